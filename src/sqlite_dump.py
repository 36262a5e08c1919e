# MIT License
#
# Copyright (c) 2017 Matt Boyer
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

import argparse
import logging
import sys

from . import PROJECT_DESCRIPTION
from . import _LOGGER
from .config import DecoderConfig
from .db import decode_database
from .header import decode_header
from .pretty import (format_database, format_header)
from .utils import DecodeError


def show_dbinfo(args):
    with open(args.sqlite_path, 'rb') as sqlite:
        header = decode_header(sqlite)
    print(format_header(header))


def dump_db(args):
    config = DecoderConfig.from_user_config()
    if args.strict:
        config['strict_cell_size'] = True

    with open(args.sqlite_path, 'rb') as sqlite:
        db = decode_database(sqlite, config)
    _LOGGER.info("Database: %r", db)
    print(format_database(db))


subcmd_actions = {
    'dbinfo': show_dbinfo,
    'dump': dump_db,
}


def setup_logging(verbose):
    if not _LOGGER.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter('%(levelname)s:%(name)s:%(message)s')
        )
        _LOGGER.addHandler(handler)
    _LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)


def subcmd_dispatcher(arg_ns):
    return subcmd_actions[arg_ns.subcmd](arg_ns)


def main(argv=None):

    verbose_parser = argparse.ArgumentParser(add_help=False)
    verbose_parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=argparse.SUPPRESS,
        help='Give *A LOT* more output.',
    )

    cli_parser = argparse.ArgumentParser(
        description=PROJECT_DESCRIPTION,
        parents=[verbose_parser],
    )

    subcmd_parsers = cli_parser.add_subparsers(
        title='Subcommands',
        description='%(prog)s implements the following subcommands:',
        dest='subcmd',
    )

    dbinfo_parser = subcmd_parsers.add_parser(
        'dbinfo',
        parents=[verbose_parser],
        help='Displays the database header',
        description='Decodes and displays the 100-byte database header',
    )
    dbinfo_parser.add_argument(
        'sqlite_path',
        help='sqlite3 file path'
    )

    dump_parser = subcmd_parsers.add_parser(
        'dump',
        parents=[verbose_parser],
        help='Displays every page in the database',
        description=(
            'Decodes the database passed as argument and displays its header '
            'followed by the header, cell pointers and cells of every page'
        ),
    )
    dump_parser.add_argument(
        'sqlite_path',
        help='sqlite3 file path'
    )
    dump_parser.add_argument(
        '-s', '--strict',
        action='store_true',
        help='Fail on cells whose declared size doesn\'t match their record',
    )

    cli_args = cli_parser.parse_args(argv)
    setup_logging(getattr(cli_args, 'verbose', None))

    if not cli_args.subcmd:
        # No subcommand specified, print the usage and bail
        cli_parser.print_help()
        return 1

    try:
        subcmd_dispatcher(cli_args)
    except (DecodeError, OSError) as ex:
        _LOGGER.error("Couldn't decode %s: %s", cli_args.sqlite_path, ex)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
