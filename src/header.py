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

import struct

from . import _LOGGER
from .constants import (HEADER_LENGTH, HEADER_MAGIC)
from .tuples import SQLite_header
from .utils import (DecodeError, ShortRead)


# The DB header is always big-endian
_HEADER_FORMAT = r'>16sHBBBBBBIIIIIIIIIIII20sII'


class BadMagic(DecodeError):
    pass


def decode_header(stream):
    '''
    Decodes the 100-byte database header at the stream's current position.
    '''
    header_offset = stream.tell()
    header_bytes = stream.read(HEADER_LENGTH)

    if not header_bytes.startswith(HEADER_MAGIC):
        raise BadMagic(
            "No SQLite header magic at offset {}: {!r}".format(
                header_offset, header_bytes[:len(HEADER_MAGIC)]
            )
        )
    if len(header_bytes) != HEADER_LENGTH:
        raise ShortRead(
            "Couldn't read SQLite header: {} of {} bytes".format(
                len(header_bytes), HEADER_LENGTH
            )
        )

    return SQLite_header(*struct.unpack(_HEADER_FORMAT, header_bytes))


def probe_header(stream):
    '''
    Returns the database header at the stream's current position, or None
    (with the stream position left untouched) when there isn't one.
    '''
    header_offset = stream.tell()
    try:
        return decode_header(stream)
    except (BadMagic, ShortRead) as ex:
        _LOGGER.debug("No header at offset %d: %s", header_offset, ex)
        stream.seek(header_offset)
        return None
