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

import os

from . import _LOGGER
from . import constants
from .config import DecoderConfig
from .header import decode_header
from .pages import BTreePage
from .tuples import SQLite_schema_record
from .utils import DecodeError


class SQLite_DB(object):
    '''
    A whole database decoded from a seekable binary stream: the header at
    offset 0, then one page every ``page_size_bytes`` bytes, as many as the
    header says there are.

    The stream isn't kept once decoding is over.
    '''

    def __init__(self, stream, config=None):
        self._config = config if config is not None else DecoderConfig()
        self._header = self.parse_header(stream)
        self._pages = []
        self.populate_btree_pages(stream)

    @property
    def header(self):
        return self._header

    @property
    def pages(self):
        return self._pages

    def __eq__(self, other):
        if not isinstance(other, SQLite_DB):
            return NotImplemented
        return (self.header, self.pages) == (other.header, other.pages)

    def __hash__(self):
        return hash(self.header)

    def __repr__(self):
        return '<SQLite DB, page count: {} | page size: {}>'.format(
            self.header.database_page_count,
            self.header.page_size_bytes
        )

    def parse_header(self, stream):
        stream.seek(0, os.SEEK_END)
        file_size = stream.tell()
        stream.seek(0, os.SEEK_SET)

        fields = decode_header(stream)

        if self._config.check_page_size and not fields.has_valid_page_size:
            _LOGGER.warning("Unusual page size: %d", fields.page_size)

        db_size = fields.page_size_bytes * fields.database_page_count
        if db_size > file_size:
            _LOGGER.warning(
                "Header claims %d pages (%d bytes) but there are only %d bytes",
                fields.database_page_count, db_size, file_size
            )

        # The in-header page count is only trustworthy when these agree
        if fields.file_change_counter != fields.version_valid:
            _LOGGER.warning(
                "File change counter %d doesn't match version-valid-for %d",
                fields.file_change_counter, fields.version_valid
            )

        _LOGGER.debug(fields)
        return fields

    def populate_btree_pages(self, stream):
        page_size = self._header.page_size_bytes
        for page_idx in range(self._header.database_page_count):
            page_offset = page_idx * page_size
            stream.seek(page_offset, os.SEEK_SET)
            try:
                page_obj = BTreePage(stream, page_idx, self._config)
            except (DecodeError, OSError) as ex:
                _LOGGER.warning(
                    "Caught %r while decoding page %d @ offset %d",
                    ex, page_idx, page_offset
                )
                raise
            _LOGGER.debug("%r", page_obj)
            self._pages.append(page_obj)

    @property
    def schema(self):
        '''
        Rows of the schema table, which is rooted in the first page.
        '''
        if not self._pages:
            return []

        schema_rows = []
        for cell in self._pages[0].cells:
            values = cell.record.values
            if len(values) != len(constants.SQLITE_SCHEMA_COLUMNS):
                _LOGGER.warning(
                    "Schema row %d has %d columns",
                    int(cell.row_id), len(values)
                )
                continue
            schema_rows.append(SQLite_schema_record(*values))
        return schema_rows

    def schema_count(self, object_type):
        return sum(1 for row in self.schema if row.type == object_type)


def decode_database(stream, config=None):
    return SQLite_DB(stream, config)
