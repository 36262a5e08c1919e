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
from . import constants
from .config import DecoderConfig
from .header import probe_header
from .record import Record
from .tuples import (SQLite_btree_page_header, SQLite_table_leaf_cell)
from .utils import (DecodeError, Varint, read_exact)


class InvalidPageType(DecodeError):
    pass


class MalformedCell(DecodeError):
    pass


def decode_btree_page_header(stream):
    '''
    Decodes an 8-byte leaf or 12-byte interior B-Tree page header.
    '''
    page_type, first_freeblock, num_cells, cell_content_start, \
        fragmented_free_bytes = struct.unpack(
            r'>BHHHB', read_exact(stream, constants.LEAF_PAGE_HEADER_LENGTH)
        )

    if page_type not in constants.BTREE_PAGE_TYPES:
        raise InvalidPageType(
            "Invalid B-Tree page type: 0x{:02x}".format(page_type)
        )

    # Only interior pages carry a right-most pointer
    right_most_pointer = None
    if page_type in constants.INTERIOR_PAGE_TYPES:
        right_most_pointer, = struct.unpack(r'>I', read_exact(stream, 4))

    return SQLite_btree_page_header(
        page_type,
        first_freeblock,
        num_cells,
        cell_content_start,
        fragmented_free_bytes,
        right_most_pointer,
    )


def decode_table_leaf_cell(stream, strict=False):
    cell_offset = stream.tell()

    # Total size of the record. Overflow isn't supported, so all of it is
    # expected to sit on this page.
    size = Varint.from_stream(stream)
    row_id = Varint.from_stream(stream)
    record_obj = Record(stream)

    if strict and len(record_obj) != int(size):
        raise MalformedCell(
            "Cell @ offset {} declares {} byte(s) but its record uses {}".format(
                cell_offset, int(size), len(record_obj)
            )
        )

    return SQLite_table_leaf_cell(size, row_id, record_obj)


class BTreePage(object):
    '''
    A B-Tree page decoded from the stream's current position.

    Page 0 is the only one that may start with the database header, in which
    case the B-Tree page header follows it. Cell pointers are relative to the
    start of the page.
    '''

    def __init__(self, stream, page_idx, config=None):
        self._page_idx = page_idx
        self._config = config if config is not None else DecoderConfig()
        self._offset = stream.tell()
        self._db_header = None
        self._cell_ptr_array = ()
        self._cells = []

        if self.idx == 0:
            self._db_header = probe_header(stream)

        self._btree_header = decode_btree_page_header(stream)

        num_cells = self._btree_header.num_cells
        if num_cells > 0:
            cell_ptr_bytes = read_exact(stream, 2 * num_cells)
            self._cell_ptr_array = struct.unpack(
                r'>{count}H'.format(count=num_cells),
                cell_ptr_bytes
            )
            self._check_cell_content_offset()

        if self._btree_header.page_type == constants.TABLE_LEAF_PAGE:
            self.parse_table_leaf_cells(stream)
        else:
            _LOGGER.warning(
                "Not decoding cells of %s page %d",
                self.page_type, self.idx
            )

    def _check_cell_content_offset(self):
        if not self._config.check_cell_content_offset:
            return
        smallest_cell_offset = min(self._cell_ptr_array)
        if self._btree_header.cell_content_start != smallest_cell_offset:
            _LOGGER.warning(
                (
                    "Inconsistent cell ptr array in page %d! Cell content "
                    "starts at offset %d, but min cell pointer is %d"
                ),
                self.idx,
                self._btree_header.cell_content_start,
                smallest_cell_offset
            )

    @property
    def idx(self):
        return self._page_idx

    @property
    def offset(self):
        return self._offset

    @property
    def db_header(self):
        return self._db_header

    @property
    def btree_header(self):
        return self._btree_header

    @property
    def page_type(self):
        return constants.BTREE_PAGE_TYPES[self._btree_header.page_type]

    @property
    def cell_pointers(self):
        return self._cell_ptr_array

    @property
    def cells(self):
        return self._cells

    def parse_table_leaf_cells(self, stream):
        _LOGGER.debug("Parsing cells in table leaf page %d", self.idx)
        for cell_idx, cell_offset in enumerate(self._cell_ptr_array):
            _LOGGER.debug("Parsing cell %d @ offset %d", cell_idx, cell_offset)
            stream.seek(self._offset + cell_offset)
            cell = decode_table_leaf_cell(
                stream, strict=self._config.strict_cell_size
            )
            _LOGGER.debug(
                "Cell %d, rowid: %d, record: %r",
                cell_idx, int(cell.row_id), cell.record
            )
            self._cells.append(cell)

    def __eq__(self, other):
        if not isinstance(other, BTreePage):
            return NotImplemented
        return (
            self.idx, self.db_header, self.btree_header,
            self.cell_pointers, self.cells,
        ) == (
            other.idx, other.db_header, other.btree_header,
            other.cell_pointers, other.cells,
        )

    def __hash__(self):
        return hash((self.idx, self.db_header, self.btree_header))

    def __repr__(self):
        return "<SQLite B-Tree Page {0} ({1}) {2} cells>".format(
            self.idx, self.page_type, len(self._cell_ptr_array)
        )


def decode_page(stream, page_idx, config=None):
    return BTreePage(stream, page_idx, config)
