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

import collections

from .constants import VALID_PAGE_SIZES


_SQLite_header = collections.namedtuple('SQLite_header', (
    'magic',
    'page_size',
    'write_format',
    'read_format',
    'reserved_length',
    'max_payload_fraction',
    'min_payload_fraction',
    'leaf_payload_fraction',
    'file_change_counter',
    'database_page_count',
    'first_freelist_trunk',
    'freelist_pages',
    'schema_cookie',
    'schema_format',
    'default_page_cache_size',
    'largest_btree_page',
    'text_encoding',
    'user_version',
    'incremental_vacuum',
    'application_id',
    'reserved',
    'version_valid',
    'sqlite_version',
))


class SQLite_header(_SQLite_header):
    __slots__ = ()

    @property
    def page_size_bytes(self):
        if self.page_size == 1:
            return 65536
        return self.page_size

    @property
    def has_valid_page_size(self):
        return self.page_size in VALID_PAGE_SIZES


SQLite_btree_page_header = collections.namedtuple('SQLite_btree_page_header', (
    'page_type',
    'first_freeblock',
    'num_cells',
    'cell_content_start',
    'fragmented_free_bytes',
    'right_most_pointer',
))


SQLite_table_leaf_cell = collections.namedtuple('SQLite_table_leaf_cell', (
    'size',
    'row_id',
    'record',
))


SerialType = collections.namedtuple('SerialType', (
    'kind',
    'length',
))


SQLite_schema_record = collections.namedtuple('SQLite_schema_record', (
    'type',
    'name',
    'tbl_name',
    'rootpage',
    'sql',
))
