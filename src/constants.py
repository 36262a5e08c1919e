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

HEADER_MAGIC = b'SQLite format 3\x00'
HEADER_LENGTH = 100

# A page size of 1 in the database header stands for 65536
VALID_PAGE_SIZES = (1, 512, 1024, 2048, 4096, 8192, 16384, 32768)

TEXT_ENCODINGS = {
    1: 'utf8',
    2: 'utf16le',
    3: 'utf16be',
}

# One-byte discriminants at the start of every B-Tree page header
INDEX_INTERIOR_PAGE = 0x02
TABLE_INTERIOR_PAGE = 0x05
INDEX_LEAF_PAGE = 0x0A
TABLE_LEAF_PAGE = 0x0D

BTREE_PAGE_TYPES = {
    INDEX_INTERIOR_PAGE:    "Index Interior",
    TABLE_INTERIOR_PAGE:    "Table Interior",
    INDEX_LEAF_PAGE:        "Index Leaf",
    TABLE_LEAF_PAGE:        "Table Leaf",
}

INTERIOR_PAGE_TYPES = (
    INDEX_INTERIOR_PAGE,
    TABLE_INTERIOR_PAGE,
)

LEAF_PAGE_HEADER_LENGTH = 8

# Kinds of serial type found in record headers
SERIAL_NULL = 'null'
SERIAL_I8 = 'i8'
SERIAL_I16 = 'i16'
SERIAL_I24 = 'i24'
SERIAL_I32 = 'i32'
SERIAL_I48 = 'i48'
SERIAL_I64 = 'i64'
SERIAL_FLOAT = 'float'
SERIAL_ZERO = 'zero'
SERIAL_ONE = 'one'
SERIAL_RESERVED = 'reserved'
SERIAL_BLOB = 'blob'
SERIAL_STRING = 'string'

INTEGER_SERIAL_TYPES = (
    SERIAL_I8,
    SERIAL_I16,
    SERIAL_I24,
    SERIAL_I32,
    SERIAL_I48,
    SERIAL_I64,
)

# Kinds of value produced when decoding a field
VALUE_NULL = 'null'
VALUE_NUMBER = 'number'
VALUE_FLOAT = 'float'
VALUE_RESERVED = 'reserved'
VALUE_STRING = 'string'
VALUE_BLOB = 'blob'

SQLITE_SCHEMA_COLUMNS = ('type', 'name', 'tbl_name', 'rootpage', 'sql',)
