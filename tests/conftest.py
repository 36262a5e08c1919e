import io
import os
import sqlite3
import struct

import pytest

from sqdecode.utils import encode_varint


DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data')

HEADER_FORMAT = r'>16sHBBBBBBIIIIIIIIIIII20sII'

NULL = (0, b'')
ZERO = (8, b'')
ONE = (9, b'')
RESERVED = (10, b'')

_INTEGER_WIDTHS = {1: 1, 2: 2, 3: 3, 4: 4, 5: 6, 6: 8}


def text(value):
    encoded = value.encode('utf-8')
    return (13 + 2 * len(encoded), encoded)


def blob(value):
    return (12 + 2 * len(value), value)


def integer(value, code):
    width = _INTEGER_WIDTHS[code]
    return (code, value.to_bytes(width, byteorder='big', signed=True))


def real(value):
    return (7, struct.pack(r'>d', value))


def build_record(columns):
    type_bytes = b''.join(encode_varint(code) for code, _ in columns)
    header_size = len(type_bytes) + 1
    while len(encode_varint(header_size)) + len(type_bytes) != header_size:
        header_size = len(encode_varint(header_size)) + len(type_bytes)
    return encode_varint(header_size) + type_bytes + \
        b''.join(body for _, body in columns)


def build_cell(row_id, record_bytes, size=None):
    if size is None:
        size = len(record_bytes)
    return encode_varint(size) + encode_varint(row_id) + record_bytes


def build_db_header(page_size=4096, page_count=1, change_counter=1,
                    version_valid=None, magic=b'SQLite format 3\x00'):
    if version_valid is None:
        version_valid = change_counter
    return struct.pack(
        HEADER_FORMAT,
        magic,
        1 if page_size == 65536 else page_size,
        1, 1, 0, 64, 32, 32,
        change_counter,
        page_count,
        0, 0,
        1, 4,
        0, 0,
        1, 0, 0, 0,
        bytes(20),
        version_valid,
        3047000,
    )


def build_page(cells, page_size=4096, db_header=b'', page_type=0x0D,
               right_most_pointer=None):
    page = bytearray(page_size)

    content_start = page_size
    pointers = []
    for cell in cells:
        content_start -= len(cell)
        page[content_start:content_start + len(cell)] = cell
        pointers.append(content_start)

    page_header = struct.pack(
        r'>BHHHB', page_type, 0, len(cells), content_start & 0xFFFF, 0
    )
    if right_most_pointer is not None:
        page_header += struct.pack(r'>I', right_most_pointer)

    prefix = db_header + page_header + struct.pack(
        r'>{}H'.format(len(pointers)), *pointers
    )
    page[:len(prefix)] = prefix
    return bytes(page)


def build_database(pages_cells, page_size=4096):
    db_header = build_db_header(page_size, len(pages_cells))
    pages = []
    for page_idx, cells in enumerate(pages_cells):
        pages.append(build_page(
            cells,
            page_size=page_size,
            db_header=db_header if page_idx == 0 else b'',
        ))
    return b''.join(pages)


SCHEMA_SQL = 'CREATE TABLE planets (name TEXT, moons INTEGER)'

MERCURY_COLUMNS = [
    NULL,
    text('Mercury'),
    text('Terrestrial'),
    integer(4879, 2),
    integer(57910000, 4),
    ZERO,
]


@pytest.fixture
def two_page_db_bytes():
    schema_record = build_record([
        text('table'),
        text('planets'),
        text('planets'),
        integer(2, 1),
        text(SCHEMA_SQL),
    ])
    planets = [
        build_cell(1, build_record(MERCURY_COLUMNS)),
        build_cell(2, build_record([
            NULL, text('Venus'), text('Terrestrial'),
            integer(12104, 2), integer(108200000, 4), ZERO,
        ])),
        build_cell(3, build_record([
            NULL, text('Earth'), text('Terrestrial'),
            integer(12742, 2), integer(149600000, 4), ONE,
        ])),
    ]
    return build_database([[build_cell(1, schema_record)], planets])


@pytest.fixture
def two_page_db(two_page_db_bytes):
    return io.BytesIO(two_page_db_bytes)


@pytest.fixture
def planets_db_path(tmp_path):
    db_path = str(tmp_path / 'planets.db')
    with open(os.path.join(DATA_DIR, 'planets.sql'), 'r') as sql_file:
        sql = sql_file.read()

    conn = sqlite3.connect(db_path)
    conn.execute('PRAGMA page_size = 4096')
    conn.executescript(sql)
    conn.commit()
    conn.close()
    return db_path
