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

from . import constants


def _rows(rows):
    width = max(len(label) for label, _ in rows) + 2
    return '\n'.join(
        '{}{}'.format((label + ':').ljust(width), value)
        for label, value in rows
    )


def format_header(header):
    encoding_name = constants.TEXT_ENCODINGS.get(
        header.text_encoding, 'unknown'
    )
    return _rows((
        ('database page size', header.page_size_bytes),
        ('write format', header.write_format),
        ('read format', header.read_format),
        ('reserved bytes', header.reserved_length),
        ('file change counter', header.file_change_counter),
        ('database page count', header.database_page_count),
        ('freelist trunk page', header.first_freelist_trunk),
        ('freelist page count', header.freelist_pages),
        ('schema cookie', header.schema_cookie),
        ('schema format', header.schema_format),
        ('default cache size', header.default_page_cache_size),
        ('autovacuum top root', header.largest_btree_page),
        ('incremental vacuum', header.incremental_vacuum),
        ('text encoding', '{} ({})'.format(
            header.text_encoding, encoding_name
        )),
        ('user version', header.user_version),
        ('application id', header.application_id),
        ('software version', header.sqlite_version),
    ))


def format_page_header(page_header):
    rows = [
        ('page type', constants.BTREE_PAGE_TYPES[page_header.page_type]),
        ('first freeblock', page_header.first_freeblock),
        ('number of cells', page_header.num_cells),
        ('cell content start', page_header.cell_content_start),
        ('fragmented free bytes', page_header.fragmented_free_bytes),
    ]
    if page_header.right_most_pointer is not None:
        rows.append(('right-most pointer', page_header.right_most_pointer))
    return _rows(rows)


def format_page(page):
    lines = [
        'page {}:'.format(page.idx),
        format_page_header(page.btree_header),
        'cell pointers: {}'.format(list(page.cell_pointers)),
        'cells:',
    ]
    for cell_idx, cell in enumerate(page.cells):
        lines.append('  [{}] row_id:{} {!r}'.format(
            cell_idx, int(cell.row_id), cell.record.values
        ))
    return '\n'.join(lines)


def format_database(db):
    sections = [format_header(db.header)]
    sections.append(_rows((
        ('number of tables', db.schema_count('table')),
        ('number of indexes', db.schema_count('index')),
        ('number of triggers', db.schema_count('trigger')),
        ('number of views', db.schema_count('view')),
    )))
    sections.extend(format_page(page) for page in db.pages)
    return '\n\n'.join(sections)
