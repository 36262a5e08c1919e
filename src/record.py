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

import io

from . import _LOGGER
from . import constants
from .field import (Field, MalformedField)
from .tuples import SerialType
from .utils import (DecodeError, MalformedVarint, Varint, read_exact)


_MAX_SERIAL_TYPE = 0xFFFFFFFFFFFFFFFF


class MalformedRecord(DecodeError):
    pass


serial_types = {
    0: SerialType(constants.SERIAL_NULL, 0),
    1: SerialType(constants.SERIAL_I8, 1),
    2: SerialType(constants.SERIAL_I16, 2),
    3: SerialType(constants.SERIAL_I24, 3),
    4: SerialType(constants.SERIAL_I32, 4),
    5: SerialType(constants.SERIAL_I48, 6),
    6: SerialType(constants.SERIAL_I64, 8),
    7: SerialType(constants.SERIAL_FLOAT, 8),
    8: SerialType(constants.SERIAL_ZERO, 0),
    9: SerialType(constants.SERIAL_ONE, 0),
    10: SerialType(constants.SERIAL_RESERVED, 0),
    11: SerialType(constants.SERIAL_RESERVED, 0),
}


def resolve_serial_type(code):
    code = int(code)
    if code < 0 or code > _MAX_SERIAL_TYPE:
        raise ValueError("Serial type {} out of range".format(code))

    try:
        return serial_types[code]
    except KeyError:
        pass

    if 1 == code % 2:
        return SerialType(constants.SERIAL_STRING, (code - 13) // 2)
    return SerialType(constants.SERIAL_BLOB, (code - 12) // 2)


class Record(object):
    '''
    A row's header (one serial type per column) and payload (one value per
    column), decoded from the current position of a stream.

    The header region is ``header_size`` bytes long, including the varint
    that encodes ``header_size`` itself. Column values follow immediately
    after it.
    '''

    def __init__(self, stream):
        self._header_size = None
        self._columns = ()
        self._fields = ()
        self._length = 0
        self._parse(stream)

    @property
    def header_size(self):
        return self._header_size

    @property
    def columns(self):
        return self._columns

    @property
    def payload(self):
        return self._fields

    @property
    def fields(self):
        return self._fields

    @property
    def values(self):
        return [field_obj.value for field_obj in self._fields]

    def __len__(self):
        return self._length

    def _parse_serial_types(self, header_bytes):
        header_stream = io.BytesIO(header_bytes)
        columns = []
        while header_stream.tell() < len(header_bytes):
            try:
                serial_type_varint = Varint.from_stream(header_stream)
            except MalformedVarint:
                # Whatever was fully decoded before the end of the header
                # region stands
                _LOGGER.debug(
                    "Record header ends inside a serial type varint, "
                    "keeping %d column(s)", len(columns)
                )
                break
            columns.append(resolve_serial_type(serial_type_varint))
        return tuple(columns)

    def _parse(self, stream):
        record_start = stream.tell()
        self._header_size = Varint.from_stream(stream)

        serial_types_length = int(self._header_size) - len(self._header_size)
        if serial_types_length < 0:
            raise MalformedRecord(
                "Record header size {} is smaller than its own varint".format(
                    int(self._header_size)
                )
            )

        self._columns = self._parse_serial_types(
            read_exact(stream, serial_types_length)
        )

        fields = []
        for col_idx, serial_type in enumerate(self._columns):
            try:
                field_obj = Field.from_stream(stream, serial_type, col_idx)
            except MalformedField as ex:
                _LOGGER.warning(
                    "Caught %r while instantiating field %d (%s)",
                    ex, col_idx, serial_type.kind
                )
                raise MalformedRecord(
                    "Column {}: {}".format(col_idx, ex)
                ) from ex
            fields.append(field_obj)

        self._fields = tuple(fields)
        self._length = stream.tell() - record_start

    def __eq__(self, other):
        if not isinstance(other, Record):
            return NotImplemented
        return (self.header_size, self.columns, self.payload) == \
            (other.header_size, other.columns, other.payload)

    def __hash__(self):
        return hash((self.header_size, self.columns, self.payload))

    def __repr__(self):
        return '<Record {} fields, {} bytes, header: {} bytes>'.format(
            len(self._fields), len(self), int(self._header_size)
        )
