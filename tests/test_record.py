import io
import math
import struct

import pytest

from sqdecode import constants
from sqdecode.field import (Field, MalformedField, decode_value)
from sqdecode.record import (MalformedRecord, Record, resolve_serial_type)
from sqdecode.tuples import SerialType
from sqdecode.utils import (ShortRead, encode_varint)

from conftest import (
    MERCURY_COLUMNS, NULL, ONE, RESERVED, ZERO, blob, build_record, integer,
    real, text,
)


@pytest.mark.parametrize('code, kind, length', [
    (0, constants.SERIAL_NULL, 0),
    (1, constants.SERIAL_I8, 1),
    (2, constants.SERIAL_I16, 2),
    (3, constants.SERIAL_I24, 3),
    (4, constants.SERIAL_I32, 4),
    (5, constants.SERIAL_I48, 6),
    (6, constants.SERIAL_I64, 8),
    (7, constants.SERIAL_FLOAT, 8),
    (8, constants.SERIAL_ZERO, 0),
    (9, constants.SERIAL_ONE, 0),
    (10, constants.SERIAL_RESERVED, 0),
    (11, constants.SERIAL_RESERVED, 0),
    (12, constants.SERIAL_BLOB, 0),
    (13, constants.SERIAL_STRING, 0),
    (27, constants.SERIAL_STRING, 7),
    (31, constants.SERIAL_STRING, 9),
    (402, constants.SERIAL_BLOB, 195),
])
def test_resolve_serial_type(code, kind, length):
    assert resolve_serial_type(code) == SerialType(kind, length)


def test_resolve_serial_type_bounds():
    huge = 2**64 - 1
    assert resolve_serial_type(huge) == \
        SerialType(constants.SERIAL_STRING, (huge - 13) // 2)
    with pytest.raises(ValueError):
        resolve_serial_type(2**64)
    with pytest.raises(ValueError):
        resolve_serial_type(-1)


@pytest.mark.parametrize('column, kind, value', [
    (NULL, constants.VALUE_NULL, None),
    (ZERO, constants.VALUE_NUMBER, 0),
    (ONE, constants.VALUE_NUMBER, 1),
    (RESERVED, constants.VALUE_RESERVED, None),
    (integer(-5, 1), constants.VALUE_NUMBER, -5),
    (integer(-4879, 2), constants.VALUE_NUMBER, -4879),
    (integer(-57910000, 4), constants.VALUE_NUMBER, -57910000),
    (integer(-2**62, 6), constants.VALUE_NUMBER, -2**62),
    (integer(139820, 3), constants.VALUE_NUMBER, 139820),
    (integer(4495000000, 5), constants.VALUE_NUMBER, 4495000000),
    (real(2.5), constants.VALUE_FLOAT, 2.5),
    (text('Ice Giant'), constants.VALUE_STRING, 'Ice Giant'),
    (text('café'), constants.VALUE_STRING, 'café'),
    (blob(b'\x00\x01\xff'), constants.VALUE_BLOB, b'\x00\x01\xff'),
])
def test_decode_value(column, kind, value):
    code, body = column
    stream = io.BytesIO(body + b'trailing')
    field_obj = decode_value(stream, resolve_serial_type(code))
    assert field_obj.kind == kind
    assert field_obj.value == value
    assert stream.tell() == len(body)


@pytest.mark.parametrize('code, body, value', [
    (3, b'\xff\xff\xff', 0xFFFFFF),
    (5, b'\xff\xff\xff\xff\xff\xfe', 0xFFFFFFFFFFFE),
])
def test_24_and_48_bit_values_are_not_sign_extended(code, body, value):
    field_obj = decode_value(io.BytesIO(body), resolve_serial_type(code))
    assert field_obj.value == value


def test_float_nan():
    field_obj = decode_value(
        io.BytesIO(struct.pack(r'>d', float('nan'))), resolve_serial_type(7)
    )
    assert math.isnan(field_obj.value)


def test_invalid_utf8_string():
    with pytest.raises(MalformedField, match='invalid string encoding'):
        decode_value(io.BytesIO(b'\xc3\x28'), resolve_serial_type(17))


def test_truncated_value():
    with pytest.raises(ShortRead):
        decode_value(io.BytesIO(b'\x00\x01'), resolve_serial_type(4))


def test_field_length_check():
    with pytest.raises(MalformedField):
        Field(0, resolve_serial_type(2), b'\x01')


def test_record_mercury():
    record_bytes = build_record(MERCURY_COLUMNS)
    stream = io.BytesIO(record_bytes + b'\xaa\xbb')
    record_obj = Record(stream)

    assert record_obj.header_size.value == 7
    assert record_obj.header_size.width == 1
    assert record_obj.columns == (
        SerialType(constants.SERIAL_NULL, 0),
        SerialType(constants.SERIAL_STRING, 7),
        SerialType(constants.SERIAL_STRING, 11),
        SerialType(constants.SERIAL_I16, 2),
        SerialType(constants.SERIAL_I32, 4),
        SerialType(constants.SERIAL_ZERO, 0),
    )
    assert record_obj.values == [
        None, 'Mercury', 'Terrestrial', 4879, 57910000, 0,
    ]
    assert [f.kind for f in record_obj.payload] == [
        constants.VALUE_NULL,
        constants.VALUE_STRING,
        constants.VALUE_STRING,
        constants.VALUE_NUMBER,
        constants.VALUE_NUMBER,
        constants.VALUE_NUMBER,
    ]
    assert [f.index for f in record_obj.fields] == list(range(6))
    assert len(record_obj.columns) == len(record_obj.payload)
    assert len(record_obj) == len(record_bytes)
    assert stream.tell() == len(record_bytes)


def test_record_with_two_byte_header_size():
    columns = [text('x')] * 130
    record_obj = Record(io.BytesIO(build_record(columns)))
    assert record_obj.header_size.width == 2
    assert record_obj.header_size.value == 132
    assert record_obj.values == ['x'] * 130


def test_record_without_columns():
    record_obj = Record(io.BytesIO(b'\x01'))
    assert record_obj.columns == ()
    assert record_obj.payload == ()
    assert len(record_obj) == 1


def test_record_header_ending_inside_varint():
    # Header claims 3 bytes: the size varint, one serial type, then the first
    # byte of a two-byte varint
    record_bytes = b'\x03' + encode_varint(27)[:1] + b'\x81' + b'Mercury'
    record_obj = Record(io.BytesIO(record_bytes))
    assert record_obj.columns == (SerialType(constants.SERIAL_STRING, 7),)
    assert record_obj.values == ['Mercury']


def test_record_header_size_too_small():
    with pytest.raises(MalformedRecord):
        Record(io.BytesIO(b'\x80\x01\x00'))


def test_record_truncated_header():
    with pytest.raises(ShortRead):
        Record(io.BytesIO(b'\x07\x00\x1b'))


def test_record_bad_string_aborts():
    record_bytes = build_record([NULL, (17, b'\xc3\x28')])
    with pytest.raises(MalformedRecord, match='invalid string encoding') \
            as excinfo:
        Record(io.BytesIO(record_bytes))
    assert isinstance(excinfo.value.__cause__, MalformedField)


def test_record_equality():
    record_bytes = build_record(MERCURY_COLUMNS)
    assert Record(io.BytesIO(record_bytes)) == \
        Record(io.BytesIO(record_bytes))
    assert Record(io.BytesIO(record_bytes)) != \
        Record(io.BytesIO(build_record([NULL, text('Venus')])))
