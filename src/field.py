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

from . import constants
from .utils import (DecodeError, decode_twos_complement, read_exact)


class MalformedField(DecodeError):
    pass


class Field(object):
    '''
    A single column value, decoded according to the serial type found for it
    in the record header.
    '''

    def __init__(self, idx, serial_type, serial_bytes):
        self._index = idx
        self._type = serial_type
        self._bytes = serial_bytes
        self._kind = None
        self._value = None
        self._parse()

    @classmethod
    def from_stream(cls, stream, serial_type, idx=None):
        # Zero-width types consume nothing from the stream
        serial_bytes = read_exact(stream, serial_type.length)
        return cls(idx, serial_type, serial_bytes)

    def _check_length(self, expected_length):
        if len(self) != expected_length:
            raise MalformedField(
                "Expected {} byte(s) for {} field, got {}".format(
                    expected_length, self._type.kind, len(self)
                )
            )

    def _parse(self):
        kind = self._type.kind
        self._check_length(self._type.length)

        if kind == constants.SERIAL_NULL:
            self._kind = constants.VALUE_NULL
            self._value = None

        # Integer types. The 24 and 48-bit widths are widened without sign
        # extension and always come out non-negative.
        elif kind in (constants.SERIAL_I24, constants.SERIAL_I48):
            self._kind = constants.VALUE_NUMBER
            self._value = int.from_bytes(bytes(self), byteorder='big')
        elif kind in constants.INTEGER_SERIAL_TYPES:
            self._kind = constants.VALUE_NUMBER
            self._value = decode_twos_complement(bytes(self), 8 * len(self))

        elif kind == constants.SERIAL_FLOAT:
            self._kind = constants.VALUE_FLOAT
            self._value, = struct.unpack(r'>d', bytes(self))
        elif kind == constants.SERIAL_ZERO:
            self._kind = constants.VALUE_NUMBER
            self._value = 0
        elif kind == constants.SERIAL_ONE:
            self._kind = constants.VALUE_NUMBER
            self._value = 1
        elif kind == constants.SERIAL_RESERVED:
            self._kind = constants.VALUE_RESERVED
            self._value = None

        elif kind == constants.SERIAL_STRING:
            self._kind = constants.VALUE_STRING
            try:
                self._value = bytes(self).decode('utf-8')
            except UnicodeDecodeError as ex:
                raise MalformedField("invalid string encoding") from ex

        elif kind == constants.SERIAL_BLOB:
            self._kind = constants.VALUE_BLOB
            self._value = bytes(self)

        else:
            raise ValueError("Unknown serial type kind {!r}".format(kind))

    def __bytes__(self):
        return self._bytes

    def __len__(self):
        return len(bytes(self))

    def __eq__(self, other):
        if not isinstance(other, Field):
            return NotImplemented
        return (self._type, self._kind, self._value) == \
            (other.serial_type, other.kind, other.value)

    def __hash__(self):
        return hash((self._type, self._kind, self._value))

    def __repr__(self):
        return "<Field {}: {!r} ({}, {} bytes)>".format(
            self._index, self._value, self._kind, len(bytes(self))
        )

    @property
    def index(self):
        return self._index

    @property
    def kind(self):
        return self._kind

    @property
    def value(self):
        return self._value

    @property
    def serial_type(self):
        return self._type


def decode_value(stream, serial_type):
    return Field.from_stream(stream, serial_type)
