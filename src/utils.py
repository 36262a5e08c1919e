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

# Varints are unsigned 64-bit quantities, anything shifted out the top is lost
_UINT64_MASK = 0xFFFFFFFFFFFFFFFF
_MAX_VARINT_LEN = 9


class DecodeError(Exception):
    pass


class ShortRead(DecodeError):
    pass


class MalformedVarint(DecodeError):
    pass


class Varint(object):
    '''
    A SQLite variable-length integer.

    Bytes 1 through 8 contribute their low 7 bits each, most significant group
    first, and a clear high bit marks the last byte. If the first 8 bytes all
    have their high bit set, the 9th byte is terminal and contributes all 8 of
    its bits.
    '''

    def __init__(self, varint_bytes):
        self._len = 0
        self._value = 0

        for b in varint_bytes:
            self._len += 1
            if self._len == _MAX_VARINT_LEN:
                self._value = ((self._value << 8) | b) & _UINT64_MASK
                break
            self._value = ((self._value << 7) | (b & 0x7F)) & _UINT64_MASK
            if not b & 0x80:
                break
        else:
            raise MalformedVarint("invalid varint")

        self._bytes = bytes(varint_bytes[:self._len])

    @classmethod
    def from_stream(cls, stream):
        varint_bytes = bytearray()
        while len(varint_bytes) < _MAX_VARINT_LEN:
            b = stream.read(1)
            if not b:
                raise MalformedVarint(
                    "invalid varint: input ends after {} byte(s)".format(
                        len(varint_bytes)
                    )
                )
            varint_bytes += b
            if not b[0] & 0x80:
                break
        return cls(bytes(varint_bytes))

    @classmethod
    def from_value(cls, value):
        return cls(encode_varint(value))

    @property
    def value(self):
        return self._value

    @property
    def width(self):
        return self._len

    def __int__(self):
        return self._value

    def __index__(self):
        return self._value

    def __len__(self):
        return self._len

    def __bytes__(self):
        return self._bytes

    def __eq__(self, other):
        if not isinstance(other, Varint):
            return NotImplemented
        return (self.value, self.width) == (other.value, other.width)

    def __hash__(self):
        return hash((self.value, self.width))

    def __repr__(self):
        return "<Varint {} ({} bytes)>".format(int(self), len(self))


def encode_varint(value):
    '''
    Returns the minimal encoding of an unsigned 64-bit integer.
    '''
    if value < 0 or value > _UINT64_MASK:
        raise ValueError(
            "Varint value out of range: {}".format(value)
        )

    # Values that need more than 56 bits use the 9-byte form, whose last byte
    # carries a full 8 bits
    if value >> 56:
        encoded = bytearray([value & 0xFF])
        value >>= 8
        for _ in range(_MAX_VARINT_LEN - 1):
            encoded.insert(0, 0x80 | (value & 0x7F))
            value >>= 7
        return bytes(encoded)

    encoded = bytearray([value & 0x7F])
    value >>= 7
    while value:
        encoded.insert(0, 0x80 | (value & 0x7F))
        value >>= 7
    return bytes(encoded)


def read_exact(stream, length):
    # Lengths come from the file itself, so check them against what is left
    # before asking the stream to allocate that much
    offset = stream.tell()
    available = stream.seek(0, os.SEEK_END) - offset
    stream.seek(offset, os.SEEK_SET)
    if length > available:
        raise ShortRead(
            "Expected {} byte(s) at offset {}, only {} left".format(
                length, offset, max(available, 0)
            )
        )

    data = stream.read(length)
    if len(data) != length:
        raise ShortRead(
            "Expected {} byte(s) at offset {}, got {}".format(
                length, stream.tell() - len(data), len(data)
            )
        )
    return data


def decode_twos_complement(encoded, bit_length):
    assert(0 == bit_length % 8)
    encoded_int = int.from_bytes(encoded, byteorder='big')
    mask = 2**(bit_length - 1)
    value = -(encoded_int & mask) + (encoded_int & ~mask)
    return value
