import struct

from errors import UnexpectedEof


class ByteReader:
    """Cursor over an in-memory GIF data stream.

    Every read checks the remaining length first and raises `UnexpectedEof` instead of returning short data.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.pos = 0

    def tell(self):
        return self.pos

    def seek(self, pos: int):
        if pos < 0 or pos > len(self.data):
            raise UnexpectedEof(pos, 0, 0)
        self.pos = pos

    def remaining(self):
        return len(self.data) - self.pos

    def read_bytes(self, length: int):
        if length < 0 or length > self.remaining():
            raise UnexpectedEof(self.pos, length, self.remaining())
        bs = self.data[self.pos:self.pos + length]
        self.pos += length
        return bs

    def read_byte(self):
        return self.read_bytes(1)[0]

    def read_u16(self):
        # data are stored in little-endian format
        return struct.unpack('<H', self.read_bytes(2))[0]
