import logging

from constants import LZW_MAX_CODE_SIZE, LZW_MAX_TABLE_SIZE
from errors import CodeTableCorruption

logger = logging.getLogger(__name__)


class BitReader:
    """Hands out variable-width codes from a byte payload, least-significant bit first.

    Whole bytes are appended above the bits already held in an integer accumulator and codes are taken off its low end, so a code may span byte boundaries.
    """

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0
        self.bits = 0
        self.nbits = 0

    def read(self, count: int):
        """Return the next `count`-bit code, or None when the payload has fewer than `count` bits left."""
        while self.nbits < count:
            if self.pos >= len(self.data):
                return None
            self.bits |= self.data[self.pos] << self.nbits
            self.pos += 1
            self.nbits += 8

        code = self.bits & ((1 << count) - 1)
        self.bits >>= count
        self.nbits -= count
        return code


class LZWDecoder:
    def __init__(self, lzw_min: int, ncolors: int):
        if not 1 <= lzw_min < LZW_MAX_CODE_SIZE:
            raise CodeTableCorruption(f'LZW minimum code size {lzw_min} is out of range')

        self.lzw_min = lzw_min
        self.ncolors = ncolors
        self.clear_code = 1 << lzw_min
        self.eoi_code = self.clear_code + 1
        self.first_code_size = lzw_min + 1

        # Slots past the palette, including clear_code and eoi_code, stay None until a code is added there.
        roots = min(ncolors, self.clear_code)
        self._initial_table = [bytes((i,)) for i in range(roots)] + [None] * (LZW_MAX_TABLE_SIZE - roots)

        self.reset()

    def reset(self):
        self.table = list(self._initial_table)
        self.code_size = self.first_code_size
        self.next_free = self.eoi_code + 1
        self.prev = None

    def _read_code(self, bits: BitReader):
        return bits.read(self.code_size)

    def _add(self, entry: bytes):
        if self.next_free >= LZW_MAX_TABLE_SIZE:
            # the table is full, keep decoding with it as it is until the next clear code
            return

        self.table[self.next_free] = entry
        self.next_free += 1

        if self.next_free == (1 << self.code_size) and self.code_size < LZW_MAX_CODE_SIZE:
            self.code_size += 1

    def decode(self, data: bytes):
        bits = BitReader(data)
        index_stream = bytearray()
        self.reset()

        while True:
            code = self._read_code(bits)
            if code is None:
                logger.debug('LZW data ended without an end of information code.')
                break

            if code == self.clear_code:
                self.reset()
                continue

            if code == self.eoi_code:
                break

            entry = self.table[code]

            if self.prev is None:
                # the first code of the stream or after a clear code is a plain color index
                if entry is None:
                    raise CodeTableCorruption(f'Code {code} is not a color index (palette has {self.ncolors} colors)')
                index_stream += entry
                self.prev = code
                continue

            prev_entry = self.table[self.prev]

            if entry is not None:
                # output {CODE}, add {CODE-1}+K where K is the first index of {CODE}
                index_stream += entry
                self._add(prev_entry + entry[:1])
            elif code == self.next_free:
                # output {CODE-1}+K where K is the first index of {CODE-1}
                entry = prev_entry + prev_entry[:1]
                index_stream += entry
                self._add(entry)
            else:
                raise CodeTableCorruption(f'Code {code} is not in the code table (next free code is {self.next_free})')

            self.prev = code

        return bytes(index_stream)


def lzw_decode(data: bytes, lzw_min: int, ncolors: int):
    """Decode a GIF LZW payload into a stream of color table indices."""
    return LZWDecoder(lzw_min, ncolors).decode(data)
