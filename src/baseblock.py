import logging

from bytereader import ByteReader
from constants import GIF_EXTENSION_INTRODUCER
from errors import MalformedBlockIntroducer, UnknownExtensionLabel

logger = logging.getLogger(__name__)


def assemble_sub_blocks(sub_blocks):
    """Join a run of data sub-blocks into the contiguous payload the LZW decoder reads."""
    return b''.join(sub_blocks)


def read_color_table(reader: ByteReader, ncolors: int):
    bs = reader.read_bytes(3 * ncolors)
    return [tuple(bs[i:i + 3]) for i in range(0, len(bs), 3)]


class BaseBlock:
    def __init__(self, seek_index: int):
        logger.debug(f'Starting to parse {self.__class__.__name__} at {seek_index}.')
        self.seek_index = seek_index
        self.block_size = 0

    def _read(self, reader: ByteReader, length=1):
        bs = reader.read_bytes(length)
        self.block_size += len(bs)
        return bs

    def _read_byte(self, reader: ByteReader):
        return self._read(reader)[0]

    def _read_u16(self, reader: ByteReader):
        value = reader.read_u16()
        self.block_size += 2
        return value

    def _expect_extension(self, reader: ByteReader, label: int):
        # 1. Expect Extension Introducer
        ext_intro = self._read_byte(reader)
        if ext_intro != GIF_EXTENSION_INTRODUCER:
            raise MalformedBlockIntroducer(f'Extension introducer 0x{ext_intro:02x} at {self.seek_index} does not equal 0x{GIF_EXTENSION_INTRODUCER:02x}')

        # 2. Expect the label of this extension
        actual = self._read_byte(reader)
        if actual != label:
            raise UnknownExtensionLabel(f'Label 0x{actual:02x} at {self.seek_index + 1} does not equal 0x{label:02x}')

    def load_data_sub_blocks(self, reader: ByteReader):
        sub_blocks = []

        while True:
            # 1. Expect Sub Block size
            block_size = self._read_byte(reader)
            if block_size == 0:
                break

            # 2. Expect Sub Block data
            sub_blocks.append(self._read(reader, block_size))

        return sub_blocks
