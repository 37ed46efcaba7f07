import logging

from bytereader import ByteReader
from constants import GIF_IMAGE_SEPARATOR
from baseblock import BaseBlock, assemble_sub_blocks, read_color_table
from errors import MalformedBlockIntroducer, MissingColorTable, IndexCountMismatch
from lzw import lzw_decode

logger = logging.getLogger(__name__)


class ImageDescriptorBlock(BaseBlock):
    def __init__(self, seek_index: int, reader: ByteReader, global_palette=None):
        super().__init__(seek_index)
        self.x = 0
        self.y = 0
        self.width = 0
        self.height = 0
        self.local_palette_flag = False
        self.sorted = False
        self.interlace_flag = False
        self.local_palette_size = 0
        self.palette = None
        self.lzw_min_code_size = 0
        self.compressed_data = b''
        self.index_stream = b''

        self._process_data_stream(reader, global_palette)

    @property
    def left(self):
        return self.x

    @property
    def top(self):
        return self.y

    def _process_data_stream(self, reader: ByteReader, global_palette):
        reader.seek(self.seek_index)

        # 1. Image Separator must contain fixed value 0x2C
        image_separator = self._read_byte(reader)
        if image_separator != GIF_IMAGE_SEPARATOR:
            raise MalformedBlockIntroducer(f'Image separator 0x{image_separator:02x} at {self.seek_index} does not equal 0x{GIF_IMAGE_SEPARATOR:02x}')

        # 2. Expect Image Left, Top, Width and Height (2 bytes each)
        self.x = self._read_u16(reader)
        self.y = self._read_u16(reader)
        self.width = self._read_u16(reader)
        self.height = self._read_u16(reader)

        # 3. Unpack fields
        fields = self._read_byte(reader)
        self.local_palette_flag = bool((fields & 0b10000000) >> 7)
        self.interlace_flag = bool((fields & 0b01000000) >> 6)
        self.sorted = bool((fields & 0b00100000) >> 5)

        # skip Reserved field (2 bits)

        # the actual size is calculated with this formula
        self.local_palette_size = 2 ** ((fields & 0b00000111) + 1)

        # 4. Expect Local Color Table, fall back to the Global Color Table
        if self.local_palette_flag:
            self.palette = read_color_table(reader, self.local_palette_size)
            self.block_size += 3 * self.local_palette_size
        elif global_palette is not None:
            self.palette = global_palette
        else:
            raise MissingColorTable(f'Image at {self.seek_index} has no local color table and the data stream has no global color table')

        # 5. Expect LZW Minimum Code Size
        self.lzw_min_code_size = self._read_byte(reader)

        # 6. Expect LZW compressed Image Data
        self.compressed_data = assemble_sub_blocks(self.load_data_sub_blocks(reader))

        # 7. Extract LZW compressed Image Data
        self.index_stream = lzw_decode(self.compressed_data, self.lzw_min_code_size, len(self.palette))

        expected = self.width * self.height
        if len(self.index_stream) != expected:
            raise IndexCountMismatch(expected, len(self.index_stream))

        logger.debug(f'Decoded {self.width}x{self.height} image at ({self.x}, {self.y}), {len(self.compressed_data)} compressed bytes.')
