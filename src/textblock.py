from bytereader import ByteReader
from constants import GIF_TXT_EXT_LABEL, GIF_TXT_EXT_BLOCK_SIZE
from baseblock import BaseBlock
from errors import MalformedBlock


class PlainTextExtensionBlock(BaseBlock):
    """Plain Text Extension. It is parsed to keep the stream in sync but never rendered."""

    def __init__(self, seek_index: int, reader: ByteReader):
        super().__init__(seek_index)
        self.x = 0
        self.y = 0
        self.width = 0
        self.height = 0
        self.cell_width = 0
        self.cell_height = 0
        self.foreground = 0
        self.background = 0
        self.text_data = []

        self._process_data_stream(reader)

    def _process_data_stream(self, reader: ByteReader):
        reader.seek(self.seek_index)
        self._expect_extension(reader, GIF_TXT_EXT_LABEL)

        # 3. Block Size must contain the fixed value 12
        ext_block_size = self._read_byte(reader)
        if ext_block_size != GIF_TXT_EXT_BLOCK_SIZE:
            raise MalformedBlock(f'Plain text block size {ext_block_size} does not equal {GIF_TXT_EXT_BLOCK_SIZE}')

        # 4. Text Grid position and size (2 bytes each)
        self.x = self._read_u16(reader)
        self.y = self._read_u16(reader)
        self.width = self._read_u16(reader)
        self.height = self._read_u16(reader)

        # 5. Character Cell size
        self.cell_width = self._read_byte(reader)
        self.cell_height = self._read_byte(reader)

        # 6. Text Foreground and Background Color Index
        self.foreground = self._read_byte(reader)
        self.background = self._read_byte(reader)

        # 7. Process Plain Text Data
        self.text_data = self.load_data_sub_blocks(reader)
