from bytereader import ByteReader
from constants import GIF_GCE_EXT_LABEL, GIF_GCE_BLOCK_SIZE, DISPOSAL_UNSPECIFIED
from baseblock import BaseBlock
from errors import MalformedBlock


class GraphicControlExtension(BaseBlock):
    def __init__(self, seek_index: int, reader: ByteReader):
        super().__init__(seek_index)
        self.disposal_method = DISPOSAL_UNSPECIFIED
        self.user_input_flag = False
        self.transparent_color_flag = False
        self.delay_time = 0
        self.transparent_color = 0

        self._process_data_stream(reader)

    @property
    def delay(self):
        """Display duration in milliseconds."""
        return self.delay_time * 10

    def _process_data_stream(self, reader: ByteReader):
        reader.seek(self.seek_index)
        self._expect_extension(reader, GIF_GCE_EXT_LABEL)

        # 3. Expect Block Size with fixed value 4
        block_size = self._read_byte(reader)
        if block_size != GIF_GCE_BLOCK_SIZE:
            raise MalformedBlock(f'Graphic control block size {block_size} does not equal {GIF_GCE_BLOCK_SIZE}')

        # 4. Expect Packed Fields
        fields = self._read_byte(reader)
        self.disposal_method = (fields & 0b00011100) >> 2
        self.user_input_flag = bool((fields & 0b00000010) >> 1)
        self.transparent_color_flag = bool(fields & 0b00000001)

        # 5. Expect Delay Time (2 bytes)
        self.delay_time = self._read_u16(reader)

        # 6. Expect Transparent Color Index
        self.transparent_color = self._read_byte(reader)

        # 7. Expect Block Terminator
        terminator = self._read_byte(reader)
        if terminator != 0:
            raise MalformedBlock(f'Graphic control block terminator 0x{terminator:02x} does not equal 0')
