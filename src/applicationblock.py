from bytereader import ByteReader
from constants import GIF_APP_EXT_LABEL, GIF_APP_EXT_BLOCK_SIZE
from baseblock import BaseBlock
from errors import MalformedBlock

# applications known to carry a loop count in their first sub-block
LOOPING_APPLICATIONS = (b'NETSCAPE2.0', b'ANIMEXTS1.0')


class ApplicationExtensionBlock(BaseBlock):
    def __init__(self, seek_index: int, reader: ByteReader):
        super().__init__(seek_index)
        self.identifier = None
        self.auth_code = None
        self.app_data = []

        self._process_data_stream(reader)

    @property
    def loop_count(self):
        """Number of repetitions requested by a NETSCAPE looping extension.

        0 means loop forever. None is returned when this block is not a looping extension.
        """
        if self.identifier + self.auth_code not in LOOPING_APPLICATIONS:
            return None
        if not self.app_data:
            return None
        data = self.app_data[0]
        if len(data) < 3 or data[0] != 1:
            return None
        return data[1] | (data[2] << 8)

    def _process_data_stream(self, reader: ByteReader):
        reader.seek(self.seek_index)
        self._expect_extension(reader, GIF_APP_EXT_LABEL)

        # 3. Expect Block Size with fixed value 11
        block_size = self._read_byte(reader)
        if block_size != GIF_APP_EXT_BLOCK_SIZE:
            raise MalformedBlock(f'Application extension block size {block_size} does not equal {GIF_APP_EXT_BLOCK_SIZE}')

        # 4. Expect Application Identifier (8 bytes)
        self.identifier = self._read(reader, 8)

        # 5. Expect Application Authentication Code (3 bytes)
        self.auth_code = self._read(reader, 3)

        # 6. Expect Application Data
        self.app_data = self.load_data_sub_blocks(reader)
