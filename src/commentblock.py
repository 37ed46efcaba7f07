from bytereader import ByteReader
from constants import GIF_COM_EXT_LABEL
from baseblock import BaseBlock


class CommentExtensionBlock(BaseBlock):
    def __init__(self, seek_index: int, reader: ByteReader):
        """The Comment Extension contains text which is not part of the actual graphics in the GIF Data Stream. It is suitable for including comments about the graphics, credits, descriptions or any other type of non-control and non-graphic data.

        Args:
            seek_index: The start index of the block in the data stream.
            reader: The reader over the whole data stream. Parsing leaves it positioned right after the block terminator.

        Attributes:
            seek_index: The start index of the block in the data stream.
            block_size: The length of this block data.
            comment_data: All the sub-blocks data (in bytes).
            comments: The sub-blocks decoded as text.
        """
        super().__init__(seek_index)
        self.comment_data = []

        self._process_data_stream(reader)

    @property
    def comments(self):
        # latin-1 maps every byte, so odd encoders cannot make this fail
        return [block.decode('latin-1') for block in self.comment_data]

    def _process_data_stream(self, reader: ByteReader):
        reader.seek(self.seek_index)
        self._expect_extension(reader, GIF_COM_EXT_LABEL)

        # 3. Process Comment Data
        self.comment_data = self.load_data_sub_blocks(reader)
