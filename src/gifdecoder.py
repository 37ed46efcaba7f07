import os
import sys
import argparse
import logging

from constants import *
from bytereader import ByteReader
from baseblock import read_color_table
from errors import (
    GIFError,
    UnsupportedSignature,
    UnsupportedVersion,
    MalformedBlockIntroducer,
    UnknownExtensionLabel,
)
from imageblock import ImageDescriptorBlock
from graphicblock import GraphicControlExtension
from applicationblock import ApplicationExtensionBlock
from commentblock import CommentExtensionBlock
from textblock import PlainTextExtensionBlock

logger = logging.getLogger(__name__)


class GIF:
    def __init__(self, data: bytes, accepted_versions=SUPPORTED_VERSIONS, table_size_from=TABLE_SIZE_FROM_RESOLUTION):
        if table_size_from not in TABLE_SIZE_SOURCES:
            raise ValueError(f'table_size_from must be one of {TABLE_SIZE_SOURCES!r}, not {table_size_from!r}')

        self.reader = ByteReader(data)
        self.accepted_versions = tuple(accepted_versions)
        self.table_size_from = table_size_from

        # image, graphic control, application and comment blocks in stream order
        self.blocks = []
        self.version = None
        self.width = 0
        self.height = 0
        self.global_palette_flag = False
        self.color_resolution = 0
        self.sorted = False
        self.table_size_field = 0
        self.global_palette_size = 0
        self.global_palette = None
        self.background = 0
        self.pixel_aspect_ratio = 0

        self._process_data_stream()

    @property
    def images(self):
        return [block for block in self.blocks if isinstance(block, ImageDescriptorBlock)]

    @property
    def background_color(self):
        """RGBA color of the logical screen background."""
        if self.global_palette is None or self.background >= len(self.global_palette):
            return DEFAULT_BACKGROUND
        return (*self.global_palette[self.background], 255)

    @property
    def loop_count(self):
        for block in self.blocks:
            if isinstance(block, ApplicationExtensionBlock) and block.loop_count is not None:
                return block.loop_count
        return None

    def _process_data_stream(self):
        reader = self.reader

        # 1. Expect GIF signature (3 bytes) and version (3 bytes)
        signature = reader.read_bytes(3)
        if signature != GIF_SIGNATURE:
            raise UnsupportedSignature(f'Signature {signature!r} does not equal {GIF_SIGNATURE!r}')

        self.version = reader.read_bytes(3)
        if self.version not in self.accepted_versions:
            raise UnsupportedVersion(f'Version {self.version!r} is not one of {self.accepted_versions!r}')

        # Parse Logical Screen Descriptor
        # 2. Expect Logical Screen Width and Height (2 bytes each)
        self.width = reader.read_u16()
        self.height = reader.read_u16()

        # 3. Unpack fields
        fields = reader.read_byte()
        self.global_palette_flag = bool((fields & 0b10000000) >> 7)
        self.color_resolution = (fields & 0b01110000) >> 4
        self.sorted = bool((fields & 0b00001000) >> 3)
        self.table_size_field = fields & 0b00000111

        # the table length follows the color resolution unless the caller asked for the size field
        if self.table_size_from == TABLE_SIZE_FROM_SIZE:
            self.global_palette_size = 2 ** (self.table_size_field + 1)
        else:
            self.global_palette_size = 2 ** (self.color_resolution + 1)

        # 4. Expect Background Color Index and Pixel Aspect Ratio
        self.background = reader.read_byte()
        self.pixel_aspect_ratio = reader.read_byte()

        # 5. Expect Global Color Table
        if self.global_palette_flag:
            self.global_palette = read_color_table(reader, self.global_palette_size)

        logger.debug(f'Logical screen {self.width}x{self.height}, global color table: {self.global_palette_size if self.global_palette_flag else None}.')

        # 6. Expect Extension Block, Image Descriptor or Trailer
        while True:
            block_type = reader.read_byte()

            if block_type == GIF_EXTENSION_INTRODUCER:
                # 7. Expect extension type
                sub_type = reader.read_byte()
                seek_index = reader.tell() - 2

                if sub_type == GIF_GCE_EXT_LABEL:
                    self.blocks.append(GraphicControlExtension(seek_index, reader))
                elif sub_type == GIF_COM_EXT_LABEL:
                    self.blocks.append(CommentExtensionBlock(seek_index, reader))
                elif sub_type == GIF_TXT_EXT_LABEL:
                    # parsed to stay in sync with the stream, plain text is not rendered
                    PlainTextExtensionBlock(seek_index, reader)
                elif sub_type == GIF_APP_EXT_LABEL:
                    self.blocks.append(ApplicationExtensionBlock(seek_index, reader))
                else:
                    raise UnknownExtensionLabel(f'Unknown extension label 0x{sub_type:02x} at {seek_index + 1}')
            elif block_type == GIF_IMAGE_SEPARATOR:
                self.blocks.append(ImageDescriptorBlock(reader.tell() - 1, reader, self.global_palette))
            elif block_type == GIF_TRAILER:
                break
            else:
                raise MalformedBlockIntroducer(f'Unknown block introducer 0x{block_type:02x} at {reader.tell() - 1}')

        logger.info(f'Finished reading GIF data: {len(self.blocks)} blocks.')


def load(path, accepted_versions=SUPPORTED_VERSIONS, table_size_from=TABLE_SIZE_FROM_RESOLUTION):
    with open(path, mode='rb') as stream:
        data = stream.read()
    return GIF(data, accepted_versions, table_size_from)


def describe(gif: GIF):
    lines = [
        f'Version: {gif.version.decode("ascii", "replace")}',
        f'Canvas: {gif.width}x{gif.height}',
        f'Global color table: {len(gif.global_palette) if gif.global_palette else "none"}',
        f'Background color: {gif.background_color}',
        'LIST OF BLOCKS',
    ]

    for block in gif.blocks:
        if isinstance(block, ImageDescriptorBlock):
            lines.append(f'IMAGE {block.width}x{block.height} at ({block.x}, {block.y}), interlaced: {block.interlace_flag}, local color table: {block.local_palette_flag}')
        elif isinstance(block, GraphicControlExtension):
            disposal = disposal_method_str.get(block.disposal_method, 'reserved disposal method')
            transparency = block.transparent_color if block.transparent_color_flag else None
            lines.append(f'GRAPHIC CONTROL delay: {block.delay} ms, {disposal}, transparent index: {transparency}')
        elif isinstance(block, ApplicationExtensionBlock):
            lines.append(f'APPLICATION EXTENSION {(block.identifier + block.auth_code).decode("ascii", "replace")}, loop count: {block.loop_count}')
        elif isinstance(block, CommentExtensionBlock):
            lines.append('COMMENT EXTENSION')
            lines.extend(f'  {comment}' for comment in block.comments)

    return '\n'.join(lines)


def main():
    parser = argparse.ArgumentParser(description='List the blocks of a GIF file')
    parser.add_argument('infile', type=str)
    parser.add_argument(
        '--version',
        dest='versions',
        action='append',
        choices=[v.decode('ascii') for v in SUPPORTED_VERSIONS],
        help='accepted GIF version, can be repeated (default: all)',
    )
    parser.add_argument(
        '--table-size',
        choices=TABLE_SIZE_SOURCES,
        default=TABLE_SIZE_FROM_SIZE,
        help='screen descriptor field that gives the global color table length (default: size)',
    )
    parser.add_argument('-v', '--verbose', action='store_true')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not os.path.exists(args.infile):
        print(f'{args.infile} does not exists!')
        return 1

    if not os.path.isfile(args.infile):
        print(f'{args.infile} is not a file!')
        return 1

    versions = [v.encode('ascii') for v in args.versions] if args.versions else SUPPORTED_VERSIONS

    try:
        gif = load(args.infile, versions, args.table_size)
    except GIFError as e:
        print(f'{args.infile}: {e.__class__.__name__}: {e}')
        return 1

    print(describe(gif))
    return 0


if __name__ == '__main__':
    sys.exit(main())
