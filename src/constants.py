# I store signatures in `bytes` for convenience in comparision.
GIF_SIGNATURE = b'GIF'
GIF87A_VERSION = b'87a'
GIF89A_VERSION = b'89a'

# Versions accepted unless the caller passes its own set.
SUPPORTED_VERSIONS = (GIF87A_VERSION, GIF89A_VERSION)

# Where the global color table length comes from: the color resolution
# (bits 4-6 of the screen descriptor fields) or the table size field (bits 0-2).
TABLE_SIZE_FROM_RESOLUTION = 'resolution'
TABLE_SIZE_FROM_SIZE = 'size'
TABLE_SIZE_SOURCES = (TABLE_SIZE_FROM_RESOLUTION, TABLE_SIZE_FROM_SIZE)

GIF_TRAILER = 0x3b
GIF_EXTENSION_INTRODUCER = 0x21
GIF_IMAGE_SEPARATOR = 0x2c
GIF_TXT_EXT_LABEL = 0x01
GIF_GCE_EXT_LABEL = 0xf9
GIF_COM_EXT_LABEL = 0xfe
GIF_APP_EXT_LABEL = 0xff

GIF_GCE_BLOCK_SIZE = 4
GIF_APP_EXT_BLOCK_SIZE = 11
GIF_TXT_EXT_BLOCK_SIZE = 12

# Disposal methods
DISPOSAL_UNSPECIFIED = 0
DISPOSAL_NONE = 1
DISPOSAL_RESTORE_BACKGROUND = 2
DISPOSAL_RESTORE_PREVIOUS = 3

disposal_method_str = {
    DISPOSAL_UNSPECIFIED: 'disposal method not specified',
    DISPOSAL_NONE: 'do not dispose of graphic',
    DISPOSAL_RESTORE_BACKGROUND: 'overwrite graphic with background color',
    DISPOSAL_RESTORE_PREVIOUS: 'overwrite graphic with previous graphic',
}

# LZW
LZW_MAX_CODE_SIZE = 12
LZW_MAX_TABLE_SIZE = 1 << LZW_MAX_CODE_SIZE

# used when there is no global color table to take the background from
DEFAULT_BACKGROUND = (255, 255, 255, 255)

# Playback states
STATE_IDLE = 'idle'
STATE_DECODING = 'decoding'
STATE_READY = 'ready'
