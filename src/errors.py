class GIFError(Exception):
    """Base class of every error raised while decoding a GIF data stream."""


class UnexpectedEof(GIFError):
    def __init__(self, position: int, wanted: int, available: int):
        super().__init__(f'Wanted {wanted} byte(s) at offset {position} but only {available} left.')
        self.position = position
        self.wanted = wanted
        self.available = available


class UnsupportedSignature(GIFError):
    pass


class UnsupportedVersion(GIFError):
    pass


class MissingColorTable(GIFError):
    pass


class MalformedBlockIntroducer(GIFError):
    pass


class UnknownExtensionLabel(GIFError):
    pass


class MalformedBlock(GIFError):
    """A fixed-size block field holds a value the format does not allow."""


class IndexCountMismatch(GIFError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f'Image data decoded to {actual} indices, expected {expected}.')
        self.expected = expected
        self.actual = actual


class CodeTableCorruption(GIFError):
    pass
