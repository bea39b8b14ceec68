class DecodeError(Exception):
    pass


class InvalidTypeCode(DecodeError):
    pass


class TooShort(DecodeError):
    pass


class TruncatedData(DecodeError):
    pass


class CrcMismatch(DecodeError):
    pass


class TrailingData(DecodeError):
    pass


class EncodingError(DecodeError):
    pass


class SignatureMismatch(DecodeError):
    pass


class ChunkNotFound(DecodeError):
    pass
