import itertools
import struct
import zlib

import attr

from pngstash import exceptions as exc


PNG_CHUNK_TYPE_PROPERTY_BITMASK = 0b00100000
PNG_CHUNK_TYPE_CODE_ALLOWED_BYTES = frozenset(
    itertools.chain(range(65, 91), range(97, 123)))

# Length and type code, then the data, then the CRC32
_CHUNK_HEAD = struct.Struct('>I4s')
_CHUNK_CRC = struct.Struct('>I')
PNG_CHUNK_OVERHEAD = _CHUNK_HEAD.size + _CHUNK_CRC.size


_valid_bytes = attr.validators.instance_of(bytes)


def _four_byte_code(instance, attribute, value):
    _valid_bytes(instance, attribute, value)
    if len(value) != 4:
        raise ValueError("{!r} must be exactly 4 bytes long".format(attribute))


@attr.attributes(frozen=True)
class ChunkType:
    """
    A PNG chunk type code.

    Any four bytes make a chunk type, so codes read from damaged files
    survive parsing; :attr:`is_valid` says whether the code is one the
    PNG specification allows. The case of each letter carries one
    property bit, exposed as :attr:`is_critical`, :attr:`is_public`,
    :attr:`is_reserved_bit_valid` and :attr:`is_safe_to_copy`.

    :ivar code: The raw four bytes of the type code
    :type code: bytes
    """
    code = attr.attr(validator=_four_byte_code)  # type: bytes

    @classmethod
    def from_str(cls, name):
        """
        Create a chunk type from a four letter string such as ``'tEXt'``.

        Unlike the plain constructor this refuses anything but exactly
        four ASCII letters, raising :exc:`exceptions.InvalidTypeCode`.
        """
        try:
            code = name.encode('ascii')
        except UnicodeEncodeError:
            code = b''
        if len(code) != 4 or not PNG_CHUNK_TYPE_CODE_ALLOWED_BYTES.issuperset(code):
            raise exc.InvalidTypeCode(
                "Chunk type must be 4 ASCII letters, got {!r}".format(name)
            )
        return cls(code)

    def _property_bit(self, index):
        # pylint: disable=unsubscriptable-object
        return bool(self.code[index] & PNG_CHUNK_TYPE_PROPERTY_BITMASK)

    @property
    def is_critical(self):
        return not self._property_bit(0)

    @property
    def is_public(self):
        return not self._property_bit(1)

    @property
    def is_reserved_bit_valid(self):
        return not self._property_bit(2)

    @property
    def is_safe_to_copy(self):
        return self._property_bit(3)

    @property
    def is_valid(self):
        return (
            PNG_CHUNK_TYPE_CODE_ALLOWED_BYTES.issuperset(self.code) and
            self.is_reserved_bit_valid
        )

    def __str__(self):
        return self.code.decode('ascii', errors='backslashreplace')


def _chunk_crc32(chunk_type, data):
    return zlib.crc32(data, zlib.crc32(chunk_type.code))


@attr.attributes(frozen=True, repr=False)
class Chunk:
    """
    A single PNG chunk: type code, data, and the CRC32 over both.

    The CRC is always computed from the type and data, never supplied.
    Use :meth:`take_from` or :meth:`from_bytes` to read a serialized
    chunk, and :meth:`as_bytes` to write one.

    :ivar chunk_type: The chunk's type code
    :type chunk_type: :class:`ChunkType`
    :ivar data: The chunk data
    :type data: bytes
    :ivar crc: CRC32 of the type code followed by the data
    :type crc: int
    """
    chunk_type = attr.attr(
        validator=attr.validators.instance_of(ChunkType)
    )  # type: ChunkType
    data = attr.attr(validator=_valid_bytes)  # type: bytes
    crc = attr.attr(init=False)  # type: int

    @crc.default
    def _compute_crc(self):
        return _chunk_crc32(self.chunk_type, self.data)

    @property
    def length(self):
        return len(self.data)

    @classmethod
    def take_from(cls, buf):
        """
        Parse the chunk at the start of ``buf``, which may be followed by
        more chunks.

        :param buf: A bytes-like object starting with a serialized chunk
        :return: The chunk, and how many bytes of ``buf`` follow it
        :rtype: tuple of (:class:`Chunk`, int)
        :raises exceptions.TooShort: if ``buf`` can't hold even an empty chunk
        :raises exceptions.TruncatedData:
            if ``buf`` ends before the declared data and CRC do
        :raises exceptions.CrcMismatch: if the stored CRC32 is wrong
        """
        view = memoryview(buf)
        if len(view) < PNG_CHUNK_OVERHEAD:
            raise exc.TooShort(
                "Need at least {need} bytes for a chunk, got {actual}".format(
                    need=PNG_CHUNK_OVERHEAD,
                    actual=len(view),
                )
            )
        length, code = _CHUNK_HEAD.unpack_from(view)
        chunk_type = ChunkType(code)
        crc_start = _CHUNK_HEAD.size + length
        crc_end = crc_start + _CHUNK_CRC.size
        if crc_end > len(view):
            fmt = (
                "Chunk {code} claims {length} data bytes, but only "
                "{available} are available"
            )
            raise exc.TruncatedData(fmt.format(
                code=code,
                length=length,
                available=len(view) - PNG_CHUNK_OVERHEAD,
            ))
        [declared_crc32] = _CHUNK_CRC.unpack_from(view, crc_start)
        # The type code and data are contiguous, checksum them together
        computed_crc32 = zlib.crc32(view[4:crc_start])
        if declared_crc32 != computed_crc32:
            fmt = "Chunk {code} declares CRC32 {declared:#010x}, computed {computed:#010x}"
            raise exc.CrcMismatch(fmt.format(
                code=code,
                declared=declared_crc32,
                computed=computed_crc32,
            ))
        chunk = cls(chunk_type, bytes(view[_CHUNK_HEAD.size:crc_start]))
        return chunk, len(view) - crc_end

    @classmethod
    def from_bytes(cls, buf):
        """
        Parse ``buf`` as exactly one chunk.

        Raises the same exceptions as :meth:`take_from`, and
        :exc:`exceptions.TrailingData` if anything follows the chunk.
        """
        chunk, remaining = cls.take_from(buf)
        if remaining:
            raise exc.TrailingData(
                "{remaining} extra bytes after chunk {code}".format(
                    remaining=remaining,
                    code=chunk.chunk_type.code,
                )
            )
        return chunk

    def as_bytes(self):
        return b''.join([
            _CHUNK_HEAD.pack(self.length, self.chunk_type.code),
            self.data,
            _CHUNK_CRC.pack(self.crc),
        ])

    def __bytes__(self):
        return self.as_bytes()

    def data_as_string(self):
        """
        Return the chunk data decoded as UTF-8, or raise
        :exc:`exceptions.EncodingError` if it isn't valid UTF-8.
        """
        try:
            return self.data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise exc.EncodingError(
                "Data of chunk {code} is not UTF-8: {reason}".format(
                    code=self.chunk_type.code,
                    reason=e.reason,
                )
            ) from e

    def __str__(self):
        return self.data.decode('utf-8', errors='replace')

    def __repr__(self):
        return '{name}(chunk_type={type!r}, length={length}, crc={crc:#010x})'.format(
            name=self.__class__.__name__,
            type=self.chunk_type,
            length=self.length,
            crc=self.crc,
        )
