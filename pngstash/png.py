import logging

from pngstash import exceptions as exc
from pngstash.models import Chunk, ChunkType


logger = logging.getLogger(__name__)


PNG_SIGNATURE = bytes([
    # High bit set to detect non-8-bit-clean transmission
    0x89,
    # ASCII letters PNG
    0x50, 0x4E, 0x47,
    # DOS line ending (CRLF)
    0x0D, 0x0A,
    # end-of-file charater
    0x1A,
    # Unix line ending (LF)
    0x0A
])

IMAGE_HEADER = ChunkType(b'IHDR')
IMAGE_TRAILER = ChunkType(b'IEND')


def _as_chunk_type(chunk_type):
    if isinstance(chunk_type, ChunkType):
        return chunk_type
    return ChunkType.from_str(chunk_type)


class Png(object):
    """
    An ordered collection of chunks making up a PNG file.

    Nothing here checks chunk ordering or which chunks are present;
    the chunks are kept exactly as read or added.
    """
    def __init__(self, chunks=()):
        self._chunks = list(chunks)

    @classmethod
    def from_chunks(cls, chunks):
        return cls(chunks)

    @classmethod
    def from_bytes(cls, data):
        """
        Parse a whole PNG file held in memory.

        The body is consumed one chunk at a time with
        :meth:`models.Chunk.take_from`, so any error in any chunk
        propagates and nothing is returned.

        :raises exceptions.SignatureMismatch:
            if ``data`` doesn't start with the PNG signature
        """
        view = memoryview(data)
        header = bytes(view[:len(PNG_SIGNATURE)])
        if header != PNG_SIGNATURE:
            raise exc.SignatureMismatch(
                "Expected {expected!r}, got {actual!r}".format(
                    expected=PNG_SIGNATURE,
                    actual=header
                )
            )
        position = len(PNG_SIGNATURE)
        chunks = []
        while position < len(view):
            chunk, remaining = Chunk.take_from(view[position:])
            logger.debug('Chunk at byte %d: %r', position, chunk)
            chunks.append(chunk)
            position = len(view) - remaining
        return cls(chunks)

    @property
    def chunks(self):
        return tuple(self._chunks)

    @property
    def header(self):
        return self.chunk_by_type(IMAGE_HEADER)

    @property
    def trailer(self):
        return self.chunk_by_type(IMAGE_TRAILER)

    def chunk_by_type(self, chunk_type):
        """
        Return the first chunk of ``chunk_type`` (a :class:`ChunkType`
        or a four letter string), or None.
        """
        chunk_type = _as_chunk_type(chunk_type)
        for chunk in self._chunks:
            if chunk.chunk_type == chunk_type:
                return chunk
        return None

    def chunks_by_type(self, chunk_type):
        chunk_type = _as_chunk_type(chunk_type)
        return [c for c in self._chunks if c.chunk_type == chunk_type]

    def append_chunk(self, chunk):
        """
        Add ``chunk`` to the image, ahead of the IEND chunk if the image
        ends with one.
        """
        if self._chunks and self._chunks[-1].chunk_type == IMAGE_TRAILER:
            self._chunks.insert(len(self._chunks) - 1, chunk)
        else:
            self._chunks.append(chunk)

    def remove_first_chunk(self, chunk_type):
        """
        Remove and return the first chunk of ``chunk_type``.

        :raises exceptions.ChunkNotFound: if there is no such chunk
        """
        chunk_type = _as_chunk_type(chunk_type)
        for index, chunk in enumerate(self._chunks):
            if chunk.chunk_type == chunk_type:
                return self._chunks.pop(index)
        raise exc.ChunkNotFound(
            "No {code} chunk in image".format(code=chunk_type.code)
        )

    def as_bytes(self):
        return PNG_SIGNATURE + b''.join(c.as_bytes() for c in self._chunks)

    def __bytes__(self):
        return self.as_bytes()

    def __len__(self):
        return len(self._chunks)

    def __iter__(self):
        return iter(self._chunks)

    def __str__(self):
        return '\n'.join(
            '{type} length={length} crc={crc:#010x}'.format(
                type=chunk.chunk_type,
                length=chunk.length,
                crc=chunk.crc,
            )
            for chunk in self._chunks
        )
