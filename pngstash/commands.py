"""
File level operations for hiding messages in PNG chunks.
"""
import logging

from pngstash.models import Chunk, ChunkType
from pngstash.png import Png


logger = logging.getLogger(__name__)


def _read_png(path):
    with open(path, 'rb') as pngfile:
        return Png.from_bytes(pngfile.read())


def _write_png(path, png):
    with open(path, 'wb') as pngfile:
        pngfile.write(png.as_bytes())


def encode(path, chunk_type, message, output=None):
    """
    Store ``message`` in a new chunk of type ``chunk_type`` and write the
    image to ``output``, or back to ``path`` if no output is given.

    :return: The chunk that was added
    :rtype: :class:`models.Chunk`
    """
    chunk = Chunk(ChunkType.from_str(chunk_type), message.encode('utf-8'))
    png = _read_png(path)
    png.append_chunk(chunk)
    destination = path if output is None else output
    _write_png(destination, png)
    logger.info('Wrote %r to %s', chunk, destination)
    return chunk


def decode(path, chunk_type):
    """
    Return the message in the first chunk of type ``chunk_type``, or None
    if the image has no such chunk.
    """
    chunk = _read_png(path).chunk_by_type(chunk_type)
    if chunk is None:
        return None
    return chunk.data_as_string()


def remove(path, chunk_type):
    """
    Remove the first chunk of type ``chunk_type`` from the image and
    rewrite it in place.

    :return: The removed chunk
    """
    png = _read_png(path)
    chunk = png.remove_first_chunk(chunk_type)
    _write_png(path, png)
    logger.info('Removed %r from %s', chunk, path)
    return chunk


def print_chunks(path):
    return str(_read_png(path))
