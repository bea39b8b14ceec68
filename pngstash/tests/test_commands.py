# pylint: disable=redefined-outer-name,no-self-use
import pytest

from pngstash.tests.rawdata import one_pixel_png_bytes


@pytest.fixture
def png_path(tmp_path):
    path = tmp_path / 'pixel.png'
    path.write_bytes(one_pixel_png_bytes())
    return path


class TestEncodeDecode:
    def test_encode_then_decode(self, png_path):
        from pngstash import commands

        commands.encode(png_path, 'ruSt', 'a secret')
        assert commands.decode(png_path, 'ruSt') == 'a secret'

    def test_encode_returns_chunk(self, png_path):
        from pngstash import commands

        chunk = commands.encode(png_path, 'ruSt', 'ünïcode')
        assert chunk.data == 'ünïcode'.encode('utf-8')
        assert str(chunk.chunk_type) == 'ruSt'

    def test_encode_to_output(self, png_path, tmp_path):
        from pngstash import commands

        output = tmp_path / 'out.png'
        commands.encode(png_path, 'ruSt', 'elsewhere', output)
        assert png_path.read_bytes() == one_pixel_png_bytes()
        assert commands.decode(output, 'ruSt') == 'elsewhere'

    def test_encode_invalid_type(self, png_path):
        from pngstash import commands
        from pngstash.exceptions import InvalidTypeCode

        with pytest.raises(InvalidTypeCode):
            commands.encode(png_path, 'ru5t', 'message')
        assert png_path.read_bytes() == one_pixel_png_bytes()

    def test_decode_missing_chunk(self, png_path):
        from pngstash import commands

        assert commands.decode(png_path, 'ruSt') is None

    def test_decode_first_of_several(self, png_path):
        from pngstash import commands

        commands.encode(png_path, 'ruSt', 'first')
        commands.encode(png_path, 'ruSt', 'second')
        assert commands.decode(png_path, 'ruSt') == 'first'

    def test_decode_binary_chunk(self, png_path):
        from pngstash import commands
        from pngstash.exceptions import EncodingError

        with pytest.raises(EncodingError):
            commands.decode(png_path, 'IDAT')

    def test_not_a_png(self, tmp_path):
        from pngstash import commands
        from pngstash.exceptions import SignatureMismatch

        path = tmp_path / 'notes.txt'
        path.write_bytes(b'just some text')
        with pytest.raises(SignatureMismatch):
            commands.decode(path, 'ruSt')


class TestRemove:
    def test_remove(self, png_path):
        from pngstash import commands

        commands.encode(png_path, 'ruSt', 'gone soon')
        removed = commands.remove(png_path, 'ruSt')
        assert removed.data_as_string() == 'gone soon'
        assert png_path.read_bytes() == one_pixel_png_bytes()

    def test_remove_missing(self, png_path):
        from pngstash import commands
        from pngstash.exceptions import ChunkNotFound

        with pytest.raises(ChunkNotFound):
            commands.remove(png_path, 'ruSt')


def test_print_chunks(png_path):
    from pngstash import commands

    commands.encode(png_path, 'ruSt', 'hi')
    listing = commands.print_chunks(png_path).splitlines()
    assert [line.split()[0] for line in listing] == [
        'IHDR', 'IDAT', 'ruSt', 'IEND'
    ]
    assert listing[2].startswith('ruSt length=2 ')
