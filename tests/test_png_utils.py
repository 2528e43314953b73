import pytest

from pngsecret.exceptions import ValidationError
from pngsecret.png import ChunkType, PNGFile
from pngsecret.png.utils import delete_messages, find_messages, get_chunk_type, hide_message


def test_get_chunk_type():
    chunk_type = ChunkType.from_string('ruSt')

    assert get_chunk_type(chunk_type) is chunk_type
    assert get_chunk_type('ruSt') == chunk_type

    with pytest.raises(ValidationError):
        get_chunk_type('ru5t')


@pytest.mark.parametrize('chunk_type', ['ruSt', ChunkType.from_string('ruSt')])
def test_hide_find_delete(red_png, chunk_type):
    png = PNGFile(red_png)

    chunk = hide_message(png, chunk_type, 'hidden')

    assert chunk.chunk_type == ChunkType.from_string('ruSt')
    assert find_messages(png, chunk_type) == ['hidden']
    assert delete_messages(png, chunk_type) == 1
    assert find_messages(png, chunk_type) == []
    assert png.pack() == red_png
