import io
import pathlib

import pytest
from PIL import Image


def png_from_image(image, **params):
    buffer = io.BytesIO()
    image.save(buffer, format='PNG', **params)

    return buffer.getvalue()


@pytest.fixture
def test_root_dir():
    return pathlib.Path(__file__).parent


@pytest.fixture
def red_png():
    '''A 5x5 red image, just IHDR, IDAT and IEND.'''
    return png_from_image(Image.new('RGB', (5, 5), 'red'))


@pytest.fixture
def palette_png():
    '''A palette image with an ancillary chunk (pHYs) in the middle.'''
    image = Image.new('RGB', (5, 10), 'green').convert('P')

    return png_from_image(image, dpi=(72, 72))


@pytest.fixture
def red_png_path(tmp_path, red_png):
    path = tmp_path / 'red.png'
    path.write_bytes(red_png)

    return path
