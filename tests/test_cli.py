import io
import logging

import pytest

from pngsecret.cli import main, slow_print
from pngsecret.png import PNGFile


def test_hide_and_find(red_png_path, capsys):
    assert main(['hide', '-i', str(red_png_path), '-c', 'ruSt', '-m', 'meet me at midnight']) == 0

    png = PNGFile(str(red_png_path))
    assert png.find_chunk('ruSt').payload == b'meet me at midnight'

    assert main(['find', '-p', str(red_png_path), '-c', 'ruSt', '--delay', '0']) == 0
    assert capsys.readouterr().out == 'meet me at midnight\n'


def test_hide_ancillary_chunk_type(red_png_path, caplog):
    with caplog.at_level(logging.WARNING):
        assert main(['hide', '-i', str(red_png_path), '-c', 'ruSt', '-m', 'a']) == 0

    assert 'critical' not in caplog.text
    assert 'reserved' not in caplog.text

    chunk = PNGFile(str(red_png_path)).find_chunk('ruSt')

    assert chunk.payload == b'a'
    assert not chunk.is_critical()
    assert not chunk.chunk_type.is_public()
    assert chunk.chunk_type.is_reserved_bit_valid()
    assert chunk.chunk_type.is_safe_to_copy()


def test_hide_output_path(red_png_path, red_png, tmp_path, capsys):
    output_path = tmp_path / 'secret.png'

    assert main([
        'hide',
        '--input-path', str(red_png_path),
        '--chunk-type', 'ruSt',
        '--message', 'first',
        '--output-path', str(output_path),
    ]) == 0
    assert main(['hide', '-i', str(output_path), '-c', 'ruSt', '-m', 'second']) == 0

    # the source is untouched
    assert red_png_path.read_bytes() == red_png

    assert main(['find', '-p', str(output_path), '-c', 'ruSt', '--delay', '0']) == 0
    assert capsys.readouterr().out == 'first\nsecond\n'


def test_delete(red_png_path, red_png):
    main(['hide', '-i', str(red_png_path), '-c', 'ruSt', '-m', 'to be removed'])
    main(['hide', '-i', str(red_png_path), '-c', 'ruSt', '-m', 'this as well'])

    assert main(['delete', '-p', str(red_png_path), '-c', 'ruSt']) == 0

    assert red_png_path.read_bytes() == red_png


def test_find_nothing(red_png_path, capsys):
    assert main(['find', '-p', str(red_png_path), '-c', 'ruSt']) == 0
    assert capsys.readouterr().out == ''


def test_invalid_chunk_type(red_png_path, red_png, capsys):
    assert main(['hide', '-i', str(red_png_path), '-c', 'ru5t', '-m', 'nope']) == 1
    assert 'ValidationError' in capsys.readouterr().err

    assert main(['delete', '-p', str(red_png_path), '-c', 'ru5t']) == 1

    assert red_png_path.read_bytes() == red_png


def test_hide_critical_chunk_type_warns(red_png_path, caplog):
    with caplog.at_level(logging.WARNING):
        assert main(['hide', '-i', str(red_png_path), '-c', 'RuSt', '-m', 'loud']) == 0

    assert 'critical' in caplog.text


def test_corrupted_file_is_not_written(tmp_path, red_png, capsys):
    path = tmp_path / 'broken.png'
    data = bytearray(red_png)
    data[-1] ^= 0xff
    path.write_bytes(bytes(data))

    assert main(['hide', '-i', str(path), '-c', 'ruSt', '-m', 'nope']) == 1
    assert 'CrcMismatchError' in capsys.readouterr().err
    assert path.read_bytes() == bytes(data)


def test_not_a_png(tmp_path, capsys):
    path = tmp_path / 'text.png'
    path.write_bytes(b'this is not a png file')

    assert main(['find', '-p', str(path), '-c', 'ruSt']) == 1
    assert 'SignatureError' in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main(['find', '-p', str(tmp_path / 'missing.png'), '-c', 'ruSt']) == 1


def test_non_utf8_message(red_png_path, capsys):
    from pngsecret.png import PNGChunk

    png = PNGFile(str(red_png_path))
    png.append_chunk(PNGChunk.new('ruSt', b'\xff\xfe'))
    red_png_path.write_bytes(png.pack())

    assert main(['find', '-p', str(red_png_path), '-c', 'ruSt', '--delay', '0']) == 1
    assert 'EncodingError' in capsys.readouterr().err


def test_list(red_png_path, capsys):
    main(['hide', '-i', str(red_png_path), '-c', 'ruSt', '-m', 'listed'])

    assert main(['list', '-p', str(red_png_path)]) == 0

    lines = capsys.readouterr().out.splitlines()

    assert lines[0].startswith('[00] 0x00000008 IHDR')
    assert lines[0].endswith('critical')
    assert 'ruSt' in lines[-2] and lines[-2].endswith('ancillary')
    assert 'IEND' in lines[-1]


def test_missing_subcommand():
    with pytest.raises(SystemExit) as e:
        main([])

    assert e.value.code == 2


def test_slow_print(monkeypatch):
    sleeps = []
    monkeypatch.setattr('pngsecret.cli.time.sleep', lambda x: sleeps.append(x))

    output = io.StringIO()
    slow_print('abc', 0.5, stream=output)

    assert output.getvalue() == 'abc\n'
    assert sleeps == [0.5, 0.5, 0.5]
