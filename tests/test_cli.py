import pytest

from ftab import cli
from ftab.cli import main
from ftab.codec import decode, encode
from ftab.format import DEFAULT_OUTPUT_FILENAME, MANIFEST_FILENAME, TICKET_FILENAME


@pytest.fixture(autouse=True)
def non_interactive(monkeypatch):
    monkeypatch.setattr(cli, 'is_interactive', lambda: False)


def write_image(tmp_path, layout):
    path = tmp_path / 'ftab.bin'
    path.write_bytes(encode(layout))
    return path


def test_unpack_then_pack(tmp_path, full_layout):
    image = write_image(tmp_path, full_layout)
    out_dir = tmp_path / 'out'

    assert main(['unpack', str(image), str(out_dir)]) == 0

    assert (out_dir / MANIFEST_FILENAME).is_file()
    assert (out_dir / 'rkos.bin').read_bytes() == b'abc'
    assert (out_dir / TICKET_FILENAME).read_bytes() == full_layout.ticket

    packed = tmp_path / 'packed.bin'
    assert main(['pack', str(out_dir / MANIFEST_FILENAME), str(packed)]) == 0

    assert packed.read_bytes() == image.read_bytes()


def test_pack_after_editing_a_segment(tmp_path, full_layout):
    image = write_image(tmp_path, full_layout)
    out_dir = tmp_path / 'out'
    assert main(['unpack', str(image), str(out_dir)]) == 0

    (out_dir / 'bver.bin').write_bytes(b'a different length')

    assert main(['pack', str(out_dir / MANIFEST_FILENAME)]) == 0

    layout = decode((out_dir / DEFAULT_OUTPUT_FILENAME).read_bytes())
    assert layout.segments[1].data == b'a different length'
    assert [_.data for _ in layout.segments[2:]] == [_.data for _ in full_layout.segments[2:]]
    assert layout.ticket == full_layout.ticket


def test_unpack_to_current_directory(tmp_path, monkeypatch, rkos_layout):
    image = write_image(tmp_path, rkos_layout)
    work_dir = tmp_path / 'work'
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)

    assert main(['unpack', str(image)]) == 0

    assert (work_dir / MANIFEST_FILENAME).is_file()
    assert (work_dir / 'rkos.bin').read_bytes() == b'\x01\x02\x03'


def test_unpack_does_not_overwrite(tmp_path, rkos_layout):
    image = write_image(tmp_path, rkos_layout)
    out_dir = tmp_path / 'out'

    assert main(['unpack', str(image), str(out_dir)]) == 0
    assert main(['unpack', str(image), str(out_dir)]) == 1
    assert main(['unpack', '--overwrite', str(image), str(out_dir)]) == 0


def test_pack_does_not_overwrite(tmp_path, rkos_layout):
    image = write_image(tmp_path, rkos_layout)
    out_dir = tmp_path / 'out'
    assert main(['unpack', str(image), str(out_dir)]) == 0

    assert main(['pack', str(out_dir / MANIFEST_FILENAME), str(image)]) == 1
    assert main(['pack', '-o', str(out_dir / MANIFEST_FILENAME), str(image)]) == 0


def test_unpack_parent_directories(tmp_path, rkos_layout):
    image = write_image(tmp_path, rkos_layout)
    out_dir = tmp_path / 'a' / 'b'

    assert main(['unpack', str(image), str(out_dir)]) == 1
    assert main(['unpack', '-p', str(image), str(out_dir)]) == 0
    assert (out_dir / MANIFEST_FILENAME).is_file()


def test_unpack_into_a_file(tmp_path, rkos_layout):
    image = write_image(tmp_path, rkos_layout)

    assert main(['unpack', str(image), str(image)]) == 1


def test_unpack_invalid_file(tmp_path):
    path = tmp_path / 'garbage.bin'
    path.write_bytes(b'\x00' * 100)

    assert main(['unpack', str(path), str(tmp_path / 'out')]) == 1


def test_pack_missing_segment(tmp_path, rkos_layout):
    image = write_image(tmp_path, rkos_layout)
    out_dir = tmp_path / 'out'
    assert main(['unpack', str(image), str(out_dir)]) == 0

    (out_dir / 'rkos.bin').unlink()

    assert main(['pack', str(out_dir / MANIFEST_FILENAME)]) == 1


def test_print_header(tmp_path, capsys, rkos_layout):
    image = write_image(tmp_path, rkos_layout)

    assert main(['-H', 'unpack', str(image), str(tmp_path / 'out')]) == 0

    out = capsys.readouterr().out
    assert 'unk_0: 0x05000100' in out
    assert 'unk_1: 0xffffffff' in out
    assert 'unk_6: 0x00000000' in out


def test_info(tmp_path, capsys, rkos_layout):
    image = write_image(tmp_path, rkos_layout)

    assert main(['--log-level', 'none', 'info', str(image)]) == 0

    out = capsys.readouterr().out
    assert 'segments: 1' in out
    assert 'rkos 00000040-00000043(00000003) 00000000 010203' in out
    assert 'ticket: none' in out


def test_unpack_asks_before_overwriting(tmp_path, monkeypatch, rkos_layout):
    image = write_image(tmp_path, rkos_layout)
    out_dir = tmp_path / 'out'
    assert main(['unpack', str(image), str(out_dir)]) == 0
    (out_dir / 'rkos.bin').write_bytes(b'edited')

    questions = []
    monkeypatch.setattr(cli, 'is_interactive', lambda: True)
    monkeypatch.setattr('builtins.input', lambda prompt: questions.append(prompt) or 'n')

    assert main(['unpack', str(image), str(out_dir)]) == 1
    assert len(questions) == 1
    assert (out_dir / 'rkos.bin').read_bytes() == b'edited'

    monkeypatch.setattr('builtins.input', lambda prompt: 'y')

    assert main(['unpack', str(image), str(out_dir)]) == 0
    assert (out_dir / 'rkos.bin').read_bytes() == b'\x01\x02\x03'


def test_overwrite_flag_does_not_ask(tmp_path, monkeypatch, rkos_layout):
    image = write_image(tmp_path, rkos_layout)
    out_dir = tmp_path / 'out'
    assert main(['unpack', str(image), str(out_dir)]) == 0

    monkeypatch.setattr(cli, 'is_interactive', lambda: True)
    monkeypatch.setattr('builtins.input', lambda prompt: pytest.fail('unexpected question'))

    assert main(['pack', str(out_dir / MANIFEST_FILENAME), str(image), '-o']) == 0
