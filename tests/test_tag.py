import pytest

from ftab.exceptions import InvalidTag
from ftab.tag import (
    format_tag,
    parse_tag,
    tag_filename,
    tag_from_bytes,
    tag_repr,
    tag_to_bytes,
)


def test_string_and_integer_are_the_same_tag():
    assert parse_tag('rkos') == 0x726b6f73
    assert parse_tag(0x726b6f73) == 0x726b6f73
    assert tag_to_bytes(parse_tag('rkos')) == b'rkos'
    assert tag_from_bytes(b'rkos') == 0x726b6f73


def test_short_string_is_padded():
    assert parse_tag('ab') == 0x61620000
    assert parse_tag('') == 0


@pytest.mark.parametrize('value', ['toolong', -1, 1 << 32, True, 1.5, None, [1]])
def test_invalid_tags(value):
    with pytest.raises(InvalidTag):
        parse_tag(value)


def test_invalid_tag_is_a_value_error():
    with pytest.raises(ValueError):
        tag_to_bytes(-1)


def test_format_tag():
    assert format_tag(0x726b6f73) == 'rkos'
    assert format_tag(parse_tag('a b!')) == 'a b!'
    assert format_tag(0x01020304) == 0x01020304
    # trailing NULs are not printable
    assert format_tag(parse_tag('ab')) == 0x61620000


def test_tag_repr():
    assert tag_repr(0x726b6f73) == 'rkos'
    assert tag_repr(0x61620000) == 'ab\\x00\\x00'


def test_tag_filename():
    assert tag_filename(parse_tag('rkos')) == 'rkos.bin'
    assert tag_filename(parse_tag('CR01')) == 'CR01.bin'
    assert tag_filename(0x01020304) == 'tag_01020304.bin'
    assert tag_filename(parse_tag('a b!')) == 'tag_61206221.bin'


def test_tag_from_bytes_like_objects():
    assert tag_from_bytes(bytearray(b'bver')) == 0x62766572
    assert tag_from_bytes(b'\x00\x00\x00\x01') == 1

    with pytest.raises(InvalidTag):
        tag_from_bytes(b'rkosftab')
