import pytest

from ftab.layout import Layout, Segment
from ftab.tag import parse_tag


@pytest.fixture
def rkos_layout():
    """Header fields as found in a real file, a single small segment and no ticket."""
    return Layout(
        unk_0=83886336,
        unk_1=4294967295,
        segments=[
            Segment(tag=parse_tag('rkos'), data=b'\x01\x02\x03', unk=0),
        ],
    )


@pytest.fixture
def full_layout():
    """Repeated tags, a non printable tag, odd sizes and a ticket."""
    return Layout(
        unk_0=0x05000100,
        unk_1=0xffffffff,
        unk_2=1,
        unk_3=2,
        unk_4=3,
        unk_5=4,
        unk_6=0xdeadbeef,
        segments=[
            Segment(tag=parse_tag('rkos'), data=b'abc', unk=0),
            Segment(tag=parse_tag('bver'), data=b'defgh', unk=0xffffffff),
            Segment(tag=parse_tag('rkos'), data=b'', unk=1),
            Segment(tag=0x01020304, data=bytes(range(32)), unk=0x12345678),
        ],
        ticket=b'0\x82\x01\x00TICKET',
    )
