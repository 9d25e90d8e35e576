'''
In-memory representation of a ftab image.

A Layout doesn't store anything that can be derived: the number of segments
is the length of the list and the offsets are decided by the encoder. The
offset a segment was found at is kept only as information for decoded
images and doesn't take part in comparisons.
'''
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .format import RESERVED_FIELDS


@dataclass
class Segment:
    tag: int
    data: bytes
    unk: int = 0
    offset: Optional[int] = field(default=None, compare=False)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class Layout:
    unk_0: int = 0
    unk_1: int = 0
    unk_2: int = 0
    unk_3: int = 0
    unk_4: int = 0
    unk_5: int = 0
    unk_6: int = 0
    segments: List[Segment] = field(default_factory=list)
    ticket: Optional[bytes] = None

    @property
    def reserved(self) -> Tuple[int, ...]:
        return tuple(getattr(self, _) for _ in RESERVED_FIELDS)

    @property
    def segments_count(self) -> int:
        return len(self.segments)

    @property
    def has_ticket(self) -> bool:
        return self.ticket is not None
