'''
Conversions for segment tags.

In the file a tag is four raw bytes; everywhere else it's handled as the
unsigned integer obtained reading those bytes as big endian. The manifest can
indicate a tag either as a string of at most four bytes or as an integer.
'''
from typing import Union

from bitstring import Bits

from .exceptions import InvalidTag


TAG_LEN = 4
TAG_BITS = TAG_LEN * 8


def tag_from_bytes(raw: bytes) -> int:
    if len(raw) != TAG_LEN:
        raise InvalidTag(f'a tag must be {TAG_LEN} bytes long, got {len(raw)}')

    return Bits(raw).uint


def tag_to_bytes(tag: int) -> bytes:
    if isinstance(tag, bool) or not isinstance(tag, int):
        raise InvalidTag(f'a tag must be an integer, got {tag.__class__.__name__}')

    if not 0 <= tag < 1 << TAG_BITS:
        raise InvalidTag(f'tag {tag} is not a non-negative integer less than 2^32')

    return Bits(uint=tag, length=TAG_BITS).bytes


def parse_tag(value: Union[str, int]) -> int:
    '''Normalize the representation of a tag coming from a manifest.'''
    if isinstance(value, str):
        raw = value.encode('utf-8')
        if len(raw) > TAG_LEN:
            raise InvalidTag(f"tag '{value}' is longer than {TAG_LEN} bytes")

        return tag_from_bytes(raw.ljust(TAG_LEN, b'\x00'))

    tag_to_bytes(value)  # range and type check

    return value


def format_tag(tag: int) -> Union[str, int]:
    '''The representation of a tag for a manifest: a string when it's made of
    printable ASCII characters, the integer otherwise.'''
    raw = tag_to_bytes(tag)

    if all(0x20 <= _ < 0x7f for _ in raw):
        return raw.decode('ascii')

    return tag


def tag_repr(tag: int) -> str:
    '''Escaped form of the tag, for messages.'''
    return ''.join(chr(_) if 0x20 <= _ < 0x7f else f'\\x{_:02x}' for _ in tag_to_bytes(tag))


def tag_filename(tag: int) -> str:
    raw = tag_to_bytes(tag)

    if raw.isalnum():
        return f'{raw.decode("ascii")}.bin'

    return f'tag_{raw.hex()}.bin'
