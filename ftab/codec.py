'''
Decoding and encoding of ftab images.

Both directions work on bytes already in memory: reading and writing files is
left to the caller.
'''
import logging
from typing import Optional

from .exceptions import (
    InvalidField,
    MagicException,
    MalformedHeader,
    PackException,
    SegmentTooLarge,
    TicketOutOfBounds,
    TooManySegments,
    TruncatedPayload,
    TruncatedSegmentTable,
)
from .format import (
    ALIGNMENT,
    HEADER_LEN,
    RESERVED_FIELDS,
    SEGMENT_HEADER_LEN,
    U32_MAX,
    FtabFile,
)
from .layout import Layout, Segment
from .streams import Stream
from .tag import tag_from_bytes, tag_repr, tag_to_bytes


logger = logging.getLogger(__name__)


def cut(data: bytes, offset: int, length: int, start: int) -> Optional[bytes]:
    '''Return data[offset:offset + length] if the range lies between start and
    the end of data, None otherwise.'''
    if offset < start or offset + length > len(data):
        return None

    return data[offset:offset + length]


def decode(data: bytes) -> Layout:
    data = bytes(data)

    if len(data) < HEADER_LEN:
        raise MalformedHeader(f'file is too short to be a ftab file ({len(data)} bytes)')

    stream = Stream(data)
    ftab = FtabFile()

    try:
        ftab.header.unpack(stream)
    except MagicException as e:
        raise MalformedHeader('file is not a ftab file (invalid magic value)', chain=['header'] + e.chain) from e

    header = ftab.header
    logger.debug('header\n%s', header)

    count = header.segments_count.value
    data_offset = HEADER_LEN + count * SEGMENT_HEADER_LEN

    logger.debug('segments count is %d', count)

    if data_offset > U32_MAX:
        raise MalformedHeader(f'segments count {count} is too large for any ftab file', chain=['header', 'segments_count'])

    if data_offset > len(data):
        raise TruncatedSegmentTable(
            f'segments list needs {data_offset} bytes but the file is only {len(data)} bytes long')

    ftab.segments.unpack(stream)

    segments = []
    for index, entry in enumerate(ftab.segments):
        tag = tag_from_bytes(entry.tag.value)
        offset = entry.seg_offset.value
        length = entry.seg_length.value

        logger.debug('segment #%d with tag %s at %#x, length %#x', index, tag_repr(tag), offset, length)

        payload = cut(data, offset, length, data_offset)
        if payload is None:
            raise TruncatedPayload(
                f'segment #{index} with tag {tag_repr(tag)} is out of bounds'
                f' (range {offset:#x}-{offset + length:#x}, file is {len(data):#x} bytes)',
                chain=['segments', str(index)], tag=tag)

        segments.append(Segment(tag=tag, data=payload, unk=entry.unk.value, offset=offset))

    ticket = None
    if header.has_ticket:
        offset = header.ticket_offset.value
        length = header.ticket_length.value

        logger.debug('ticket offset is %#x, length is %#x', offset, length)

        ticket = cut(data, offset, length, data_offset)
        if ticket is None:
            raise TicketOutOfBounds(
                f'ticket range {offset:#x}-{offset + length:#x} in file is out of bounds', chain=['header'])
    else:
        logger.debug('ticket is not present')

    return Layout(
        segments=segments,
        ticket=ticket,
        **{_: getattr(header, _).value for _ in RESERVED_FIELDS},
    )


def check_u32(value, name):
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U32_MAX:
        raise InvalidField(f"field '{name}' must be an integer between 0 and {U32_MAX:#x}, got {value!r}")

    return value


def encode(layout: Layout) -> bytes:
    count = len(layout.segments)
    data_offset = HEADER_LEN + count * SEGMENT_HEADER_LEN

    if count > U32_MAX or data_offset > U32_MAX:
        raise TooManySegments(f'{count} segments do not fit into a ftab file')

    ftab = FtabFile()
    header = ftab.header

    for name in RESERVED_FIELDS:
        getattr(header, name).value = check_u32(getattr(layout, name), name)

    header.segments_count.value = count

    chunks = []
    cursor = data_offset

    for index, segment in enumerate(layout.segments):
        # every payload starts at an aligned offset
        padding = -cursor % ALIGNMENT
        if padding:
            chunks.append(b'\x00' * padding)
            cursor += padding

        length = len(segment.data)
        if cursor + length > U32_MAX:
            raise SegmentTooLarge(
                f'segment #{index} ({length:#x} bytes at {cursor:#x}) exceeds the 32-bit range',
                chain=['segments', str(index)])

        logger.debug('segment #%d offset is %#x, length is %#x, padded with %d bytes', index, cursor, length, padding)

        entry = ftab.segments.instance_element()
        entry.tag.value = tag_to_bytes(segment.tag)
        entry.seg_offset.value = cursor
        entry.seg_length.value = length
        entry.unk.value = check_u32(segment.unk, f'segments.{index}.unk')
        ftab.segments.append(entry)

        chunks.append(bytes(segment.data))
        cursor += length

    # the ticket is not padded
    if layout.ticket is not None:
        length = len(layout.ticket)
        if cursor + length > U32_MAX:
            raise SegmentTooLarge(f'ticket ({length:#x} bytes at {cursor:#x}) exceeds the 32-bit range', chain=['ticket'])

        logger.debug('ticket offset is %#x, length is %#x', cursor, length)

        header.ticket_offset.value = cursor
        header.ticket_length.value = length
        chunks.append(bytes(layout.ticket))

    try:
        head = ftab.pack()
    except PackException as e:
        raise InvalidField(e.message, chain=e.chain) from e

    return head + b''.join(chunks)
