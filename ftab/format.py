'''
# ftab binary format

  .-----------------------------.  0x00
  | header (48 bytes)           |
  | segment header 1 (16 bytes) |  0x30
  | segment header 2            |
    ...
  | segment header N            |
  | segment data 1              |  aligned to 4 bytes
  | segment data 2              |  aligned to 4 bytes
    ...
  | segment data N              |
  | ticket (optional)           |
  '-----------------------------'

All the integers are little endian; the tag is kept as four raw bytes, so
that read as a big endian integer it gives back the four character code
(b'rkos' is 0x726b6f73).

The ticket (an APTicket in DER format) is present when at least one between
its offset and its length is different from zero.
'''
from .core import Chunk
from . import fields
from .properties import Dependency


MAGIC = b'rkosftab'
ALIGNMENT = 4
U32_MAX = 0xffffffff

RESERVED_FIELDS = ('unk_0', 'unk_1', 'unk_2', 'unk_3', 'unk_4', 'unk_5', 'unk_6')

MANIFEST_FILENAME = 'manifest.toml'
TICKET_FILENAME = 'ApImg4Ticket.der'
DEFAULT_OUTPUT_FILENAME = 'ftab.bin'


class FtabHeader(Chunk):
    unk_0          = fields.StructField('I')
    unk_1          = fields.StructField('I')
    unk_2          = fields.StructField('I')
    unk_3          = fields.StructField('I')
    ticket_offset  = fields.StructField('I')
    ticket_length  = fields.StructField('I')
    unk_4          = fields.StructField('I')
    unk_5          = fields.StructField('I')
    magic          = fields.StringField(8, default=MAGIC, is_magic=True)
    segments_count = fields.StructField('I')
    unk_6          = fields.StructField('I')

    @property
    def has_ticket(self):
        return self.ticket_offset.value != 0 or self.ticket_length.value != 0


class SegmentHeader(Chunk):
    tag        = fields.StringField(4)
    seg_offset = fields.StructField('I')
    seg_length = fields.StructField('I')
    unk        = fields.StructField('I')  # seems to be ignored by whoever reads the format


class FtabFile(Chunk):
    '''Header and segments table, i.e. everything that comes before the data.'''
    header   = FtabHeader()
    segments = fields.ArrayField(SegmentHeader(), n=Dependency('.header.segments_count'))


HEADER_LEN = FtabHeader().size
SEGMENT_HEADER_LEN = SegmentHeader().size
