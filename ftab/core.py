"""
Core module for the abstraction of a binary format

"""
import logging
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import (
    ChunkUnpackException,
    UnpackException,
)
from .properties import ChunkPhase


logger = logging.getLogger(__name__)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size that identify a Chunk.

    A Chunk can contain sub-chunks: an instance of a Chunk subclass used in the class
    body of another Chunk behaves like any other field.
    """

    def __init__(self, data=None, **kwargs):
        self.stream = Stream(data) if data is not None else None
        super().__init__(**kwargs)

        # now we have setup all the fields necessary and we can unpack if
        # some data is passed with the constructor
        if self.stream is not None:
            logger.debug('unpacking \'%s\' from the data passed', self.__class__.__name__)
            self.unpack(self.stream)
        else:
            self.relayout()

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, field)
        return msg

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def _get_value(self):
        return self

    def _set_value(self, value):
        raise AttributeError(f"a {self.__class__.__name__} can only be assigned field by field")

    def _get_size(self):
        '''the size MUST be derived from the subchunks'''
        return sum(field.size for _, field in self.get_fields())

    def _get_raw(self):
        value = b''
        for field_name, field_instance in self.get_fields():
            field_raw = field_instance.raw
            logger.debug("field '%s' raw=%s", field_name, field_raw.hex())
            value += field_raw

        return value

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''This method triggers the chunk's children to reset the offsets
        in order to pack correctly.

        In practice it's like pack() but it's only interested in the sizes
        of the chunks.'''
        phase_old = self._phase
        self._phase = ChunkPhase.RELAYOUTING
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            logger.debug('relayouting %s.%s', self.__class__.__name__, field_name)
            size += field_instance.relayout(offset=offset + size)

        self._phase = phase_old

        return size

    def pack(self, stream=None, relayout=True):
        '''Encode the chunk, field by field, at the offsets given by the layout.

        If a stream is passed the data is written there, otherwise a new one
        is created; the raw bytes are returned in both cases.'''
        if relayout:
            self.relayout(offset=self.offset or 0)

        self._phase = ChunkPhase.PACKING
        stream = Stream(b'') if stream is None else stream

        for field_name, field_instance in self.get_fields():
            logger.debug('packing %s.%s at offset %08x', self.__class__.__name__, field_name, field_instance.offset)

            stream.seek(field_instance.offset)
            field_instance.pack(stream=stream, relayout=False)

        self._phase = ChunkPhase.DONE

        return self.raw

    def unpack(self, stream):
        '''Take the binary data from the stream and build the representation
        given by the fields of the class.

        The fields are read in order starting from the current position of the
        stream; a failure in a sub-field is reported as a ChunkUnpackException
        whose chain lists the names of the fields involved.
        '''
        self._phase = ChunkPhase.UNPACKING
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            offset = stream.tell()
            logger.debug('unpacking %s.%s at offset %d', self.__class__.__name__, field_name, offset)

            try:
                field.unpack(stream)
            except (UnpackException, ChunkUnpackException) as e:
                raise ChunkUnpackException(e.message, chain=[field_name] + e.chain) from e
            field.offset = offset

        self._phase = ChunkPhase.DONE
