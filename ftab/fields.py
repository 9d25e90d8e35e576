"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct

from .meta import FieldBase, Endianess
from .properties import Dependency, ChunkPhase
from .exceptions import UnpackException, ChunkUnpackException, MagicException, PackException


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, is_magic=False):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def _get_value(self):
        return self._value

    def _set_value(self, value):
        self._value = value

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
    )

    def relayout(self, offset=0):
        old_phase = self._phase
        self._phase = ChunkPhase.RELAYOUTING
        self.offset = offset
        self._phase = old_phase

        return self.size

    def pack(self, stream=None, relayout=True):
        '''Write the raw representation into the stream (if any) and return it.'''
        if relayout:
            self.relayout(offset=self.offset or 0)

        self._phase = ChunkPhase.PACKING
        raw = self.raw
        if stream is not None:
            stream.write(raw)
        self._phase = ChunkPhase.DONE

        return raw

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')

    def _chain(self):
        return [self.name] if self.name else []

    def _read(self, stream, size):
        raw = stream.read(size)
        if len(raw) != size:
            self.logger.debug('wanted %d bytes for field \'%s\', got %d', size, self.name, len(raw))
            raise UnpackException(
                f'expected {size} bytes, only {len(raw)} available')

        return raw


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.
    """

    def __init__(self, format, default=0, **kw):
        self.format = format
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def __str__(self):
        width = self.size * 2
        formatter = '0x%%0%dx' % width
        return formatter % self.value

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        try:
            return struct.pack(self.get_format(), self.value)
        except struct.error as e:
            raise PackException(
                f'value {self.value!r} does not fit format \'{self.format}\': {e}',
                chain=self._chain())

    def unpack(self, stream):
        raw = self._read(stream, self.size)
        value = struct.unpack(self.get_format(), raw)[0]

        if self.is_magic and value != self.default:
            raise MagicException(f'magic mismatch: got {value:#x}', chain=self._chain())

        self.value = value


class StringField(Field):
    """Represent a contiguous chunk of bytes of fixed length."""

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError("StringField must have 'n' or 'default' indicated!")

        self.length = n or len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return self.length

    def value_from_default(self):
        return b'\x00' * self.length if not self.default else self.default

    def _set_value(self, value) -> None:
        if len(value) != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        self._value = bytes(value)

    def _get_size(self):
        return self.length

    def _get_raw(self):
        return self.value

    def unpack(self, stream):
        raw = self._read(stream, self.length)

        if self.is_magic and raw != self.default:
            raise MagicException(f'magic mismatch: got {raw!r}', chain=self._chain())

        self.value = raw


class ArrayField(Field):
    '''Un/Pack an array of fields.

    The elements are copies of the prototype field passed as first argument;
    the number of elements to unpack is given via the parameter named "n",
    either as an integer or as a Dependency on another field.

    This class must behave like a list in python, obviously cannot implement all the methods
    since, for example, slicing what should mean?
    '''

    def __init__(self, field, n=0, **kw):
        if not isinstance(n, (Dependency, int)):
            raise ValueError('n is \'%s\' must be of the right type' % n.__class__.__name__)

        self.field = field
        self._n = n

        super().__init__(default=[], **kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        n = self._n if isinstance(self._n, int) else 0
        return [self.instance_element() for _ in range(n)]

    def clear(self):
        self.value.clear()

    @property
    def n(self):
        '''The number of elements to expect while unpacking.'''
        if isinstance(self._n, Dependency):
            return self._n.resolve(self)

        return self._n

    def _get_raw(self):
        return b''.join(element.raw for element in self.value)

    def _get_size(self):
        return sum(element.size for element in self.value)

    def relayout(self, offset=0):
        super().relayout(offset=offset)
        size = 0
        for element in self.value:
            size += element.relayout(offset=offset + size)

        return size

    def instance_element(self):
        return self.field.create(father=self)  # pass the father so that we don't lose the hierarchy

    def append(self, element):
        element.father = self
        self.value.append(element)

    def unpack(self, stream):
        self._phase = ChunkPhase.UNPACKING
        n = self.n
        self.logger.debug('unpacking %d elements for \'%s\'', n, self.name)

        elements = []
        for index in range(n):
            element = self.instance_element()
            try:
                element.unpack(stream)
            except (UnpackException, ChunkUnpackException) as e:
                raise ChunkUnpackException(e.message, chain=[str(index)] + e.chain) from e
            elements.append(element)

        self.value = elements
        self._phase = ChunkPhase.DONE
