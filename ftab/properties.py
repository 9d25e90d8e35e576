import logging
from enum import Enum, auto


logger = logging.getLogger(__name__)


class ChunkPhase(Enum):
    '''Enum to state the actual phase of a chunk'''
    INIT        = 0
    RELAYOUTING = auto()
    PACKING     = auto()
    UNPACKING   = auto()
    DONE        = auto()


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Table(Chunk):
            count = fields.StructField('I')
            entries = fields.ArrayField(Entry(), n=Dependency('.count'))

    and have the number of elements of 'entries' read from the field named
    'count' at unpacking time.

    The expression is relative to the chunk containing the field, like a
    relative import: '.count' is a sibling, '.header.count' is the field
    'count' of the sibling named 'header'.
    '''
    def __init__(self, expression):
        if not expression.startswith('.'):
            raise ValueError(f"dependency '{expression}' must start with a dot")

        self.expression = expression

    def resolve_field(self, instance):
        # '.header.count'.split(".") -> ['', 'header', 'count']
        fields_path = self.expression.split('.')[1:]

        field = instance.father
        if field is None:
            raise AttributeError(f"cannot resolve '{self.expression}' for a field without father")

        for component_name in fields_path:
            field = getattr(field, component_name)
            logger.debug(' resolved sub-component "%s" from "%s"', field.__class__.__name__, component_name)

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        value = self.resolve_field(instance).value

        logger.debug('resolved \'%s\' with value %s', self.expression, value)

        return value
