"""
Core module for the abstraction of a file format

"""
import logging
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import PngSecretException
from .properties import get_root_from_chunk


logger = logging.getLogger(__name__)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size that identify a Chunk.

    A Chunk can contain sub-chunks: an instance used in the body of
    another Chunk is the template of a field of the latter.

    Passing raw bytes or a path to the constructor unpacks them.
    """

    def __init__(self, source=None, **kwargs):
        super().__init__(**kwargs)

        # now we have setup all the fields necessary and we can unpack if
        # some data is passed with the constructor
        if source is not None:
            with Stream(source) as stream:
                logger.debug('unpacking \'%s\' from %r' % (self.__class__.__name__, stream))
                self.unpack(stream)
        else:
            self.relayout()

    @classmethod
    def from_bytes(cls, data):
        return cls(data)

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
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def init(self):
        for _, field in self.get_fields():
            field.init()

    @property
    def root(self):
        '''Obtain the final father of this chunk'''
        return get_root_from_chunk(self)

    def _get_value(self):
        return self

    def _set_value(self, value):
        raise AttributeError(f'you cannot set the value of \'{self.__class__.__name__}\', set its fields instead')

    def _get_size(self):
        '''the size parameter MUST not be set but MUST be derived from the subchunks'''
        size = 0
        for _, field in self.get_fields():
            size += field.size

        return size

    @property
    def raw(self):
        value = b''
        for field_name, field_instance in self.get_fields():
            field_raw = field_instance.raw
            logger.debug("field '%s' raw=%r", field_name, field_raw)
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

        In practice it's like packing() but it's only interested in the sizes
        of the chunks.'''
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            logger.debug('relayouting %s.%s' % (self.__class__.__name__, field_name))
            size += field_instance.relayout(offset=offset + size)

        return size

    def pack(self, stream=None, relayout=True):
        '''Encode the high-level representation into binary data.

        If we are the root then we set our offset to zero and initialize
        the stream, the sub-chunks are then packed one after the other
        at the offsets computed by the relayout.'''
        if relayout:
            self.relayout()

        stream = Stream(b'') if not stream else stream

        for field_name, field_instance in self.get_fields():
            logger.debug('packing %s.%s at offset %08x' % (self.__class__.__name__, field_name, field_instance.offset))
            stream.seek(field_instance.offset)
            field_instance.pack(stream=stream, relayout=False)

        return stream.getvalue()

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        The fields are read in order of definition, each one starting where
        the previous ended; any failure is annotated with the name of the field
        and propagated as it is.
        '''
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            offset = stream.tell()
            logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, offset))

            try:
                field.unpack(stream)
            except PngSecretException as e:
                e.chain.append(field_name)
                raise

            field.offset = offset
