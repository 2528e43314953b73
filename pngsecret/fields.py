"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct

from .meta import FieldBase, Endianess
from .properties import Dependency
from .streams import Stream
from .exceptions import PngSecretException, SignatureError, TruncatedError


logger = logging.getLogger(__name__)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, is_magic=False):
        super().__init__()
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

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.value)

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
        self.offset = offset

        return self.size

    def pack(self, stream=None, relayout=True):
        if relayout:
            self.relayout()

        stream = Stream(b'') if not stream else stream
        stream.write(self.raw)

        return stream.getvalue()

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


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
        width = self.size * 2  # we want to be as large as possible
        formatter = '0x%%0%dx' % width
        return formatter % self.value

    def get_format(self):
        prefix = {
            Endianess.LITTLE_ENDIAN: '<',
            Endianess.BIG_ENDIAN: '>',
            Endianess.NETWORK: '!',
            Endianess.NATIVE: '=',
        }[self.endianess]

        return '%s%s' % (prefix, self.format)

    def _set_value(self, value):
        # struct complains for us if the value doesn't fit
        struct.pack(self.get_format(), value)
        self._value = value

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.value)

    def unpack(self, stream):
        raw = stream.read_exact(self.size)
        self.value = struct.unpack(self.get_format(), raw)[0]


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length can be an integer or a Dependency: in the latter case the
    length is read from (and written back to) another field."""

    def __init__(self, n=None, **kw):
        if n is None and kw.get('default') is None:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self._length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __len__(self):
        return len(self.value)

    def has_dependency(self):
        return isinstance(self._length, Dependency)

    @property
    def length(self):
        if self.has_dependency():
            return self._length.resolve(self)

        return self._length

    def value_from_default(self):
        if self.default is not None:
            return self.default

        return b'' if self.has_dependency() else b'\x00' * self._length

    def _set_value(self, value):
        """We must follow the length indication unless it's a Dependency,
        in that case we are going to write back the length where necessary."""
        if not isinstance(value, (bytes, bytearray)):
            raise ValueError(f"{self.__class__.__name__} accepts only binary strings, not {value.__class__.__name__}")

        if not self.has_dependency():
            if len(value) != self._length:
                raise ValueError(f'you are trying to set a value with the wrong size (that is {self._length} bytes)')
        elif self.father is not None:
            self._length.resolve_and_set(self, len(value))

        self._value = bytes(value)

    def _get_size(self):
        return len(self.value)

    def _get_raw(self):
        return self.value

    def unpack(self, stream):
        length = self.length

        if self.is_magic:
            raw = stream.read(length)
            if raw != self.default:
                logger.warning('the magic doesn\'t correspond')
                raise SignatureError(f'expected magic {self.default!r}, found {raw!r}')
        else:
            raw = stream.read_exact(length)

        # the length is already right, skip the write back
        self._value = raw


class ArrayField(Field):
    '''Un/Pack an array of Chunks.

    The elements are unpacked one after the other until the stream is
    exhausted; the field passed as argument is the template for each element.

    This class behaves like a read-only list in python: modifications go
    through insert() and remove_if().
    '''

    def __init__(self, field_cls, **kw):
        self.field_cls = field_cls

        if 'default' not in kw:
            kw['default'] = []

        super().__init__(**kw)

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        return list(self.default)

    @property
    def raw(self):
        value = b''
        for element in self.value:
            value += element.raw

        return value

    def _get_size(self):
        size = 0
        for element in self.value:
            size += element.size

        return size

    def relayout(self, offset=0):
        super().relayout(offset=offset)
        size = 0
        for field in self.value:
            size += field.relayout(offset=offset + size)

        return size

    def pack(self, stream=None, relayout=True):
        if relayout:
            self.relayout()

        stream = Stream(b'') if not stream else stream

        for element in self.value:
            element.pack(stream=stream, relayout=False)

        return stream.getvalue()

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def unpack(self, stream):
        self.clear()

        while not stream.at_eof():
            element = self.instance_element()
            try:
                element.unpack(stream)
            except PngSecretException as e:
                e.chain.append(f'[{len(self.value)}]')
                raise

            logger.debug('unpacked element %d: %r', len(self.value), element)
            self.value.append(element)

    def clear(self):
        self.value.clear()

    def insert(self, index, element):
        element.father = self
        self.value.insert(index, element)

    def remove_if(self, condition):
        '''Remove all the elements for which condition() is True,
        returning how many of them have been removed.'''
        kept = [_ for _ in self.value if not condition(_)]
        removed = len(self.value) - len(kept)

        self.value = kept

        return removed
