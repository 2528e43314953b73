'''
# Portable Network Graphics

The specification is at <http://www.libpng.org/pub/png/spec/1.2/PNG-Contents.html>.

A PNG file is an 8 bytes signature followed by a sequence of chunks; here
the chunks are treated as opaque, apart from their type and their CRC,
so that custom chunks can be added and removed without touching the image.

'''
import logging

from bitstring import Bits

from ..core import Chunk
from .. import fields
from ..fields import Endianess
from ..properties import Dependency
from ..common import crc
from ..exceptions import ValidationError, EncodingError


logger = logging.getLogger(__name__)

PNG_SIGNATURE = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'


class ChunkType(object):
    '''The 4 bytes identifying the kind of a chunk.

    Each byte is an ASCII letter and bit 5 of each of them (i.e. its case)
    is a property of the chunk:

     1. ancillary bit: uppercase means critical
     2. private bit: uppercase means public
     3. reserved bit: must be uppercase for a valid chunk type
     4. safe-to-copy bit: lowercase means safe to copy
    '''
    SIZE = 4
    PROPERTY_BIT = 5

    __slots__ = ('_raw',)

    def __init__(self, raw: bytes):
        if len(raw) != self.SIZE:
            raise ValidationError(f'a chunk type must be {self.SIZE} bytes long, not {len(raw)}')

        object.__setattr__(self, '_raw', bytes(raw))

    def __setattr__(self, name, value):
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    @classmethod
    def from_bytes(cls, raw: bytes) -> "ChunkType":
        return cls(raw)

    @classmethod
    def from_string(cls, value: str) -> "ChunkType":
        raw = value.encode('utf-8')

        if len(raw) != cls.SIZE:
            raise ValidationError(f'chunk type {value!r} must be {cls.SIZE} bytes long')

        chunk_type = cls(raw)

        if not chunk_type.is_only_letters():
            raise ValidationError(f'chunk type {value!r} must contain only ASCII letters')

        return chunk_type

    @property
    def raw(self) -> bytes:
        return self._raw

    def _property_bit(self, index: int) -> bool:
        # the PNG definition: bit 5 of the byte, not its letter case ('@' has it clear)
        # bitstring indexes from the most significant bit
        return Bits(self._raw)[index * 8 + (7 - self.PROPERTY_BIT)]

    def is_only_letters(self) -> bool:
        return all(0x41 <= _ <= 0x5a or 0x61 <= _ <= 0x7a for _ in self._raw)

    def is_critical(self) -> bool:
        return not self._property_bit(0)

    def is_public(self) -> bool:
        return not self._property_bit(1)

    def is_reserved_bit_valid(self) -> bool:
        return not self._property_bit(2)

    def is_safe_to_copy(self) -> bool:
        return self._property_bit(3)

    def is_valid(self) -> bool:
        return self.is_only_letters() and self.is_reserved_bit_valid()

    def __str__(self):
        try:
            return self._raw.decode('ascii')
        except UnicodeDecodeError as e:
            raise EncodingError(f'chunk type {self._raw!r} is not ASCII') from e

    def __repr__(self):
        return f'<{self.__class__.__name__}({self._raw!r})>'

    def __eq__(self, other):
        if not isinstance(other, ChunkType):
            return NotImplemented

        return self._raw == other._raw

    def __hash__(self):
        return hash(self._raw)

    def __deepcopy__(self, memo):
        return self


def as_chunk_type_raw(tag) -> bytes:
    '''Normalize a tag given as string, bytes or ChunkType to raw bytes.'''
    if isinstance(tag, ChunkType):
        return tag.raw
    if isinstance(tag, str):
        return tag.encode('utf-8')

    return bytes(tag)


class ChunkTypeField(fields.Field):
    '''Four bytes field whose value is a ChunkType; nothing is checked
    when unpacking, the legality of the type is up to the user.'''

    def __init__(self, **kw):
        kw.setdefault('default', ChunkType(b'\x00' * ChunkType.SIZE))
        super().__init__(**kw)

    def _set_value(self, value):
        if not isinstance(value, ChunkType):
            raise ValueError(f'{self.__class__.__name__} accepts only ChunkType instances')

        self._value = value

    def _get_size(self):
        return ChunkType.SIZE

    def _get_raw(self) -> bytes:
        return self.value.raw

    def unpack(self, stream):
        self.value = ChunkType(stream.read_exact(ChunkType.SIZE))


class PNGHeader(Chunk):
    magic = fields.StringField(8, default=PNG_SIGNATURE, is_magic=True)


class PNGChunk(Chunk):
    '''This is the main data structure of the format: the 4 fields represent
    a chunk into the file. Each field is intended big-endian.

    A chunk is defined as critical or ancillary depending on the case of the
    starting letter of the type field.

    The crc field is network-byte-order CRC-32 computed over the chunk type and chunk data, but not the length.

    # Critical chunks

     1. IHDR: contains image's width, height, bit depth, color type, compression method, filter method and interlace method
     2. PLTE: contains the palette data
     3. IDAT: contains the actual image data (compressed)
     4. IEND: is the terminator chunk
    '''
    length = fields.StructField('I', endianess=Endianess.BIG_ENDIAN)
    type   = ChunkTypeField()
    data   = fields.StringField(Dependency('.length'))
    crc    = crc.CRCField(['type', 'data'], endianess=Endianess.BIG_ENDIAN)  # network byte order

    @classmethod
    def new(cls, chunk_type: ChunkType, data: bytes) -> "PNGChunk":
        '''Build a chunk from scratch: length and crc are derived right away.'''
        if isinstance(chunk_type, str):
            chunk_type = ChunkType.from_string(chunk_type)

        chunk = cls()
        chunk.type.value = chunk_type
        chunk.data.value = data
        chunk.crc.update()
        chunk.relayout()

        return chunk

    def __eq__(self, other):
        if not isinstance(other, PNGChunk):
            return NotImplemented

        return self.raw == other.raw

    __hash__ = None

    @property
    def chunk_type(self) -> ChunkType:
        return self.type.value

    @property
    def payload(self) -> bytes:
        return self.data.value

    def payload_as_string(self) -> str:
        try:
            return self.data.value.decode('utf-8')
        except UnicodeDecodeError as e:
            raise EncodingError(f'the payload of chunk {self.chunk_type!r} is not valid UTF-8') from e

    def is_critical(self):
        return self.chunk_type.is_critical()

    def is_type(self, tag) -> bool:
        return self.chunk_type.raw == as_chunk_type_raw(tag)


class PNGFile(Chunk):
    '''The whole file: the signature and then the chunks until the end of the data.

    The chunks are kept in the order they are found so that packing an
    unmodified file gives back exactly the same bytes.'''
    header = PNGHeader()
    chunks = fields.ArrayField(PNGChunk())

    TERMINATOR = b'IEND'

    def append_chunk(self, chunk: PNGChunk):
        '''Add the chunk keeping the terminator chunk as the last one.'''
        index = len(self.chunks)

        if index > 0 and self.chunks[-1].is_type(self.TERMINATOR):
            index -= 1

        logger.debug(f'inserting chunk {chunk.chunk_type!r} at position {index}')
        self.chunks.insert(index, chunk)

    def remove_chunks(self, tag) -> int:
        removed = self.chunks.remove_if(lambda _: _.is_type(tag))
        logger.debug(f'removed {removed} chunk(s) of type {tag!r}')

        return removed

    def find_chunks(self, tag):
        return [_ for _ in self.chunks if _.is_type(tag)]

    def find_chunk(self, tag):
        for chunk in self.chunks:
            if chunk.is_type(tag):
                return chunk

        return None
