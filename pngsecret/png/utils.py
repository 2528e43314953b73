import logging

from . import ChunkType, PNGChunk


logger = logging.getLogger(__name__)


def get_chunk_type(chunk_type):
    '''Accept a ChunkType as it is, otherwise build (and validate) it from a string.'''
    if isinstance(chunk_type, ChunkType):
        return chunk_type

    return ChunkType.from_string(chunk_type)


def hide_message(png, chunk_type, message):
    '''Append to the file a new chunk of the given type with the message (UTF-8 encoded) as data.'''
    chunk_type = get_chunk_type(chunk_type)

    if chunk_type.is_critical():
        logger.warning(f'\'{chunk_type}\' is a critical chunk type: PNG readers will refuse the image')
    if not chunk_type.is_reserved_bit_valid():
        logger.warning(f'\'{chunk_type}\' has the reserved bit set: PNG readers may refuse the image')

    chunk = PNGChunk.new(chunk_type, message.encode('utf-8'))
    png.append_chunk(chunk)

    logger.info(f'hidden {chunk.length.value} bytes in a chunk of type \'{chunk_type}\'')

    return chunk


def find_messages(png, chunk_type):
    '''Return the data, as text, of all the chunks with the given type.'''
    chunk_type = get_chunk_type(chunk_type)

    return [_.payload_as_string() for _ in png.find_chunks(chunk_type)]


def delete_messages(png, chunk_type):
    chunk_type = get_chunk_type(chunk_type)

    removed = png.remove_chunks(chunk_type)
    logger.info(f'removed {removed} chunk(s) of type \'{chunk_type}\'')

    return removed
