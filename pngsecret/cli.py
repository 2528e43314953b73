'''
Command line to hide, find and delete messages inside the chunks of a PNG file.

 $ pngsecret hide -i image.png -c ruSt -m 'the secret'
 $ pngsecret find -p image.png -c ruSt
'''
import argparse
import logging
import os
import sys
import time

from .exceptions import PngSecretException
from .png import PNGFile
from .png.utils import hide_message, find_messages, delete_messages


logger = logging.getLogger(__name__)


def slow_print(text, delay, stream=None):
    '''Print one character at a time, waiting delay seconds between them.'''
    stream = stream or sys.stdout

    if delay <= 0:
        stream.write(text + '\n')
        return

    for character in text:
        stream.write(character)
        stream.flush()
        time.sleep(delay)

    stream.write('\n')


def write_png(png, path):
    data = png.pack()

    with open(path, 'wb') as f:
        f.write(data)

    logger.debug(f'written {len(data)} bytes to \'{path}\'')


def cmd_hide(args):
    png = PNGFile(args.input_path)

    hide_message(png, args.chunk_type, args.message)

    write_png(png, args.output_path or args.input_path)


def cmd_find(args):
    png = PNGFile(args.path)

    messages = find_messages(png, args.chunk_type)

    if not messages:
        logger.info(f'no chunk of type \'{args.chunk_type}\' found')
        return

    slow_print('\n'.join(messages), args.delay)


def cmd_delete(args):
    png = PNGFile(args.path)

    delete_messages(png, args.chunk_type)

    write_png(png, args.path)


def cmd_list(args):
    png = PNGFile(args.path)

    png.relayout()

    for idx, chunk in enumerate(png.chunks):
        kind = 'critical' if chunk.is_critical() else 'ancillary'
        print(f'[{idx:02d}] 0x{chunk.offset:08x} {chunk.chunk_type.raw.decode("latin1")} {chunk.length.value:>10d} {chunk.crc} {kind}')


def get_parser():
    parser = argparse.ArgumentParser(
        prog='pngsecret',
        description='Tool for creating and reading hidden messages inside PNG files',
    )
    subparsers = parser.add_subparsers(dest='command', required=True, help='command to execute on the given png')

    hide_parser = subparsers.add_parser('hide', help='hides a message inside a png file')
    hide_parser.add_argument('-i', '--input-path', required=True, help='path to the source image')
    hide_parser.add_argument('-c', '--chunk-type', required=True, help='string representation of a PNG chunk type')
    hide_parser.add_argument('-m', '--message', required=True, help='the message to hide')
    hide_parser.add_argument('-o', '--output-path', help='path of the resulting image (default: overwrite the source)')
    hide_parser.set_defaults(func=cmd_hide)

    find_parser = subparsers.add_parser('find', help='prints the message(s) inside a png file')
    find_parser.add_argument('-p', '--path', required=True, help='path to the source image')
    find_parser.add_argument('-c', '--chunk-type', required=True, help='string representation of a PNG chunk type')
    find_parser.add_argument('--delay', type=float, default=0.02, help='seconds between printed characters (0 to disable)')
    find_parser.set_defaults(func=cmd_find)

    delete_parser = subparsers.add_parser('delete', help='removes the message(s) from a png file')
    delete_parser.add_argument('-p', '--path', required=True, help='path to the source image')
    delete_parser.add_argument('-c', '--chunk-type', required=True, help='string representation of a PNG chunk type')
    delete_parser.set_defaults(func=cmd_delete)

    list_parser = subparsers.add_parser('list', help='lists the chunks of a png file')
    list_parser.add_argument('-p', '--path', required=True, help='path to the source image')
    list_parser.set_defaults(func=cmd_list)

    return parser


def main(argv=None):
    logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)

    args = get_parser().parse_args(argv)

    try:
        args.func(args)
    except PngSecretException as e:
        print(f'{args.command}: {e.__class__.__name__}: {e}', file=sys.stderr)
        return 1
    except OSError as e:
        print(f'{args.command}: {e}', file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
