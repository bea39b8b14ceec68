import argparse
import logging
import sys

from pngstash import commands
from pngstash.exceptions import DecodeError
from pngstash.version import __version__

logger = logging.getLogger(__name__)


def _encode(args):
    commands.encode(args.path, args.chunk_type, args.message, args.output)
    return 0


def _decode(args):
    message = commands.decode(args.path, args.chunk_type)
    if message is None:
        logger.error('No %s chunk in %s', args.chunk_type, args.path)
        return 1
    print(message)
    return 0


def _remove(args):
    chunk = commands.remove(args.path, args.chunk_type)
    print('Removed {type} chunk ({length} bytes)'.format(
        type=chunk.chunk_type,
        length=chunk.length,
    ))
    return 0


def _print(args):
    print(commands.print_chunks(args.path))
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog='pngstash',
        description='Hide, find and remove messages in PNG chunks',
    )
    parser.add_argument('--version', action='version', version=__version__)
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debugging output to stderr')
    subparsers = parser.add_subparsers(dest='command', required=True)

    encode_parser = subparsers.add_parser(
        'encode', help='Store a message in a new chunk')
    encode_parser.add_argument('path', help='PNG file to read')
    encode_parser.add_argument('chunk_type', help='Four letter chunk type')
    encode_parser.add_argument('message', help='Text to store')
    encode_parser.add_argument(
        'output', nargs='?', default=None,
        help='File to write (default: overwrite the input)')
    encode_parser.set_defaults(func=_encode)

    decode_parser = subparsers.add_parser(
        'decode', help='Print the message from the first matching chunk')
    decode_parser.add_argument('path')
    decode_parser.add_argument('chunk_type')
    decode_parser.set_defaults(func=_decode)

    remove_parser = subparsers.add_parser(
        'remove', help='Remove the first matching chunk')
    remove_parser.add_argument('path')
    remove_parser.add_argument('chunk_type')
    remove_parser.set_defaults(func=_remove)

    print_parser = subparsers.add_parser('print', help='List every chunk')
    print_parser.add_argument('path')
    print_parser.set_defaults(func=_print)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    try:
        return args.func(args)
    except (DecodeError, OSError) as e:
        logger.error('%s: %s', type(e).__name__, e)
        return 1
