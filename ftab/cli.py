'''
Command line interface: unpack a ftab file into a directory with a manifest
and the files of its segments, or pack it back from the manifest.

 $ ftab unpack ftab.bin out/
 $ ftab pack out/manifest.toml ftab-new.bin
'''
import argparse
import logging
import os
import sys
from pathlib import Path

from .codec import decode, encode
from .exceptions import FtabException
from .format import DEFAULT_OUTPUT_FILENAME, MANIFEST_FILENAME, RESERVED_FIELDS
from .manifest import from_manifest, load_manifest, save_manifest, to_manifest
from .tag import tag_repr
from . import util


logger = logging.getLogger(__name__)

LOG_LEVELS = {
    'NONE': logging.CRITICAL + 10,
    'TRACE': logging.DEBUG,
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARN': logging.WARNING,
    'ERROR': logging.ERROR,
}


def setup_logging(level_name):
    level = LOG_LEVELS.get(level_name.upper(), logging.WARNING)
    if 'DEBUG' in os.environ:
        level = logging.DEBUG

    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')
    logging.getLogger('ftab').setLevel(level)


def is_interactive():
    return sys.stdin.isatty()


def ask_overwrite(path):
    answer = input(f'Do you want to overwrite the file at \'{path}\'? [y/N] ')

    return answer.strip().lower() in ('y', 'yes')


def get_confirm(overwrite):
    '''Without --overwrite an existing file is overwritten only if the user
    agrees, and only when there is a user to ask.'''
    if overwrite or not is_interactive():
        return None

    return ask_overwrite


def print_header(layout):
    for name in RESERVED_FIELDS:
        print(f'{name}: 0x{getattr(layout, name):08x}')


def print_segments(layout):
    '''One line per segment with its position in the file, gaps between
    consecutive segments are shown when larger than any padding.'''
    print(f'segments: {layout.segments_count}')

    end = 0
    for segment in layout.segments:
        if end and segment.offset - end >= 4:
            print(f'gap: {end:08x}-{segment.offset:08x}({segment.offset - end:x})')

        print(f'{tag_repr(segment.tag):4} {segment.offset:08x}-{segment.offset + segment.size:08x}({segment.size:08x})'
              f' {segment.unk:08x} {segment.data[:16].hex()}')
        end = segment.offset + segment.size

    if layout.has_ticket:
        print(f'ticket: {len(layout.ticket)} bytes')
    else:
        print('ticket: none')


def do_unpack(in_file, out_dir=None, overwrite=False, create_parent_dirs=False, show_header=False):
    data = util.read_file('input file', in_file)

    logger.info('loaded file at path \'%s\'', in_file)

    if out_dir is not None:
        out_dir = util.ensure_directory('output directory', out_dir, create_parents=create_parent_dirs)

    layout = decode(data)

    if show_header:
        print_header(layout)

    confirm = get_confirm(overwrite)
    manifest = to_manifest(layout, out_dir, overwrite=overwrite, confirm=confirm)
    save_manifest(manifest, util.qualify_path(MANIFEST_FILENAME, out_dir), overwrite=overwrite, confirm=confirm)

    logger.info('done')

    return manifest


def do_pack(manifest_path, out_file=None, overwrite=False):
    manifest = load_manifest(manifest_path)
    input_dir = Path(manifest_path).parent

    out_file = util.qualify_path(out_file if out_file is not None else DEFAULT_OUTPUT_FILENAME, input_dir)

    data = encode(from_manifest(manifest, input_dir))

    logger.debug('writing ftab to \'%s\'', out_file)
    util.save_file('output file', out_file, data, overwrite=overwrite, confirm=get_confirm(overwrite))

    logger.info('done')

    return out_file


def do_info(in_file):
    layout = decode(util.read_file('input file', in_file))

    print_header(layout)
    print_segments(layout)

    return layout


def get_parser():
    parser = argparse.ArgumentParser(prog='ftab', description='Unpack and pack ftab firmware files.')
    parser.add_argument('-H', '--print-header', action='store_true',
                        help='print the fields of the header that are neither offsets nor magic'
                             ' (currently all are unknown and ignored)')
    parser.add_argument('-l', '--log-level', default='WARN',
                        help='one of NONE, TRACE, DEBUG, INFO, WARN and ERROR (default: %(default)s)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    unpack = subparsers.add_parser('unpack', help='unpack a ftab file into a directory')
    unpack.add_argument('-o', '--overwrite', action='store_true',
                        help='overwrite existing files in the output directory without asking')
    unpack.add_argument('-p', '--create-parent-dirs', action='store_true',
                        help='create parent directories when the output directory does not exist')
    unpack.add_argument('in_file', type=Path, help='path to the ftab file to be unpacked')
    unpack.add_argument('out_dir', type=Path, nargs='?',
                        help='directory where the unpacked files will be written (default: current directory)')

    pack = subparsers.add_parser('pack', help='create a ftab file from a manifest')
    pack.add_argument('-o', '--overwrite', action='store_true',
                      help='overwrite the output file without asking if it exists')
    pack.add_argument('manifest', type=Path, help='path to the manifest describing the ftab file')
    pack.add_argument('out_file', type=Path, nargs='?',
                      help=f'destination path (default: {DEFAULT_OUTPUT_FILENAME} next to the manifest)')

    info = subparsers.add_parser('info', help='show header and segments of a ftab file')
    info.add_argument('in_file', type=Path, help='path to the ftab file')

    return parser


def main(argv=None):
    args = get_parser().parse_args(argv)

    setup_logging(args.log_level)

    try:
        if args.command == 'unpack':
            do_unpack(args.in_file, args.out_dir, overwrite=args.overwrite,
                      create_parent_dirs=args.create_parent_dirs, show_header=args.print_header)
        elif args.command == 'pack':
            do_pack(args.manifest, args.out_file, overwrite=args.overwrite)
        else:
            do_info(args.in_file)
    except FtabException as e:
        logger.error('%s', e)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
