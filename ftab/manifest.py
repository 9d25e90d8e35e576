'''
The manifest is the human editable description of a ftab image.

    unk_0 = 83886336
    unk_1 = 4294967295
    ...
    ticket = "ApImg4Ticket.der"

    [[segments]]
    path = "rkos.bin"
    tag = "rkos"
    unk = 0

Each segment refers to a file holding its data; a tag can be written either
as a string of at most four characters or as an integer. Offsets and lengths
are not part of the manifest since they are recomputed when packing.
'''
import logging
import tomllib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import tomli_w

from .codec import check_u32
from .exceptions import FileOpError, InvalidField, ManifestError, MissingFile
from .format import RESERVED_FIELDS, TICKET_FILENAME
from .layout import Layout, Segment
from .tag import format_tag, parse_tag, tag_filename, tag_repr
from . import util


logger = logging.getLogger(__name__)


@dataclass
class SegmentEntry:
    path: str
    tag: int
    unk: int = 0


@dataclass
class Manifest:
    unk_0: int = 0
    unk_1: int = 0
    unk_2: int = 0
    unk_3: int = 0
    unk_4: int = 0
    unk_5: int = 0
    unk_6: int = 0
    ticket: Optional[str] = None
    segments: List[SegmentEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, document: Dict[str, Any]) -> 'Manifest':
        '''Build a Manifest from the parsed document, normalizing the tags.'''
        if not isinstance(document, dict):
            raise InvalidField('a manifest must be a table')

        reserved = {}
        for name in RESERVED_FIELDS:
            if name not in document:
                raise InvalidField(f"missing field '{name}'", chain=[name])
            reserved[name] = check_u32(document[name], name)

        ticket = document.get('ticket')
        if ticket is not None and not isinstance(ticket, str):
            raise InvalidField("field 'ticket' must be a path", chain=['ticket'])

        if 'segments' not in document:
            raise InvalidField("missing field 'segments'", chain=['segments'])

        raw_segments = document['segments']
        if not isinstance(raw_segments, list):
            raise InvalidField("field 'segments' must be an array of tables", chain=['segments'])

        segments = []
        for index, raw_segment in enumerate(raw_segments):
            chain = ['segments', str(index)]
            if not isinstance(raw_segment, dict):
                raise InvalidField('a segment must be a table', chain=chain)

            for name in ('path', 'tag', 'unk'):
                if name not in raw_segment:
                    raise InvalidField(f"missing field '{name}'", chain=chain + [name])

            if not isinstance(raw_segment['path'], str):
                raise InvalidField("field 'path' must be a string", chain=chain + ['path'])

            try:
                tag = parse_tag(raw_segment['tag'])
            except ManifestError as e:
                e.chain = chain + ['tag']
                raise

            segments.append(SegmentEntry(
                path=raw_segment['path'],
                tag=tag,
                unk=check_u32(raw_segment['unk'], f'segments.{index}.unk'),
            ))

        return cls(ticket=ticket, segments=segments, **reserved)

    def to_dict(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {_: getattr(self, _) for _ in RESERVED_FIELDS}

        if self.ticket is not None:
            document['ticket'] = self.ticket

        document['segments'] = [
            {
                'path': _.path,
                'tag': format_tag(_.tag),
                'unk': _.unk,
            } for _ in self.segments
        ]

        return document


def load_manifest(path) -> Manifest:
    data = util.read_file('manifest', path)

    try:
        document = tomllib.loads(data.decode('utf-8'))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ManifestError(f"failed to parse the manifest file at '{path}': {e}") from e

    return Manifest.from_dict(document)


def save_manifest(manifest: Manifest, path, overwrite=False, confirm=None):
    util.save_file('manifest', path, tomli_w.dumps(manifest.to_dict()).encode('utf-8'), overwrite=overwrite,
                   confirm=confirm)


def segment_filenames(layout: Layout) -> List[str]:
    '''Names for the files of the segments: a tag that shows up more than once
    gets the index of the segment appended from the second time on. Names are
    compared ignoring case since the file system may do the same.'''
    names = []
    seen = set()

    for index, segment in enumerate(layout.segments):
        name = tag_filename(segment.tag)
        if name.casefold() in seen:
            stem, suffix = name.rsplit('.', 1)
            name = f'{stem}_{index}.{suffix}'
        seen.add(name.casefold())
        names.append(name)

    return names


def to_manifest(layout: Layout, segment_dir=None, overwrite=False, confirm=None) -> Manifest:
    '''Save segments and ticket of the layout inside segment_dir and return the
    manifest describing them; paths in the manifest are relative to segment_dir.

    overwrite and confirm are passed to util.save_file().'''
    manifest = Manifest(**{_: getattr(layout, _) for _ in RESERVED_FIELDS})

    if layout.ticket is not None:
        util.save_file('ticket', util.qualify_path(TICKET_FILENAME, segment_dir), layout.ticket, overwrite=overwrite,
                       confirm=confirm)
        manifest.ticket = TICKET_FILENAME

    for filename, segment in zip(segment_filenames(layout), layout.segments):
        logger.debug('saving segment with tag %s to \'%s\'', tag_repr(segment.tag), filename)

        util.save_file('segment', util.qualify_path(filename, segment_dir), segment.data, overwrite=overwrite,
                       confirm=confirm)
        manifest.segments.append(SegmentEntry(path=filename, tag=segment.tag, unk=segment.unk))

    return manifest


def _read_referenced(name, path, base_dir):
    full_path = util.qualify_path(path, base_dir)

    try:
        return util.read_file(name, full_path)
    except FileOpError as e:
        raise MissingFile(str(e), path=full_path) from e


def from_manifest(manifest: Manifest, base_dir=None) -> Layout:
    '''Load the files referenced by the manifest, relative paths are taken with
    respect to base_dir.'''
    segments = []

    for entry in manifest.segments:
        logger.debug('reading segment with tag %s from \'%s\'', tag_repr(entry.tag), entry.path)

        segments.append(Segment(
            tag=entry.tag,
            data=_read_referenced('segment', entry.path, base_dir),
            unk=entry.unk,
        ))

    ticket = None
    if manifest.ticket is not None:
        ticket = _read_referenced('ticket', manifest.ticket, base_dir)

    return Layout(
        segments=segments,
        ticket=ticket,
        **{_: getattr(manifest, _) for _ in RESERVED_FIELDS},
    )