import logging
from pathlib import Path

from .exceptions import FileOpError


logger = logging.getLogger(__name__)


def qualify_path(path, directory=None) -> Path:
    '''Relative paths are taken with respect to directory (when given),
    absolute ones are returned as they are.'''
    path = Path(path)

    if path.is_absolute() or directory is None:
        return path

    return Path(directory) / path


def read_file(name, path) -> bytes:
    logger.debug('reading %s from \'%s\'', name, path)

    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise FileOpError('read', name, path, e) from e


def save_file(name, path, data, overwrite=False, confirm=None):
    '''Write data at path; unless overwrite is set an existing file is an error.

    When confirm is given it's called with the path of an existing file and
    the file is overwritten if it returns True.'''
    try:
        f = open(path, 'wb' if overwrite else 'xb')
    except FileExistsError as e:
        if confirm is None or not Path(path).is_file() or not confirm(path):
            raise FileOpError('create', name, path, e) from e

        f = _open_truncated(name, path)
    except OSError as e:
        raise FileOpError('create', name, path, e) from e

    with f:
        try:
            f.write(data)
        except OSError as e:
            raise FileOpError('write', name, path, e) from e

    logger.info('saved %s to \'%s\'', name, path)


def _open_truncated(name, path):
    try:
        return open(path, 'wb')
    except OSError as e:
        raise FileOpError('create', name, path, e) from e


def ensure_directory(name, path, create_parents=False):
    path = Path(path)

    try:
        path.mkdir(parents=create_parents, exist_ok=True)
    except OSError as e:
        raise FileOpError('create', name, path, e) from e

    return path
