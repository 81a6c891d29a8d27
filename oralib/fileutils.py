# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Utility functions for dealing with files and filenames"""


## Imports

import os
import os.path
import functools
import logging
import shutil

logger = logging.getLogger(__name__)


## Module configuration


VIA_TEMPFILE_MAKES_BACKUP_COPY = False
VIA_TEMPFILE_BACKUP_COPY_SUFFIX = "~"
TEMPFILE_PREFIX = ".tmpsave."


## Utility funcs


def is_path(target):
    """True if target names a file, rather than being a file object"""
    return isinstance(target, (str, bytes, os.PathLike))


def temp_path_for(target_path):
    """Where to write a file which will replace target_path

    >>> temp_path_for("/tmp/pictures/cat.ora")
    '/tmp/pictures/.tmpsave.cat.ora'

    The temp file lives in the same folder, so that the final rename
    stays on one filesystem.

    """
    dirname, basename = os.path.split(target_path)
    return os.path.join(dirname, TEMPFILE_PREFIX + basename)


def _copy_to_backup(target_path, backup_path):
    """Replace backup_path with a synced copy of target_path"""
    if os.path.exists(backup_path):
        logger.debug("Removing old backup %r", backup_path)
        os.remove(backup_path)
    logger.debug("Making new backup %r", backup_path)
    with open(target_path, 'rb') as target_fp:
        with open(backup_path, 'wb') as backup_fp:
            shutil.copyfileobj(target_fp, backup_fp)
            backup_fp.flush()
            os.fsync(backup_fp.fileno())


def via_tempfile(save_method):
    """Save method decorator: write named files via a tempfile

    :param callable save_method: A save method to be wrapped
    :returns: a new decorated method

    The wrapped method's first non-self parameter is a filename or a
    writable file object. File objects are passed straight through.
    For filenames, the save method writes to `temp_path_for()` the
    target instead, and the result is then renamed over the target.
    If the save method fails, the temp file is removed and the target
    is left as it was.

    Symlinked targets are resolved, so that the file being pointed at
    is the one replaced. Any backup copy goes next to the name the
    caller gave.

    """
    @functools.wraps(save_method)
    def _wrapped_save_method(self, filename, *args, **kwds):
        if not is_path(filename):
            return save_method(self, filename, *args, **kwds)
        filename = os.fsdecode(os.fspath(filename))
        target_path = os.path.realpath(filename)
        temp_path = temp_path_for(target_path)
        if os.path.exists(temp_path):
            os.remove(temp_path)

        logger.debug("Writing to temp path %r", temp_path)
        try:
            result = save_method(self, temp_path, *args, **kwds)
        except Exception:
            logger.error("Save to %r failed, removing temp file", filename)
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
        if not os.path.exists(temp_path):
            logger.warning("Save method did not create %r", temp_path)
            return result

        if VIA_TEMPFILE_MAKES_BACKUP_COPY and os.path.exists(target_path):
            _copy_to_backup(
                target_path,
                filename + VIA_TEMPFILE_BACKUP_COPY_SUFFIX,
            )
        logger.debug("Replacing %r with %r", target_path, temp_path)
        os.replace(temp_path, target_path)
        return result

    return _wrapped_save_method


## Module testing


def _test():
    """Run doctest strings"""
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
