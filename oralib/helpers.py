# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Geometry, thumbnail and zipfile helpers"""

import logging
import zipfile

import numpy as np

logger = logging.getLogger(__name__)


## Constants

#: Longest side of saved thumbnails, in pixels
THUMBNAIL_MAX_SIZE = 256

#: Timestamp written for every archive entry, for reproducible output
ZIP_ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)


class Rect (object):
    """Representation of a rectangular area.

    >>> a = Rect(0, 10, 5, 15)
    >>> a.overlaps(Rect(2, 10, 1, 15))
    True
    >>> a.overlaps(Rect(5, 10, 1, 15))
    False
    >>> i = Rect(0, 0, 10, 10).intersection(Rect(5, -5, 10, 10))
    >>> tuple(i)
    (5, 0, 5, 5)
    >>> Rect(0, 0, 10, 10).intersection(Rect(10, 0, 4, 4)) is None
    True

    """

    def __init__(self, x=0, y=0, w=0, h=0):
        """Initializes, with optional location and dimensions."""
        object.__init__(self)
        self.x = x
        self.y = y
        self.w = w
        self.h = h

    def __iter__(self):
        """Allows iteration, and thus casting to tuples and lists.

        The sequence returned is always 4 items long, and in the order
        x, y, w, h.

        """
        return iter((self.x, self.y, self.w, self.h))

    def __eq__(self, other):
        """Returns true if this rectangle is identical to another."""
        try:
            return tuple(self) == tuple(other)
        except TypeError:  # e.g. comparison to None
            return False

    def __hash__(self):
        return hash(tuple(self))

    def overlaps(self, r2):
        """Returns true if this rectangle intersects another."""
        if max(self.x, r2.x) >= min(self.x + self.w, r2.x + r2.w):
            return False
        if max(self.y, r2.y) >= min(self.y + self.h, r2.y + r2.h):
            return False
        return True

    def intersection(self, other):
        """Creates new Rect for the intersection with another
        If the rectangles do not intersect, None is returned
        :rtype: Rect
        """
        if not self.overlaps(other):
            return None

        x = max(self.x, other.x)
        y = max(self.y, other.y)
        rx = min(self.x + self.w, other.x + other.w)
        ry = min(self.y + self.h, other.y + other.h)
        return Rect(x, y, rx - x, ry - y)

    def slices(self):
        """Returns (row slice, column slice) for indexing pixel arrays"""
        return (
            slice(self.y, self.y + self.h),
            slice(self.x, self.x + self.w),
        )

    def __repr__(self):
        return 'Rect(%d, %d, %d, %d)' % (self.x, self.y, self.w, self.h)


def clamp(x, lo, hi):
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def get_opaque_bbox(pixels):
    """Find the bounding box of all pixels with nonzero alpha

    :param numpy.ndarray pixels: (h, w, 4) RGBA array
    :returns: the tight bbox, or the full array area if nothing is opaque
    :rtype: Rect

    >>> px = np.zeros((64, 64, 4), dtype="uint8")
    >>> get_opaque_bbox(px)
    Rect(0, 0, 64, 64)
    >>> px[10, 20, 3] = 1
    >>> px[12, 5, 3] = 255
    >>> get_opaque_bbox(px)
    Rect(5, 10, 16, 3)

    Fully transparent arrays are not cropped to a zero-sized box.
    Their pixel data is saved as-is, at an offset of (0, 0).

    """
    height, width = pixels.shape[:2]
    opaque = pixels[..., 3] > 0
    rows = np.flatnonzero(opaque.any(axis=1))
    if rows.size == 0:
        return Rect(0, 0, width, height)
    cols = np.flatnonzero(opaque.any(axis=0))
    top, bottom = int(rows[0]), int(rows[-1])
    left, right = int(cols[0]), int(cols[-1])
    return Rect(left, top, right - left + 1, bottom - top + 1)


def thumbnail_size(width, height, max_size=THUMBNAIL_MAX_SIZE):
    """Calculate aspect-preserving thumbnail dimensions

    >>> thumbnail_size(1000, 500)
    (256, 128)
    >>> thumbnail_size(500, 1000)
    (128, 256)
    >>> thumbnail_size(100, 50)
    (100, 50)
    >>> thumbnail_size(256, 256)
    (256, 256)
    >>> thumbnail_size(300, 300)
    (256, 256)
    >>> thumbnail_size(10000, 1)
    (256, 1)

    """
    if width <= max_size and height <= max_size:
        return (width, height)
    if width >= height:
        short = int(round(height * max_size / width))
        return (max_size, max(1, short))
    else:
        short = int(round(width * max_size / height))
        return (max(1, short), max_size)


def zipfile_writestr(z, arcname, data, compress_type=None):
    """Write a string into a zipfile entry, with standard permissions

    :param zipfile.ZipFile z: A zip file open for write.
    :param unicode arcname: Name of the file entry to add.
    :param bytes data: Content to add.
    :param int compress_type: Override for the archive's compression.

    Work around bad permissions with the standard
    `zipfile.Zipfile.writestr`: http://bugs.python.org/issue3394. The
    original zero-permissions defect was fixed upstream, but do we want
    more public permissions than the fix's 0600?

    Entries always get the same timestamp, so that saving the same
    document twice produces the same bytes.

    """
    zi = zipfile.ZipInfo(arcname, date_time=ZIP_ENTRY_DATE_TIME)
    zi.external_attr = 0o644 << 16  # wider perms, should match z.write()
    zi.external_attr |= 0o100000 << 16  # regular file
    if compress_type is None:
        compress_type = z.compression
    zi.compress_type = compress_type
    logger.debug("Writing %r (%d bytes)", arcname, len(data))
    z.writestr(zi, data)


def _test():
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
