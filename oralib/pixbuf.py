# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""PNG encoding, decoding and scaling for pixel arrays

Pixel data is passed around as numpy arrays of shape (height, width, 4)
and dtype uint8, holding straight (non-premultiplied) RGBA. The
functions here convert between those arrays and PNG data via Pillow.

The names are patterned after the load/save helpers MyPaint uses
for its GdkPixbufs.

"""

## Imports

import io
import logging

import numpy as np
from PIL import Image

from oralib.errors import MalformedDataError

logger = logging.getLogger(__name__)


## Constants

#: Filter used when scaling down previews
DEFAULT_RESAMPLE = Image.Resampling.LANCZOS


## Utility functions


def new_pixels(width, height):
    """Make a fully transparent pixel array

    >>> new_pixels(3, 2).shape
    (2, 3, 4)

    """
    return np.zeros((height, width, 4), dtype=np.uint8)


def save_to_bytes(pixels):
    """Encode a pixel array as PNG data

    :param numpy.ndarray pixels: (h, w, 4) uint8 RGBA array
    :rtype: bytes

    >>> data = save_to_bytes(new_pixels(4, 4))
    >>> data[:8] == b"\\x89PNG\\r\\n\\x1a\\n"
    True

    """
    image = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def load_from_stream(fp):
    """Decode PNG data from an open file-like object

    :param fp: file-like object opened for reading
    :rtype: numpy.ndarray
    :returns: (h, w, 4) uint8 RGBA array

    Greyscale, paletted and RGB images are converted to RGBA, with
    alpha set to fully opaque where the source has none.

    """
    with Image.open(fp) as image:
        image.load()
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return np.array(image, dtype=np.uint8)


def load_from_bytes(data):
    """Decode PNG data held in memory

    >>> px = new_pixels(5, 3)
    >>> px[1, 2] = (10, 20, 30, 40)
    >>> out = load_from_bytes(save_to_bytes(px))
    >>> out.shape, out[1, 2].tolist()
    ((3, 5, 4), [10, 20, 30, 40])

    """
    return load_from_stream(io.BytesIO(data))


def load_from_zipfile(datazip, filename):
    """Extract and decode a PNG from a zipfile entry

    :param zipfile.ZipFile datazip: ZipFile object opened for extracting
    :param unicode filename: PNG entry (file name) in the zipfile
    :rtype: numpy.ndarray
    :raises MalformedDataError: if the entry is missing or not an image

    """
    try:
        info = datazip.getinfo(filename)
    except KeyError as err:
        raise MalformedDataError(
            "Missing archive entry %r" % (filename,),
            entry=filename,
        ) from err
    logger.debug("Decoding %r (%d bytes)", filename, info.file_size)
    with datazip.open(info, mode="r") as datafp:
        try:
            return load_from_stream(io.BytesIO(datafp.read()))
        except (OSError, ValueError, Image.DecompressionBombError) as err:
            raise MalformedDataError(
                "Cannot decode image entry %r: %s" % (filename, err),
                entry=filename,
            ) from err


def scale(pixels, size, resample=None):
    """Resize a pixel array

    :param numpy.ndarray pixels: (h, w, 4) uint8 RGBA array
    :param tuple size: target (width, height)
    :param resample: a PIL.Image.Resampling filter, or None for default
    :rtype: numpy.ndarray

    Scaling happens with premultiplied alpha, so that the colors of
    fully transparent pixels do not bleed into their neighbours.

    >>> px = new_pixels(100, 50)
    >>> px[:, :50] = (255, 0, 0, 255)
    >>> out = scale(px, (10, 5), resample=Image.Resampling.BOX)
    >>> out.shape
    (5, 10, 4)
    >>> out[2, 2].tolist(), out[2, 8].tolist()
    ([255, 0, 0, 255], [0, 0, 0, 0])

    """
    if resample is None:
        resample = DEFAULT_RESAMPLE
    width, height = size
    if pixels.shape[1] == width and pixels.shape[0] == height:
        return pixels.copy()
    image = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    image = image.convert("RGBa")
    image = image.resize((width, height), resample=resample)
    image = image.convert("RGBA")
    return np.array(image, dtype=np.uint8)


## Module testing

def _test():
    """Run doctest strings"""
    import doctest
    doctest.testmod(optionflags=doctest.ELLIPSIS)


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)
    _test()
