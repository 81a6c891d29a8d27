# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Hand-built OpenRaster archives for tests"""

import io
import zipfile

import numpy as np

import oralib.pixbuf


def solid_png(width, height, rgba=(255, 0, 0, 255)):
    """PNG data for a single-color image"""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[...] = rgba
    return oralib.pixbuf.save_to_bytes(pixels)


def make_orazip(entries, mimetype=b"image/openraster"):
    """Build an archive in memory

    :param list entries: (name, bytes) pairs, written in order
    :param bytes mimetype: content of the leading mimetype entry,
        or None to leave it out
    :returns: a seekable file object, rewound

    """
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_STORED) as z:
        if mimetype is not None:
            z.writestr("mimetype", mimetype)
        for name, data in entries:
            z.writestr(name, data)
    buf.seek(0)
    return buf


def stack_xml(layer_elems, w=8, h=8, extra=""):
    """Minimal stack.xml data around some <layer> element strings"""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<image w="%d" h="%d"%s><stack>%s</stack></image>'
        % (w, h, extra, "".join(layer_elems))
    ).encode("utf-8")
