# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""MyPaint stroke map side data

MyPaint records the shapes of the brush strokes which made up a layer
in a binary "stroke map", stored next to the layer's PNG. Its contents
are opaque here: they are carried from load to save unchanged, along
with the name of the stack.xml attribute which referenced them. That
attribute name doubles as the stroke map's format version.

"""

from collections import namedtuple

#: Attribute used by MyPaint 1.0 and earlier
STROKEMAP_V1_ATTR = "mypaint_strokemap"

#: Attribute used by MyPaint 1.1 onwards, for the v2 format
STROKEMAP_V2_ATTR = "mypaint_strokemap_v2"

#: In lookup order. Later entries win if a layer has more than one.
SUPPORTED_STROKEMAP_ATTRS = (STROKEMAP_V1_ATTR, STROKEMAP_V2_ATTR)


class StrokeMap (namedtuple("StrokeMap", ["data", "version"])):
    """Raw stroke map bytes, and their version attribute name

    >>> sm = StrokeMap(b"}", STROKEMAP_V2_ATTR)
    >>> sm.version
    'mypaint_strokemap_v2'
    >>> StrokeMap(b"}", "mypaint_strokemap_v9")
    Traceback (most recent call last):
    ...
    ValueError: unsupported stroke map version: 'mypaint_strokemap_v9'

    """

    __slots__ = ()

    def __new__(cls, data, version=STROKEMAP_V2_ATTR):
        if version not in SUPPORTED_STROKEMAP_ATTRS:
            raise ValueError(
                "unsupported stroke map version: %r" % (version,),
            )
        return super(StrokeMap, cls).__new__(cls, bytes(data), version)


## Module testing


def _test():
    import doctest
    doctest.testmod()


if __name__ == "__main__":
    _test()
