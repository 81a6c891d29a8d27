# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Core layer classes etc."""


## Imports

import logging

import numpy as np

import oralib.helpers as helpers
import oralib.modes
import oralib.pixbuf
import oralib.stackxml
import oralib.strokemap
from oralib.errors import MalformedDataError

logger = logging.getLogger(__name__)


## Class defs


class PaintingLayer (object):
    """A full-canvas layer of straight RGBA pixels

    Layers always have the same size as the document which owns them.
    Where an OpenRaster file stores a smaller image at some offset,
    it is placed into a canvas-sized transparent surface on load.
    Offsets are worked out afresh from the pixel data on every save,
    and are not kept as layer state.

    Besides the usual flags, a layer can carry two pieces of side data
    which other programs put in .ora files: a background tile PNG, and
    a MyPaint stroke map. They are kept verbatim.

    >>> layer = PaintingLayer(4, 3, name="Sketch")
    >>> layer
    <PaintingLayer 'Sketch'>
    >>> layer.pixels.shape
    (3, 4, 4)
    >>> layer.opacity, layer.visible, layer.mode == oralib.modes.NORMAL
    (255, True, True)

    """

    ## Class constants

    #: Forms the default name
    DEFAULT_NAME = u"Layer"

    PERMITTED_MODES = set(oralib.modes.STANDARD_MODES)

    ## Construction, loading, other lifecycle stuff

    def __init__(self, width, height, name=None, pixels=None,
                 opacity=255, visible=True, mode=oralib.modes.DEFAULT_MODE,
                 background_tile=None, strokemap=None):
        """Construct a new layer

        :param int width: canvas width
        :param int height: canvas height
        :param name: The name for the new layer.
        :param numpy.ndarray pixels: (height, width, 4) RGBA, copied
        :param int opacity: byte opacity, 0..255
        :param bool visible: visibility flag
        :param int mode: layer mode, see oralib.modes
        :param bytes background_tile: background tile PNG data
        :param oralib.strokemap.StrokeMap strokemap: stroke map data

        """
        super(PaintingLayer, self).__init__()
        if width <= 0 or height <= 0:
            raise ValueError("layer size must be positive: %rx%r"
                             % (width, height))
        self._width = int(width)
        self._height = int(height)
        self._pixels = oralib.pixbuf.new_pixels(self._width, self._height)
        if pixels is not None:
            self.pixels = pixels
        self._name = None
        self.name = name
        self._opacity = 255
        self.opacity = opacity
        self._visible = bool(visible)
        self._mode = oralib.modes.DEFAULT_MODE
        self.mode = mode
        self.background_tile = background_tile
        self.strokemap = strokemap
        #: True if the layer was the bottom one in a loaded file.
        self.is_background = False

    @classmethod
    def new_from_openraster(cls, orazip, descriptor, width, height):
        """Reads and returns a layer from an OpenRaster zipfile

        :param zipfile.ZipFile orazip: An OpenRaster zipfile
        :param oralib.stackxml.LayerDescriptor descriptor: what to load
        :param int width: canvas width
        :param int height: canvas height
        :raises MalformedDataError: if referenced entries are missing

        """
        layer = cls(width, height)
        layer.load_from_openraster(orazip, descriptor)
        return layer

    def load_from_openraster(self, orazip, descriptor):
        """Loads layer flags, pixels and side data from a .ora zipfile"""
        self.name = descriptor.name
        self.opacity = descriptor.opacity
        self.visible = descriptor.visible
        self.mode = descriptor.mode
        self.is_background = descriptor.is_background
        logger.debug(
            "Trying to load %r at %+d%+d",
            descriptor.src,
            descriptor.x, descriptor.y,
        )
        pixbuf = oralib.pixbuf.load_from_zipfile(orazip, descriptor.src)
        self.load_surface_from_pixbuf(pixbuf, descriptor.x, descriptor.y)
        self.background_tile = None
        if descriptor.background_tile:
            self.background_tile = _read_entry(
                orazip, descriptor.background_tile,
            )
        self.strokemap = None
        if descriptor.strokemap:
            self.strokemap = oralib.strokemap.StrokeMap(
                _read_entry(orazip, descriptor.strokemap),
                descriptor.strokemap_version,
            )

    def load_surface_from_pixbuf(self, pixbuf, x=0, y=0):
        """Replace the layer's pixels with an image placed at an offset

        :param numpy.ndarray pixbuf: (h, w, 4) RGBA image data
        :param int x: X offset of the image's top left corner
        :param int y: Y offset of the image's top left corner

        Everything outside the placed image becomes fully transparent.
        No blending happens. Parts of the image lying outside the
        canvas are dropped.

        >>> layer = PaintingLayer(4, 4)
        >>> img = np.full((2, 3, 4), 200, dtype="uint8")
        >>> layer.load_surface_from_pixbuf(img, 2, 1)
        >>> layer.pixels[..., 3]
        array([[  0,   0,   0,   0],
               [  0,   0, 200, 200],
               [  0,   0, 200, 200],
               [  0,   0,   0,   0]], dtype=uint8)

        """
        pixels = oralib.pixbuf.new_pixels(self._width, self._height)
        img_h, img_w = pixbuf.shape[:2]
        canvas = helpers.Rect(0, 0, self._width, self._height)
        placed = helpers.Rect(x, y, img_w, img_h)
        visible = canvas.intersection(placed)
        if visible is None:
            logger.warning(
                "Layer image (%dx%d%+d%+d) lies outside the canvas",
                img_w, img_h, x, y,
            )
        else:
            if visible != placed:
                logger.debug(
                    "Clipping layer image %r to canvas %r",
                    placed, canvas,
                )
            src = helpers.Rect(
                visible.x - x, visible.y - y,
                visible.w, visible.h,
            )
            pixels[visible.slices()] = pixbuf[src.slices()][..., :4]
        self._pixels = pixels

    ## Properties

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def pixels(self):
        """The layer's (height, width, 4) uint8 straight RGBA array

        Assigned arrays are copied, and must match the layer's size.
        """
        return self._pixels

    @pixels.setter
    def pixels(self, pixels):
        pixels = np.asarray(pixels)
        if pixels.shape != (self._height, self._width, 4):
            raise ValueError(
                "pixels must have shape %r, not %r"
                % ((self._height, self._width, 4), pixels.shape),
            )
        self._pixels = pixels.astype(np.uint8, copy=True)

    @property
    def name(self):
        """The layer's name, for display purposes"""
        return self._name

    @name.setter
    def name(self, name):
        if name is not None:
            name = str(name)
        else:
            name = self.DEFAULT_NAME
        self._name = name

    @property
    def opacity(self):
        """Opacity as a byte value in [0, 255]

        >>> layer = PaintingLayer(1, 1)
        >>> layer.opacity = 300
        >>> layer.opacity
        255
        >>> layer.opacity = 127.6
        >>> layer.opacity
        128

        """
        return self._opacity

    @opacity.setter
    def opacity(self, opacity):
        self._opacity = int(round(helpers.clamp(float(opacity), 0, 255)))

    @property
    def opacity_fraction(self):
        """Opacity as a float in [0.0, 1.0]"""
        return self._opacity / 255.0

    @opacity_fraction.setter
    def opacity_fraction(self, fraction):
        self.opacity = helpers.clamp(float(fraction), 0.0, 1.0) * 255

    @property
    def visible(self):
        """Whether the layer has a visible effect on its backdrop."""
        return self._visible

    @visible.setter
    def visible(self, visible):
        self._visible = bool(visible)

    @property
    def mode(self):
        """How this layer combines with its backdrop.

        Values not in PERMITTED_MODES are replaced by the default mode.

        """
        return self._mode

    @mode.setter
    def mode(self, mode):
        mode = int(mode)
        if mode not in self.PERMITTED_MODES:
            mode = oralib.modes.DEFAULT_MODE
        self._mode = mode

    ## Information

    def get_bbox(self):
        """Get the tight bounding box of the layer's non-transparent data

        :rtype: oralib.helpers.Rect

        For an empty layer, this is the whole canvas.
        """
        return helpers.get_opaque_bbox(self._pixels)

    def is_empty(self):
        return not self._pixels[..., 3].any()

    ## Standard stuff

    def __repr__(self):
        """Simplified repr() of a layer"""
        if self.name:
            return "<%s %r>" % (self.__class__.__name__, self.name)
        else:
            return "<%s>" % (self.__class__.__name__)

    def __eq__(self, layer):
        """Two layers are only equal if they are the same object"""
        return self is layer

    def __hash__(self):
        """Return a hash for the layer (identity only)"""
        return id(self)

    ## Saving

    def save_to_openraster(self, orazip, index, tile_written=False):
        """Saves the layer's data into an open OpenRaster ZipFile

        :param zipfile.ZipFile orazip: a zipfile open for write
        :param int index: the layer's bottom-first index, used in names
        :param bool tile_written: a background tile is already stored
        :returns: description of what was written
        :rtype: oralib.stackxml.LayerDescriptor

        The PNG written is cropped to the layer's bounding box, which
        also gives the offsets recorded in stack.xml.

        """
        bbox = self.get_bbox()
        background_tile = None
        if self.background_tile:
            background_tile = oralib.stackxml.BACKGROUND_TILE_PATH
            if tile_written:
                logger.warning(
                    "Layer %d: only one background tile can be stored, "
                    "keeping the one already written to %r",
                    index, background_tile,
                )
            else:
                helpers.zipfile_writestr(
                    orazip, background_tile, self.background_tile,
                )
        strokemap = None
        strokemap_version = None
        if self.strokemap and self.strokemap.data:
            strokemap = oralib.stackxml.layer_strokemap_path(index)
            strokemap_version = self.strokemap.version
            helpers.zipfile_writestr(orazip, strokemap, self.strokemap.data)
        src = oralib.stackxml.layer_src_path(index)
        png = oralib.pixbuf.save_to_bytes(self._pixels[bbox.slices()])
        helpers.zipfile_writestr(orazip, src, png)
        return oralib.stackxml.LayerDescriptor(
            x=bbox.x,
            y=bbox.y,
            name=self.name,
            opacity=self.opacity,
            visible=self.visible,
            mode=self.mode,
            src=src,
            background_tile=background_tile,
            strokemap=strokemap,
            strokemap_version=strokemap_version,
            index=index,
            is_background=self.is_background,
        )


## Helper functions


def _read_entry(orazip, name):
    """Read a whole zipfile entry, raising if it does not exist"""
    try:
        info = orazip.getinfo(name)
    except KeyError as err:
        raise MalformedDataError(
            "Missing archive entry %r" % (name,),
            entry=name,
        ) from err
    with orazip.open(info, mode="r") as fp:
        return fp.read()


## Module testing


def _test():
    """Run doctest strings"""
    import doctest
    doctest.testmod(optionflags=doctest.ELLIPSIS)


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)
    _test()
