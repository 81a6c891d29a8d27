# -*- coding: utf-8 -*-
# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Layered documents, and their OpenRaster load and save"""

## Imports

import time
import zipfile
import logging

import oralib.helpers as helpers
import oralib.fileutils as fileutils
import oralib.layer as layer
import oralib.pixbuf
import oralib.stackxml
import oralib.xml
from oralib.errors import ContainerIntegrityError
from oralib.errors import UnsupportedResolutionUnit

logger = logging.getLogger(__name__)


## Module constants

#: Resolution of new documents, and of files which don't declare one
DEFAULT_RESOLUTION = 72

#: Resolution written for documents measured in plain pixels
DEFAULT_SAVE_DPI = 96

CM_PER_INCH = 2.54

MIMETYPE_ENTRY = "mimetype"
MERGEDIMAGE_ENTRY = "mergedimage.png"
THUMBNAIL_ENTRY = "Thumbnails/thumbnail.png"


class ResolutionUnit (object):
    """Units for a document's nominal resolution"""

    #: Dots per inch
    INCH = "inch"

    #: Dots per centimeter
    CENTIMETER = "centimeter"

    #: No physical size: the resolution values are not meaningful
    PIXEL = "pixel"


## Class defs


class Document (object):
    """A fixed-size image made of a stack of full-canvas layers

    >>> doc = Document(320, 200)
    >>> paper = doc.add_layer()
    >>> ink = doc.add_layer(name="Ink")
    >>> doc
    <Document 320x200, 2 layers>
    >>> [l.name for l in doc]
    ['Layer 0', 'Ink']
    >>> doc.get_dpi()
    (72.0, 72.0)

    """

    def __init__(self, width, height,
                 xres=DEFAULT_RESOLUTION, yres=DEFAULT_RESOLUTION,
                 unit=ResolutionUnit.INCH):
        """Initialize as an empty document

        :param int width: canvas width, in pixels
        :param int height: canvas height, in pixels
        :param float xres: horizontal resolution, in dots per `unit`
        :param float yres: vertical resolution, in dots per `unit`
        :param str unit: a ResolutionUnit value

        """
        super(Document, self).__init__()
        self._width = None
        self._height = None
        self._set_size(width, height)
        self._xres = float(DEFAULT_RESOLUTION)
        self._yres = float(DEFAULT_RESOLUTION)
        self._unit = ResolutionUnit.INCH
        self.set_resolution(xres, yres, unit)
        #: Layers, bottom first.
        self.layers = []

    @classmethod
    def new_from_openraster(cls, filename):
        """Loads and returns a new document from an OpenRaster file

        :param filename: path or binary file object to read from

        """
        doc = cls(1, 1)
        doc.load_ora(filename)
        return doc

    def __repr__(self):
        return "<%s %dx%d, %d layers>" % (
            self.__class__.__name__,
            self._width, self._height,
            len(self.layers),
        )

    def __len__(self):
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)

    def _set_size(self, width, height):
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ValueError("document size must be positive: %rx%r"
                             % (width, height))
        self._width = width
        self._height = height

    def clear(self, width=None, height=None):
        """Remove all layers, optionally changing the canvas size"""
        self.layers = []
        if width is not None or height is not None:
            self._set_size(
                self._width if width is None else width,
                self._height if height is None else height,
            )

    ## Canvas size and resolution

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    def get_resolution(self):
        """Returns the nominal resolution, as (xres, yres, unit)"""
        return (self._xres, self._yres, self._unit)

    def set_resolution(self, xres, yres=None, unit=None):
        """Sets the nominal resolution

        :param float xres: horizontal resolution
        :param float yres: vertical resolution (default: same as xres)
        :param str unit: a ResolutionUnit value (default: unchanged)

        The unit is only checked when saving.
        """
        if yres is None:
            yres = xres
        xres = float(xres)
        yres = float(yres)
        if not (xres > 0 and yres > 0):
            raise ValueError("resolution must be positive: %r, %r"
                             % (xres, yres))
        self._xres = xres
        self._yres = yres
        if unit is not None:
            self._unit = unit

    def get_dpi(self):
        """Get the resolution to record in stack.xml, in dots per inch

        :returns: (xres, yres)
        :raises UnsupportedResolutionUnit: for unknown units

        >>> doc = Document(10, 10, xres=100, yres=50,
        ...                unit=ResolutionUnit.CENTIMETER)
        >>> doc.get_dpi()
        (254.0, 127.0)
        >>> doc.set_resolution(1, unit=ResolutionUnit.PIXEL)
        >>> doc.get_dpi()
        (96.0, 96.0)
        >>> doc.set_resolution(1, unit="furlong")
        >>> doc.get_dpi()
        Traceback (most recent call last):
        ...
        oralib.errors.UnsupportedResolutionUnit: Cannot save resolution in 'furlong' units

        """
        unit = self._unit
        if unit == ResolutionUnit.CENTIMETER:
            return (self._xres * CM_PER_INCH, self._yres * CM_PER_INCH)
        elif unit == ResolutionUnit.INCH:
            return (self._xres, self._yres)
        elif unit == ResolutionUnit.PIXEL:
            return (float(DEFAULT_SAVE_DPI), float(DEFAULT_SAVE_DPI))
        raise UnsupportedResolutionUnit(
            "Cannot save resolution in %r units" % (unit,),
        )

    ## Layers

    def add_layer(self, name=None, index=None):
        """Creates a new, empty layer

        :param name: name for the layer, default "Layer <index>"
        :param int index: where to insert it; default is on top
        :returns: the new layer
        :rtype: oralib.layer.PaintingLayer

        """
        if index is None:
            index = len(self.layers)
        if name is None:
            name = oralib.stackxml.default_layer_name(index)
        new_layer = layer.PaintingLayer(self._width, self._height, name=name)
        self.insert_layer(index, new_layer)
        return new_layer

    def insert_layer(self, index, new_layer):
        """Inserts an existing layer, which must match the canvas size"""
        if (new_layer.width, new_layer.height) != (self._width, self._height):
            raise ValueError(
                "layer is %dx%d, but the document is %dx%d"
                % (new_layer.width, new_layer.height,
                   self._width, self._height),
            )
        self.layers.insert(index, new_layer)

    def remove_layer(self, old_layer):
        self.layers.remove(old_layer)

    ## Rendering

    def flatten(self):
        """Composites all visible layers into one RGBA pixel array"""
        return layer.flatten(self.layers, self._width, self._height)

    def render_thumbnail(self, max_size=None, resample=None, flat=None):
        """Renders a thumbnail of the flattened layers

        :param int max_size: longest side, default THUMBNAIL_MAX_SIZE
        :param resample: PIL resampling filter, default in oralib.pixbuf
        :param numpy.ndarray flat: already flattened data to use
        :rtype: numpy.ndarray

        """
        if max_size is None:
            max_size = helpers.THUMBNAIL_MAX_SIZE
        if flat is None:
            flat = self.flatten()
        size = helpers.thumbnail_size(self._width, self._height, max_size)
        return oralib.pixbuf.scale(flat, size, resample=resample)

    ## Loading and saving

    @fileutils.via_tempfile
    def save_ora(self, filename, thumbnail_max_size=None, resample=None):
        """Saves OpenRaster data to a file

        :param filename: path or writable binary file object
        :param int thumbnail_max_size: longest side of the thumbnail
        :param resample: PIL resampling filter for the thumbnail
        :returns: the thumbnail's pixels
        :rtype: numpy.ndarray

        """
        logger.info('save_ora: %r', filename)
        t0 = time.time()
        thumbnail = _save_layers_to_new_orazip(
            self,
            filename,
            thumbnail_max_size=thumbnail_max_size,
            resample=resample,
        )
        logger.info('%.3fs save_ora total', time.time() - t0)
        return thumbnail

    def load_ora(self, filename):
        """Loads from an OpenRaster file, replacing everything

        :param filename: path or binary file object to read from
        :raises oralib.errors.FormatError: if the file is not valid

        If loading fails, the document is left unchanged.
        """
        logger.info('load_ora: %r', filename)
        t0 = time.time()
        with _open_orazip(filename) as orazip:
            _check_mimetype(orazip)
            try:
                xml = orazip.read(oralib.stackxml.STACKXML_ENTRY)
            except KeyError as err:
                raise ContainerIntegrityError(
                    "No stack.xml found in OpenRaster file",
                ) from err
            info = oralib.stackxml.parse_stack_xml(xml)
            new_layers = [
                layer.PaintingLayer.new_from_openraster(
                    orazip, descriptor, info.width, info.height,
                )
                for descriptor in info.layers
            ]
        assert len(new_layers) > 0
        self.clear(width=info.width, height=info.height)
        self.set_resolution(info.xres, info.yres, ResolutionUnit.INCH)
        for new_layer in new_layers:
            self.insert_layer(len(self.layers), new_layer)
        logger.info('%.3fs load_ora total', time.time() - t0)


## Module functions


def load_ora(filename):
    """Loads a new Document from an OpenRaster file"""
    return Document.new_from_openraster(filename)


def read_thumbnail(filename):
    """Reads the stored thumbnail of an OpenRaster file

    :param filename: path or binary file object to read from
    :returns: the thumbnail's pixels, or None if there is none
    :rtype: numpy.ndarray

    Only the mimetype is checked, so this works for files which
    cannot otherwise be loaded.

    """
    return _read_preview(filename, THUMBNAIL_ENTRY)


def read_merged_image(filename):
    """Reads the stored full-size merged image of an OpenRaster file

    Like read_thumbnail(), returns None if the file has none.

    """
    return _read_preview(filename, MERGEDIMAGE_ENTRY)


def _read_preview(filename, entry):
    with _open_orazip(filename) as orazip:
        _check_mimetype(orazip)
        if entry not in orazip.namelist():
            logger.debug("No %r in %r", entry, filename)
            return None
        return oralib.pixbuf.load_from_zipfile(orazip, entry)


def _open_orazip(filename):
    """Opens an OpenRaster zipfile for reading"""
    try:
        return zipfile.ZipFile(filename, mode="r")
    except zipfile.BadZipFile as err:
        raise ContainerIntegrityError(
            "Not an OpenRaster file (not a zip archive): %s" % (err,),
        ) from err


def _check_mimetype(orazip):
    """Raises unless the zipfile has the OpenRaster mimetype entry"""
    try:
        data = orazip.read(MIMETYPE_ENTRY)
    except KeyError as err:
        raise ContainerIntegrityError(
            "No mimetype found in OpenRaster file",
        ) from err
    logger.debug("mimetype: %r", data)
    if data != oralib.xml.OPENRASTER_MEDIA_TYPE.encode("ascii"):
        raise ContainerIntegrityError(
            "Incorrect mimetype: %r" % (data,),
        )


def _save_layers_to_new_orazip(doc, filename, thumbnail_max_size=None,
                               resample=None):
    """Save a document's layers to a new OpenRaster zipfile

    :param Document doc: what to save
    :param filename: where to save, a path or writable file object
    :param int thumbnail_max_size: longest side of the thumbnail
    :param resample: PIL resampling filter for the thumbnail
    :rtype: numpy.ndarray
    :returns: Thumbnail preview image (256x256 max) of what was saved

    >>> import io
    >>> from oralib.layer.test import make_test_document
    >>> doc, layers = make_test_document()
    >>> buf = io.BytesIO()
    >>> thumb = _save_layers_to_new_orazip(doc, buf)
    >>> thumb.shape
    (48, 64, 4)
    >>> with zipfile.ZipFile(buf) as z:
    ...     z.namelist()[:2]
    ['mimetype', 'data/layer0.png']

    """
    if not doc.layers:
        raise ValueError("Cannot save a document without layers")
    # Check this before anything is written
    xres, yres = doc.get_dpi()

    orazip = zipfile.ZipFile(
        filename, 'w',
        compression=zipfile.ZIP_STORED,
    )
    with orazip:
        # The mimetype entry must be first, and uncompressed
        helpers.zipfile_writestr(
            orazip, MIMETYPE_ENTRY,
            oralib.xml.OPENRASTER_MEDIA_TYPE.encode("ascii"),
            compress_type=zipfile.ZIP_STORED,
        )

        # Layer data, bottom first
        descriptors = []
        tile_written = False
        for index, s_layer in enumerate(doc.layers):
            t0 = time.time()
            descriptor = s_layer.save_to_openraster(
                orazip, index,
                tile_written=tile_written,
            )
            if descriptor.background_tile:
                tile_written = True
            descriptors.append(descriptor)
            logger.debug('%.3fs saving layer %d %r',
                         time.time() - t0, index, s_layer)

        xml = oralib.stackxml.generate_stack_xml(
            doc.width, doc.height,
            xres, yres,
            descriptors,
        )
        helpers.zipfile_writestr(
            orazip, oralib.stackxml.STACKXML_ENTRY, xml,
        )

        # Previews: full size, then the thumbnail
        flat = doc.flatten()
        helpers.zipfile_writestr(
            orazip, MERGEDIMAGE_ENTRY,
            oralib.pixbuf.save_to_bytes(flat),
        )
        thumbnail = doc.render_thumbnail(
            max_size=thumbnail_max_size,
            resample=resample,
            flat=flat,
        )
        helpers.zipfile_writestr(
            orazip, THUMBNAIL_ENTRY,
            oralib.pixbuf.save_to_bytes(thumbnail),
        )
    return thumbnail


## Module testing


def _test():
    """Run doctest strings"""
    import doctest
    doctest.testmod(optionflags=doctest.ELLIPSIS)


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)
    _test()
