# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Tests for painting layers"""

import io
import unittest
import zipfile

import numpy as np
from PIL import Image

import oralib.modes as modes
import oralib.pixbuf
import oralib.stackxml as stackxml
import oralib.strokemap as strokemap
from oralib.errors import MalformedDataError
from oralib.layer import PaintingLayer

from .orafiles import make_orazip
from .orafiles import solid_png


class Properties (unittest.TestCase):

    def test_new_layer_is_transparent(self):
        layer = PaintingLayer(5, 3)
        self.assertEqual(layer.pixels.shape, (3, 5, 4))
        self.assertFalse(layer.pixels.any())
        self.assertTrue(layer.is_empty())
        self.assertEqual(layer.name, PaintingLayer.DEFAULT_NAME)

    def test_size_must_be_positive(self):
        with self.assertRaises(ValueError):
            PaintingLayer(0, 3)

    def test_pixels_are_copied_and_checked(self):
        src = np.full((3, 5, 4), 7, dtype=np.uint8)
        layer = PaintingLayer(5, 3, pixels=src)
        src[...] = 0
        self.assertEqual(int(layer.pixels[0, 0, 0]), 7)
        with self.assertRaises(ValueError):
            layer.pixels = np.zeros((5, 3, 4), dtype=np.uint8)

    def test_opacity_fraction(self):
        layer = PaintingLayer(1, 1)
        layer.opacity_fraction = 0.5
        self.assertEqual(layer.opacity, 128)
        layer.opacity = -20
        self.assertEqual(layer.opacity_fraction, 0.0)

    def test_unknown_mode_becomes_normal(self):
        layer = PaintingLayer(1, 1, mode=modes.SCREEN)
        self.assertEqual(layer.mode, modes.SCREEN)
        layer.mode = 1234
        self.assertEqual(layer.mode, modes.NORMAL)

    def test_identity(self):
        a = PaintingLayer(1, 1, name="same")
        b = PaintingLayer(1, 1, name="same")
        self.assertNotEqual(a, b)
        self.assertEqual(len({a, b}), 2)

    def test_bbox(self):
        layer = PaintingLayer(20, 10)
        layer.pixels[2:4, 6:9] = (1, 2, 3, 4)
        self.assertEqual(tuple(layer.get_bbox()), (6, 2, 3, 2))


class Placement (unittest.TestCase):

    def test_partly_outside_is_clipped(self):
        layer = PaintingLayer(4, 4)
        img = np.zeros((3, 3, 4), dtype=np.uint8)
        img[...] = (9, 9, 9, 255)
        img[2, 2] = (1, 2, 3, 255)
        layer.load_surface_from_pixbuf(img, -2, -2)
        self.assertEqual(tuple(layer.pixels[0, 0]), (1, 2, 3, 255))
        self.assertEqual(int(layer.pixels[..., 3].sum()), 255)

    def test_entirely_outside(self):
        layer = PaintingLayer(4, 4)
        layer.pixels[...] = 255
        img = np.full((2, 2, 4), 255, dtype=np.uint8)
        layer.load_surface_from_pixbuf(img, 10, 0)
        self.assertTrue(layer.is_empty())


class SaveAndLoad (unittest.TestCase):

    def _save(self, layer, index=0, tile_written=False):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as z:
            descriptor = layer.save_to_openraster(
                z, index, tile_written=tile_written,
            )
        buf.seek(0)
        return descriptor, zipfile.ZipFile(buf)

    def test_saved_png_is_cropped(self):
        layer = PaintingLayer(32, 16, name="Dot", opacity=64,
                              visible=False, mode=modes.DARKEN)
        layer.pixels[5:7, 10:13] = (200, 100, 50, 255)
        descriptor, orazip = self._save(layer, index=2)
        with orazip:
            self.assertEqual((descriptor.x, descriptor.y), (10, 5))
            self.assertEqual(descriptor.src, "data/layer2.png")
            self.assertEqual(descriptor.name, "Dot")
            self.assertEqual(descriptor.opacity, 64)
            self.assertFalse(descriptor.visible)
            self.assertEqual(descriptor.mode, modes.DARKEN)
            png = oralib.pixbuf.load_from_zipfile(orazip, descriptor.src)
        self.assertEqual(png.shape, (2, 3, 4))

        loaded = PaintingLayer(32, 16)
        loaded.load_surface_from_pixbuf(png, descriptor.x, descriptor.y)
        np.testing.assert_array_equal(loaded.pixels, layer.pixels)

    def test_empty_layer_saves_full_canvas(self):
        descriptor, orazip = self._save(PaintingLayer(7, 3))
        with orazip:
            png = oralib.pixbuf.load_from_zipfile(orazip, descriptor.src)
        self.assertEqual((descriptor.x, descriptor.y), (0, 0))
        self.assertEqual(png.shape, (3, 7, 4))

    def test_side_data_is_written(self):
        layer = PaintingLayer(
            4, 4,
            background_tile=b"tile",
            strokemap=strokemap.StrokeMap(b"strokes",
                                          strokemap.STROKEMAP_V1_ATTR),
        )
        descriptor, orazip = self._save(layer, index=1)
        with orazip:
            self.assertEqual(descriptor.background_tile,
                             stackxml.BACKGROUND_TILE_PATH)
            self.assertEqual(orazip.read(descriptor.background_tile),
                             b"tile")
            self.assertEqual(descriptor.strokemap,
                             "data/layer1_strokemap.dat")
            self.assertEqual(descriptor.strokemap_version,
                             strokemap.STROKEMAP_V1_ATTR)
            self.assertEqual(orazip.read(descriptor.strokemap), b"strokes")

    def test_empty_strokemap_is_skipped(self):
        layer = PaintingLayer(4, 4, strokemap=strokemap.StrokeMap(b""))
        descriptor, orazip = self._save(layer)
        with orazip:
            self.assertIsNone(descriptor.strokemap)
            self.assertIsNone(descriptor.strokemap_version)
            self.assertEqual(orazip.namelist(), ["data/layer0.png"])

    def test_second_tile_is_not_written_again(self):
        layer = PaintingLayer(4, 4, background_tile=b"tile")
        descriptor, orazip = self._save(layer, tile_written=True)
        with orazip:
            self.assertEqual(descriptor.background_tile,
                             stackxml.BACKGROUND_TILE_PATH)
            self.assertNotIn(stackxml.BACKGROUND_TILE_PATH,
                             orazip.namelist())

    def test_load_from_descriptor(self):
        orazip = zipfile.ZipFile(make_orazip([
            ("data/a.png", solid_png(2, 2, (0, 255, 0, 255))),
            ("data/tile.png", b"tile"),
            ("data/a.dat", b"strokes"),
        ]))
        descriptor = stackxml.LayerDescriptor(
            x=1, y=2, name="Green", opacity=77, visible=False,
            mode=modes.OVERLAY, src="data/a.png",
            background_tile="data/tile.png",
            strokemap="data/a.dat",
            strokemap_version=strokemap.STROKEMAP_V2_ATTR,
            index=0, is_background=True,
        )
        with orazip:
            layer = PaintingLayer.new_from_openraster(orazip, descriptor, 4, 5)
        self.assertEqual(layer.name, "Green")
        self.assertEqual(layer.opacity, 77)
        self.assertFalse(layer.visible)
        self.assertEqual(layer.mode, modes.OVERLAY)
        self.assertTrue(layer.is_background)
        self.assertEqual(layer.background_tile, b"tile")
        self.assertEqual(layer.strokemap,
                         strokemap.StrokeMap(b"strokes",
                                             strokemap.STROKEMAP_V2_ATTR))
        self.assertEqual(tuple(layer.get_bbox()), (1, 2, 2, 2))

    def test_missing_entries(self):
        orazip = zipfile.ZipFile(make_orazip([
            ("data/a.png", solid_png(1, 1)),
        ]))
        good = stackxml.LayerDescriptor(0, 0, "x", 255, True,
                                        modes.NORMAL, "data/a.png")
        with orazip:
            for bad in (good._replace(src="data/nope.png"),
                        good._replace(background_tile="data/nope.png"),
                        good._replace(strokemap="data/nope.dat",
                                      strokemap_version="mypaint_strokemap")):
                with self.assertRaises(MalformedDataError) as cm:
                    PaintingLayer.new_from_openraster(orazip, bad, 2, 2)
                self.assertTrue(cm.exception.entry.startswith("data/nope"))

    def test_undecodable_png(self):
        orazip = zipfile.ZipFile(make_orazip([("data/a.png", b"junk")]))
        descriptor = stackxml.LayerDescriptor(0, 0, "x", 255, True,
                                              modes.NORMAL, "data/a.png")
        with orazip:
            with self.assertRaises(MalformedDataError):
                PaintingLayer.new_from_openraster(orazip, descriptor, 2, 2)

    def test_oversized_png(self):
        orazip = zipfile.ZipFile(make_orazip([
            ("data/big.png", solid_png(4, 4)),
        ]))
        descriptor = stackxml.LayerDescriptor(0, 0, "x", 255, True,
                                              modes.NORMAL, "data/big.png")
        old_limit = Image.MAX_IMAGE_PIXELS
        Image.MAX_IMAGE_PIXELS = 4
        try:
            with orazip:
                with self.assertRaises(MalformedDataError) as cm:
                    PaintingLayer.new_from_openraster(
                        orazip, descriptor, 4, 4,
                    )
        finally:
            Image.MAX_IMAGE_PIXELS = old_limit
        self.assertEqual(cm.exception.entry, "data/big.png")


if __name__ == "__main__":
    unittest.main()
