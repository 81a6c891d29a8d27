# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Tests for small helper functions"""

import io
import unittest
import zipfile

import numpy as np

import oralib.helpers as helpers


class Bounds (unittest.TestCase):

    def test_empty_layer_uses_whole_canvas(self):
        px = np.zeros((48, 64, 4), dtype=np.uint8)
        self.assertEqual(helpers.get_opaque_bbox(px),
                         helpers.Rect(0, 0, 64, 48))

    def test_single_pixel(self):
        px = np.zeros((48, 64, 4), dtype=np.uint8)
        px[47, 63, 3] = 1
        self.assertEqual(helpers.get_opaque_bbox(px),
                         helpers.Rect(63, 47, 1, 1))

    def test_color_without_alpha_is_ignored(self):
        px = np.zeros((10, 10, 4), dtype=np.uint8)
        px[2, 2] = (255, 255, 255, 0)
        px[5, 6] = (0, 0, 0, 10)
        self.assertEqual(helpers.get_opaque_bbox(px),
                         helpers.Rect(6, 5, 1, 1))

    def test_intersection(self):
        canvas = helpers.Rect(0, 0, 10, 10)
        self.assertEqual(
            canvas.intersection(helpers.Rect(-2, 8, 4, 4)),
            helpers.Rect(0, 8, 2, 2),
        )
        self.assertIsNone(canvas.intersection(helpers.Rect(-4, 0, 4, 4)))


class Thumbnails (unittest.TestCase):

    def test_small_images_are_not_scaled(self):
        self.assertEqual(helpers.thumbnail_size(64, 48), (64, 48))

    def test_longest_side_fits(self):
        self.assertEqual(helpers.thumbnail_size(600, 300), (256, 128))
        self.assertEqual(helpers.thumbnail_size(300, 600), (128, 256))
        self.assertEqual(helpers.thumbnail_size(512, 512), (256, 256))

    def test_custom_limit(self):
        self.assertEqual(helpers.thumbnail_size(400, 100, 100), (100, 25))

    def test_never_zero(self):
        self.assertEqual(helpers.thumbnail_size(1, 5000), (1, 256))


class ZipEntries (unittest.TestCase):

    def test_writestr_metadata(self):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as z:
            helpers.zipfile_writestr(z, "a.txt", b"hello")
            helpers.zipfile_writestr(z, "b.txt", b"world",
                                     compress_type=zipfile.ZIP_STORED)
        with zipfile.ZipFile(buf) as z:
            a, b = z.infolist()
            self.assertEqual(a.date_time, helpers.ZIP_ENTRY_DATE_TIME)
            self.assertEqual((a.external_attr >> 16) & 0o777, 0o644)
            self.assertEqual(a.compress_type, zipfile.ZIP_DEFLATED)
            self.assertEqual(b.compress_type, zipfile.ZIP_STORED)
            self.assertEqual(z.read("b.txt"), b"world")


if __name__ == "__main__":
    unittest.main()
