# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Tests for saving via temporary files"""

import io
import os
import shutil
import tempfile
import unittest

import oralib.fileutils as fileutils


class _Saver (object):

    def __init__(self, data=b"new", fail=False):
        self.data = data
        self.fail = fail
        self.paths = []

    @fileutils.via_tempfile
    def save(self, filename):
        self.paths.append(filename)
        if fileutils.is_path(filename):
            with open(filename, "wb") as fp:
                fp.write(self.data)
        else:
            filename.write(self.data)
        if self.fail:
            raise RuntimeError("save failed")
        return len(self.data)


class ViaTempfile (unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.target = os.path.join(self.tmpdir, "picture.ora")
        with open(self.target, "wb") as fp:
            fp.write(b"old")

    def tearDown(self):
        shutil.rmtree(self.tmpdir)
        fileutils.VIA_TEMPFILE_MAKES_BACKUP_COPY = False

    def _read(self, path):
        with open(path, "rb") as fp:
            return fp.read()

    def test_file_objects_pass_through(self):
        saver = _Saver()
        buf = io.BytesIO()
        self.assertEqual(saver.save(buf), 3)
        self.assertIs(saver.paths[0], buf)
        self.assertEqual(buf.getvalue(), b"new")

    def test_replaces_target(self):
        saver = _Saver()
        self.assertEqual(saver.save(self.target), 3)
        self.assertEqual(saver.paths[0],
                         fileutils.temp_path_for(os.path.realpath(self.target)))
        self.assertEqual(self._read(self.target), b"new")
        self.assertEqual(os.listdir(self.tmpdir), ["picture.ora"])

    def test_failure_keeps_target(self):
        saver = _Saver(fail=True)
        with self.assertRaises(RuntimeError):
            saver.save(self.target)
        self.assertEqual(self._read(self.target), b"old")
        self.assertEqual(os.listdir(self.tmpdir), ["picture.ora"])

    def test_backup_copy(self):
        fileutils.VIA_TEMPFILE_MAKES_BACKUP_COPY = True
        _Saver().save(self.target)
        self.assertEqual(self._read(self.target), b"new")
        self.assertEqual(self._read(self.target + "~"), b"old")


if __name__ == "__main__":
    unittest.main()
