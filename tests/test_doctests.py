# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Runs the doctests embedded in oralib's modules"""

import doctest
import unittest

import oralib.document
import oralib.errors
import oralib.fileutils
import oralib.helpers
import oralib.layer.core
import oralib.layer.rendering
import oralib.modes
import oralib.pixbuf
import oralib.stackxml
import oralib.strokemap
import oralib.xml

MODULES = [
    oralib.document,
    oralib.errors,
    oralib.fileutils,
    oralib.helpers,
    oralib.layer.core,
    oralib.layer.rendering,
    oralib.modes,
    oralib.pixbuf,
    oralib.stackxml,
    oralib.strokemap,
    oralib.xml,
]


class Doctests (unittest.TestCase):

    def test_module_doctests(self):
        for module in MODULES:
            result = doctest.testmod(module, optionflags=doctest.ELLIPSIS)
            self.assertEqual(result.failed, 0, module.__name__)


if __name__ == "__main__":
    unittest.main()
