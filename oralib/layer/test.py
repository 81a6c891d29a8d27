# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


def make_test_document(width=64, height=48):
    """Makes a simple test Document (3 layers with sparse content)

    :return: The document, and its layers bottom-first.
    :rtype: tuple

    The bottom layer is filled with an opaque color, the middle one has
    a small opaque square, and the top one is empty and hidden.

    """
    import oralib.document
    import oralib.modes
    doc = oralib.document.Document(width, height)
    paper = doc.add_layer(name="Paper")
    paper.pixels[...] = (250, 245, 230, 255)
    ink = doc.add_layer(name="Ink")
    ink.pixels[10:20, 5:15] = (10, 20, 30, 255)
    ink.pixels[12, 30] = (200, 0, 0, 128)
    ink.opacity = 128
    ink.mode = oralib.modes.MULTIPLY
    notes = doc.add_layer(name="Notes")
    notes.visible = False
    notes.mode = oralib.modes.SCREEN
    return (doc, [paper, ink, notes])
