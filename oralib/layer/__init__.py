# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Layers holding pixel data, and how to flatten them.

Documents own an ordered list of `PaintingLayer`s, bottom first.
Every layer is the same size as its document.
Flattening the list into a single image is done by
`oralib.layer.rendering.flatten()`.

"""

from .core import *
from .rendering import flatten
