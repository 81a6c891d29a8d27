# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Reading and writing OpenRaster (.ora) layered images"""

from oralib.meta import ORALIB_VERSION as __version__
