# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Project meta-information.

oralib uses `Semantic Versioning`_ for its version strings.

    ``MAJOR.MINOR.PATCH[-PREREL][+BUILD]``

.. _Semantic Versioning: http://semver.org/

"""

#: Base version string. Keep in step with setup.py.
ORALIB_VERSION = "1.0.0"
