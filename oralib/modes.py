# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Layer mode constants, and their OpenRaster composite-op names

Each mode also has a translatable label and tooltip in `MODE_STRINGS`,
for applications which let users pick layer modes.

"""

import logging
from gettext import gettext as _

logger = logging.getLogger(__name__)


## Mode constants

ADDITIVE = 0
COLOR_BURN = 1
COLOR_DODGE = 2
DARKEN = 3
DIFFERENCE = 4
GLOW = 5
LIGHTEN = 6
MULTIPLY = 7
NEGATION = 8
NORMAL = 9
OVERLAY = 10
REFLECT = 11
SCREEN = 12
XOR = 13

#: Valid modes for all layers
STANDARD_MODES = tuple(range(14))

#: The default layer combine mode
DEFAULT_MODE = NORMAL

#: Composite-op name written when a mode has no entry in the table
DEFAULT_ORA_OPNAME = "svg:src-over"


#: UI strings (label, tooltip) for the layer modes
MODE_STRINGS = {
    ADDITIVE: (
        _("Additive"),
        _("This layer and its backdrop are simply added together.")),
    COLOR_BURN: (
        _("Color Burn"),
        _("Darkens the backdrop using the top layer.")),
    COLOR_DODGE: (
        _("Color Dodge"),
        _("Brightens the backdrop using the top layer.")),
    DARKEN: (
        _("Darken"),
        _("The top layer is used where it is darker than "
          "the backdrop.")),
    DIFFERENCE: (
        _("Difference"),
        _("Subtracts the darker color from the lighter of the two.")),
    GLOW: (
        _("Glow"),
        _("Lightens the top layer by the square of the backdrop. "
          "This is the inverse of 'Reflect'.")),
    LIGHTEN: (
        _("Lighten"),
        _("The top layer is used where it is lighter than "
          "the backdrop.")),
    MULTIPLY: (
        _("Multiply"),
        _("Similar to loading two slides into a projector and "
          "projecting the combined result.")),
    NEGATION: (
        _("Negation"),
        _("Like 'Difference', but the brightest result is where "
          "the two colors sum to white.")),
    NORMAL: (
        _("Normal"),
        _("The top layer only, without blending colors.")),
    OVERLAY: (
        _("Overlay"),
        _("Overlays the backdrop with the top layer, preserving the "
          "backdrop's highlights and shadows.")),
    REFLECT: (
        _("Reflect"),
        _("Lightens the backdrop by the square of the top layer.")),
    SCREEN: (
        _("Screen"),
        _("Like shining two separate slide projectors onto a screen "
          "simultaneously. This is the inverse of 'Multiply'.")),
    XOR: (
        _("Xor"),
        _("Only the parts of this layer and its backdrop which do "
          "not overlap are kept.")),
}
for mode in STANDARD_MODES:
    assert mode in MODE_STRINGS


#: Layer combine mode to composite-op name lookup used when saving
ORA_OPNAMES_BY_MODE = {
    ADDITIVE: "svg:plus",
    COLOR_BURN: "svg:color-burn",
    COLOR_DODGE: "svg:color-dodge",
    DARKEN: "svg:darken",
    DIFFERENCE: "svg:difference",
    GLOW: "pdn:glow",
    LIGHTEN: "svg:lighten",
    MULTIPLY: "svg:multiply",
    NEGATION: "pdn:negation",
    NORMAL: "svg:src-over",
    OVERLAY: "svg:overlay",
    REFLECT: "pdn:reflect",
    SCREEN: "svg:screen",
    XOR: "svg:xor",
}


#: Name to layer combine mode lookup used when loading OpenRaster
ORA_MODES_BY_OPNAME = {
    opname: mode
    for mode, opname in ORA_OPNAMES_BY_MODE.items()
}


## Composite-op resolution

_LEGACY_PREFIX = "pdn-"
_PDN_PREFIX = "pdn:"


def _lookup_exact(opname):
    return ORA_MODES_BY_OPNAME.get(opname)


def _lookup_as_pdn_op(opname):
    parts = opname.split(":")
    if len(parts) < 2:
        return None
    return ORA_MODES_BY_OPNAME.get(_PDN_PREFIX + parts[1])


#: Strategies tried in order when resolving a composite-op name.
#: Each returns a mode, or None to pass on to the next one.
_OPNAME_STRATEGIES = (
    _lookup_exact,
    _lookup_as_pdn_op,
)


def mode_from_ora_opname(opname):
    """Resolve a composite-op attribute value to a layer mode

    :param str opname: value of a composite-op attribute
    :returns: a mode from STANDARD_MODES; never raises

    >>> mode_from_ora_opname("svg:multiply") == MULTIPLY
    True
    >>> mode_from_ora_opname("pdn-glow") == GLOW
    True
    >>> mode_from_ora_opname("krita:reflect") == REFLECT
    True
    >>> mode_from_ora_opname("svg:hard-light") == NORMAL
    True
    >>> mode_from_ora_opname("nonsense") == NORMAL
    True

    """
    opname = str(opname)
    if opname.startswith(_LEGACY_PREFIX):
        opname = _PDN_PREFIX + opname[len(_LEGACY_PREFIX):]
    for strategy in _OPNAME_STRATEGIES:
        mode = strategy(opname)
        if mode is not None:
            return mode
    logger.warning("Unknown composite-op %r, using normal mode", opname)
    return DEFAULT_MODE


def ora_opname_for_mode(mode):
    """Get the composite-op name to save for a layer mode

    >>> ora_opname_for_mode(SCREEN)
    'svg:screen'
    >>> ora_opname_for_mode(-1)
    'svg:src-over'

    """
    return ORA_OPNAMES_BY_MODE.get(mode, DEFAULT_ORA_OPNAME)


## Module testing


def _test():
    import doctest
    doctest.testmod()


if __name__ == "__main__":
    _test()
