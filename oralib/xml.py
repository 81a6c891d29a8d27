# This file is part of oralib.
# -*- coding: utf-8 -*-
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Helpers, and constants for the OpenRaster XML dialect."""

## Imports

import math
import re

from oralib.errors import MalformedDataError


## Consts for XML dialects

OPENRASTER_MEDIA_TYPE = "image/openraster"
OPENRASTER_VERSION = u"0.0.3"

#: Plain ASCII decimal numbers, as written by every known producer
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_REAL_RE = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)


## Helper functions

def indent_etree(elem, level=0):
    """Indent an XML etree.

    This does not seem to come with python?
    Source: http://effbot.org/zone/element-lib.htm#prettyprint

    """
    i = "\n" + level*"  "
    if len(elem):
        if not elem.text or not elem.text.strip():
            elem.text = i + "  "
        if not elem.tail or not elem.tail.strip():
            elem.tail = i
        for elem in elem:
            indent_etree(elem, level+1)
        if not elem.tail or not elem.tail.strip():
            elem.tail = i
    else:
        if level and (not elem.tail or not elem.tail.strip()):
            elem.tail = i


def get_attribute(elem, name, default):
    """Get an attribute's value, with a fallback for missing or empty ones

    >>> import xml.etree.ElementTree as ET
    >>> elem = ET.fromstring('<layer name="" x="12"/>')
    >>> get_attribute(elem, "x", "0")
    '12'
    >>> get_attribute(elem, "y", "0")
    '0'
    >>> get_attribute(elem, "name", "Layer 1")
    'Layer 1'

    An empty string is never returned unless it is the default.

    """
    value = elem.attrib.get(name)
    if not value:
        return default
    return value


def get_int_attribute(elem, name, default):
    """Get an attribute as an int, raising on malformed values

    >>> import xml.etree.ElementTree as ET
    >>> elem = ET.fromstring('<layer x="-3" y="two"/>')
    >>> get_int_attribute(elem, "x", "0")
    -3
    >>> get_int_attribute(elem, "w", "0")
    0
    >>> get_int_attribute(elem, "y", "0")
    Traceback (most recent call last):
    ...
    oralib.errors.MalformedDataError: <layer> attribute 'y' is not an integer: 'two'

    Digit separators and non-ASCII digits are not accepted.

    >>> get_int_attribute(ET.fromstring('<layer x="1_0"/>'), "x", "0")
    Traceback (most recent call last):
    ...
    oralib.errors.MalformedDataError: <layer> attribute 'x' is not an integer: '1_0'

    """
    value = get_attribute(elem, name, default)
    if not isinstance(value, str) or not _INTEGER_RE.fullmatch(value):
        raise MalformedDataError(
            "<%s> attribute %r is not an integer: %r"
            % (elem.tag, name, value),
            attribute=name,
        )
    return int(value)


def get_float_attribute(elem, name, default):
    """Get an attribute as a finite float, raising on malformed values

    >>> import xml.etree.ElementTree as ET
    >>> elem = ET.fromstring('<image xres="300.5" yres="nan"/>')
    >>> get_float_attribute(elem, "xres", "72")
    300.5
    >>> get_float_attribute(elem, "zres", "72")
    72.0
    >>> get_float_attribute(elem, "yres", "72")
    Traceback (most recent call last):
    ...
    oralib.errors.MalformedDataError: <image> attribute 'yres' is not a number: 'nan'

    """
    value = get_attribute(elem, name, default)
    if not isinstance(value, str) or not _REAL_RE.fullmatch(value):
        raise MalformedDataError(
            "<%s> attribute %r is not a number: %r"
            % (elem.tag, name, value),
            attribute=name,
        )
    number = float(value)
    if not math.isfinite(number):
        raise MalformedDataError(
            "<%s> attribute %r is not a number: %r"
            % (elem.tag, name, value),
            attribute=name,
        )
    return number


def format_real(value):
    """Formats a real number for an XML attribute, invariantly

    >>> format_real(72.0)
    '72'
    >>> format_real(299.9994)
    '299.9994'
    >>> format_real(96)
    '96'

    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


## Module testing


def _test():
    import doctest
    doctest.testmod()


if __name__ == "__main__":
    _test()
