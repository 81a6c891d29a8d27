# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Error classes which may be raised while loading or saving"""


class FileHandlingError (Exception):
    """Simple problem loading or saving files; user-facing string

    Covers expected things like missing archive entries, malformed
    stack descriptions, unsupported formats etc.

    The stringification of a FileHandlingError should always be
    presentable to the user directly. It may contain diagnostic
    information such as the archive entry or attribute involved.

    In general, if one of these is raised as a response to another
    exception, chain it with ``raise ... from err`` so that the
    programmer-focussed details stay available in tracebacks.

    """


class FormatError (FileHandlingError):
    """The data being loaded is not valid OpenRaster"""


class ContainerIntegrityError (FormatError):
    """The archive itself is unusable as an OpenRaster container.

    Raised for archives which are not ZIP files at all, which lack a
    correct ``mimetype`` entry or a ``stack.xml``, or whose stack
    contains no layers.

    """


class MalformedDataError (FormatError):
    """Some data inside an otherwise usable container is broken.

    :ivar entry: archive entry name involved, if known
    :ivar attribute: stack.xml attribute name involved, if known

    >>> err = MalformedDataError("bad x", entry="stack.xml", attribute="x")
    >>> str(err)
    'bad x'
    >>> (err.entry, err.attribute)
    ('stack.xml', 'x')

    """

    def __init__(self, msg, entry=None, attribute=None):
        super(MalformedDataError, self).__init__(msg)
        self.entry = entry
        self.attribute = attribute


class UnsupportedResolutionUnit (FileHandlingError, ValueError):
    """The document's resolution unit cannot be written to stack.xml"""
