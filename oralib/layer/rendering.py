# This file is part of oralib.
# Copyright (C) 2026 by the oralib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Flattening layer stacks into a single image.

Compositing is done in floating point on straight (non-premultiplied)
RGBA, using the separable blend-mode formulation of the W3C
"Compositing and Blending" spec: each mode is a function B(Cb, Cs) of
backdrop and source color, combined by source-over. The three "pdn:"
modes use Paint.NET's formulas. Xor is the Porter-Duff operator, and
has no blend function of its own.

"""

# Imports:

import logging

import numpy as np

import oralib.modes as modes

logger = logging.getLogger(__name__)


# Blend functions:

def _safe_divide(num, denom, fill):
    out = np.full_like(num, fill)
    np.divide(num, denom, out=out, where=(denom > 0))
    return out


def _blend_normal(cb, cs):
    return cs


def _blend_multiply(cb, cs):
    return cb * cs


def _blend_screen(cb, cs):
    return cb + cs - cb * cs


def _blend_overlay(cb, cs):
    # Hard light with the layers swapped
    return np.where(
        cb <= 0.5,
        _blend_multiply(cs, 2.0 * cb),
        _blend_screen(cs, 2.0 * cb - 1.0),
    )


def _blend_darken(cb, cs):
    return np.minimum(cb, cs)


def _blend_lighten(cb, cs):
    return np.maximum(cb, cs)


def _blend_color_dodge(cb, cs):
    dodged = np.minimum(1.0, _safe_divide(cb, 1.0 - cs, 1.0))
    return np.where(cb <= 0.0, 0.0, dodged)


def _blend_color_burn(cb, cs):
    burned = 1.0 - np.minimum(1.0, _safe_divide(1.0 - cb, cs, 1.0))
    return np.where(cb >= 1.0, 1.0, burned)


def _blend_difference(cb, cs):
    return np.abs(cb - cs)


def _blend_additive(cb, cs):
    return np.minimum(1.0, cb + cs)


def _blend_reflect(cb, cs):
    return np.minimum(1.0, _safe_divide(cb * cb, 1.0 - cs, 1.0))


def _blend_glow(cb, cs):
    return _blend_reflect(cs, cb)


def _blend_negation(cb, cs):
    return 1.0 - np.abs(1.0 - cb - cs)


BLEND_FUNCS = {
    modes.ADDITIVE: _blend_additive,
    modes.COLOR_BURN: _blend_color_burn,
    modes.COLOR_DODGE: _blend_color_dodge,
    modes.DARKEN: _blend_darken,
    modes.DIFFERENCE: _blend_difference,
    modes.GLOW: _blend_glow,
    modes.LIGHTEN: _blend_lighten,
    modes.MULTIPLY: _blend_multiply,
    modes.NEGATION: _blend_negation,
    modes.NORMAL: _blend_normal,
    modes.OVERLAY: _blend_overlay,
    modes.REFLECT: _blend_reflect,
    modes.SCREEN: _blend_screen,
}
for mode in modes.STANDARD_MODES:
    assert mode in BLEND_FUNCS or mode == modes.XOR


# Compositing:

def composite(backdrop, src, mode=modes.NORMAL, opacity=1.0):
    """Composite float RGBA source data over a backdrop, in place

    :param numpy.ndarray backdrop: (h, w, 4) float RGBA in [0, 1]
    :param numpy.ndarray src: (h, w, 4) float RGBA in [0, 1]
    :param int mode: layer mode
    :param float opacity: multiplier for the source's alpha

    >>> dst = np.zeros((1, 1, 4)); dst[...] = (1.0, 0.5, 0.0, 1.0)
    >>> src = np.zeros((1, 1, 4)); src[...] = (0.5, 0.5, 0.5, 1.0)
    >>> composite(dst, src, modes.MULTIPLY)
    >>> [round(float(c), 3) for c in dst[0, 0]]
    [0.5, 0.25, 0.0, 1.0]
    >>> composite(dst, src, modes.XOR)
    >>> [round(float(c), 3) for c in dst[0, 0]]
    [0.0, 0.0, 0.0, 0.0]

    """
    a_s = src[..., 3:4] * float(opacity)
    a_b = backdrop[..., 3:4]
    c_s = src[..., :3]
    c_b = backdrop[..., :3]
    if mode == modes.XOR:
        a_o = a_s * (1.0 - a_b) + a_b * (1.0 - a_s)
        co = c_s * a_s * (1.0 - a_b) + c_b * a_b * (1.0 - a_s)
    else:
        blend = BLEND_FUNCS.get(mode, _blend_normal)
        mixed = blend(c_b, c_s)
        a_o = a_s + a_b * (1.0 - a_s)
        co = (
            (1.0 - a_b) * a_s * c_s
            + (1.0 - a_s) * a_b * c_b
            + a_s * a_b * mixed
        )
    backdrop[..., :3] = _safe_divide(co, a_o, 0.0)
    backdrop[..., 3:4] = a_o


def flatten(layers, width, height):
    """Composite layers into a single straight RGBA image

    :param iterable layers: PaintingLayers, bottom first
    :param int width: canvas width
    :param int height: canvas height
    :returns: (height, width, 4) uint8 RGBA array

    Hidden layers are skipped. The result starts out fully transparent.

    """
    canvas = np.zeros((height, width, 4), dtype=np.float64)
    for layer in layers:
        if not layer.visible or layer.opacity == 0:
            continue
        logger.debug("Flattening %r (%s)", layer,
                     modes.MODE_STRINGS[layer.mode][0])
        src = layer.pixels.astype(np.float64) / 255.0
        composite(canvas, src, layer.mode, layer.opacity_fraction)
    out = np.clip(np.rint(canvas * 255.0), 0, 255)
    return out.astype(np.uint8)
