"""Render an annotated group tree as directory-style text lines.

    ├── Base maps/
    │   ├── Orthophoto
    │   └── Topo
    │       ├── Roads
    │       └── Rivers
    └── Overlays/
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
SPACE_PREFIX = "    "

UNNAMED_GROUP = "(unnamed group)"
UNNAMED_LAYER = "(unnamed layer)"


def _number_string(value: float) -> str:
    """Format a number with the shortest round-trip digits, exponent past 1e21."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    parts = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in parts.digits)
    k = len(digits)
    n = parts.exponent + k  # decimal point position relative to digits
    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        exponent = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"
    return sign + text


def display_string(value: Any) -> str:
    """Stringify a decoded JSON value the way a JSON-native script would.

    Numbers use the shortest round-trip digits (``7.0`` is ``7``, ``1e-7``
    stays ``1e-7``, ``1e21`` is ``1e+21``), booleans are lower case, arrays are
    comma-joined and objects collapse to ``[object Object]``.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int) and abs(value) < 10**21:
        return str(value)
    if isinstance(value, int) and abs(value) >= 2**1024:
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, (int, float)):
        return _number_string(float(value))
    if isinstance(value, list):
        return ",".join("" if item is None else display_string(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def _fallback(node: dict, default: str) -> str:
    node_id = node.get("id")
    return display_string(default if node_id is None else node_id)


def group_label(group: Any) -> str:
    node = group if isinstance(group, dict) else {}
    name = node.get("name")
    if isinstance(name, str):
        return name
    return _fallback(node, UNNAMED_GROUP)


def layer_label(layer: Any) -> str:
    node = layer if isinstance(layer, dict) else {}
    caption = node.get("caption")
    if isinstance(caption, str) and caption:
        return caption
    return _fallback(node, UNNAMED_LAYER)


def _connector(is_last: bool) -> str:
    return LAST_BRANCH if is_last else BRANCH


def _child_prefix(prefix: str, is_last: bool) -> str:
    return prefix + (SPACE_PREFIX if is_last else PIPE_PREFIX)


def _sublayer_lines(layer: Any, label: str, prefix: str) -> list[str]:
    sublayers = layer.get("layers") if isinstance(layer, dict) else None
    if not isinstance(sublayers, list) or not sublayers:
        return []

    kept = []
    for sub in sublayers:
        text = display_string(sub).strip()
        if text and text != label:
            kept.append(sub)

    return [
        f"{prefix}{_connector(i == len(kept) - 1)}{display_string(sub)}"
        for i, sub in enumerate(kept)
    ]


def _group_lines(group: Any, prefix: str, is_last: bool, lines: list[str]) -> None:
    lines.append(f"{prefix}{_connector(is_last)}{group_label(group)}/")

    node = group if isinstance(group, dict) else {}
    inner = _child_prefix(prefix, is_last)
    layers = node.get("layers")
    subgroups = node.get("groups")
    if not isinstance(subgroups, list):
        subgroups = []

    if isinstance(layers, list):
        for i, layer in enumerate(layers):
            # A leaf only closes the branch when no subgroups follow it
            last_layer = i == len(layers) - 1 and not subgroups
            label = layer_label(layer)
            lines.append(f"{inner}{_connector(last_layer)}{label}")
            lines.extend(_sublayer_lines(layer, label, _child_prefix(inner, last_layer)))

    for i, subgroup in enumerate(subgroups):
        _group_lines(subgroup, inner, i == len(subgroups) - 1, lines)


def build_tree_lines(groups: list) -> list[str]:
    """Render root groups (already annotated) into tree lines.

    Args:
        groups: Ordered root group nodes.

    Returns:
        One string per rendered node, without trailing newlines.
    """
    lines: list[str] = []
    for i, group in enumerate(groups):
        _group_lines(group, "", i == len(groups) - 1, lines)
    return lines
