"""Inject resolved captions into a map document's group tree.

Leaf layer entries are rewritten in place. The entry dict keeps its identity;
only its keys are replaced, so callers holding a reference see the result.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Any

from loguru import logger

from mapcaptions.meta import LayerMeta

ANCHOR_KEY = "infobox"


def _place_caption(entry: dict, meta: LayerMeta) -> None:
    if meta.has_caption:
        entry["caption"] = meta.caption
    if isinstance(meta.sublayer_captions, list):
        entry["layers"] = meta.sublayer_captions


def apply_meta(layer: dict, meta: LayerMeta) -> None:
    """Rewrite one leaf entry so it carries the caption from ``meta``.

    The leaf's own ``caption`` is discarded. The new caption (and sublayer
    caption list, if any) goes directly after the ``infobox`` key, or at the
    end when the leaf has no ``infobox``. Every other key keeps its position.
    """
    has_anchor = ANCHOR_KEY in layer
    rebuilt: dict = {}
    for key, value in layer.items():
        if key == "caption":
            continue
        # Assigning an existing key keeps its original position
        rebuilt[key] = value
        if key == ANCHOR_KEY:
            _place_caption(rebuilt, meta)
    if not has_anchor:
        _place_caption(rebuilt, meta)

    layer.clear()
    layer.update(rebuilt)


def inject_into_group(group: Any, meta_by_id: Mapping[Any, LayerMeta]) -> int:
    """Annotate ``group`` and all of its subgroups in place.

    Args:
        group: A group node (dict with optional ``layers`` and ``groups``).
        meta_by_id: Mapping produced by the indexer.

    Returns:
        Number of leaf entries rewritten.
    """
    if not isinstance(group, dict):
        return 0

    count = 0
    layers = group.get("layers")
    if isinstance(layers, list):
        for layer in layers:
            if not isinstance(layer, dict):
                continue
            layer_id = layer.get("id")
            if not layer_id or not isinstance(layer_id, Hashable):
                continue
            meta = meta_by_id.get(layer_id)
            if meta is None:
                continue
            apply_meta(layer, meta)
            count += 1

    subgroups = group.get("groups")
    if isinstance(subgroups, list):
        for subgroup in subgroups:
            count += inject_into_group(subgroup, meta_by_id)
    return count


def inject_into_groups(groups: list, meta_by_id: Mapping[Any, LayerMeta]) -> int:
    """Annotate every root group in order."""
    count = 0
    for group in groups:
        count += inject_into_group(group, meta_by_id)
    logger.debug(f"Annotated {count} layer entries across {len(groups)} root groups")
    return count
