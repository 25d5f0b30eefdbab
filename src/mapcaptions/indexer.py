"""Build the layer id -> LayerMeta lookup from a layers document.

The four category lists (``wmslayers``, ``wfslayers``, ``vectorlayers``,
``wfstlayers``) are folded into one mapping. WFS, vector and WFS-T entries are
only inserted from inside the WMS loop, so an empty WMS list yields an empty
mapping whatever the other categories contain.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

from loguru import logger

from mapcaptions.meta import MISSING, IdIndex, LayerMeta

CATEGORY_KEYS = ("wmslayers", "wfslayers", "vectorlayers", "wfstlayers")


def _records(value: Any) -> list:
    if isinstance(value, list):
        return value
    return []


def _is_record(value: Any) -> bool:
    """A record is a JSON object with a hashable ``id`` key."""
    return isinstance(value, dict) and "id" in value and isinstance(value["id"], Hashable)


def _sublayer_captions(record: dict) -> list[str] | None:
    sub_ids = record.get("layers")
    infos = record.get("layersInfo")
    if not isinstance(sub_ids, list) or len(sub_ids) < 2 or not isinstance(infos, list):
        return None

    info_by_id = IdIndex()
    for info in infos:
        if _is_record(info):
            info_by_id[info["id"]] = info

    captions = []
    for sub_id in sub_ids:
        if not isinstance(sub_id, Hashable):
            continue
        info = info_by_id.get(sub_id)
        if info is None:
            continue
        caption = info.get("caption")
        # Blank captions are dropped, not kept as placeholders
        if isinstance(caption, str) and caption.strip() != "":
            captions.append(caption)

    return captions or None


def build_layer_meta_map(
    wmslayers: Any = None,
    wfslayers: Any = None,
    vectorlayers: Any = None,
    wfstlayers: Any = None,
) -> IdIndex:
    """Build the id -> LayerMeta mapping.

    Args:
        wmslayers: WMS layer records.
        wfslayers: WFS layer records.
        vectorlayers: Vector layer records.
        wfstlayers: WFS-T layer records.

    Returns:
        Mapping from layer id to LayerMeta. Later insertions win; a WMS entry
        always overwrites a same-id entry from the other categories.
    """
    others = [
        *_records(wfslayers),
        *_records(vectorlayers),
        *_records(wfstlayers),
    ]

    meta_by_id = IdIndex()
    for wms in _records(wmslayers):
        if not _is_record(wms):
            continue

        meta = LayerMeta(
            caption=wms.get("caption", MISSING),
            sublayer_captions=_sublayer_captions(wms),
        )

        for record in others:
            if _is_record(record):
                meta_by_id[record["id"]] = LayerMeta(caption=record.get("caption", MISSING))

        meta_by_id[wms["id"]] = meta

    logger.debug(f"Indexed {len(meta_by_id)} layer ids")
    return meta_by_id


def build_from_document(document: dict) -> IdIndex:
    """Build the mapping from a parsed layers document."""
    return build_layer_meta_map(*(document.get(key) for key in CATEGORY_KEYS))
