"""Inject layer captions into map group trees and render them as text.

The layers document is indexed into id -> caption metadata, the map
document's groups are annotated in place, and the annotated tree is
rendered as a directory-style listing.
"""

from mapcaptions.annotator import apply_meta, inject_into_group, inject_into_groups
from mapcaptions.indexer import build_from_document, build_layer_meta_map
from mapcaptions.meta import MISSING, IdIndex, LayerMeta
from mapcaptions.pipeline import process_batch, process_one
from mapcaptions.renderer import build_tree_lines

__all__ = [
    "IdIndex",
    "LayerMeta",
    "MISSING",
    "apply_meta",
    "build_from_document",
    "build_layer_meta_map",
    "build_tree_lines",
    "inject_into_group",
    "inject_into_groups",
    "process_batch",
    "process_one",
]
