"""File-level pipeline: read both documents, annotate, write JSON and tree.

Each (map, layers) pair is processed to completion before the next one
starts. Read and parse failures abort the run; only the auxiliary tree file
is allowed to fail with a warning.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from loguru import logger

from mapcaptions.annotator import inject_into_groups
from mapcaptions.config import Settings, settings as default_settings
from mapcaptions.errors import InputDocumentError
from mapcaptions.indexer import build_from_document
from mapcaptions.renderer import build_tree_lines

_JSON_EXT = re.compile(r"\.json$", re.IGNORECASE)


def _resolve(path: Path | str, cfg: Settings) -> Path:
    path = Path(path)
    if path.is_absolute():
        return path
    return cfg.work_dir / path


def load_document(path: Path | str) -> dict:
    """Read and parse a JSON document whose root must be an object.

    Raises:
        InputDocumentError: If the file is unreadable, malformed, or its root
            is not a JSON object.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputDocumentError(path, f"cannot read file ({exc.strerror or exc})") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputDocumentError(path, f"invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise InputDocumentError(path, f"expected a JSON object, got {type(data).__name__}")
    return data


def tree_path_for(out_path: Path | str, cfg: Settings | None = None) -> Path:
    """Tree listing path next to ``out_path``.

    A trailing ``.json`` is swapped for the tree suffix; any other name gets
    the suffix appended so the JSON output is never overwritten.
    """
    cfg = cfg or default_settings
    text = str(out_path)
    if _JSON_EXT.search(text):
        return Path(_JSON_EXT.sub(cfg.tree_suffix, text))
    return Path(text + cfg.tree_suffix)


def parse_pair(token: str) -> tuple[str, str] | None:
    """Split a ``map:layers`` batch token. Returns None if it is unusable."""
    if ":" not in token:
        return None
    parts = token.split(":")
    map_path, layers_path = parts[0], parts[1]
    if not map_path or not layers_path:
        return None
    return map_path, layers_path


def batch_output_path(
    map_path: str, out_dir: str | None = None, cfg: Settings | None = None
) -> Path:
    """Output path for one batch pair.

    The name is the map file's base name (``.json`` stripped) plus the batch
    suffix. It goes in ``out_dir`` when given, else beside the map file.
    """
    cfg = cfg or default_settings
    base_name = _JSON_EXT.sub("", map_path.replace("\\", "/").split("/")[-1])
    if out_dir:
        directory = out_dir
    else:
        directory = map_path[: map_path.rfind("/") + 1]
    filename = f"{base_name}{cfg.batch_suffix}"
    return Path(directory) / filename if directory else Path(filename)


def _utf8_safe(text: str) -> str:
    """Replace lone surrogates (valid in decoded JSON strings) with U+FFFD."""
    return text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def _write_tree(groups: list, out_path: Path, cfg: Settings) -> Path | None:
    tree_path = tree_path_for(out_path, cfg)
    try:
        text = _utf8_safe("\n".join(build_tree_lines(groups)))
        tree_path.write_text(text, encoding="utf-8")
    except (OSError, ValueError) as exc:
        logger.warning(f"Failed to write tree file {tree_path}: {exc}")
        return None
    print(f"Wrote {tree_path}")
    return tree_path


def process_one(
    map_path: Path | str,
    layers_path: Path | str,
    out_path: Path | str,
    cfg: Settings | None = None,
) -> list[Path]:
    """Inject captions from ``layers_path`` into ``map_path``.

    Writes the annotated map document to ``out_path`` and, unless disabled,
    a tree listing beside it.

    Returns:
        Paths of the files written, JSON output first.
    """
    cfg = cfg or default_settings
    map_file = _resolve(map_path, cfg)
    layers_file = _resolve(layers_path, cfg)
    out_file = _resolve(out_path, cfg)

    map_doc = load_document(map_file)
    layers_doc = load_document(layers_file)

    meta_by_id = build_from_document(layers_doc)
    groups = map_doc.get("groups")
    if not isinstance(groups, list):
        groups = []
    inject_into_groups(groups, meta_by_id)

    text = _utf8_safe(
        json.dumps(map_doc, indent=cfg.json_indent, ensure_ascii=cfg.ensure_ascii)
    )
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(text, encoding="utf-8")
    print(f"Wrote {out_file}")
    written = [out_file]

    if cfg.write_tree:
        tree_file = _write_tree(groups, out_file, cfg)
        if tree_file is not None:
            written.append(tree_file)
    return written


def process_batch(
    pairs: list[tuple[str, str]],
    out_dir: str | None = None,
    cfg: Settings | None = None,
) -> list[Path]:
    """Process batch pairs in order. The first failure aborts the batch."""
    cfg = cfg or default_settings
    written: list[Path] = []
    for map_path, layers_path in pairs:
        out_path = batch_output_path(map_path, out_dir, cfg)
        logger.debug(f"Batch pair {map_path} + {layers_path} -> {out_path}")
        written.extend(process_one(map_path, layers_path, out_path, cfg))
    return written
