"""LayerMeta dataclass — caption metadata resolved for one layer id.

A caption can be absent (the source record had no ``caption`` key), which is
distinct from a caption that is present but ``null``. Absence is modelled with
the ``MISSING`` sentinel so the annotator knows not to emit the key at all.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from dataclasses import dataclass
from typing import Any


class _Missing:
    """Marker for a caption key that was never present."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass
class LayerMeta:
    """Caption metadata for one configured layer.

    Attributes:
        caption: The record's caption verbatim, or MISSING when it had none.
        sublayer_captions: Non-blank captions of the record's sub-identifiers,
            in declared order. None unless the record lists at least two
            sub-identifiers and one of them resolves to a caption.
    """

    caption: Any = MISSING
    sublayer_captions: list[str] | None = None

    @property
    def has_caption(self) -> bool:
        return self.caption is not MISSING


def _id_key(value: Any) -> tuple[bool, Any]:
    # JSON true and 1 are distinct ids, but equal as Python dict keys
    return (isinstance(value, bool), value)


class IdIndex(MutableMapping):
    """Insertion-ordered mapping keyed by JSON layer ids.

    Behaves like a dict except that boolean ids never collide with the
    numbers 1 and 0.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[bool, Any], tuple[Any, Any]] = {}

    def __getitem__(self, layer_id: Any) -> Any:
        return self._entries[_id_key(layer_id)][1]

    def __setitem__(self, layer_id: Any, value: Any) -> None:
        key = _id_key(layer_id)
        if key in self._entries:
            # Keep the first-inserted id object, as a dict would
            layer_id = self._entries[key][0]
        self._entries[key] = (layer_id, value)

    def __delitem__(self, layer_id: Any) -> None:
        del self._entries[_id_key(layer_id)]

    def __iter__(self) -> Iterator[Any]:
        return (layer_id for layer_id, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"IdIndex({dict(self._entries.values())!r})"
