"""Canonical JSON serialization for the ``results`` output.

Downstream workflow steps read the ``results`` output with ``fromJSON``;
keeping the bytes stable makes their diffs and caches stable too.
"""

import json
from typing import Any, Sequence

from buf_breaking.contracts import Annotation


def canonical_dumps(obj: Any) -> str:
    """
    Canonical JSON serialization.

    Rules:
    - UTF-8 (no ASCII escaping)
    - Sorted keys
    - Stable separators (",", ":")
    - Lists keep their given order
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False
    )


def dumps_annotations(annotations: Sequence[Annotation]) -> str:
    """Serialize annotations as one JSON array, ``[]`` when empty."""
    return canonical_dumps([annotation.to_output() for annotation in annotations])
