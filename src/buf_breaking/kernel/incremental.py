"""Incremental filtering of breaking changes.

An annotation from the current run is "already present" in a baseline run
when the baseline holds an annotation with the same path, type and message.
Line and column are not part of the comparison: the same incompatibility
can move around a file between the baseline and the current snapshot
without changing identity.
"""

from typing import List, Sequence

from buf_breaking.contracts import Annotation


def _is_present(annotation: Annotation, baseline: Sequence[Annotation]) -> bool:
    return any(
        annotation.path == other.path
        and annotation.type == other.type
        and annotation.message == other.message
        for other in baseline
    )


def filter_new(current: Sequence[Annotation], baseline: Sequence[Annotation]) -> List[Annotation]:
    """
    Return the annotations of ``current`` that are not present in ``baseline``.

    The result preserves the order of ``current``. Duplicates in ``current``
    are tested independently. Neither input is mutated.

    Args:
        current: Annotations from the run against the primary baseline
        baseline: Annotations from the run against the "since" baseline

    Returns:
        New list of the surviving annotations
    """
    return [annotation for annotation in current if not _is_present(annotation, baseline)]


def count_suppressed(current: Sequence[Annotation], baseline: Sequence[Annotation]) -> int:
    """Number of annotations in ``current`` that ``filter_new`` would drop."""
    return sum(1 for annotation in current if _is_present(annotation, baseline))
