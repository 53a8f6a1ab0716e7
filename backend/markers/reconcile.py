from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence, TypeVar

from markers.types import Annotation, identity_key

FULL_REPLACE_COUNT_DELTA = 50
FULL_REPLACE_MAX_COUNT = 200
DEFAULT_CHUNK_SIZE = 50

T = TypeVar("T")


@dataclass(frozen=True)
class AnnotationDiff:
    to_add: list[Annotation] = field(default_factory=list)
    to_remove: list[Annotation] = field(default_factory=list)
    # True when the whole rendered set is swapped instead of diffed.
    full_replace: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def reconcile(
    current: Sequence[Annotation],
    next: Sequence[Annotation],
    *,
    full_replace_count_delta: int = FULL_REPLACE_COUNT_DELTA,
    full_replace_max_count: int = FULL_REPLACE_MAX_COUNT,
) -> AnnotationDiff:
    """
    Add/remove instructions that turn the rendered `current` set into `next`.

    - Same annotations in the same order: nothing to do.
    - Large swings (count delta or size of `next`): replace everything, which the
      render surface can batch more cheaply than a fine-grained diff.
    - Otherwise: identity-based set difference, keeping input order.
    """
    cur_keys = [identity_key(a) for a in current]
    next_keys = [identity_key(a) for a in next]

    if len(cur_keys) == len(next_keys) and cur_keys == next_keys:
        return AnnotationDiff()

    if (
        abs(len(current) - len(next)) > full_replace_count_delta
        or len(next) > full_replace_max_count
    ):
        return AnnotationDiff(to_add=list(next), to_remove=list(current), full_replace=True)

    cur_set = set(cur_keys)
    next_set = set(next_keys)
    to_add = [a for a, k in zip(next, next_keys) if k not in cur_set]
    to_remove = [a for a, k in zip(current, cur_keys) if k not in next_set]
    return AnnotationDiff(to_add=to_add, to_remove=to_remove)


def chunked(items: Sequence[T], size: int = DEFAULT_CHUNK_SIZE) -> Iterator[list[T]]:
    # Render surfaces apply diffs in chunks to avoid one huge synchronous UI update.
    n = max(1, int(size))
    for i in range(0, len(items), n):
        yield list(items[i : i + n])


def split_diff(diff: AnnotationDiff, size: int = DEFAULT_CHUNK_SIZE) -> Iterator[AnnotationDiff]:
    """
    Break a diff into surface-sized pieces: removals first, then additions.

    A full replace keeps its flag (and the complete removal list) on the first piece only,
    so the surface clears once and then receives plain additions.
    """
    n = max(1, int(size))
    if diff.full_replace:
        yield AnnotationDiff(
            to_add=list(diff.to_add[:n]), to_remove=list(diff.to_remove), full_replace=True
        )
        for part in chunked(diff.to_add[n:], n):
            yield AnnotationDiff(to_add=part)
        return
    for part in chunked(diff.to_remove, n):
        yield AnnotationDiff(to_remove=part)
    for part in chunked(diff.to_add, n):
        yield AnnotationDiff(to_add=part)
