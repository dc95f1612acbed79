from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from operator import attrgetter
from typing import TypeVar

T = TypeVar("T")


def reconcile(imported_order: Iterable, catalog: Sequence[T],
              key: Callable[[T], Hashable] = attrgetter("id")) -> list[T]:
    """Merge an imported id order with the authoritative catalog.

    Ids from ``imported_order`` that name a catalog entry come first, in
    their imported order (duplicates collapse to the first position); every
    catalog entry not placed yet follows in catalog order. The result is
    always a permutation of exactly ``catalog``.
    """
    by_id = {key(entry): entry for entry in catalog}
    placed: set = set()
    result: list[T] = []

    for raw_id in imported_order or ():
        # JSON true/false and 1.0 would otherwise alias ids 1 and 0
        if isinstance(raw_id, bool) or not isinstance(raw_id, (int, str)):
            continue
        if raw_id in placed:
            continue
        entry = by_id.get(raw_id)
        if entry is None:
            continue
        placed.add(raw_id)
        result.append(entry)

    for entry in catalog:
        if key(entry) not in placed:
            result.append(entry)
    return result
