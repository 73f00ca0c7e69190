"""Small higher-order helpers used by the report pipeline."""
from __future__ import annotations

import functools
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

T = TypeVar("T")
Record = Dict[str, Optional[str]]


def get_even_param(*args: T) -> List[T]:
    """Return every other argument, starting with the first."""
    return list(args[::2])


def flatten(items: Iterable[Any]) -> List[Any]:
    """Flatten arbitrarily nested lists and tuples, keeping left-to-right order."""
    flat: List[Any] = []
    for item in items:
        if isinstance(item, (list, tuple)):
            flat.extend(flatten(item))
        else:
            flat.append(item)
    return flat


def filter_with(predicate: Callable[[T], Any]) -> Callable[[Iterable[T]], List[T]]:
    def _filter(items: Iterable[T]) -> List[T]:
        return [item for item in items if predicate(item)]

    return _filter


def limit_calls(fn: Optional[Callable[..., T]] = None, max_calls: int = 1):
    """Allow ``fn`` to run at most ``max_calls`` times; later calls return ``None``.

    Works both as ``limit_calls(fn, 3)`` and as ``@limit_calls(max_calls=3)``.
    """
    if fn is None:
        return lambda func: limit_calls(func, max_calls)

    calls = 0

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Optional[T]:
        nonlocal calls
        if calls >= max_calls:
            return None
        calls += 1
        return fn(*args, **kwargs)

    return wrapper


def rows_to_objects(data: Any) -> List[Record]:
    """Turn ``{"headers": [...], "rows": [[...], ...]}`` into one dict per row.

    ``data`` may be a mapping or any object exposing ``headers`` and ``rows``.
    Cells beyond the last header are dropped; headers without a cell map to
    ``None``.
    """
    if isinstance(data, dict):
        headers, rows = data.get("headers", []), data.get("rows", [])
    else:
        headers, rows = data.headers, data.rows

    records: List[Record] = []
    for cells in rows:
        record: Record = {}
        for index, header in enumerate(headers):
            record[header] = cells[index] if index < len(cells) else None
        records.append(record)
    return records
