"""Aggregations over San Francisco film-location records."""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Union

TITLE = "Title"
RELEASE_YEAR = "Release Year"
FUN_FACTS = "Fun Facts"
ACTOR_COLUMNS = ("Actor 1", "Actor 2", "Actor 3")

Record = Mapping[str, Optional[str]]


def longest_fun_fact(records: Iterable[Record]) -> Optional[Record]:
    """Return the record with the longest ``Fun Facts`` text, or ``None``.

    Ties keep the first record seen. Records without a fun fact never win.
    """
    best: Optional[Record] = None
    best_length = 0
    for record in records:
        length = len(record.get(FUN_FACTS) or "")
        if length > best_length:
            best, best_length = record, length
    return best


def titles_by_year(records: Iterable[Record], year: Union[int, str]) -> List[str]:
    wanted = str(year).strip()
    titles: Dict[str, None] = {}
    for record in records:
        if str(record.get(RELEASE_YEAR) or "").strip() != wanted:
            continue
        titles.setdefault(f"{(record.get(TITLE) or '').upper()} ({wanted})")
    return list(titles)


def actor_counts(records: Iterable[Record]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for record in records:
        for column in ACTOR_COLUMNS:
            actor = record.get(column)
            if not actor:
                continue
            counts[actor] = counts.get(actor, 0) + 1
    return counts
