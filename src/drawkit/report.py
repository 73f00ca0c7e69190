"""Actor frequency report rendered as an SVG bar chart."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

from .drawing import Element, rectangle, root_element, text
from .hoffy import Record, rows_to_objects
from .measure import fit_font_size

CHART_WIDTH = 800
CHART_HEIGHT = 170
BAR_WIDTH = 100
BAR_STEP = 110
BAR_MAX_HEIGHT = 120
BAR_BASELINE = 140
LABEL_Y = 160
LABEL_MAX_FONT_SIZE = 14
LABEL_FILL = "black"
PALETTE = ["red", "green", "blue", "orange", "purple"]


def load_records(path: Union[str, Path]) -> List[Record]:
    """Read a CSV file whose first row holds the column names."""
    with Path(path).open("r", encoding="utf-8-sig", newline="") as fh:
        rows = list(csv.reader(fh, strict=True))
    if not rows:
        return []
    headers, *body = rows
    return rows_to_objects({"headers": headers, "rows": body})


def top_actors(counts: Dict[str, int], limit: int = 3) -> List[Tuple[str, int]]:
    ranked = sorted(counts.items(), key=lambda pair: pair[1], reverse=True)
    return ranked[: max(limit, 0)]


def build_chart(pairs: Sequence[Tuple[str, int]]) -> Element:
    """One bottom-aligned bar plus a fitted label per (name, count) pair."""
    root = root_element()
    root.add_attributes({"width": CHART_WIDTH, "height": CHART_HEIGHT})
    if not pairs:
        return root

    tallest = max(count for _, count in pairs) or 1
    for index, (name, count) in enumerate(pairs):
        x = index * BAR_STEP
        height = round(BAR_MAX_HEIGHT * count / tallest, 2)
        root.add_child(rectangle(x, BAR_BASELINE - height, BAR_WIDTH, height, PALETTE[index % len(PALETTE)]))

        label = f"{name} ({count})"
        size = fit_font_size(label, BAR_WIDTH, LABEL_MAX_FONT_SIZE)
        root.add_child(text(x, LABEL_Y, size, LABEL_FILL, label))
    return root


def demo_chart(message: str = "wat is a prototype? \N{GRIMACING FACE}") -> Element:
    root = root_element()
    root.add_attributes({"width": 800, "height": 170, "abc": 200, "def": 400})
    root.remove_attributes(["abc", "def", "non-existent-attribute"])

    circle = Element("circle")
    circle.add_attribute("r", 75)
    circle.add_attribute("fill", "yellow")
    circle.add_attributes({"cx": 200, "cy": 80})
    root.add_child(circle)

    root.add_child(rectangle(0, 0, 200, 100, "blue"))
    root.add_child(text(50, 70, 70, "red", message))
    return root
