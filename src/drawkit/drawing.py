"""Minimal SVG element tree with a deterministic text serializer."""
from __future__ import annotations

import math
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

SVG_NS = "http://www.w3.org/2000/svg"
INDENT = "    "
PREAMBLE = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    "<!-- Licensed under the MIT License. -->\n"
)

AttributeValue = Union[str, int, float]

_WRITER = ThreadPoolExecutor(max_workers=1, thread_name_prefix="drawkit-write")


class CycleError(ValueError):
    """Raised when adding a child would make an element its own ancestor."""


class Element:
    """One node of an SVG document: a name, ordered attributes, children and optional content."""

    def __init__(self, name: str, content: Optional[str] = None, *, is_root: bool = False) -> None:
        self._name = name
        self.attributes: Dict[str, AttributeValue] = {}
        self.children: List[Element] = []
        self.content = content
        self.is_root = is_root

    @property
    def name(self) -> str:
        return self._name

    def add_attribute(self, name: str, value: AttributeValue) -> bool:
        """Add ``name`` only if it is not present yet; return whether it was added."""
        if name in self.attributes:
            return False
        self.attributes[name] = value
        return True

    def set_attribute(self, name: str, value: AttributeValue) -> None:
        self.attributes[name] = value

    def add_attributes(
        self, attrs: Union[Mapping[str, AttributeValue], Iterable[Tuple[str, AttributeValue]]]
    ) -> int:
        """Add every absent name/value pair in iteration order and return how many were added."""
        pairs = attrs.items() if isinstance(attrs, Mapping) else attrs
        return sum(self.add_attribute(name, value) for name, value in pairs)

    def remove_attributes(self, names: Iterable[str]) -> int:
        removed = 0
        for name in names:
            if name in self.attributes:
                del self.attributes[name]
                removed += 1
        return removed

    def add_child(self, child: Element) -> None:
        if child is self or child._contains(self):
            raise CycleError(f"<{child.name}> is already an ancestor of <{self.name}>")
        self.children.append(child)

    def _contains(self, node: Element) -> bool:
        stack = list(self.children)
        while stack:
            current = stack.pop()
            if current is node:
                return True
            stack.extend(current.children)
        return False

    def serialize(self) -> str:
        parts: List[str] = []
        if self.is_root:
            parts.append(PREAMBLE)
        _render(self, 0, parts)
        return "".join(parts)

    def write(
        self, path: Union[str, Path], on_complete: Optional[Callable[[Optional[BaseException]], None]] = None
    ) -> "Future[Path]":
        """Write the serialized document to ``path`` in the background.

        The returned future resolves to the written path or carries the
        ``OSError`` raised by the write. ``on_complete`` is called once the
        write settles, with ``None`` on success or the exception on failure.
        """
        if not self.is_root:
            raise ValueError(f"only the root element can be written, not <{self.name}>")
        target = Path(path)
        future = _WRITER.submit(_write_text, target, self.serialize())
        if on_complete is not None:
            future.add_done_callback(lambda done: on_complete(done.exception()))
        return future

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"<Element {self.name} attrs={len(self.attributes)} children={len(self.children)}>"


def root_element() -> Element:
    root = Element("svg", is_root=True)
    root.add_attribute("xmlns", SVG_NS)
    return root


def rectangle(x: AttributeValue, y: AttributeValue, width: AttributeValue, height: AttributeValue, fill: str) -> Element:
    rect = Element("rect")
    rect.add_attributes({"x": x, "y": y, "width": width, "height": height, "fill": fill})
    return rect


def text(x: AttributeValue, y: AttributeValue, font_size: AttributeValue, fill: str, content: str) -> Element:
    label = Element("text", content=content)
    label.add_attributes({"x": x, "y": y, "font-size": font_size, "fill": fill})
    return label


def _render(element: Element, depth: int, parts: List[str]) -> None:
    # Iterative walk over (element, depth, closing) entries; deep trees must not hit the recursion limit.
    stack: List[Tuple[Element, int, bool]] = [(element, depth, False)]
    while stack:
        node, level, closing = stack.pop()
        pad = INDENT * level
        if closing:
            if node.content or node.children:
                parts.append(f"\n{pad}")
            parts.append(f"</{node.name}>")
            continue

        if level > depth:
            parts.append("\n")
        attrs = "".join(f' {name}="{_fmt(value)}"' for name, value in node.attributes.items())
        parts.append(f"{pad}<{node.name}{attrs}>")
        if node.content:
            parts.append(f"\n{INDENT * (level + 1)}{node.content}")

        stack.append((node, level, True))
        for child in reversed(node.children):
            stack.append((child, level + 1, False))


def _fmt(value: AttributeValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value == int(value):
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _write_text(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


__all__ = [
    "CycleError",
    "Element",
    "PREAMBLE",
    "SVG_NS",
    "rectangle",
    "root_element",
    "text",
]
