"""Pillow-backed text measurement for sizing labels."""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from PIL import ImageFont

DEFAULT_FONT_KEY = "sans-serif"
SANS_SERIF_FAMILIES = ["Helvetica", "Arial", "Liberation Sans", "DejaVu Sans"]

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


class TextMeasurer:
    """Caches Pillow fonts per (font, size) and measures rendered text widths.

    ``DRAWKIT_FONT`` names an explicit TrueType file tried before the
    sans-serif system fonts.
    """

    FONT_DIRS = [
        Path("/System/Library/Fonts"),
        Path("/System/Library/Fonts/Supplemental"),
        Path("/Library/Fonts"),
        Path("~/Library/Fonts").expanduser(),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        Path("C:/Windows/Fonts"),
    ]

    def __init__(self) -> None:
        self._font_cache: Dict[Tuple[str, int], Font] = {}
        self._font_paths: Dict[str, Optional[str]] = {}

    def font(self, size: float) -> Font:
        key_size = max(1, int(round(size)))
        explicit = os.getenv("DRAWKIT_FONT") or None
        cache_key = (explicit or DEFAULT_FONT_KEY, key_size)
        if cache_key in self._font_cache:
            return self._font_cache[cache_key]

        candidates: List[str] = []
        if explicit:
            candidates.append(explicit)
        for fam in SANS_SERIF_FAMILIES:
            resolved = self._locate_font(fam)
            if resolved:
                candidates.append(resolved)
        candidates.append("DejaVuSans.ttf")

        font: Optional[Font] = None
        for candidate in candidates:
            try:
                font = ImageFont.truetype(candidate, key_size)
                break
            except OSError:
                continue
        if font is None:
            font = ImageFont.load_default(size=key_size)

        self._font_cache[cache_key] = font
        return font

    def measure(self, text: str, size: float) -> float:
        return float(self.font(size).getlength(text))

    def fit_size(self, text: str, max_width: float, max_size: int, *, min_size: int = 6) -> int:
        """Largest font size in ``[min_size, max_size]`` whose rendering of ``text`` fits ``max_width``."""
        size = max_size
        while size > min_size and self.measure(text, size) > max_width:
            size -= 1
        return max(size, min_size)

    def _locate_font(self, family: str) -> Optional[str]:
        key = family.lower()
        if key in self._font_paths:
            return self._font_paths[key]
        normalized = re.sub(r"[^a-z0-9]+", "", key)
        aliases = {normalized, normalized + "mt", normalized + "psmt"}
        best_match: Optional[Tuple[int, str]] = None
        for directory in self.FONT_DIRS:
            if not normalized or not directory.exists():
                continue
            try:
                paths = list(directory.rglob("*.ttf"))
            except OSError:
                continue
            for path in paths:
                stem = re.sub(r"[^a-z0-9]+", "", path.stem.lower())
                if stem in aliases:
                    score = 0
                elif stem.startswith(normalized):
                    score = 1
                elif normalized in stem:
                    score = 2
                else:
                    continue
                if best_match is None or score < best_match[0]:
                    best_match = (score, str(path))
        resolved = best_match[1] if best_match else None
        self._font_paths[key] = resolved
        return resolved


TEXT_MEASURER = TextMeasurer()


def fit_font_size(text: str, max_width: float, max_size: int, *, min_size: int = 6) -> int:
    return TEXT_MEASURER.fit_size(text, max_width, max_size, min_size=min_size)
