"""Line normalization for imported Arabic text.

Extraction collaborators hand over text with diacritics, bidi controls,
zero-width joiners, private-use glyphs from PDF fonts and a zoo of colon
look-alikes. The classifier only ever sees the cleaned form; the raw line is
kept for display.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from asc.classifier.types import ScreenplayLine
from asc.patterns.arabic import convert_indic_digits


@dataclass
class NormalizerConfig:
    """Configuration for :class:`LineNormalizer`."""

    strip_diacritics: bool = True
    strip_tatweel: bool = True
    convert_digits: bool = True
    strip_bullets: bool = True


class LineNormalizer:
    """Clean single lines and split documents into indexed lines."""

    _DIACRITICS_RE = re.compile(r"[\u064B-\u065F\u0670]")
    _TATWEEL_RE = re.compile(r"\u0640")
    # bidi controls, zero-width characters, BOM, soft hyphen and the BMP private-use area
    _INVISIBLE_RE = re.compile(r"[\u200B-\u200F\u202A-\u202E\u2066-\u2069\uFEFF\u00AD\u061C\uE000-\uF8FF]")
    _COLON_RE = re.compile(r"[\uFF1A\uFE55\uFE30\u2236\uA789\u02D0\u02F8]")
    _BULLET_RE = re.compile(r"^\s*[\u2022\u25CF\u25AA\u25A0\u25E6\u2023\u2219\u00B7*]+\s*")
    _SPACE_RE = re.compile(r"[ \t\u00A0\u2000-\u200A\u202F\u205F\u3000]+")

    def __init__(self, config: NormalizerConfig | None = None) -> None:
        self.cfg = config or NormalizerConfig()

    def normalize_line(self, text: str) -> str:
        """Return the cleaned form of one line ("" when nothing remains)."""
        out = self._INVISIBLE_RE.sub("", text)
        if self.cfg.strip_diacritics:
            out = self._DIACRITICS_RE.sub("", out)
        if self.cfg.strip_tatweel:
            out = self._TATWEEL_RE.sub("", out)
        out = self._COLON_RE.sub(":", out)
        if self.cfg.convert_digits:
            out = convert_indic_digits(out)
        if self.cfg.strip_bullets:
            out = self._BULLET_RE.sub("", out)
        out = self._SPACE_RE.sub(" ", out)
        return out.strip()

    def iter_lines(self, text: str) -> Iterator[ScreenplayLine]:
        """Yield non-empty lines in document order with dense indices."""
        index = 0
        for raw in text.splitlines():
            normalized = self.normalize_line(raw)
            if not normalized:
                continue
            yield ScreenplayLine(line_index=index, raw=raw.strip(), normalized=normalized)
            index += 1

    def split_lines(self, text: str) -> list[ScreenplayLine]:
        return list(self.iter_lines(text))


def normalize_line(text: str) -> str:
    """Functional wrapper using the default configuration."""
    return LineNormalizer().normalize_line(text)
