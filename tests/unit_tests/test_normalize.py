"""Tests for line normalization and line splitting."""

from __future__ import annotations

from asc.classifier.normalize import LineNormalizer, NormalizerConfig, normalize_line


def test_strips_diacritics_and_converts_digits() -> None:
    assert normalize_line("مَشْهَدٌ ١٢") == "مشهد 12"


def test_strips_tatweel_and_invisible_marks() -> None:
    tatweel = chr(0x0640)
    rlm, lrm, zwj = chr(0x200F), chr(0x200E), chr(0x200D)
    assert normalize_line(f"ق{tatweel}{tatweel}ال") == "قال"
    assert normalize_line(f"{rlm}أحمد{zwj}{lrm}:") == "أحمد:"


def test_unifies_colon_variants_and_spaces() -> None:
    fullwidth_colon = chr(0xFF1A)
    nbsp = chr(0x00A0)
    assert normalize_line(f"أحمد{fullwidth_colon}") == "أحمد:"
    assert normalize_line(f"  يدخل{nbsp}{nbsp}أحمد   الغرفة ") == "يدخل أحمد الغرفة"


def test_strips_leading_bullets() -> None:
    bullet = chr(0x2022)
    assert normalize_line(f"{bullet} يدخل أحمد") == "يدخل أحمد"


def test_config_can_keep_digits_and_diacritics() -> None:
    fatha = chr(0x064E)
    normalizer = LineNormalizer(NormalizerConfig(strip_diacritics=False, convert_digits=False))
    assert normalizer.normalize_line("مشهد ١") == "مشهد ١"
    assert normalizer.normalize_line(f"ق{fatha}ال") == f"ق{fatha}ال"


def test_split_lines_skips_blank_lines_with_dense_indices() -> None:
    rlm = chr(0x200F)
    text = f"\n\nيدخل أحمد\n   \n{rlm}\nأحمد:  \n"
    lines = LineNormalizer().split_lines(text)
    assert [ln.line_index for ln in lines] == [0, 1]
    assert [ln.normalized for ln in lines] == ["يدخل أحمد", "أحمد:"]
    assert lines[1].raw == "أحمد:"
