"""Action-verb lexicon used to recognise narrative action lines.

Screenplay action is written in the present tense ("يدخل", "تجلس") with the
occasional narrative past form ("استدار", "ابتسم"). The lexicon keeps the
masculine present forms as the base list and derives the feminine ``ت`` forms
from them so both stay in sync.
"""

from __future__ import annotations

import re

from asc.patterns.arabic import PRONOUN_RE

__all__ = [
    "PRESENT_ACTION_VERBS",
    "PAST_ACTION_VERBS",
    "FULL_ACTION_VERB_SET",
    "LEADING_PARTICLES",
    "is_action_verb",
    "is_action_verb_start",
    "has_pronoun_action",
]

PRESENT_ACTION_VERBS: tuple[str, ...] = (
    # movement
    "يدخل", "يخرج", "يمشي", "يركض", "يجري", "يقف", "يجلس", "ينهض", "يقوم", "يتحرك",
    "يتقدم", "يتراجع", "يقترب", "يبتعد", "يصعد", "ينزل", "يعود", "يغادر", "يصل", "يعبر",
    "يتجه", "يتجول", "يقفز", "يزحف", "يتسلل", "يهرع", "يسرع", "يندفع", "يترنح", "يتعثر",
    "يسقط", "ينحني", "يركع", "يستلقي", "يتمدد", "يتكئ", "يستدير", "يلتفت", "يتلفت", "يدور",
    "يهرب", "يطارد", "يلاحق", "يتبع", "يختبئ", "يظهر", "يختفي", "يتوقف", "ينتظر", "يستيقظ",
    "ينام",
    # looking and gestures
    "ينظر", "يحدق", "يتأمل", "يراقب", "يتفحص", "يشير", "يومئ", "يهز", "يلوح", "يصفق",
    "يبتسم", "يضحك", "يبكي", "يتنهد", "يرتجف", "يرتعش", "يتجهم", "يعبس", "يغمض", "يفرك",
    "يحك", "يعض", "يتثاءب", "يلهث", "يسعل", "يبتلع",
    # voice used as stage direction
    "يصرخ", "يهمس", "يتمتم", "يصيح", "ينادي",
    # handling objects
    "يمسك", "يرفع", "يضع", "يأخذ", "يفتح", "يغلق", "يلقي", "يرمي", "يدفع", "يسحب",
    "يجذب", "يحمل", "يلبس", "يخلع", "يلتقط", "يمزق", "يحرق", "يشعل", "يطفئ", "ينظف",
    "يرتب", "يغسل", "يمسح", "يلمس", "يطرق", "يدق", "يكتب", "يقرأ", "يفتش", "يبحث",
    "يتناول", "يناول", "يقدم", "يسلم", "يضم", "يقطع", "يكسر", "يعلق", "يخفي", "يحضر",
    # eating, drinking and rituals
    "يشرب", "يأكل", "يحتسي", "يرتشف", "يدخن", "يتوضأ", "يصلي", "يسجد",
    # contact
    "يعانق", "يحتضن", "يصافح", "يقبل", "يصفع", "يضرب", "يطعن", "يطلق", "يصطدم", "ينقض",
    "يودع", "يستقبل",
    # things happening
    "يرن", "ينفجر", "ينكسر", "يتحطم", "يلمع", "يضيء", "يخفت", "يتناثر", "يهتز", "يتصاعد",
)

PAST_ACTION_VERBS: tuple[str, ...] = (
    "دخل", "خرج", "نظر", "جلس", "وقف", "مشى", "ركض", "نهض", "تحرك", "تقدم",
    "تراجع", "اقترب", "ابتعد", "صعد", "نزل", "عاد", "غادر", "وصل", "استدار", "التفت",
    "ابتسم", "ضحك", "بكى", "صرخ", "همس", "تنهد", "ارتجف", "تعثر", "ترنح", "اندفع",
    "هرع", "تجهم", "عبس", "حدق", "أشار", "أومأ", "هز", "أمسك", "رفع", "أخذ",
    "فتح", "أغلق", "ألقى", "سقط", "دفع", "سحب", "حمل", "التقط", "مزق", "أشعل",
    "أطفأ", "شرب", "أكل", "كتب", "قرأ", "عانق", "احتضن", "صافح", "قفز", "ظهر",
    "اختفى", "توقف", "انتظر", "استلقى", "تثاءب", "أغمض", "لوح", "انحنى", "ركع", "انفجر",
    "اتجه", "استيقظ",
)

FULL_ACTION_VERB_SET: frozenset[str] = frozenset(
    PRESENT_ACTION_VERBS
    + tuple("ت" + verb[1:] for verb in PRESENT_ACTION_VERBS)
    + PAST_ACTION_VERBS
)

# Conjunction / preposition prefixes that attach directly to a verb.
LEADING_PARTICLES: tuple[str, ...] = ("و", "ف", "ل")

_LEADING_NOISE_RE = re.compile(r"^[^ء-ي]+")
_TOKEN_STRIP_RE = re.compile(r"[^ء-ي]+$")


def _first_token(text: str) -> str:
    parts = _LEADING_NOISE_RE.sub("", text).split(maxsplit=1)
    if not parts:
        return ""
    return _TOKEN_STRIP_RE.sub("", parts[0])


def is_action_verb(token: str) -> bool:
    """Return True if ``token`` (optionally particle-prefixed) is a known action verb."""
    if not token:
        return False
    if token in FULL_ACTION_VERB_SET:
        return True
    if len(token) > 3 and token[0] in LEADING_PARTICLES:
        return token[1:] in FULL_ACTION_VERB_SET
    return False


def is_action_verb_start(text: str) -> bool:
    """Return True when the first word of ``text`` is an action verb.

    Leading punctuation such as a dash or bullet is ignored, as is a single
    attached ``و``/``ف``/``ل`` particle ("ويجلس", "فتنظر").
    """
    return is_action_verb(_first_token(text))


def _is_present_form(token: str) -> bool:
    if len(token) > 3 and token[0] in LEADING_PARTICLES:
        token = token[1:]
    return token[:1] in ("ي", "ت")


def has_pronoun_action(text: str, max_gap: int = 2) -> bool:
    """Return True for a standalone pronoun followed by a present-tense action verb.

    Up to ``max_gap`` words may sit between the two ("وهو مازال يتوضأ"). Words
    that merely start with ``ي``/``ت`` ("هو تاجر", "هو في تونس") do not count;
    the verb must be in the lexicon.
    """
    for match in PRONOUN_RE.finditer(text):
        following = text[match.end():].split()[: max_gap + 1]
        for word in following:
            token = _TOKEN_STRIP_RE.sub("", word)
            if _is_present_form(token) and is_action_verb(token):
                return True
    return False
