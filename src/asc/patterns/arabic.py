"""Regular expressions and lookup tables for Arabic screenplay text.

Every pattern here runs on normalized text (diacritics, tatweel and invisible
marks already stripped, colon variants unified). The helpers are pure and keep
no state between calls.
"""

from __future__ import annotations

import re

__all__ = [
    "ARABIC_LETTER",
    "DIALECT_PATTERNS",
    "DIALECT_ORDER",
    "detect_dialect",
    "NEGATION_PATTERNS",
    "NEGATION_PLUS_VERB_RE",
    "has_negation",
    "TRANSITION_RE",
    "ARABIC_NUMBER_RE",
    "has_indic_digits",
    "convert_indic_digits",
    "PRONOUN_RE",
    "BASMALA_RE",
    "is_basmala",
    "SCENE_NUMBER_RE",
    "SCENE_HEADER_SPLIT_RE",
    "SCENE_TIME_RE",
    "SCENE_LOCATION_RE",
    "PARENTHETICAL_RE",
    "CHARACTER_CUE_RE",
    "INLINE_DIALOGUE_RE",
    "DIALOGUE_START_RE",
    "DIALOGUE_END_RE",
    "QUOTE_START_RE",
    "NARRATIVE_AUDIO_RE",
    "DASH_LEAD_RE",
    "CHARACTER_STOP_WORDS",
    "has_dialogue_cue",
]

ARABIC_LETTER = "ء-ي"

# Word edges for Arabic; ``\b`` also fires between a letter and a digit which
# is not wanted inside scene headers, so the lookarounds are explicit.
_L = rf"(?<![{ARABIC_LETTER}\w])"
_R = rf"(?![{ARABIC_LETTER}\w])"


def _words(*items: str) -> str:
    return "|".join(sorted(items, key=len, reverse=True))


# ---------------------------------------------------------------------------
# Dialects
# ---------------------------------------------------------------------------

_EGYPTIAN_MARKERS = (
    "إيه", "ايه", "عايز", "عايزة", "عاوز", "عاوزة", "دلوقتي", "دلوقت", "كده", "كدا",
    "ازاي", "إزاي", "فين", "امتى", "إمتى", "بتاع", "بتاعة", "بتاعي", "خالص", "أوي",
    "اوي", "برضه", "برضو", "ماشي", "بقى", "ده", "دي", "دول", "مفيش", "مافيش", "علشان",
    "عشان", "يعني ايه", "حاضر", "طب",
)
_LEVANTINE_MARKERS = (
    "بدي", "بدك", "بده", "بدها", "بدنا", "بدكن", "بدهم", "هلق", "هلأ", "هيك",
    "شو", "ليش", "كتير", "منيح", "منيحة", "هاد", "هادا", "هدول", "زلمة", "مبلى",
    "لسه", "عنجد", "يلعن",
)
_GULF_MARKERS = (
    "ابي", "أبي", "ابغى", "أبغى", "ابغي", "يبي", "تبي", "نبي", "يبغى", "تبغى",
    "شلون", "وش", "ايش", "إيش", "حيل", "واجد", "يسوي", "أسوي", "اسوي", "تسوي",
    "نسوي", "الحين", "ذحين", "هني", "مب",
)

DIALECT_PATTERNS: dict[str, re.Pattern[str]] = {
    "egyptian": re.compile(rf"{_L}(?:{_words(*_EGYPTIAN_MARKERS)}){_R}"),
    "levantine": re.compile(rf"{_L}(?:{_words(*_LEVANTINE_MARKERS)}){_R}"),
    "gulf": re.compile(rf"{_L}(?:{_words(*_GULF_MARKERS)}){_R}"),
}

# Declared evaluation order; the first match wins when markers overlap.
DIALECT_ORDER: tuple[str, ...] = ("egyptian", "levantine", "gulf")


def detect_dialect(text: str) -> str | None:
    """Return the first dialect whose markers appear in ``text``, else None."""
    for name in DIALECT_ORDER:
        if DIALECT_PATTERNS[name].search(text):
            return name
    return None


# ---------------------------------------------------------------------------
# Negation
# ---------------------------------------------------------------------------

NEGATION_PATTERNS: tuple[re.Pattern[str], ...] = (
    # standard negators
    re.compile(rf"{_L}(?:لا|لم|لن|ليس|ليست|لست|لسنا|لستم){_R}"),
    # colloquial negators
    re.compile(rf"{_L}(?:مش|مو|مب|موش|مفيش|مافيش|ماكانش|محدش|ماحدش|مهوش){_R}"),
    # ma + verb with the circumfix ``ش`` (ماعرفش, مابحبش)
    re.compile(rf"{_L}ما\s?[{ARABIC_LETTER}]{{2,}}ش{_R}"),
)

# A negator followed by a third-person masculine verb ("لا يتحرك") reads as
# narration; first and second person forms ("لا أعرف", "لا تتحرك") do not match.
NEGATION_PLUS_VERB_RE = re.compile(rf"{_L}[وف]?(?:لا|لم|لن)\s+ي[{ARABIC_LETTER}]{{2,}}{_R}")


def has_negation(text: str) -> bool:
    """Return True if any broad negation marker occurs in ``text``."""
    return any(p.search(text) for p in NEGATION_PATTERNS)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

_TRANSITION_KEYWORDS = (
    r"قطع",
    r"قطع\s+مفاجئ",
    r"قطع\s+سريع",
    r"انتقال",
    r"مزج",
    r"ذوبان",
    r"تلاشي",
    r"تلاش",
    r"اظلام",
    r"إظلام",
    r"إظلام\s+تدريجي",
    r"ظهور\s+تدريجي",
    r"اختفاء\s+تدريجي",
    r"فلاش\s*باك",
    r"عودة\s+للحاضر",
    r"نهاية\s+الفلاش\s*باك",
    r"cut",
    r"smash\s+cut",
    r"match\s+cut",
    r"jump\s+cut",
    r"dissolve",
    r"fade\s+in",
    r"fade\s+out",
    r"fade",
    r"flashback",
)

TRANSITION_RE = re.compile(
    rf"^\s*(?:{_words(*_TRANSITION_KEYWORDS)})(?:\s+(?:إلى|الى|to))?\s*[:.]?\s*$",
    re.IGNORECASE,
)

# ---------------------------------------------------------------------------
# Digits
# ---------------------------------------------------------------------------

ARABIC_NUMBER_RE = re.compile(r"[٠-٩۰-۹]")

_INDIC_DIGITS = str.maketrans(
    "٠١٢٣٤٥٦٧٨٩"
    "۰۱۲۳۴۵۶۷۸۹",
    "01234567890123456789",
)


def has_indic_digits(text: str) -> bool:
    """Return True if ``text`` contains Arabic-Indic or Extended Arabic-Indic digits."""
    return ARABIC_NUMBER_RE.search(text) is not None


def convert_indic_digits(text: str) -> str:
    """Replace Indic digits with ASCII digits, leaving every other character as is."""
    return text.translate(_INDIC_DIGITS)


# ---------------------------------------------------------------------------
# Pronoun + verb
# ---------------------------------------------------------------------------

# An independent third-person pronoun. It must stand alone so names such as
# "إبراهيم" never trigger it; the verb that follows is checked against the
# lexicon by :func:`asc.patterns.verbs.has_pronoun_action`.
PRONOUN_RE = re.compile(rf"{_L}[وف]?(?:هو|هي|هم|هما|هن){_R}")

# ---------------------------------------------------------------------------
# Structural line patterns
# ---------------------------------------------------------------------------

BASMALA_RE = re.compile(r"بسم\s+الله")
_BASMALA_TAIL_RE = re.compile(r"الرحمن|الرحيم")


def is_basmala(text: str) -> bool:
    """Return True for the invocation "بسم الله الرحمن الرحيم" and short variants."""
    if len(text.split()) > 8:
        return False
    return BASMALA_RE.search(text) is not None and _BASMALA_TAIL_RE.search(text) is not None


SCENE_NUMBER_RE = re.compile(r"^\s*(?:مشهد|المشهد|scene)\s*(?:رقم\s*)?[0-9]+", re.IGNORECASE)
SCENE_HEADER_SPLIT_RE = re.compile(
    r"^\s*((?:مشهد|المشهد|scene)\s*(?:رقم\s*)?[0-9]+)\s*[-–—:،,/]?\s*(.*)$",
    re.IGNORECASE,
)

SCENE_TIME_RE = re.compile(
    rf"{_L}(?:ال)?(?:{_words('ليل', 'ليلا', 'ليلي', 'نهار', 'نهارا', 'نهاري', 'صباح', 'صباحا', 'مساء', 'مساءا', 'فجر', 'فجرا', 'ظهرا', 'ظهيرة', 'عصر', 'عصرا', 'غروب', 'شروق')}){_R}"
    r"|\b(?:day|night|morning|evening|dawn|dusk|continuous)\b",
    re.IGNORECASE,
)

SCENE_LOCATION_RE = re.compile(
    rf"{_L}(?:{_words('داخلي', 'خارجي', 'داخلى', 'خارجى')}){_R}"
    r"|\b(?:int|ext|interior|exterior)\b\.?",
    re.IGNORECASE,
)

PARENTHETICAL_RE = re.compile(r"^\s*[(（][^()（）]*[)）]\s*$")

# "أحمد:" or "أحمد (بهدوء):"
CHARACTER_CUE_RE = re.compile(
    r"^\s*(?P<name>[^\s:()0-9][^:()0-9]{0,29}?)\s*(?:\((?P<extension>[^)]{1,30})\))?\s*:\s*$"
)

# "أحمد: أنا هنا" keeps speaker and speech on one line.
INLINE_DIALOGUE_RE = re.compile(r"^\s*(?P<name>[^\s:()0-9][^:()0-9]{0,24}?)\s*:\s*(?P<speech>\S.*)$")

_DIALOGUE_OPENERS = (
    "يا", "أنا", "انا", "أنت", "انت", "إنت", "انتي", "أنتِ", "نحن", "احنا", "إحنا",
    "ايوه", "أيوه", "أيوا", "نعم", "طيب", "حسنا", "شكرا", "مرحبا", "أهلا", "اهلا",
    "والله", "يعني", "لماذا", "ليه", "كيف", "متى", "هل", "ماذا", "ممكن", "لازم",
    "خلاص", "معلش", "آسف", "اسف", "أرجوك", "ارجوك", "من فضلك", "تعال", "تعالي",
    "اسمع", "اسمعي", "بص", "شوف",
)
DIALOGUE_START_RE = re.compile(rf"^\s*(?:{_words(*_DIALOGUE_OPENERS)}){_R}")
DIALOGUE_END_RE = re.compile(r"[؟?!]+[\"»”]?\s*$")
QUOTE_START_RE = re.compile(r"^\s*[\"«“]")

NARRATIVE_AUDIO_RE = re.compile(
    rf"^\s*(?:{_words('نسمع', 'يسمع', 'تسمع', 'صوت', 'أصوات', 'اصوات', 'ضجيج', 'موسيقى', 'صمت', 'لقطة', 'لقطات')}){_R}"
)

DASH_LEAD_RE = re.compile(r"^\s*[-–—]\s*\S")

CHARACTER_STOP_WORDS: frozenset[str] = frozenset(
    {
        "في", "من", "على", "إلى", "الى", "عن", "عند", "ثم", "و", "لكن", "بعد", "قبل",
        "مع", "هذا", "هذه", "ذلك", "تلك", "الآن", "الان", "بينما", "حين", "عندما",
        "هو", "هي", "هم", "نحن", "أنا", "انا", "مشهد", "المشهد", "ملاحظة", "ملحوظة",
        "المكان", "الزمان", "الزمن", "الوقت", "التاريخ", "العنوان", "تأليف", "إخراج",
        "سيناريو", "حوار", "قصة", "الشخصيات", "ليل", "نهار", "داخلي", "خارجي",
    }
)


def has_dialogue_cue(text: str) -> bool:
    """Return True when ``text`` carries a surface marker of direct speech."""
    return bool(
        DIALOGUE_START_RE.search(text)
        or DIALOGUE_END_RE.search(text)
        or QUOTE_START_RE.search(text)
    )
