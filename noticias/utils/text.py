"""
Text helpers for public content: slugs, accent-insensitive patterns,
search highlights and reading time.
"""
import math
import re
import unicodedata

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")

# Each base letter matches its accented variants
_ACCENT_CLASSES = {
    "a": "[aáàäâ]",
    "e": "[eéèëê]",
    "i": "[iíìïî]",
    "o": "[oóòöô]",
    "u": "[uúùüû]",
    "n": "[nñ]",
}

WORDS_PER_MINUTE = 200
HIGHLIGHT_CONTEXT = 75
HIGHLIGHT_FALLBACK_LENGTH = 150


def strip_accents(value: str) -> str:
    normalized = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def slugify(value: str) -> str:
    """'Política Local' -> 'politica-local'"""
    slug = strip_accents(value.lower())
    return _NON_SLUG_RE.sub("-", slug).strip("-")


def capitalize_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def slug_to_name(slug: str) -> str:
    return slug.replace("-", " ")


def exact_match_pattern(value: str) -> str:
    """Anchored, case-insensitive pattern matching ``value`` literally."""
    return f"(?i)^{re.escape(value)}$"


def accent_insensitive_pattern(slug: str) -> str:
    """
    Build an anchored, case-insensitive pattern that matches a category name
    regardless of accents, e.g. 'politica' matches 'Política'.

    The leading ``(?i)`` is understood by Python ``re`` (SQLite REGEXP) and by
    PostgreSQL advanced regular expressions alike.
    """
    name = strip_accents(slug_to_name(slug).lower())
    parts = []
    for ch in name:
        if ch in _ACCENT_CLASSES:
            parts.append(_ACCENT_CLASSES[ch])
        else:
            parts.append(re.escape(ch))
    return "(?i)^" + "".join(parts) + "$"


def strip_html(content: str) -> str:
    if not content:
        return ""
    return _SPACE_RE.sub(" ", _TAG_RE.sub(" ", content)).strip()


def extract_highlight(content: str, query: str) -> str:
    """
    Fragment of the plain text around the first case-insensitive occurrence
    of ``query``; the start of the text when the query does not occur.
    """
    plain = strip_html(content)
    index = plain.lower().find(query.lower())

    if index == -1:
        return plain[:HIGHLIGHT_FALLBACK_LENGTH] + "..."

    start = max(0, index - HIGHLIGHT_CONTEXT)
    end = min(len(plain), index + len(query) + HIGHLIGHT_CONTEXT)

    highlight = plain[start:end]
    if start > 0:
        highlight = "..." + highlight
    if end < len(plain):
        highlight = highlight + "..."
    return highlight


def read_time_minutes(content: str) -> int:
    words = len(strip_html(content).split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))
