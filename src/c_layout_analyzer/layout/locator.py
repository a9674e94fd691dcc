"""
Type Span Locator.

Finds the C/C++ type expression touching a cursor position in a single
line of source text, using only local lexical context.

Strategies are tried in priority order and the first one whose span
contains the cursor wins:
1. Aggregate keyword (``struct Foo``, ``union U *``, ``class C``)
2. Known user-defined type name under the cursor
3. Composite built-in specifier run (``unsigned long long``, ``const char *``)
4. Bare keyword under the cursor
"""

import re
from collections.abc import Callable, Collection
from dataclasses import dataclass


@dataclass(frozen=True)
class TypeSpan:
    """Character offsets of a match within its line (end exclusive)."""
    start: int
    end: int

    def contains(self, offset: int) -> bool:
        """Inclusive at both ends, so a cursor just past the text still counts."""
        return self.start <= offset <= self.end


@dataclass(frozen=True)
class TypeMatch:
    """A located type expression."""
    text: str
    span: TypeSpan


# ============================================================================
# Keyword Vocabulary
# ============================================================================

TYPE_KEYWORDS = (
    # Qualifiers and storage classes
    "signed", "unsigned", "const", "volatile", "static", "extern", "register",
    # Base specifiers
    "short", "long", "char", "int", "float", "double",
    "bool", "_Bool", "wchar_t",
    # Fixed-width aliases
    "int8_t", "int16_t", "int32_t", "int64_t",
    "uint8_t", "uint16_t", "uint32_t", "uint64_t",
    # System aliases
    "size_t", "ptrdiff_t", "intptr_t", "uintptr_t",
    # Fast / least / max aliases
    "int_fast8_t", "int_fast16_t", "int_fast32_t", "int_fast64_t",
    "uint_fast8_t", "uint_fast16_t", "uint_fast32_t", "uint_fast64_t",
    "int_least8_t", "int_least16_t", "int_least32_t", "int_least64_t",
    "uint_least8_t", "uint_least16_t", "uint_least32_t", "uint_least64_t",
    "intmax_t", "uintmax_t",
    # Aggregate keywords and void
    "struct", "union", "enum", "class", "void",
)

_KEYWORD_SET = frozenset(TYPE_KEYWORDS)


# ============================================================================
# Regex Patterns
# ============================================================================

# The trailing \b only holds after a star when a word follows it directly
# ("int *p"). A star followed by whitespace ("int* p") is left out of the
# match, so the type resolves as its non-pointer base.
LOCATOR_PATTERNS = {
    # struct/union/class followed by a name and optional pointer markers
    "AGGREGATE": re.compile(r"\b(?:struct|union|class)\s+(\w+)(?:\s*\*+)?\b"),
    # One or more vocabulary tokens, optionally followed by pointer markers.
    # Token order and repetition are unconstrained.
    "COMPOSITE": re.compile(
        r"\b(?:(?:" + "|".join(TYPE_KEYWORDS) + r")\s*)+(?:\*+)?\b"
    ),
    "WORD": re.compile(r"\w+"),
}

_WHITESPACE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text.strip())


def word_at(line_text: str, cursor_offset: int) -> TypeMatch | None:
    """
    Get the identifier run touching the cursor.

    Args:
        line_text: The full line
        cursor_offset: 0-based character offset

    Returns:
        The word and its span, or None if the cursor touches no word
    """
    for match in LOCATOR_PATTERNS["WORD"].finditer(line_text):
        span = TypeSpan(match.start(), match.end())
        if span.contains(cursor_offset):
            return TypeMatch(match.group(0), span)
        if match.start() > cursor_offset:
            break
    return None


# ============================================================================
# Strategies
# ============================================================================

def match_aggregate_keyword(
    line_text: str, cursor_offset: int, known_user_types: Collection[str]
) -> TypeMatch | None:
    """Strategy 1: ``struct|union|class Name [*]``."""
    for match in LOCATOR_PATTERNS["AGGREGATE"].finditer(line_text):
        span = TypeSpan(match.start(), match.end())
        if not span.contains(cursor_offset):
            continue

        # On the name itself: return just the name so it resolves directly
        name_span = TypeSpan(match.start(1), match.end(1))
        if name_span.contains(cursor_offset):
            return TypeMatch(match.group(1), name_span)

        return TypeMatch(_collapse(match.group(0)), span)
    return None


def match_known_identifier(
    line_text: str, cursor_offset: int, known_user_types: Collection[str]
) -> TypeMatch | None:
    """Strategy 2: the word under the cursor is a known user-defined type."""
    if not known_user_types:
        return None
    word = word_at(line_text, cursor_offset)
    if word is not None and word.text in known_user_types:
        return word
    return None


def match_composite_builtin(
    line_text: str, cursor_offset: int, known_user_types: Collection[str]
) -> TypeMatch | None:
    """Strategy 3: a run of built-in specifier/qualifier tokens."""
    for match in LOCATOR_PATTERNS["COMPOSITE"].finditer(line_text):
        span = TypeSpan(match.start(), match.end())
        if span.contains(cursor_offset):
            return TypeMatch(_collapse(match.group(0)), span)
    return None


def match_bare_keyword(
    line_text: str, cursor_offset: int, known_user_types: Collection[str]
) -> TypeMatch | None:
    """Strategy 4: the word under the cursor is a vocabulary token."""
    word = word_at(line_text, cursor_offset)
    if word is not None and word.text in _KEYWORD_SET:
        return word
    return None


Strategy = Callable[[str, int, Collection[str]], TypeMatch | None]

STRATEGIES: tuple[Strategy, ...] = (
    match_aggregate_keyword,
    match_known_identifier,
    match_composite_builtin,
    match_bare_keyword,
)


def locate_type(
    line_text: str,
    cursor_offset: int,
    known_user_types: Collection[str] = (),
) -> TypeMatch | None:
    """
    Locate the type expression covering a cursor offset.

    Args:
        line_text: One line of C/C++ source
        cursor_offset: 0-based character offset of the cursor
        known_user_types: User-defined type names for the current document

    Returns:
        The first strategy's match, or None when there is no type here
    """
    for strategy in STRATEGIES:
        match = strategy(line_text, cursor_offset, known_user_types)
        if match is not None:
            return match
    return None
