"""
Built-in C/C++ type layouts.

Static size/alignment table for fundamental, fixed-width and system
alias types on 32-bit and 64-bit targets.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutEntry:
    """Size and alignment of a type on both bit-widths."""
    size32: int
    align32: int
    size64: int
    align64: int
    description: str | None = None

    def size(self, is_64bit: bool) -> int:
        return self.size64 if is_64bit else self.size32

    def alignment(self, is_64bit: bool) -> int:
        return self.align64 if is_64bit else self.align32


_WHITESPACE = re.compile(r"\s+")


def normalize_type_name(text: str) -> str:
    """Trim, collapse whitespace and lower-case a type name."""
    return _WHITESPACE.sub(" ", text.strip()).lower()


# ============================================================================
# Layout Table
# ============================================================================

BUILTIN_TYPES: dict[str, LayoutEntry] = {
    # Character types
    "char": LayoutEntry(1, 1, 1, 1, "Character type, always 1 byte"),
    "signed char": LayoutEntry(1, 1, 1, 1, "Signed character (-128 to 127)"),
    "unsigned char": LayoutEntry(1, 1, 1, 1, "Unsigned character (0 to 255)"),

    # Short integers
    "short": LayoutEntry(2, 2, 2, 2, "Short integer, typically 16-bit"),
    "short int": LayoutEntry(2, 2, 2, 2, "Short integer, typically 16-bit"),
    "unsigned short": LayoutEntry(2, 2, 2, 2, "Unsigned short integer"),
    "unsigned short int": LayoutEntry(2, 2, 2, 2, "Unsigned short integer"),

    # Standard integers
    "int": LayoutEntry(4, 4, 4, 4, "Standard integer, typically 32-bit"),
    "signed": LayoutEntry(4, 4, 4, 4, "Signed integer (same as int)"),
    "signed int": LayoutEntry(4, 4, 4, 4, "Signed integer, typically 32-bit"),
    "unsigned": LayoutEntry(4, 4, 4, 4, "Unsigned integer"),
    "unsigned int": LayoutEntry(4, 4, 4, 4, "Unsigned integer, typically 32-bit"),

    # Long integers (platform dependent)
    "long": LayoutEntry(4, 4, 8, 8, "Long integer (platform dependent)"),
    "long int": LayoutEntry(4, 4, 8, 8, "Long integer (platform dependent)"),
    "signed long": LayoutEntry(4, 4, 8, 8, "Signed long integer"),
    "signed long int": LayoutEntry(4, 4, 8, 8, "Signed long integer"),
    "unsigned long": LayoutEntry(4, 4, 8, 8, "Unsigned long integer"),
    "unsigned long int": LayoutEntry(4, 4, 8, 8, "Unsigned long integer"),

    # Long long integers
    "long long": LayoutEntry(8, 8, 8, 8, "Long long integer, always 64-bit"),
    "long long int": LayoutEntry(8, 8, 8, 8, "Long long integer, always 64-bit"),
    "signed long long": LayoutEntry(8, 8, 8, 8, "Signed long long integer"),
    "signed long long int": LayoutEntry(8, 8, 8, 8, "Signed long long integer"),
    "unsigned long long": LayoutEntry(8, 8, 8, 8, "Unsigned long long integer"),
    "unsigned long long int": LayoutEntry(8, 8, 8, 8, "Unsigned long long integer"),

    # Floating point
    "float": LayoutEntry(4, 4, 4, 4, "Single precision floating point (IEEE 754)"),
    "double": LayoutEntry(8, 8, 8, 8, "Double precision floating point (IEEE 754)"),
    "long double": LayoutEntry(12, 4, 16, 16, "Extended precision floating point"),

    # Boolean and wide character
    "bool": LayoutEntry(1, 1, 1, 1, "Boolean type (C++)"),
    "_Bool": LayoutEntry(1, 1, 1, 1, "Boolean type (C99)"),
    "wchar_t": LayoutEntry(2, 2, 4, 4, "Wide character type"),

    # System types
    "size_t": LayoutEntry(4, 4, 8, 8, "Size type for array indexing"),
    "ssize_t": LayoutEntry(4, 4, 8, 8, "Signed size type"),
    "ptrdiff_t": LayoutEntry(4, 4, 8, 8, "Pointer difference type"),
    "intptr_t": LayoutEntry(4, 4, 8, 8, "Integer type for storing pointers"),
    "uintptr_t": LayoutEntry(4, 4, 8, 8, "Unsigned integer type for storing pointers"),
    "off_t": LayoutEntry(4, 4, 8, 8, "File offset type"),
    "time_t": LayoutEntry(4, 4, 8, 8, "Time type"),

    # Fixed-width integers (C99/C++11)
    "int8_t": LayoutEntry(1, 1, 1, 1, "Exactly 8-bit signed integer"),
    "uint8_t": LayoutEntry(1, 1, 1, 1, "Exactly 8-bit unsigned integer"),
    "int16_t": LayoutEntry(2, 2, 2, 2, "Exactly 16-bit signed integer"),
    "uint16_t": LayoutEntry(2, 2, 2, 2, "Exactly 16-bit unsigned integer"),
    "int32_t": LayoutEntry(4, 4, 4, 4, "Exactly 32-bit signed integer"),
    "uint32_t": LayoutEntry(4, 4, 4, 4, "Exactly 32-bit unsigned integer"),
    "int64_t": LayoutEntry(8, 8, 8, 8, "Exactly 64-bit signed integer"),
    "uint64_t": LayoutEntry(8, 8, 8, 8, "Exactly 64-bit unsigned integer"),

    # Fast types
    "int_fast8_t": LayoutEntry(1, 1, 1, 1, "Fastest type with at least 8 bits"),
    "uint_fast8_t": LayoutEntry(1, 1, 1, 1, "Fastest unsigned type with at least 8 bits"),
    "int_fast16_t": LayoutEntry(4, 4, 8, 8, "Fastest type with at least 16 bits"),
    "uint_fast16_t": LayoutEntry(4, 4, 8, 8, "Fastest unsigned type with at least 16 bits"),
    "int_fast32_t": LayoutEntry(4, 4, 8, 8, "Fastest type with at least 32 bits"),
    "uint_fast32_t": LayoutEntry(4, 4, 8, 8, "Fastest unsigned type with at least 32 bits"),
    "int_fast64_t": LayoutEntry(8, 8, 8, 8, "Fastest type with at least 64 bits"),
    "uint_fast64_t": LayoutEntry(8, 8, 8, 8, "Fastest unsigned type with at least 64 bits"),

    # Least types
    "int_least8_t": LayoutEntry(1, 1, 1, 1, "Smallest type with at least 8 bits"),
    "uint_least8_t": LayoutEntry(1, 1, 1, 1, "Smallest unsigned type with at least 8 bits"),
    "int_least16_t": LayoutEntry(2, 2, 2, 2, "Smallest type with at least 16 bits"),
    "uint_least16_t": LayoutEntry(2, 2, 2, 2, "Smallest unsigned type with at least 16 bits"),
    "int_least32_t": LayoutEntry(4, 4, 4, 4, "Smallest type with at least 32 bits"),
    "uint_least32_t": LayoutEntry(4, 4, 4, 4, "Smallest unsigned type with at least 32 bits"),
    "int_least64_t": LayoutEntry(8, 8, 8, 8, "Smallest type with at least 64 bits"),
    "uint_least64_t": LayoutEntry(8, 8, 8, 8, "Smallest unsigned type with at least 64 bits"),

    # Maximum width
    "intmax_t": LayoutEntry(8, 8, 8, 8, "Maximum width signed integer"),
    "uintmax_t": LayoutEntry(8, 8, 8, 8, "Maximum width unsigned integer"),
}

# Lookup index keyed by normalized name ("_Bool" -> "_bool").
_BY_NORMALIZED_NAME: dict[str, LayoutEntry] = {
    normalize_type_name(name): entry for name, entry in BUILTIN_TYPES.items()
}


def get_layout_entry(type_name: str) -> LayoutEntry | None:
    """
    Look up a built-in type by name.

    Args:
        type_name: Type name in any case or spacing (e.g. ``"unsigned  LONG"``)

    Returns:
        The layout entry, or None for names outside the table
    """
    return _BY_NORMALIZED_NAME.get(normalize_type_name(type_name))
