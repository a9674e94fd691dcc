"""
Type-expression resolution and architecture-aware layout.

Key Components:
- TypeLayoutEngine: Resolves the type under a cursor to a layout
- ArchitectureResolver: Effective 32/64-bit architecture and table queries
- locate_type(): Finds the type expression touching a cursor offset
- BUILTIN_TYPES: Static size/alignment table
"""

from .architecture import (
    ArchitectureResolver,
    ArchitectureState,
    HostArchitecture,
    classify_target,
    get_resolver,
    set_resolver,
)
from .engine import (
    AggregateInfo,
    LayoutResult,
    TypeLayoutEngine,
    get_engine,
    set_engine,
)
from .locator import (
    STRATEGIES,
    TYPE_KEYWORDS,
    TypeMatch,
    TypeSpan,
    locate_type,
    word_at,
)
from .types import (
    BUILTIN_TYPES,
    LayoutEntry,
    get_layout_entry,
    normalize_type_name,
)

__all__ = [
    # Engine
    "TypeLayoutEngine",
    "get_engine",
    "set_engine",
    "AggregateInfo",
    "LayoutResult",
    # Architecture
    "ArchitectureResolver",
    "ArchitectureState",
    "HostArchitecture",
    "classify_target",
    "get_resolver",
    "set_resolver",
    # Locator
    "STRATEGIES",
    "TYPE_KEYWORDS",
    "TypeMatch",
    "TypeSpan",
    "locate_type",
    "word_at",
    # Table
    "BUILTIN_TYPES",
    "LayoutEntry",
    "get_layout_entry",
    "normalize_type_name",
]
