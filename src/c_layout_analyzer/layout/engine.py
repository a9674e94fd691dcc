"""
Layout Engine - resolves the type at a cursor into a memory layout.

Control flow per request:
1. Locate the type expression under the cursor (locator strategies)
2. Pointer expressions report pointer size; the base is resolved only
   for its description
3. Otherwise try the document's aggregates, then the built-in table
"""

import re
from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass

from ..config import ARCHITECTURE_KEYS, RENDERING_KEYS
from .architecture import ArchitectureResolver, get_resolver
from .locator import TypeSpan, locate_type


AGGREGATE_PREFIXES = ("struct ", "union ", "class ")

USER_DEFINED_DESCRIPTION = "User-defined type"

_POINTER_MARKERS = re.compile(r"\s*\*+\s*")


@dataclass(frozen=True)
class AggregateInfo:
    """Output of the external aggregate analyzer for one type."""
    total_size: int


@dataclass(frozen=True)
class LayoutResult:
    """A resolved layout, ready for rendering."""
    text: str
    size: int
    span: TypeSpan | None = None
    alignment: int | None = None
    description: str | None = None
    is_pointer: bool = False
    pointee_description: str | None = None
    is_aggregate: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "text": self.text,
            "span": {"start": self.span.start, "end": self.span.end} if self.span else None,
            "size": self.size,
            "alignment": self.alignment,
            "description": self.description,
            "is_pointer": self.is_pointer,
            "pointee_description": self.pointee_description,
            "is_aggregate": self.is_aggregate,
        }


class TypeLayoutEngine:
    """
    Resolves type expressions in source lines to architecture-aware layouts.

    Aggregates (user-defined structs, unions, classes) are supplied per
    call as a name -> AggregateInfo mapping; the engine only performs
    point lookups against it.
    """

    def __init__(self, resolver: ArchitectureResolver | None = None):
        self._resolver = resolver
        self._invalidation_listeners: list[Callable[[], None]] = []

    @property
    def resolver(self) -> ArchitectureResolver:
        if self._resolver is None:
            self._resolver = get_resolver()
        return self._resolver

    # ========================================================================
    # Public API
    # ========================================================================

    def resolve(
        self,
        line_text: str,
        cursor_offset: int,
        known_user_types: Collection[str] | None = None,
        aggregates: Mapping[str, AggregateInfo] | None = None,
    ) -> LayoutResult | None:
        """
        Resolve the type under the cursor.

        Args:
            line_text: One line of C/C++ source
            cursor_offset: 0-based character offset of the cursor
            known_user_types: User-defined type names in the document
                (defaults to the aggregate mapping's names)
            aggregates: Aggregate sizes for the document

        Returns:
            The layout, or None when nothing resolvable is under the cursor
        """
        aggregates = aggregates or {}
        if known_user_types is None:
            known_user_types = aggregates.keys()

        match = locate_type(line_text, cursor_offset, known_user_types)
        if match is None:
            return None

        result = self.layout_of(match.text, aggregates)
        if result is None:
            return None
        return LayoutResult(
            text=result.text,
            size=result.size,
            span=match.span,
            alignment=result.alignment,
            description=result.description,
            is_pointer=result.is_pointer,
            pointee_description=result.pointee_description,
            is_aggregate=result.is_aggregate,
        )

    def layout_of(
        self, type_text: str, aggregates: Mapping[str, AggregateInfo] | None = None
    ) -> LayoutResult | None:
        """
        Resolve an already-extracted type expression.

        Args:
            type_text: e.g. ``"unsigned long"``, ``"struct Node *"``, ``"Node"``
            aggregates: Aggregate sizes for the document

        Returns:
            The layout (without span), or None for unknown types
        """
        aggregates = aggregates or {}
        text = type_text.strip()
        if not text:
            return None

        if "*" in text:
            return self._pointer_layout(text, aggregates)

        aggregate = self.lookup_aggregate(text, aggregates)
        if aggregate is not None:
            return LayoutResult(
                text=text,
                size=aggregate.total_size,
                description=USER_DEFINED_DESCRIPTION,
                is_aggregate=True,
            )

        entry = self.resolver.lookup(text)
        if entry is None:
            return None
        is_64bit = self.resolver.is_64bit()
        return LayoutResult(
            text=text,
            size=entry.size(is_64bit),
            alignment=entry.alignment(is_64bit),
            description=entry.description,
        )

    def lookup_aggregate(
        self, name: str, aggregates: Mapping[str, AggregateInfo]
    ) -> AggregateInfo | None:
        """Exact name first, then with a leading aggregate keyword stripped."""
        info = aggregates.get(name)
        if info is not None:
            return info

        for prefix in AGGREGATE_PREFIXES:
            if name.startswith(prefix):
                return aggregates.get(name[len(prefix):].strip())
        return None

    def current_architecture_label(self) -> str:
        return self.resolver.label()

    # ========================================================================
    # Configuration Changes
    # ========================================================================

    def add_invalidation_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback that drops per-document caches."""
        self._invalidation_listeners.append(listener)

    def on_configuration_changed(self, changed_keys: Iterable[str]) -> None:
        """
        React to a configuration change notification.

        Args:
            changed_keys: Names of the configuration fields that changed
        """
        changed = set(changed_keys)
        if changed & ARCHITECTURE_KEYS:
            self.resolver.refresh()
        if changed & (ARCHITECTURE_KEYS | RENDERING_KEYS):
            for listener in self._invalidation_listeners:
                listener()

    # ========================================================================
    # Internals
    # ========================================================================

    def _pointer_layout(
        self, text: str, aggregates: Mapping[str, AggregateInfo]
    ) -> LayoutResult:
        pointer_size = self.resolver.pointer_size()
        base_text = " ".join(_POINTER_MARKERS.sub(" ", text).split())

        base = self.layout_of(base_text, aggregates) if base_text else None
        if base is not None:
            description = f"Pointer to {base_text}"
            pointee_description = base.description
        else:
            description = "Pointer type"
            pointee_description = None

        return LayoutResult(
            text=text,
            size=pointer_size,
            alignment=pointer_size,
            description=description,
            is_pointer=True,
            pointee_description=pointee_description,
        )


# ============================================================================
# Global Instance
# ============================================================================

_engine: TypeLayoutEngine | None = None


def get_engine() -> TypeLayoutEngine:
    """Get the global engine instance."""
    global _engine
    if _engine is None:
        _engine = TypeLayoutEngine()
    return _engine


def set_engine(engine: TypeLayoutEngine | None) -> None:
    """Set the global engine instance (useful for testing)."""
    global _engine
    _engine = engine
