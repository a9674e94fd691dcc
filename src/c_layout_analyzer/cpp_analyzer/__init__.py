"""
C/C++ Declaration Analysis.

Uses tree-sitter to find the user-defined aggregate types declared in a
document, which key the aggregate sizes the layout engine consumes.

Key Components:
- DeclarationScanner: tree-sitter based declaration scanner
- get_scanner(): Get the global scanner instance
- build_aggregate_map(): Join declarations with externally supplied sizes
"""

from .declarations import (
    AggregateDeclaration,
    DeclarationScanner,
    build_aggregate_map,
    get_scanner,
    known_type_names,
    set_scanner,
)
from .queries import (
    AGGREGATE_NODE_KINDS,
    AGGREGATE_QUERIES,
    QUERY_PATTERNS,
)

__all__ = [
    # Scanner
    "DeclarationScanner",
    "get_scanner",
    "set_scanner",
    # Data classes
    "AggregateDeclaration",
    # Helpers
    "build_aggregate_map",
    "known_type_names",
    # Queries
    "QUERY_PATTERNS",
    "AGGREGATE_QUERIES",
    "AGGREGATE_NODE_KINDS",
]
