"""
Declaration Scanner - user-defined type names via tree-sitter.

Collects the struct/union/class definitions and aggregate typedef names
declared in a C/C++ document. These feed the known-identifier strategy
of the locator and key the aggregate size mapping the engine consumes.

Aggregate sizes themselves (member layout, padding) are supplied by the
caller; nothing here computes them.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import sys
from pathlib import Path
from typing import Any

import tree_sitter_cpp as tscpp
from tree_sitter import Language, Parser, Query as TSQuery, QueryCursor

from ..config import Config, get_config
from ..layout.engine import AggregateInfo
from .queries import AGGREGATE_NODE_KINDS, AGGREGATE_QUERIES, QUERY_PATTERNS


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class AggregateDeclaration:
    """A user-defined aggregate type declared in a document."""
    name: str
    kind: str
    line: int
    aliases: list[str] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        """The tag name followed by every typedef alias."""
        return [self.name, *self.aliases]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "kind": self.kind,
            "line": self.line,
            "aliases": self.aliases,
        }


# Modification time (ns) and size in bytes of a scanned file
FileStamp = tuple[int, int]


def _node_text(node: Any) -> str:
    return node.text.decode(errors="ignore")


# ============================================================================
# Scanner
# ============================================================================

class DeclarationScanner:
    """
    Scans C/C++ source for aggregate type declarations.

    File scans are cached by path (FIFO eviction, bounded by the
    configured cache size). A cached scan is reused only while the
    file's modification time and size are unchanged.
    """

    def __init__(self, config: Config | None = None):
        """Initialize the scanner."""
        self._language = Language(tscpp.language())
        self._parser = Parser(self._language)
        self._config = config

        self._query_cache: dict[str, TSQuery] = {}
        self._file_cache: dict[str, tuple[FileStamp, list[AggregateDeclaration]]] = {}
        self._cache_queue: list[str] = []

        self._init_queries()

    @property
    def config(self) -> Config:
        return self._config or get_config()

    def _init_queries(self) -> None:
        """Compile the declaration queries."""
        for name, pattern in QUERY_PATTERNS.items():
            try:
                self._query_cache[name] = TSQuery(self._language, pattern)
            except Exception as e:
                print(f"Warning: Failed to compile query '{name}': {e}", file=sys.stderr)

    def _manage_cache(
        self, key: str, value: tuple[FileStamp, list[AggregateDeclaration]]
    ) -> None:
        """Manage cache size using FIFO eviction."""
        if len(self._file_cache) >= self.config.cache_max_size:
            if self._cache_queue:
                oldest = self._cache_queue.pop(0)
                self._file_cache.pop(oldest, None)

        self._file_cache[key] = value
        self._cache_queue.append(key)

    def clear_cache(self) -> None:
        """Drop every cached file scan."""
        self._file_cache.clear()
        self._cache_queue.clear()

    # ========================================================================
    # Scanning
    # ========================================================================

    def scan(self, content: str) -> list[AggregateDeclaration]:
        """
        Find aggregate declarations in source text.

        Args:
            content: C/C++ source

        Returns:
            Declarations in first-seen order, one per tag or anonymous typedef
        """
        tree = self._parser.parse(bytes(content, "utf-8"))
        declarations: dict[str, AggregateDeclaration] = {}

        for query_name, kind in AGGREGATE_QUERIES.items():
            query = self._query_cache.get(query_name)
            if not query:
                continue

            for _, captured in QueryCursor(query).matches(tree.root_node):
                name_nodes = captured.get("name") or []
                aggregate_nodes = captured.get("aggregate") or []
                body_nodes = captured.get("body") or []
                if not name_nodes or not aggregate_nodes:
                    continue

                # Skip forward declarations and elaborated uses (no body)
                if not body_nodes:
                    continue

                name = _node_text(name_nodes[0])
                if name not in declarations:
                    declarations[name] = AggregateDeclaration(
                        name=name,
                        kind=kind,
                        line=aggregate_nodes[0].start_point[0] + 1,
                    )

        self._collect_typedefs(tree, declarations)
        return sorted(declarations.values(), key=lambda d: d.line)

    def _collect_typedefs(self, tree: Any, declarations: dict[str, AggregateDeclaration]) -> None:
        """Attach typedef aliases to their aggregate, or declare anonymous ones."""
        query = self._query_cache.get("TYPEDEF")
        if not query:
            return

        for _, captured in QueryCursor(query).matches(tree.root_node):
            type_nodes = captured.get("type") or []
            alias_nodes = captured.get("alias") or []
            typedef_nodes = captured.get("typedef") or []
            if not type_nodes or not alias_nodes or not typedef_nodes:
                continue

            type_node = type_nodes[0]
            kind = AGGREGATE_NODE_KINDS.get(type_node.type)
            if kind is None:
                continue

            alias = _node_text(alias_nodes[0])
            line = typedef_nodes[0].start_point[0] + 1
            tag_node = type_node.child_by_field_name("name")

            if tag_node is None:
                # typedef struct { ... } Name;
                if type_node.child_by_field_name("body") is not None and alias not in declarations:
                    declarations[alias] = AggregateDeclaration(name=alias, kind=kind, line=line)
                continue

            tag = _node_text(tag_node)
            declaration = declarations.get(tag)
            if declaration is None:
                # typedef struct Tag Alias; with Tag defined elsewhere
                declaration = AggregateDeclaration(name=tag, kind=kind, line=line)
                declarations[tag] = declaration
            if alias != tag and alias not in declaration.aliases:
                declaration.aliases.append(alias)

    def scan_file(self, file_path: str) -> list[AggregateDeclaration]:
        """
        Find aggregate declarations in a file.

        Args:
            file_path: Path to a C/C++ source or header file

        Returns:
            Declarations found in the file
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        key = str(path.resolve())
        stat = path.stat()
        stamp = (stat.st_mtime_ns, stat.st_size)

        cached = self._file_cache.get(key) if self.config.cache_enabled else None
        if cached is not None and cached[0] == stamp:
            return cached[1]

        content = path.read_text(encoding="utf-8", errors="ignore")
        declarations = self.scan(content)

        if self.config.cache_enabled:
            if cached is not None:
                self._file_cache[key] = (stamp, declarations)
            else:
                self._manage_cache(key, (stamp, declarations))
        return declarations


# ============================================================================
# Aggregate Mapping
# ============================================================================

def known_type_names(declarations: Iterable[AggregateDeclaration]) -> set[str]:
    """All tag names and typedef aliases declared."""
    names: set[str] = set()
    for declaration in declarations:
        names.update(declaration.names)
    return names


def build_aggregate_map(
    declarations: Iterable[AggregateDeclaration],
    sizes: Mapping[str, int],
) -> dict[str, AggregateInfo]:
    """
    Build the name -> AggregateInfo mapping consumed by the engine.

    A size given for any name of a declaration (tag or alias) applies to
    all of its names. Sizes for names not declared in the document are
    kept as-is.

    Args:
        declarations: Declarations from scan()/scan_file()
        sizes: Total sizes in bytes, keyed by type name

    Returns:
        Mapping from every sized name to its AggregateInfo
    """
    aggregates = {name: AggregateInfo(total_size=size) for name, size in sizes.items()}

    for declaration in declarations:
        size = next((sizes[n] for n in declaration.names if n in sizes), None)
        if size is None:
            continue
        for name in declaration.names:
            aggregates.setdefault(name, AggregateInfo(total_size=size))

    return aggregates


# ============================================================================
# Global Instance
# ============================================================================

_scanner: DeclarationScanner | None = None


def get_scanner() -> DeclarationScanner:
    """Get the global scanner instance."""
    global _scanner
    if _scanner is None:
        _scanner = DeclarationScanner()
    return _scanner


def set_scanner(scanner: DeclarationScanner | None) -> None:
    """Set the global scanner instance (useful for testing)."""
    global _scanner
    _scanner = scanner
