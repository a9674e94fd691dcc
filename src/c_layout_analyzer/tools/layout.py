"""
Type layout tools.

These tools resolve C/C++ type expressions to their memory layout for
the effective target architecture, the same information an editor
shows when hovering a type.

Note on FastMCP exposure:
- Tool descriptions are given at registration time in server.py.
- Parameter annotations stay in English for LLM clarity.

Configuration is done via environment variables (see config.py) or at
runtime through the `configure` tool.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from ..config import get_config
from ..cpp_analyzer import build_aggregate_map, get_scanner, known_type_names
from ..layout import LayoutResult, get_engine

ArchitectureType = Literal["auto", "x32", "x64", "target"]


# ============================================================================
# Rendering
# ============================================================================


def render_hover(result: LayoutResult, architecture_label: str, show_architecture: bool = True) -> str:
    """
    Render a layout as hover markdown.

    Args:
        result: Resolved layout.
        architecture_label: Label of the effective architecture.
        show_architecture: Append the architecture line.

    Returns:
        Markdown text, one fact per paragraph.
    """
    if result.is_aggregate:
        lines = [f"Size: `{result.size} bytes`"]
    else:
        lines = [f"Memory Size: `{result.size} bytes`"]

    if result.description:
        lines.append(f"_{result.description}_")

    if show_architecture:
        lines.append(f"Architecture: {architecture_label}")

    return "\n\n".join(lines)


def _payload(result: LayoutResult | None) -> dict:
    """Build the tool response for a (possibly absent) layout."""
    engine = get_engine()
    label = engine.current_architecture_label()

    if result is None:
        return {"found": False, "architecture": label}

    return {
        "found": True,
        **result.to_dict(),
        "architecture": label,
        "hover": render_hover(result, label, get_config().show_architecture),
    }


def _architecture_summary() -> dict:
    resolver = get_engine().resolver
    return {
        "mode": get_config().architecture.value,
        "is_64bit": resolver.is_64bit(),
        "label": resolver.label(),
        "pointer_size": resolver.pointer_size(),
        "host": resolver.host.machine,
    }


# ============================================================================
# Layout Tools
# ============================================================================


async def get_type_layout(
    line_text: Annotated[str, "One line of C/C++ source containing the type"],
    cursor_offset: Annotated[int, "0-based character offset of the cursor within the line"],
    known_types: Annotated[
        list[str] | None,
        "User-defined type names declared in the document (typedefs, structs, classes)",
    ] = None,
    aggregate_sizes: Annotated[
        dict[str, int] | None,
        "Total size in bytes of user-defined aggregates, keyed by type name",
    ] = None,
) -> dict:
    """
    Resolve the type expression under a cursor to its memory layout.

    Returns:
        A dict with:
        - found: bool
        - text / span / size / alignment / description (when found)
        - is_pointer / pointee_description / is_aggregate (when found)
        - architecture: str
        - hover: str (markdown, when found)
    """
    aggregates = build_aggregate_map((), aggregate_sizes or {})
    known = set(known_types or ()) | set(aggregates)

    result = get_engine().resolve(line_text, cursor_offset, known, aggregates)
    return _payload(result)


async def get_type_layout_in_file(
    file_path: Annotated[str, "C/C++ source or header file"],
    line: Annotated[int, "1-based line number"],
    column: Annotated[int, "0-based column of the cursor"],
    aggregate_sizes: Annotated[
        dict[str, int] | None,
        "Total size in bytes of user-defined aggregates, keyed by tag or typedef name",
    ] = None,
) -> dict:
    """
    Resolve the type at a position in a file.

    User-defined type names are discovered from the file's declarations;
    sizes for them come from `aggregate_sizes` (typedef aliases share
    the size of their tag).

    Returns:
        Same shape as get_type_layout, plus:
        - file: str
        - line: int
        - declared_types: list[str]
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    lines = path.read_text(encoding="utf-8", errors="ignore").split("\n")
    if line < 1 or line > len(lines):
        raise ValueError(f"Line out of range: {line} (file has {len(lines)} lines)")

    declarations = get_scanner().scan_file(file_path)
    aggregates = build_aggregate_map(declarations, aggregate_sizes or {})
    known = known_type_names(declarations) | set(aggregates)

    result = get_engine().resolve(lines[line - 1].rstrip("\r"), column, known, aggregates)

    payload = _payload(result)
    payload["file"] = file_path
    payload["line"] = line
    payload["declared_types"] = sorted(known_type_names(declarations))
    return payload


async def lookup_type(
    type_name: Annotated[str, "Type expression, e.g. 'unsigned long', 'struct Node *', 'size_t'"],
    aggregate_sizes: Annotated[
        dict[str, int] | None,
        "Total size in bytes of user-defined aggregates, keyed by type name",
    ] = None,
) -> dict:
    """
    Look up a type expression directly, without locating it in a line.

    Returns:
        Same shape as get_type_layout (span is null).
    """
    aggregates = build_aggregate_map((), aggregate_sizes or {})
    return _payload(get_engine().layout_of(type_name, aggregates))


# ============================================================================
# Architecture Tools
# ============================================================================


async def get_architecture() -> dict:
    """
    Get the effective target architecture.

    Returns:
        A dict:
        - mode: str (auto/x32/x64/target)
        - is_64bit: bool
        - label: str
        - pointer_size: int
        - host: str
    """
    return _architecture_summary()


async def configure(
    architecture: Annotated[
        ArchitectureType | None,
        "Architecture mode: 'auto' (host) | 'x32' | 'x64' | 'target' (toolchain descriptor)",
    ] = None,
    intellisense_mode: Annotated[
        str | None,
        "Toolchain target descriptor used in 'target' mode (e.g. 'windows-msvc-x64')",
    ] = None,
    show_architecture: Annotated[bool | None, "Append the architecture label to hovers"] = None,
) -> dict:
    """
    Change configuration at runtime.

    Only the given options are changed. The architecture is recomputed
    when the mode or toolchain descriptor changes, and cached document
    scans are dropped.

    Returns:
        The architecture summary plus `changed`: list[str].
    """
    updates = {
        key: value
        for key, value in (
            ("architecture", architecture),
            ("intellisense_mode", intellisense_mode),
            ("show_architecture", show_architecture),
        )
        if value is not None
    }

    changed = get_config().update(**updates)
    get_engine().on_configuration_changed(changed)

    return {"changed": sorted(changed), **_architecture_summary()}
