"""
MCP Server entry point - C Layout Analyzer.

Design goal: answer "how big is this type here?" for C/C++ source,
correctly for the target's bit-width.

Environment variables:
- LAYOUT_ARCHITECTURE: auto/x32/x64/target (default: auto)
- C_CPP_INTELLISENSE_MODE: Toolchain target descriptor (target mode)
- LAYOUT_SHOW_ARCHITECTURE: Append the architecture label to hovers
- ANALYZER_CACHE_ENABLED / ANALYZER_CACHE_MAX_SIZE: Declaration scan cache
"""

from __future__ import annotations

import argparse
import os
import sys

from fastmcp import FastMCP

from . import __version__
from .config import get_config
from .cpp_analyzer import get_scanner
from .layout import get_engine
from .tools import layout

# Initialize MCP server
mcp = FastMCP(
    name="CLayoutAnalyzer",
    version=__version__,
)


def _log(message: str) -> None:
    # stdout carries the stdio transport
    print(f"[C Layout Analyzer] {message}", file=sys.stderr)


def register_tools():
    """
    Register MCP tools.

    Layout tools (3):
    - get_type_layout: Type under a cursor in a line
    - get_type_layout_in_file: Type at a file position
    - lookup_type: Type expression lookup

    Architecture tools (2):
    - get_architecture: Effective architecture
    - configure: Runtime configuration change
    """
    mcp.tool(description="Resolve the C/C++ type under a cursor in a source line to size/alignment")(
        layout.get_type_layout
    )

    mcp.tool(description="Resolve the C/C++ type at a line/column in a source file to size/alignment")(
        layout.get_type_layout_in_file
    )

    mcp.tool(description="Look up size/alignment of a C/C++ type expression (e.g. 'unsigned long *')")(
        layout.lookup_type
    )

    mcp.tool(description="Get the effective target architecture (32/64-bit, label, pointer size)")(
        layout.get_architecture
    )

    mcp.tool(description="Change architecture mode / toolchain target descriptor / hover options")(
        layout.configure
    )

    _log("Registered 5 tools.")


def initialize_engine() -> None:
    """Resolve the architecture and connect cache invalidation."""
    engine = get_engine()
    engine.add_invalidation_listener(get_scanner().clear_cache)
    engine.resolver.refresh()
    _log(f"Architecture: {engine.current_architecture_label()}")


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="c-layout-analyzer",
        description="C Layout Analyzer MCP Server",
    )

    parser.add_argument(
        "--architecture",
        choices=["auto", "x32", "x64", "target"],
        help="Architecture mode (default: auto)",
        default=None,
    )
    parser.add_argument(
        "--intellisense-mode",
        help="Toolchain target descriptor used in target mode (e.g. windows-msvc-x64)",
        default=None,
    )
    parser.add_argument(
        "--hide-architecture",
        action="store_true",
        help="Do not append the architecture label to hovers",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print effective config and exit",
    )

    # Transport options
    parser.add_argument(
        "--transport",
        choices=["stdio", "http", "sse"],
        default="stdio",
        help="MCP transport (default: stdio)",
    )
    parser.add_argument(
        "--mcp-host",
        default="127.0.0.1",
        help="Host for http/sse transport (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--mcp-port",
        type=int,
        default=8000,
        help="Port for http/sse transport (default: 8000)",
    )
    parser.add_argument(
        "--mcp-path",
        default="/mcp",
        help="Path prefix for http transport (default: /mcp)",
    )

    return parser


def _apply_cli_overrides(args: argparse.Namespace) -> None:
    """Apply CLI overrides to env vars (single-run convenience)."""
    if args.architecture:
        os.environ["LAYOUT_ARCHITECTURE"] = args.architecture
    if args.intellisense_mode is not None:
        os.environ["C_CPP_INTELLISENSE_MODE"] = args.intellisense_mode
    if args.hide_architecture:
        os.environ["LAYOUT_SHOW_ARCHITECTURE"] = "false"


def main(argv: list[str] | None = None):
    """Run the MCP server."""
    parser = _build_arg_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    _apply_cli_overrides(args)

    if args.print_config:
        cfg = get_config()
        engine = get_engine()
        print("[C Layout Analyzer] Effective config:")
        print(f"  ARCHITECTURE: {cfg.architecture.value}")
        print(f"  INTELLISENSE_MODE: {cfg.intellisense_mode or '(unset)'}")
        print(f"  SHOW_ARCHITECTURE: {cfg.show_architecture}")
        print(f"  CACHE: enabled={cfg.cache_enabled} max_size={cfg.cache_max_size}")
        print(f"  Resolved: {engine.current_architecture_label()}")
        return

    register_tools()
    initialize_engine()

    if args.transport == "stdio":
        mcp.run()
    elif args.transport == "http":
        mcp.run(transport="http", host=args.mcp_host, port=args.mcp_port, path=args.mcp_path)
    else:
        mcp.run(transport="sse", host=args.mcp_host, port=args.mcp_port)


if __name__ == "__main__":
    main()
