"""
MCP Tools for C Layout Analyzer.

Layout tools (layout module):
- get_type_layout: Layout of the type under a cursor in a line
- get_type_layout_in_file: Same, at a position in a file
- lookup_type: Layout of a type expression

Architecture tools:
- get_architecture: Effective target architecture
- configure: Change architecture mode / toolchain descriptor at runtime
"""

from . import layout

__all__ = ["layout"]
