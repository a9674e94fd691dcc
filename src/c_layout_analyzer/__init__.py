"""
C Layout Analyzer - MCP Server for C/C++ type memory layouts.

Provides tools for:
- Locating the type expression under a cursor in C/C++ source
- Architecture-aware size/alignment of built-in types (32-bit / 64-bit)
- Pointer sizing and user-defined aggregate lookups
- Target architecture resolution (host / manual / toolchain target)
"""

__version__ = "0.1.0"
