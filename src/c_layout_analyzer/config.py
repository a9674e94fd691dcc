"""
Configuration management for C Layout Analyzer.

Supports three architecture resolution modes plus manual override:
- auto: Host process word size (default)
- x32 / x64: Forced bit-width
- target: Toolchain-reported target descriptor (IntelliSense mode)

Configuration via environment variables:

Architecture:
- LAYOUT_ARCHITECTURE: auto/x32/x64/target (default: auto)
- C_CPP_INTELLISENSE_MODE: Toolchain target descriptor, read only in target mode
  (e.g. "windows-msvc-x64", "linux-gcc-arm")

Rendering:
- LAYOUT_SHOW_ARCHITECTURE: Append the architecture label to hovers (default: true)

Cache Settings:
- ANALYZER_CACHE_ENABLED: Cache per-document declaration scans (default: true)
- ANALYZER_CACHE_MAX_SIZE: Maximum cached documents (default: 1000)
"""

import os
from dataclasses import dataclass, field, fields
from enum import Enum


class ArchitectureMode(str, Enum):
    """How the effective target architecture is chosen."""

    AUTO = "auto"  # Host process word size (default)
    X32 = "x32"  # Forced 32-bit
    X64 = "x64"  # Forced 64-bit
    TARGET = "target"  # Inferred from the toolchain descriptor


# Keys whose change requires the architecture to be recomputed.
ARCHITECTURE_KEYS = frozenset({"architecture", "intellisense_mode"})

# Keys whose change only affects how results are rendered.
RENDERING_KEYS = frozenset({"show_architecture"})


def _parse_bool(value: str | None, default: bool = True) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_int(value: str | None, default: int) -> int:
    """Parse integer from environment variable."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_architecture(value: str | None) -> ArchitectureMode:
    """Parse architecture mode from environment variable."""
    if value is None:
        return ArchitectureMode.AUTO
    try:
        return ArchitectureMode(value.strip().lower())
    except ValueError:
        return ArchitectureMode.AUTO


@dataclass
class Config:
    """Analyzer configuration loaded from environment variables."""

    # Architecture selection
    architecture: ArchitectureMode = field(
        default_factory=lambda: _parse_architecture(os.getenv("LAYOUT_ARCHITECTURE"))
    )
    intellisense_mode: str = field(
        default_factory=lambda: os.getenv("C_CPP_INTELLISENSE_MODE", "")
    )

    # Rendering
    show_architecture: bool = field(
        default_factory=lambda: _parse_bool(os.getenv("LAYOUT_SHOW_ARCHITECTURE"), True)
    )

    # Cache settings
    cache_enabled: bool = field(
        default_factory=lambda: _parse_bool(os.getenv("ANALYZER_CACHE_ENABLED"), True)
    )
    cache_max_size: int = field(
        default_factory=lambda: _parse_int(os.getenv("ANALYZER_CACHE_MAX_SIZE"), 1000)
    )

    def __post_init__(self):
        if isinstance(self.architecture, str):
            self.architecture = _parse_architecture(self.architecture)

    def update(self, **values) -> set[str]:
        """Apply a configuration change.

        Args:
            **values: Field names and their new values.

        Returns:
            Names of the fields whose value actually changed.
        """
        known = {f.name for f in fields(self)}
        changed: set[str] = set()

        for name, value in values.items():
            if name not in known:
                raise AttributeError(f"Unknown configuration key: {name}")
            if name == "architecture" and not isinstance(value, ArchitectureMode):
                value = ArchitectureMode(str(value).strip().lower())
            if getattr(self, name) != value:
                setattr(self, name, value)
                changed.add(name)

        return changed


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    global _config
    _config = None
