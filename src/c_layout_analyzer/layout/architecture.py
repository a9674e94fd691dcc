"""
Architecture Resolver.

Holds the effective target architecture (32-bit vs 64-bit plus a
human-readable label) and answers size/alignment queries against the
built-in layout table for that bit-width.

Resolution modes (re-derived from configuration on every refresh):
- auto: host process word size
- x32 / x64: forced bit-width
- target: classify the toolchain descriptor, falling back to the host
"""

import platform
import struct
import threading
from dataclasses import dataclass

from ..config import ArchitectureMode, Config, get_config
from .types import LayoutEntry, get_layout_entry


# Checked in this order; 64-bit wins when both could match ("arm64" contains "arm").
TARGET_64BIT_MARKERS = ("x64", "amd64", "arm64", "aarch64")
TARGET_32BIT_MARKERS = ("x86", "i386", "i686", "arm", "32")


@dataclass(frozen=True)
class HostArchitecture:
    """The machine name and word size of the running process."""
    machine: str
    is_64bit: bool

    @classmethod
    def detect(cls) -> "HostArchitecture":
        """Detect from the interpreter (a 32-bit process on a 64-bit OS is 32-bit)."""
        return cls(
            machine=platform.machine().lower() or "unknown",
            is_64bit=struct.calcsize("P") == 8,
        )


@dataclass(frozen=True)
class ArchitectureState:
    """Effective architecture; always replaced as a whole."""
    is_64bit: bool
    label: str


def classify_target(descriptor: str) -> bool | None:
    """
    Classify a toolchain target descriptor by substring.

    Args:
        descriptor: e.g. ``"windows-msvc-x64"`` or ``"linux-gcc-arm"``

    Returns:
        True for 64-bit, False for 32-bit, None when empty or unrecognized
    """
    mode = descriptor.strip().lower()
    if not mode:
        return None
    if any(marker in mode for marker in TARGET_64BIT_MARKERS):
        return True
    if any(marker in mode for marker in TARGET_32BIT_MARKERS):
        return False
    return None


class ArchitectureResolver:
    """
    Resolves the effective architecture and serves layout queries.

    The configuration is injectable so independent resolvers with
    different forced architectures can coexist; without one, the global
    configuration is read on each refresh.
    """

    def __init__(self, config: Config | None = None, host: HostArchitecture | None = None):
        self._config = config
        self._host = host or HostArchitecture.detect()
        self._lock = threading.Lock()
        self._state = self._host_state("host")
        self.refresh()

    # ========================================================================
    # State
    # ========================================================================

    def refresh(self, config: Config | None = None) -> None:
        """
        Recompute the architecture from configuration.

        Args:
            config: Optional replacement configuration object
        """
        if config is not None:
            self._config = config
        state = self._resolve(self._config or get_config())
        with self._lock:
            self._state = state

    @property
    def state(self) -> ArchitectureState:
        return self._state

    @property
    def host(self) -> HostArchitecture:
        return self._host

    def is_64bit(self) -> bool:
        return self._state.is_64bit

    def label(self) -> str:
        return self._state.label

    def _host_state(self, note: str) -> ArchitectureState:
        return ArchitectureState(self._host.is_64bit, f"{self._host.machine} ({note})")

    def _resolve(self, config: Config) -> ArchitectureState:
        mode = config.architecture

        if mode == ArchitectureMode.X32:
            return ArchitectureState(False, "x32 (manual)")

        if mode == ArchitectureMode.X64:
            return ArchitectureState(True, "x64 (manual)")

        if mode == ArchitectureMode.TARGET:
            descriptor = (config.intellisense_mode or "").strip().lower()
            is_64bit = classify_target(descriptor)
            if is_64bit is None:
                return self._host_state("target unavailable, host fallback")
            prefix = "x64" if is_64bit else "x32"
            return ArchitectureState(is_64bit, f"{prefix} (target: {descriptor})")

        return self._host_state("host")

    # ========================================================================
    # Layout Queries
    # ========================================================================

    def lookup(self, type_name: str) -> LayoutEntry | None:
        """Exact, case-insensitive, whitespace-normalized table lookup."""
        return get_layout_entry(type_name)

    def size_of(self, type_name: str) -> int | None:
        entry = self.lookup(type_name)
        if entry is None:
            return None
        return entry.size(self._state.is_64bit)

    def alignment_of(self, type_name: str) -> int | None:
        entry = self.lookup(type_name)
        if entry is None:
            return None
        return entry.alignment(self._state.is_64bit)

    def pointer_size(self) -> int:
        """Pointer width for the current bit-width, independent of the pointee."""
        return 8 if self._state.is_64bit else 4


# ============================================================================
# Global Instance
# ============================================================================

_resolver: ArchitectureResolver | None = None


def get_resolver() -> ArchitectureResolver:
    """Get the global resolver instance."""
    global _resolver
    if _resolver is None:
        _resolver = ArchitectureResolver()
    return _resolver


def set_resolver(resolver: ArchitectureResolver | None) -> None:
    """Set the global resolver instance (useful for testing)."""
    global _resolver
    _resolver = resolver
