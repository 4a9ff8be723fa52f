"""Error hierarchy for the center search and its configuration."""

from __future__ import annotations


class MandelscopeError(Exception):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class InvalidConfiguration(MandelscopeError, ValueError):
    """Raised for option values that would make the search degenerate."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__("INVALID_CONFIGURATION", f"{key}: {message}")
        self.key = key


class NoStructureFound(MandelscopeError):
    """Raised when every quadrant of the coarse grid scores zero complexity."""

    def __init__(self, delta: float, center) -> None:
        super().__init__(
            "NO_STRUCTURE_FOUND",
            f"no structure is found inside the domain (delta={delta:.1e}, center=({center.x:+.6e}, {center.y:+.6e}))",
        )
        self.delta = delta
        self.center = center
