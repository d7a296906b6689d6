"""
Base exception hierarchy

Provides a consistent exception structure across the toolkit
with clear error messages and recovery hints.
"""

from pathlib import Path


class SnapshotToolkitError(Exception):
    """
    Base exception for all toolkit errors

    Attributes:
        message: Error message
        component: Component that raised the error
        recovery_hint: Optional hint for recovery
    """

    def __init__(self, message: str, component: str = "", recovery_hint: str = ""):
        self.message = message
        self.component = component
        self.recovery_hint = recovery_hint
        super().__init__(message)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.component:
            msg = f"[{self.component}] {msg}"
        if self.recovery_hint:
            msg += f"\nRecovery: {self.recovery_hint}"
        return msg


class ConfigurationError(SnapshotToolkitError):
    """Configuration-related errors"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(
            message,
            component="Configuration",
            recovery_hint=recovery_hint or "Check your environment variables and .env file",
        )


class ValidationError(SnapshotToolkitError):
    """Validation errors (tolerances, buffers, keys)"""

    def __init__(self, message: str, recovery_hint: str = ""):
        super().__init__(message, component="Validation", recovery_hint=recovery_hint)


class DimensionMismatchError(SnapshotToolkitError):
    """Candidate and reference images have different sizes"""

    def __init__(self, candidate_size: tuple[int, int], reference_size: tuple[int, int]):
        self.candidate_size = candidate_size
        self.reference_size = reference_size
        super().__init__(
            f"Image size mismatch: candidate={candidate_size[0]}x{candidate_size[1]}, "
            f"reference={reference_size[0]}x{reference_size[1]}",
            component="Comparison",
            recovery_hint="Re-record the reference image if the new size is intended",
        )


class SnapshotMismatchError(SnapshotToolkitError):
    """Images have equal sizes but too many pixels differ"""

    def __init__(self, differing_pixel_fraction: float, tolerance: float):
        self.differing_pixel_fraction = differing_pixel_fraction
        self.tolerance = tolerance
        super().__init__(
            f"Images differ: {differing_pixel_fraction:.4%} of pixels changed "
            f"(tolerance {tolerance:.4%})",
            component="Comparison",
        )


class EmptySuffixSetError(SnapshotToolkitError):
    """No reference directory suffixes were supplied"""

    def __init__(self):
        super().__init__(
            "Suffixes set cannot be empty",
            component="Verification",
            recovery_hint="Pass at least one suffix, or None for the default suffixes",
        )


class StorageError(SnapshotToolkitError):
    """Base class for reference store I/O errors"""

    def __init__(self, message: str, path: Path | None = None, recovery_hint: str = ""):
        self.path = path
        super().__init__(message, component="Storage", recovery_hint=recovery_hint)


class ReferenceNotFoundError(StorageError):
    """No reference image exists for a key"""

    def __init__(self, key: str, path: Path):
        self.key = key
        super().__init__(
            f"Reference image not found: {key} ({path})",
            path=path,
            recovery_hint="Run once in record mode to create the reference image",
        )


class StorageReadError(StorageError):
    """A reference image exists but could not be read or decoded"""


class StorageWriteError(StorageError):
    """A reference image could not be written"""


class SnapshotAssertionError(SnapshotToolkitError, AssertionError):
    """Raised to the test runner when no reference image matched"""

    def __init__(self, message: str):
        super().__init__(message, component="Snapshot")


class RecordModeError(SnapshotToolkitError, AssertionError):
    """Raised after recording so a test run in record mode never passes silently"""

    def __init__(self, key: str, path: Path):
        self.key = key
        self.path = path
        super().__init__(
            f"Test ran in record mode. Reference image is now saved: {path}",
            component="Snapshot",
            recovery_hint="Disable record mode to perform an actual snapshot comparison",
        )
