"""
Tests for the exception hierarchy
"""

from pathlib import Path

from snapshot_toolkit.core.exceptions import (
    DimensionMismatchError,
    EmptySuffixSetError,
    RecordModeError,
    ReferenceNotFoundError,
    SnapshotAssertionError,
    SnapshotToolkitError,
    StorageError,
    StorageWriteError,
)


class TestExceptionFormatting:
    def test_component_and_recovery_hint(self):
        """Test message formatting with component and hint"""
        error = SnapshotToolkitError("boom", component="Test", recovery_hint="try again")

        assert str(error) == "[Test] boom\nRecovery: try again"

    def test_dimension_mismatch_message(self):
        error = DimensionMismatchError((3, 2), (2, 2))

        assert "candidate=3x2" in str(error)
        assert "reference=2x2" in str(error)

    def test_empty_suffix_set(self):
        assert "Suffixes set cannot be empty" in str(EmptySuffixSetError())

    def test_storage_hierarchy(self):
        """Test that storage errors share a base class and carry the path"""
        path = Path("/refs/widget.png")

        assert isinstance(ReferenceNotFoundError("widget", path), StorageError)
        assert StorageWriteError("nope", path=path).path == path

    def test_assertion_errors_are_assertion_errors(self):
        """Test that test-runner errors are AssertionErrors"""
        assert isinstance(SnapshotAssertionError("failed"), AssertionError)
        assert isinstance(RecordModeError("widget", Path("/refs/widget.png")), AssertionError)
        assert isinstance(RecordModeError("widget", Path("/refs/widget.png")), SnapshotToolkitError)
