"""
Snapshot Verifier

Captures an element once and checks it against reference images in an
ordered list of suffix directories, accepting the first match. In record
mode the first suffix directory receives the new reference instead.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from snapshot_toolkit.core.config import Settings, get_settings
from snapshot_toolkit.core.exceptions import (
    EmptySuffixSetError,
    RecordModeError,
    ReferenceNotFoundError,
    SnapshotAssertionError,
    SnapshotToolkitError,
    StorageError,
    StorageReadError,
)
from snapshot_toolkit.core.interfaces import IRenderer
from snapshot_toolkit.core.paths import default_suffixes, reference_directory
from snapshot_toolkit.visual_testing.comparison import ComparisonResult, ImageComparator, validate_tolerance
from snapshot_toolkit.visual_testing.pixel_buffer import PixelBuffer
from snapshot_toolkit.visual_testing.reference_store import ReferenceStore, save_pixel_buffer
from snapshot_toolkit.visual_testing.renderers import ImageRenderer

logger = logging.getLogger(__name__)


@dataclass
class SuffixAttempt:
    """Outcome of checking one suffix directory"""

    suffix: str
    path: Path
    comparison: ComparisonResult | None = None
    error: SnapshotToolkitError | None = None

    def describe(self) -> str:
        label = self.suffix or "<root>"
        if self.error is not None:
            return f"{label}: {self.error.message}"
        if self.comparison is not None:
            return f"{label}: {self.comparison.describe()}"
        return f"{label}: recorded"


@dataclass
class VerificationResult:
    """Result of verifying one snapshot across suffix directories"""

    key: str
    passed: bool
    recorded: bool = False
    suffix: str | None = None
    reference_path: Path | None = None
    comparison: ComparisonResult | None = None
    candidate: PixelBuffer | None = None
    attempts: list[SuffixAttempt] = field(default_factory=list)

    def failure_message(self) -> str:
        lines = [f"Snapshot comparison failed for '{self.key}':"]
        lines.extend(f"  - {attempt.describe()}" for attempt in self.attempts)
        return "\n".join(lines)


class SnapshotVerifier:
    """
    Verifies rendered elements against reference images.

    Features:
    - Ordered suffix fallback (first match wins)
    - Record mode (writes the reference and stops)
    - Failure artifacts (reference, failed and diff images)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        renderer: IRenderer | None = None,
        comparator: ImageComparator | None = None,
        record_mode: bool | None = None,
    ):
        """
        Initialize verifier.

        Args:
            settings: Settings to use (default: get_settings())
            renderer: Rendering capability (default: ImageRenderer)
            comparator: Image comparator (default: built from settings.channel_tolerance)
            record_mode: Overrides settings.record_mode when not None
        """
        self.settings = settings or get_settings()
        self.renderer = renderer or ImageRenderer()
        self.comparator = comparator or ImageComparator(
            channel_tolerance=self.settings.channel_tolerance,
            output_dir=self.settings.failure_image_dir,
        )
        self.record_mode = self.settings.record_mode if record_mode is None else record_mode

    def verify(
        self,
        element: Any,
        key: str,
        suffixes: Sequence[str] | None = None,
        tolerance: float = 0.0,
    ) -> VerificationResult:
        """
        Verify an element against its reference images.

        Args:
            element: Element handed to the renderer
            key: Reference key (see core.paths.reference_key)
            suffixes: Suffix variants in priority order (None: default_suffixes())
            tolerance: Maximum fraction of differing pixels (0.0 to 1.0)

        Returns:
            VerificationResult; passed is True on the first match or after recording

        Raises:
            EmptySuffixSetError: If suffixes is empty
            ValidationError: If tolerance is outside [0, 1]
            ConfigurationError: If the reference image root is not configured
            StorageWriteError: If recording fails
        """
        if suffixes is None:
            suffixes = default_suffixes()
        suffixes = list(suffixes)
        if not suffixes:
            raise EmptySuffixSetError()
        validate_tolerance(tolerance)

        root = self.settings.require_reference_image_dir()

        candidate = self.renderer.capture(element)
        result = VerificationResult(key=key, passed=False, candidate=candidate)

        for suffix in suffixes:
            store = ReferenceStore(reference_directory(root, suffix))
            path = store.path_for(key)

            if self.record_mode:
                store.record(candidate, key)
                result.attempts.append(SuffixAttempt(suffix=suffix, path=path))
                result.passed = True
                result.recorded = True
                result.suffix = suffix
                result.reference_path = path
                break

            attempt = SuffixAttempt(suffix=suffix, path=path)
            result.attempts.append(attempt)
            try:
                reference = store.load(key)
            except (ReferenceNotFoundError, StorageReadError) as e:
                logger.debug(f"Snapshot {key}: no usable reference in '{suffix}': {e.message}")
                attempt.error = e
                continue

            comparison = self.comparator.compare(candidate, reference, tolerance)
            attempt.comparison = comparison
            result.comparison = comparison
            result.reference_path = path
            if comparison.matches:
                result.passed = True
                result.suffix = suffix
                break

            logger.debug(f"Snapshot {key}: mismatch in '{suffix}': {comparison.describe()}")

        if result.passed:
            logger.info(
                f"Snapshot {key}: {'recorded' if result.recorded else 'matched'} "
                f"in '{result.suffix}' ({result.reference_path})"
            )
        else:
            logger.warning(f"Snapshot {key}: no reference matched across {len(suffixes)} suffixes")

        return result

    def assert_snapshot(
        self,
        element: Any,
        key: str,
        suffixes: Sequence[str] | None = None,
        tolerance: float = 0.0,
    ) -> VerificationResult:
        """
        Verify an element and raise assertion errors for the test runner.

        Raises:
            SnapshotAssertionError: If no suffix directory matched
            RecordModeError: After recording, when settings.fail_in_record_mode is set
        """
        result = self.verify(element, key, suffixes=suffixes, tolerance=tolerance)

        if result.recorded:
            if self.settings.fail_in_record_mode:
                raise RecordModeError(key, result.reference_path)
            return result

        if not result.passed:
            message = result.failure_message()
            artifact_error = None
            if self.settings.failure_image_dir is not None:
                try:
                    saved = self.save_failure_images(result)
                except StorageError as e:
                    logger.error(f"Could not save failure images for {key}: {e.message}")
                    message += f"\nFailure images could not be saved: {e.message}"
                    artifact_error = e
                else:
                    if saved:
                        message += f"\nFailure images saved to: {self.settings.failure_image_dir}"
            raise SnapshotAssertionError(message) from artifact_error

        return result

    def save_failure_images(self, result: VerificationResult) -> list[Path]:
        """
        Write reference_, failed_ and diff_ images for the last compared suffix.

        Returns:
            Paths written (empty when nothing was compared)
        """
        failure_dir = self.settings.failure_image_dir
        if failure_dir is None or result.candidate is None:
            return []

        name = result.key.replace("/", "_")
        saved = [save_pixel_buffer(result.candidate, failure_dir / f"failed_{name}.png")]

        if result.reference_path is not None and result.comparison is not None:
            reference = ReferenceStore(result.reference_path.parent).load(
                result.reference_path.stem
            )
            saved.append(save_pixel_buffer(reference, failure_dir / f"reference_{name}.png"))
            saved.append(
                self.comparator.save_diff_image(
                    result.candidate, reference, name, output_dir=failure_dir
                )
            )

        logger.info(f"Saved {len(saved)} failure images for {result.key} to {failure_dir}")
        return saved
