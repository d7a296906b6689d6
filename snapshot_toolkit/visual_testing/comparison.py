"""
Snapshot Comparison Algorithm

Uses Pillow band operations for pixel-by-pixel comparison of snapshots.
A pixel differs when any RGBA channel differs by more than the channel
tolerance; the image matches when the fraction of differing pixels is
within the tolerance.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageChops, ImageDraw

from snapshot_toolkit.core.exceptions import (
    DimensionMismatchError,
    SnapshotMismatchError,
    SnapshotToolkitError,
    ValidationError,
)
from snapshot_toolkit.visual_testing.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_TOLERANCE = 0
HIGHLIGHT_COLOR = (255, 0, 0, 255)


def validate_tolerance(tolerance: float) -> None:
    """Raise ValidationError unless tolerance is a fraction in [0, 1]"""
    if not 0.0 <= tolerance <= 1.0:
        raise ValidationError(f"Tolerance must be in [0, 1], got {tolerance}")


@dataclass
class ComparisonResult:
    """Result of a snapshot comparison"""

    matches: bool
    differing_pixel_fraction: float  # 0.0 to 1.0
    differing_pixel_count: int
    total_pixels: int
    tolerance: float  # Tolerance used (0.0 to 1.0)
    channel_tolerance: int
    diagnostic: SnapshotToolkitError | None = None

    @property
    def dimension_mismatch(self) -> bool:
        return isinstance(self.diagnostic, DimensionMismatchError)

    def raise_for_mismatch(self) -> None:
        """Raise the diagnostic error if the comparison did not match"""
        if self.matches:
            return
        if self.diagnostic is not None:
            raise self.diagnostic
        raise SnapshotMismatchError(self.differing_pixel_fraction, self.tolerance)

    def describe(self) -> str:
        """One-line human readable summary"""
        if self.diagnostic is not None:
            return str(self.diagnostic.message)
        return (
            f"{self.differing_pixel_count}/{self.total_pixels} pixels differ "
            f"({self.differing_pixel_fraction:.4%}, tolerance {self.tolerance:.4%})"
        )


class ImageComparator:
    """
    Compares pixel buffers using per-pixel analysis.

    Features:
    - Aggregate tolerance (fraction of pixels allowed to differ)
    - Per-channel tolerance (default 0: exact channel equality)
    - Diff image generation highlighting differences
    """

    def __init__(
        self,
        channel_tolerance: int = DEFAULT_CHANNEL_TOLERANCE,
        output_dir: Path | None = None,
    ):
        """
        Initialize comparator.

        Args:
            channel_tolerance: Per-channel delta still counted as equal (0-255, default 0)
            output_dir: Directory to save diff images
        """
        if not 0 <= channel_tolerance <= 255:
            raise ValidationError(f"Channel tolerance must be in 0..255, got {channel_tolerance}")
        self.channel_tolerance = channel_tolerance
        self.output_dir = output_dir

    def compare(
        self,
        candidate: PixelBuffer,
        reference: PixelBuffer,
        tolerance: float = 0.0,
    ) -> ComparisonResult:
        """
        Compare a candidate snapshot against a reference.

        Args:
            candidate: Freshly captured pixels
            reference: Recorded reference pixels
            tolerance: Maximum fraction of differing pixels (0.0 to 1.0)

        Returns:
            ComparisonResult; a size mismatch never matches and carries
            a DimensionMismatchError diagnostic
        """
        validate_tolerance(tolerance)

        if candidate.size != reference.size:
            logger.warning(f"Image size mismatch: candidate={candidate.size}, reference={reference.size}")
            return ComparisonResult(
                matches=False,
                differing_pixel_fraction=1.0,
                differing_pixel_count=max(candidate.total_pixels, reference.total_pixels),
                total_pixels=max(candidate.total_pixels, reference.total_pixels),
                tolerance=tolerance,
                channel_tolerance=self.channel_tolerance,
                diagnostic=DimensionMismatchError(candidate.size, reference.size),
            )

        total_pixels = candidate.total_pixels
        if total_pixels == 0:
            diff_pixel_count = 0
            fraction = 0.0
        else:
            mask = self._difference_mask(candidate.to_image(), reference.to_image())
            diff_pixel_count = total_pixels - mask.histogram()[0]
            fraction = diff_pixel_count / total_pixels

        matches = fraction <= tolerance

        logger.info(
            f"Comparison complete: differing={diff_pixel_count}/{total_pixels} "
            f"({fraction:.4%}), tolerance={tolerance:.4%}, matches={matches}"
        )

        return ComparisonResult(
            matches=matches,
            differing_pixel_fraction=fraction,
            differing_pixel_count=diff_pixel_count,
            total_pixels=total_pixels,
            tolerance=tolerance,
            channel_tolerance=self.channel_tolerance,
        )

    def compare_strict(
        self,
        candidate: PixelBuffer,
        reference: PixelBuffer,
        tolerance: float = 0.0,
    ) -> ComparisonResult:
        """
        Compare, raising DimensionMismatchError when sizes differ.

        Raises:
            DimensionMismatchError: If candidate and reference sizes differ
        """
        result = self.compare(candidate, reference, tolerance)
        if result.dimension_mismatch:
            raise result.diagnostic
        return result

    def _difference_mask(self, candidate_img: Image.Image, reference_img: Image.Image) -> Image.Image:
        """
        Build an "L" mask that is 255 where a pixel differs and 0 elsewhere.
        """
        threshold = self.channel_tolerance
        diff = ImageChops.difference(candidate_img, reference_img)
        bands = [band.point(lambda v: 255 if v > threshold else 0) for band in diff.split()]

        mask = bands[0]
        for band in bands[1:]:
            mask = ImageChops.lighter(mask, band)
        return mask

    def generate_diff_image(self, candidate: PixelBuffer, reference: PixelBuffer) -> Image.Image:
        """
        Generate a diff image highlighting differences.

        Creates a side-by-side image showing:
        - Reference on left
        - Candidate in middle
        - Differing pixels highlighted in red on right (equal sizes only)
        """
        width = max(candidate.width, reference.width)
        height = max(candidate.height, reference.height)

        diff_img = Image.new("RGBA", (width * 3, height), (30, 30, 30, 255))

        candidate_img = candidate.to_image()
        reference_img = reference.to_image()

        diff_img.paste(reference_img, (0, 0))
        diff_img.paste(candidate_img, (width, 0))

        label = "Diff (size mismatch)"
        if candidate.size == reference.size and candidate.total_pixels > 0:
            mask = self._difference_mask(candidate_img, reference_img)
            highlight = candidate_img.copy()
            highlight.paste(HIGHLIGHT_COLOR, (0, 0, candidate.width, candidate.height), mask)
            diff_img.paste(highlight, (width * 2, 0))
            label = f"Diff ({candidate.total_pixels - mask.histogram()[0]} pixels)"

        # Add labels
        draw = ImageDraw.Draw(diff_img)
        draw.text((2, 2), "Reference", fill=(255, 255, 255, 255))
        draw.text((width + 2, 2), "Candidate", fill=(255, 255, 255, 255))
        draw.text((width * 2 + 2, 2), label, fill=HIGHLIGHT_COLOR)

        return diff_img

    def save_diff_image(
        self,
        candidate: PixelBuffer,
        reference: PixelBuffer,
        name: str,
        output_dir: Path | None = None,
    ) -> Path:
        """
        Generate a diff image and save it as ``diff_<name>.png``.

        Args:
            candidate: Freshly captured pixels
            reference: Recorded reference pixels
            name: Base name, usually the reference key
            output_dir: Overrides the comparator's output directory

        Returns:
            Path of the saved diff image
        """
        target_dir = output_dir or self.output_dir
        if target_dir is None:
            raise ValidationError("No output directory configured for diff images")

        target_dir.mkdir(parents=True, exist_ok=True)
        diff_path = target_dir / f"diff_{name}.png"
        self.generate_diff_image(candidate, reference).save(diff_path, "PNG")

        logger.info(f"Saved diff image to: {diff_path}")

        return diff_path
