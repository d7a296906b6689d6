"""
Visual Testing Module

Provides pixel buffers, reference image storage and snapshot comparison
for visual regression testing.
"""

from snapshot_toolkit.visual_testing.comparison import ComparisonResult, ImageComparator
from snapshot_toolkit.visual_testing.pixel_buffer import PixelBuffer
from snapshot_toolkit.visual_testing.reference_store import ReferenceStore
from snapshot_toolkit.visual_testing.renderers import CallableRenderer, ImageRenderer
from snapshot_toolkit.visual_testing.verifier import (
    SnapshotVerifier,
    SuffixAttempt,
    VerificationResult,
)

__all__ = [
    "CallableRenderer",
    "ComparisonResult",
    "ImageComparator",
    "ImageRenderer",
    "PixelBuffer",
    "ReferenceStore",
    "SnapshotVerifier",
    "SuffixAttempt",
    "VerificationResult",
]
