"""
Snapshot Toolkit

Visual regression testing for UI components: compare rendered snapshots
against recorded reference images, or record new references.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from snapshot_toolkit.core.exceptions import SnapshotToolkitError
from snapshot_toolkit.visual_testing import (
    ComparisonResult,
    ImageComparator,
    PixelBuffer,
    ReferenceStore,
    SnapshotVerifier,
    VerificationResult,
)

__all__ = [
    "ComparisonResult",
    "ImageComparator",
    "PixelBuffer",
    "ReferenceStore",
    "SnapshotToolkitError",
    "SnapshotVerifier",
    "VerificationResult",
]
