"""
Reference Store

File-system persistence for reference images, one PNG per key.
"""

import logging
from pathlib import Path

from PIL import Image

from snapshot_toolkit.core.exceptions import (
    ReferenceNotFoundError,
    StorageReadError,
    StorageWriteError,
    ValidationError,
)
from snapshot_toolkit.core.paths import REFERENCE_IMAGE_EXTENSION
from snapshot_toolkit.visual_testing.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


def load_pixel_buffer(path: Path) -> PixelBuffer:
    """
    Decode an image file into a pixel buffer.

    Args:
        path: Image file path (any format Pillow can read)

    Returns:
        PixelBuffer in RGBA

    Raises:
        StorageReadError: If the file cannot be read or decoded
    """
    try:
        with Image.open(path) as img:
            return PixelBuffer.from_image(img)
    except OSError as e:
        logger.error(f"Failed to read image {path}: {e}")
        raise StorageReadError(f"Failed to read image: {path}: {e}", path=path) from e


def save_pixel_buffer(buffer: PixelBuffer, path: Path) -> Path:
    """
    Encode a pixel buffer as PNG, creating parent directories.

    Raises:
        StorageWriteError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        buffer.to_image().save(path, "PNG")
    except OSError as e:
        logger.error(f"Failed to write image {path}: {e}")
        raise StorageWriteError(
            f"Failed to write image: {path}: {e}",
            path=path,
            recovery_hint="Check that the reference directory is writable",
        ) from e
    return path


class ReferenceStore:
    """
    Stores reference images under a directory as ``<key>.png``.

    Keys may contain ``/`` to group references in subdirectories but
    must stay inside the store directory.
    """

    def __init__(self, directory: Path):
        """
        Initialize reference store.

        Args:
            directory: Directory holding the reference images (created on first record)
        """
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """
        Get the file path for a key

        Raises:
            ValidationError: For empty, absolute or traversing keys
        """
        if not key:
            raise ValidationError("Reference key cannot be empty")

        key_path = Path(key)
        if key_path.is_absolute() or ".." in key_path.parts:
            raise ValidationError(
                f"Invalid reference key: {key}",
                recovery_hint="Use relative keys without '..' components",
            )

        return self._directory / f"{key}{REFERENCE_IMAGE_EXTENSION}"

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def load(self, key: str) -> PixelBuffer:
        """
        Load a reference image.

        Raises:
            ReferenceNotFoundError: If no reference exists for the key
            StorageReadError: If the reference cannot be decoded
        """
        path = self.path_for(key)
        if not path.is_file():
            raise ReferenceNotFoundError(key, path)

        buffer = load_pixel_buffer(path)
        logger.debug(f"Loaded reference {key} ({buffer.width}x{buffer.height}) from {path}")
        return buffer

    def record(self, candidate: PixelBuffer, key: str) -> Path:
        """
        Persist a reference image, overwriting any existing entry.

        Returns:
            Path of the written file

        Raises:
            StorageWriteError: If the file cannot be written
        """
        path = save_pixel_buffer(candidate, self.path_for(key))
        logger.info(f"Recorded reference {key} ({candidate.width}x{candidate.height}) to {path}")
        return path

    def delete(self, key: str) -> bool:
        """
        Delete a reference image.

        Returns:
            True if a file was deleted, False if none existed
        """
        path = self.path_for(key)
        if not path.is_file():
            return False

        try:
            path.unlink()
        except OSError as e:
            raise StorageWriteError(f"Failed to delete reference: {path}: {e}", path=path) from e

        logger.info(f"Deleted reference {key}")
        return True

    def list_keys(self) -> list[str]:
        """List all reference keys in the store, sorted"""
        if not self._directory.is_dir():
            return []

        return sorted(
            path.relative_to(self._directory).with_suffix("").as_posix()
            for path in self._directory.rglob(f"*{REFERENCE_IMAGE_EXTENSION}")
            if path.is_file()
        )
