"""
Pixel buffer

Immutable 8-bit RGBA pixel data, the unit the comparator works on.
"""

from dataclasses import dataclass

from PIL import Image

from snapshot_toolkit.core.exceptions import ValidationError

PIXEL_MODE = "RGBA"
BYTES_PER_PIXEL = 4


@dataclass(frozen=True)
class PixelBuffer:
    """
    Captured pixels of a rendered element

    Attributes:
        width: Width in pixels
        height: Height in pixels
        data: Row-major RGBA bytes, length width * height * 4
    """

    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        """Validate dimensions and data length"""
        if self.width < 0 or self.height < 0:
            raise ValidationError(f"Invalid buffer size: {self.width}x{self.height}")

        if not isinstance(self.data, bytes):
            # Normalize bytearray/memoryview so the buffer stays immutable
            object.__setattr__(self, "data", bytes(self.data))

        expected = self.width * self.height * BYTES_PER_PIXEL
        if len(self.data) != expected:
            raise ValidationError(
                f"Buffer data length mismatch: got {len(self.data)}, expected {expected} "
                f"for {self.width}x{self.height} {PIXEL_MODE}"
            )

    @property
    def mode(self) -> str:
        return PIXEL_MODE

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Get the RGBA value at (x, y)"""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValidationError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        offset = (y * self.width + x) * BYTES_PER_PIXEL
        r, g, b, a = self.data[offset : offset + BYTES_PER_PIXEL]
        return r, g, b, a

    def with_pixel(self, x: int, y: int, rgba: tuple[int, int, int, int]) -> "PixelBuffer":
        """Return a copy with one pixel replaced"""
        self.pixel(x, y)
        offset = (y * self.width + x) * BYTES_PER_PIXEL
        data = bytearray(self.data)
        data[offset : offset + BYTES_PER_PIXEL] = bytes(rgba)
        return PixelBuffer(self.width, self.height, bytes(data))

    def to_image(self) -> Image.Image:
        """Convert to a Pillow RGBA image"""
        return Image.frombytes(PIXEL_MODE, self.size, self.data)

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        """Create from a Pillow image of any mode"""
        if image.mode != PIXEL_MODE:
            image = image.convert(PIXEL_MODE)
        width, height = image.size
        return cls(width=width, height=height, data=image.tobytes())

    @classmethod
    def solid(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "PixelBuffer":
        """Create a buffer filled with a single color"""
        return cls(width=width, height=height, data=bytes(rgba) * (width * height))
