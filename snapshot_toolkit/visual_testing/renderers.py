"""
Rendering adapters

The toolkit never draws UI itself; a renderer turns whatever the test hands
over into a PixelBuffer.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from PIL import Image

from snapshot_toolkit.core.exceptions import ValidationError
from snapshot_toolkit.visual_testing.pixel_buffer import PixelBuffer
from snapshot_toolkit.visual_testing.reference_store import load_pixel_buffer


class ImageRenderer:
    """
    Default renderer for elements that already are, or can produce, pixels.

    Accepts:
    - PixelBuffer
    - PIL.Image.Image (any mode)
    - image file paths
    - objects with a ``to_image()`` method returning a PIL image
    - zero-argument callables returning any of the above
    """

    def capture(self, element: Any) -> PixelBuffer:
        if isinstance(element, PixelBuffer):
            return element
        if isinstance(element, Image.Image):
            return PixelBuffer.from_image(element)
        if isinstance(element, (str, Path)):
            return load_pixel_buffer(Path(element))
        if hasattr(element, "to_image"):
            return self.capture(element.to_image())
        if callable(element):
            return self.capture(element())

        raise ValidationError(
            f"Cannot capture element of type {type(element).__name__}",
            recovery_hint="Pass a PIL image or PixelBuffer, or supply a custom renderer",
        )


class CallableRenderer:
    """Renderer backed by a render function ``element -> PIL image | PixelBuffer``"""

    def __init__(self, render: Callable[[Any], Any]):
        self.render = render
        self._images = ImageRenderer()

    def capture(self, element: Any) -> PixelBuffer:
        return self._images.capture(self.render(element))
