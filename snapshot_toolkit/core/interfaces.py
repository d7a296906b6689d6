"""
Core interfaces and protocols

Defines protocols for dependency injection between the verifier
and the rendering capability.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from snapshot_toolkit.visual_testing.pixel_buffer import PixelBuffer


class IRenderer(Protocol):
    """Protocol for rendering capabilities that turn a UI element into pixels"""

    def capture(self, element: Any) -> "PixelBuffer":
        """Render the element and return its pixels"""
        ...

