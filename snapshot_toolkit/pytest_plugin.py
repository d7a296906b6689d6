"""
pytest integration

Load with ``-p snapshot_toolkit.pytest_plugin`` (or ``pytest_plugins`` in a
top-level conftest.py). Provides the ``snapshot`` fixture and the
``--snapshot-record`` flag.

References are keyed on the test's module, class and name, so
``tests/test_ui.py::TestButton::test_press`` records to
``{root}{suffix}/tests/test_ui/TestButton/test_press.png``.
"""

from collections.abc import Sequence
from typing import Any

import pytest

from snapshot_toolkit.core.config import Settings
from snapshot_toolkit.core.interfaces import IRenderer
from snapshot_toolkit.core.paths import node_reference_name, reference_key
from snapshot_toolkit.visual_testing.verifier import SnapshotVerifier, VerificationResult


def pytest_addoption(parser):
    group = parser.getgroup("snapshot")
    group.addoption(
        "--snapshot-record",
        action="store_true",
        default=False,
        help="Record reference images instead of comparing against them",
    )


class SnapshotFixture:
    """Snapshot helper bound to a single test"""

    def __init__(self, test_name: str, verifier: SnapshotVerifier):
        self.test_name = test_name
        self.verifier = verifier

    @property
    def record_mode(self) -> bool:
        return self.verifier.record_mode

    def key(self, identifier: str = "") -> str:
        return reference_key(self.test_name, identifier)

    def verify(
        self,
        element: Any,
        identifier: str = "",
        suffixes: Sequence[str] | None = None,
        tolerance: float = 0.0,
    ) -> VerificationResult:
        """Verify without raising on mismatch"""
        return self.verifier.verify(element, self.key(identifier), suffixes, tolerance)

    def assert_match(
        self,
        element: Any,
        identifier: str = "",
        suffixes: Sequence[str] | None = None,
        tolerance: float = 0.0,
    ) -> VerificationResult:
        """Verify and fail the test on mismatch, or after recording"""
        return self.verifier.assert_snapshot(element, self.key(identifier), suffixes, tolerance)

    def with_renderer(self, renderer: IRenderer) -> "SnapshotFixture":
        """Copy of this fixture that captures through a custom renderer"""
        verifier = SnapshotVerifier(
            settings=self.verifier.settings,
            renderer=renderer,
            comparator=self.verifier.comparator,
            record_mode=self.verifier.record_mode,
        )
        return SnapshotFixture(self.test_name, verifier)


@pytest.fixture
def snapshot_settings() -> Settings:
    """Settings read fresh from the environment for each test"""
    return Settings()


@pytest.fixture
def snapshot(request, snapshot_settings: Settings) -> SnapshotFixture:
    """Snapshot helper keyed on the current test's node id"""
    record_mode = snapshot_settings.record_mode or request.config.getoption("snapshot_record")
    verifier = SnapshotVerifier(settings=snapshot_settings, record_mode=record_mode)
    return SnapshotFixture(node_reference_name(request.node.nodeid), verifier)
