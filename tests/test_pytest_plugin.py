"""
Tests for the pytest plugin

Runs small test files in an isolated pytest session.
"""

import pytest

PLUGIN_ARGS = ("-p", "snapshot_toolkit.pytest_plugin")

SNAPSHOT_TEST = """
from PIL import Image


def test_widget(snapshot):
    image = Image.new("RGBA", (4, 4), {color})
    snapshot.assert_match(image, identifier="body", suffixes=[""])
"""


@pytest.fixture
def reference_dir(pytester, monkeypatch):
    path = pytester.path / "refs"
    monkeypatch.setenv("SNAPSHOT_REFERENCE_IMAGE_DIR", str(path))
    return path


class TestSnapshotFixture:
    """Test record, compare and failure through the snapshot fixture"""

    def test_record_then_compare(self, pytester, reference_dir):
        """Test the record run fails on purpose and the next run passes"""
        pytester.makepyfile(SNAPSHOT_TEST.format(color=(255, 0, 0, 255)))

        recorded = pytester.runpytest(*PLUGIN_ARGS, "--snapshot-record")
        recorded.assert_outcomes(failed=1)
        recorded.stdout.fnmatch_lines(["*Test ran in record mode*"])
        assert (reference_dir / "test_record_then_compare" / "test_widget_body.png").exists()

        compared = pytester.runpytest(*PLUGIN_ARGS)
        compared.assert_outcomes(passed=1)

    def test_mismatch_fails(self, pytester, reference_dir):
        """Test that a changed rendering fails the test"""
        pytester.makepyfile(SNAPSHOT_TEST.format(color=(255, 0, 0, 255)))
        pytester.runpytest(*PLUGIN_ARGS, "--snapshot-record")

        pytester.makepyfile(SNAPSHOT_TEST.format(color=(0, 255, 0, 255)))
        result = pytester.runpytest(*PLUGIN_ARGS)

        result.assert_outcomes(failed=1)
        result.stdout.fnmatch_lines(["*Snapshot comparison failed for 'test_mismatch_fails/test_widget_body'*"])

    def test_missing_reference_dir_errors(self, pytester, monkeypatch):
        """Test that an unconfigured root fails the test before comparing"""
        monkeypatch.delenv("SNAPSHOT_REFERENCE_IMAGE_DIR", raising=False)
        pytester.makepyfile(SNAPSHOT_TEST.format(color=(255, 0, 0, 255)))

        result = pytester.runpytest(*PLUGIN_ARGS)

        result.assert_outcomes(failed=1)
        result.stdout.fnmatch_lines(["*ConfigurationError*"])

    def test_record_mode_from_environment(self, pytester, reference_dir, monkeypatch):
        monkeypatch.setenv("SNAPSHOT_RECORD_MODE", "true")
        monkeypatch.setenv("SNAPSHOT_FAIL_IN_RECORD_MODE", "false")
        pytester.makepyfile(SNAPSHOT_TEST.format(color=(0, 0, 255, 255)))

        result = pytester.runpytest(*PLUGIN_ARGS)

        result.assert_outcomes(passed=1)
        assert (reference_dir / "test_record_mode_from_environment" / "test_widget_body.png").exists()

    def test_verify_and_custom_renderer(self, pytester, reference_dir):
        """Test the non-raising verify() and with_renderer()"""
        pytester.makepyfile(
            """
            from PIL import Image

            from snapshot_toolkit.visual_testing.renderers import CallableRenderer


            def draw(color):
                return Image.new("RGB", (3, 3), color)


            def test_checkbox(snapshot):
                renderer = CallableRenderer(draw)
                checked = snapshot.with_renderer(renderer)

                result = checked.verify("red", suffixes=[""])
                assert result.passed is False
                assert result.key == "test_verify_and_custom_renderer/test_checkbox"
            """
        )

        result = pytester.runpytest(*PLUGIN_ARGS)

        result.assert_outcomes(passed=1)

    def test_same_test_name_in_two_modules(self, pytester, reference_dir):
        """Test that equally named tests in different modules keep separate references"""
        pytester.makepyfile(
            test_red=SNAPSHOT_TEST.format(color=(255, 0, 0, 255)),
            test_blue=SNAPSHOT_TEST.format(color=(0, 0, 255, 255)),
        )

        recorded = pytester.runpytest(*PLUGIN_ARGS, "--snapshot-record")
        recorded.assert_outcomes(failed=2)
        assert sorted(
            path.relative_to(reference_dir).as_posix() for path in reference_dir.rglob("*.png")
        ) == ["test_blue/test_widget_body.png", "test_red/test_widget_body.png"]

        compared = pytester.runpytest(*PLUGIN_ARGS)
        compared.assert_outcomes(passed=2)

    def test_same_test_name_in_two_classes(self, pytester, reference_dir):
        """Test that the test class is part of the reference key"""
        pytester.makepyfile(
            """
            from PIL import Image


            class TestLight:
                def test_widget(self, snapshot):
                    snapshot.assert_match(Image.new("RGB", (2, 2), "white"), suffixes=[""])


            class TestDark:
                def test_widget(self, snapshot):
                    snapshot.assert_match(Image.new("RGB", (2, 2), "black"), suffixes=[""])
            """
        )

        pytester.runpytest(*PLUGIN_ARGS, "--snapshot-record")
        compared = pytester.runpytest(*PLUGIN_ARGS)

        compared.assert_outcomes(passed=2)
        module_dir = reference_dir / "test_same_test_name_in_two_classes"
        assert (module_dir / "TestLight" / "test_widget.png").exists()
        assert (module_dir / "TestDark" / "test_widget.png").exists()
