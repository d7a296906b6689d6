"""
Tests for reference path resolution
"""

import sys
from pathlib import Path

from snapshot_toolkit.core.paths import (
    default_suffixes,
    node_reference_name,
    reference_directory,
    reference_key,
)


class TestReferencePaths:
    def test_suffix_is_appended_to_root(self):
        """Test that suffixes extend the root directory name"""
        assert reference_directory("/refs", "_ios") == Path("/refs_ios")
        assert reference_directory(Path("/refs"), "") == Path("/refs")

    def test_default_suffixes(self):
        """Test platform directory first, then the shared root"""
        assert default_suffixes() == (f"_{sys.platform}", "")


class TestReferenceKey:
    def test_test_name_only(self):
        assert reference_key("test_login") == "test_login"

    def test_with_identifier(self):
        assert reference_key("test_login", "error_state") == "test_login_error_state"

    def test_unsafe_characters_replaced(self):
        """Test that parametrized names and separators become file-safe"""
        assert reference_key("test_button[dark-mode]") == "test_button_dark-mode_"
        assert reference_key("test_x", "a/b c") == "test_x_a_b_c"

    def test_slashes_in_test_name_are_kept(self):
        """Test that module and class segments become subdirectories"""
        assert reference_key("tests/test_ui/TestButton/test_press[a b]", "x/y") == (
            "tests/test_ui/TestButton/test_press_a_b__x_y"
        )


class TestNodeReferenceName:
    def test_module_function(self):
        assert node_reference_name("test_a.py::test_widget") == "test_a/test_widget"

    def test_class_and_nested_path(self):
        """Test that directories, module and class all appear in the name"""
        assert node_reference_name("tests/ui/test_b.py::TestDark::test_widget") == (
            "tests/ui/test_b/TestDark/test_widget"
        )

    def test_parametrize_id_does_not_split(self):
        """Test that separators inside parametrize ids stay on the last segment"""
        assert node_reference_name("test_a.py::test_widget[a/b::c]") == "test_a/test_widget[a_b::c]"
        assert reference_key(node_reference_name("test_a.py::test_widget[a/b::c]")) == (
            "test_a/test_widget_a_b__c_"
        )

    def test_distinct_modules_give_distinct_keys(self):
        assert reference_key(node_reference_name("test_a.py::test_widget")) != reference_key(
            node_reference_name("test_b.py::test_widget")
        )
