"""Tests for asum.clipboard module."""

import pyperclip

from asum.clipboard import copy_to_clipboard


class TestCopyToClipboard:
    """Tests for copy_to_clipboard."""

    def test_copies_text(self, mocker):
        """Test a successful copy."""
        mock_copy = mocker.patch("asum.clipboard.pyperclip.copy")

        assert copy_to_clipboard("fix: x") is True
        mock_copy.assert_called_once_with("fix: x")

    def test_failure_is_a_warning(self, mocker, caplog):
        """Test that a missing clipboard backend does not raise."""
        mocker.patch(
            "asum.clipboard.pyperclip.copy",
            side_effect=pyperclip.PyperclipException("no clipboard mechanism"),
        )

        with caplog.at_level("WARNING", logger="asum"):
            assert copy_to_clipboard("fix: x") is False

        assert "no clipboard mechanism" in caplog.text
