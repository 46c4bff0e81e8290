"""
Unit tests for input sanitization helpers.
"""

import pytest

from helpers.sanitization import (
    is_allowed_image_reference,
    sanitize_html,
    sanitize_plain_text,
)


class TestSanitizeHtml:
    """Tests for sanitize_html function."""

    def test_removes_script_tags(self) -> None:
        result = sanitize_html("<script>alert(1)</script>Safe content")
        assert result is not None
        assert "<script>" not in result
        assert "Safe content" in result

    def test_removes_event_handlers(self) -> None:
        result = sanitize_html('<p onclick="steal()">Hi</p>')
        assert result == "<p>Hi</p>"

    def test_removes_images(self) -> None:
        result = sanitize_html('<img src=x onerror="alert(1)">')
        assert result is not None
        assert "onerror" not in result
        assert "<img" not in result

    def test_preserves_allowed_tags(self) -> None:
        content = "<p>Hello <b>world</b></p>"
        assert sanitize_html(content) == content

    def test_preserves_lists_and_quotes(self) -> None:
        content = "<ul><li>One</li></ul><blockquote>Cited</blockquote>"
        assert sanitize_html(content) == content

    def test_strips_links(self) -> None:
        result = sanitize_html('<a href="javascript:alert(1)">click</a>')
        assert result == "click"

    def test_handles_none(self) -> None:
        assert sanitize_html(None) is None


class TestSanitizePlainText:
    """Tests for sanitize_plain_text function."""

    def test_strips_all_html(self) -> None:
        assert sanitize_plain_text("<b>Bold</b> text") == "Bold text"

    def test_keeps_plain_text(self) -> None:
        assert sanitize_plain_text("Just words") == "Just words"

    def test_handles_none(self) -> None:
        assert sanitize_plain_text(None) is None

    def test_handles_empty_string(self) -> None:
        assert sanitize_plain_text("") == ""


class TestIsAllowedImageReference:
    """Tests for is_allowed_image_reference function."""

    @pytest.mark.parametrize(
        "value",
        [
            "https://cdn.example.com/a.png",
            "http://example.com/b.jpg",
            "data:image/png;base64,iVBORw0K",
            "DATA:IMAGE/GIF;base64,R0lGOD",
            "/uploads/avatar.webp",
        ],
    )
    def test_accepts_image_references(self, value: str) -> None:
        assert is_allowed_image_reference(value) is True

    @pytest.mark.parametrize(
        "value",
        [
            "javascript:alert(1)",
            "JaVaScRiPt:alert(1)",
            "data:text/html,<script>alert(1)</script>",
            "//evil.example.com/x.png",
            "vbscript:msgbox(1)",
            "",
            None,
        ],
    )
    def test_rejects_other_schemes(self, value) -> None:
        assert is_allowed_image_reference(value) is False
