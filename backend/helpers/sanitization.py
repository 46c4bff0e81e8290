"""
Input sanitization applied before user content is stored.

Entry descriptions and bios keep a small whitelist of formatting tags;
titles and comments are reduced to plain text. Image references are opaque
strings, but only web URLs and inline image data URLs are accepted so a
stored value can never become a `javascript:` link in the UI.
"""

from typing import Optional

import bleach

# Conservative list of allowed HTML tags for rich text
ALLOWED_TAGS = [
    "p",
    "br",
    "strong",
    "b",
    "em",
    "i",
    "u",
    "ul",
    "ol",
    "li",
    "blockquote",
]

# No attributes allowed (prevents event handlers)
ALLOWED_ATTRIBUTES: dict[str, list[str]] = {}

ALLOWED_IMAGE_PREFIXES = ("http://", "https://", "data:image/")


def sanitize_html(content: Optional[str]) -> Optional[str]:
    """
    Sanitize rich text, keeping only the tags in ALLOWED_TAGS.

    Args:
        content: Raw HTML content from user input

    Returns:
        Sanitized HTML, or None if input is None

    Examples:
        >>> sanitize_html('<p>Hello <b>world</b></p>')
        '<p>Hello <b>world</b></p>'
    """
    if content is None:
        return None

    return bleach.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True,
    )


def sanitize_plain_text(content: Optional[str]) -> Optional[str]:
    """
    Strip all HTML tags for plain text fields such as titles and comments.

    Examples:
        >>> sanitize_plain_text('<b>Bold</b> text')
        'Bold text'
    """
    if content is None:
        return None

    return bleach.clean(content, tags=[], strip=True)


def is_allowed_image_reference(value: Optional[str]) -> bool:
    """
    Check that an image reference is a web URL, an image data URL or a
    site-relative path.

    Examples:
        >>> is_allowed_image_reference('https://cdn.example.com/a.png')
        True
        >>> is_allowed_image_reference('data:image/png;base64,iVBORw0K')
        True
        >>> is_allowed_image_reference('javascript:alert(1)')
        False
    """
    if not value:
        return False

    candidate = value.strip()
    if candidate.lower().startswith(ALLOWED_IMAGE_PREFIXES):
        return True
    return candidate.startswith("/") and not candidate.startswith("//")
