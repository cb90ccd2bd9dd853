"""
=============================================================================
MIME TYPE CLASSIFICATION
=============================================================================

Maps a requested path to the Content-Type sent back to the client.

=============================================================================
A FIXED TABLE, ON PURPOSE
=============================================================================

The server only distinguishes two kinds of content:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     CONTENT CLASSES                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   IMAGES (binary)                 EVERYTHING ELSE (text)            │
    │   ───────────────                 ──────────────────────            │
    │                                                                      │
    │   .jpg → image/jpg                → text/html                        │
    │   .gif → image/gif                                                   │
    │   .png → image/png                                                   │
    │                                                                      │
    │   Copied byte for byte            Streamed line by line with        │
    │                                   template tokens expanded          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The suffix match is CASE-SENSITIVE: "photo.PNG" is served as text/html.
There is no content sniffing and no negotiation with the Accept header.

=============================================================================
"""

from typing import Dict


# =============================================================================
# MIME TYPE DATABASE
# =============================================================================

MIME_TYPES: Dict[str, str] = {
    ".jpg": "image/jpg",
    ".gif": "image/gif",
    ".png": "image/png",
}

# Anything not in the table is treated as markup
DEFAULT_MIME_TYPE = "text/html"


# =============================================================================
# PUBLIC FUNCTIONS
# =============================================================================

def get_mime_type(path: str) -> str:
    """
    Get the MIME type for a requested path based on its suffix.

    Args:
        path: Requested path as it appeared in the request line.

    Returns:
        The MIME type string. Never raises.

    Examples:
        >>> get_mime_type("/images/cat.png")
        'image/png'

        >>> get_mime_type("/index.html")
        'text/html'

        >>> get_mime_type("/CAT.PNG")
        'text/html'
    """
    for extension, mime_type in MIME_TYPES.items():
        if path.endswith(extension):
            return mime_type
    return DEFAULT_MIME_TYPE


def is_binary_type(mime_type: str) -> bool:
    """Check whether content of this type is copied verbatim."""
    return mime_type.startswith("image/")
