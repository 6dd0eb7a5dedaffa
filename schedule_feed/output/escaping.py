"""iCalendar TEXT escaping (RFC 5545, section 3.3.11)."""

import re

_ESCAPED = re.compile(r"\\([\\;,nN])")


def escape_text(text: str) -> str:
    """Escape a free-text value for a content line.

    Backslashes are escaped first so the escapes inserted afterwards are not
    doubled. A CRLF pair becomes a single ``\\n``.
    """
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def unescape_text(text: str) -> str:
    """Inverse of ``escape_text``."""

    def _replace(match: re.Match) -> str:
        char = match.group(1)
        return "\n" if char in "nN" else char

    return _ESCAPED.sub(_replace, text)
