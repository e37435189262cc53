"""RFC 5545 text escaping and line folding."""

from typing import Optional

from timetree_exporter.config.constants import RFC5545_MAX_LINE


def escape_text(value) -> Optional[str]:
    """Escape a free-text value for use in a content line.

    Backslashes are escaped first so the backslashes introduced by the later
    substitutions are not doubled.

    Args:
        value: Text to escape. Non-string values are converted with str().

    Returns:
        The escaped text, or None for empty or absent input.
    """
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    if not text:
        return None
    return (
        text.replace("\\", "\\\\")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
        .replace(";", "\\;")
        .replace(",", "\\,")
    )


def fold_line(line: str, limit: int = RFC5545_MAX_LINE) -> str:
    """Fold a content line into chunks of at most ``limit`` characters.

    Continuation chunks are joined with CRLF followed by a single space.
    """
    if len(line) <= limit:
        return line
    parts = [line[i:i + limit] for i in range(0, len(line), limit)]
    return "\r\n ".join(parts)
