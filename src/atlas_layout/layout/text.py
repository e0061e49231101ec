"""Label text wrapping."""

MAX_LABEL_LINES = 4
ELLIPSIS = "..."


def _ellipsize(line: str) -> str:
    """Mark a line as truncated, keeping its length where possible."""
    if line.endswith(ELLIPSIS):
        return line
    if len(line) > len(ELLIPSIS):
        return line[: -len(ELLIPSIS)] + ELLIPSIS
    return ".."


def split_text_into_lines(text: str, max_chars_per_line: int, max_lines: int = MAX_LABEL_LINES) -> list[str]:
    """Greedily wrap ``text`` on whitespace into at most ``max_lines`` lines.

    Words are never broken, so a single word longer than ``max_chars_per_line``
    occupies a line of its own. When the text needs more than ``max_lines``
    lines, the last kept line is truncated with an ellipsis.

    Args:
        text: The label to wrap.
        max_chars_per_line: Soft line length limit.
        max_lines: Maximum number of lines returned.

    Returns:
        The wrapped lines; empty for empty text or ``max_lines < 1``.
    """
    words = text.split() if text else []
    if not words or max_lines < 1:
        return []

    lines: list[str] = []
    current = ""
    for word in words:
        if not current:
            current = word
        elif len(current) + len(word) + 1 <= max_chars_per_line:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    lines.append(current)

    if len(lines) > max_lines:
        lines = lines[:max_lines]
        lines[-1] = _ellipsize(lines[-1])
    return lines
