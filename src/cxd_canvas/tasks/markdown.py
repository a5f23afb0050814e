"""
Markdown checkbox parsing.

Recognises `- [ ] text` / `- [x] text` lines (any indentation, case-insensitive
marker) and rewrites the marker of a single line in place.
"""

import re
from typing import List

from cxd_canvas.tasks.models import SubtaskProjection

# One checkbox line: indent, "-", "[ ]" or "[x]"/"[X]", text
TASK_PATTERN = re.compile(r"^\s*-\s*\[([ xX])\]\s*(.+)$")

# Marker of a checkbox line, split so only the character inside the brackets changes
MARKER_PATTERN = re.compile(r"^(\s*-\s*\[)([ xX])(\])")

# Leading checkbox syntax removed from titles
TITLE_CHECKBOX_PATTERN = re.compile(r"^\s*-?\s*\[([ xX])?\]\s*")

UNTITLED_TASK = "Untitled Task"
MAX_TITLE_LENGTH = 50

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def hash_string(text: str) -> str:
    """Stable 32-bit rolling hash (h * 31 + code unit) rendered in base 36.

    Computed over UTF-16 code units so subtask ids agree with the ones the web
    client generates for the same text.
    """
    value = 0
    data = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        value = (value * 31 + code_unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000

    value = abs(value)
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def parse_markdown_tasks(content: str) -> List[SubtaskProjection]:
    """
    Extract checkbox lines from content.

    Args:
        content: Markdown text of a canvas element

    Returns:
        One SubtaskProjection per checkbox line, in line order. line_index is the real
        0-based line number; lines that do not match are skipped.
    """
    subtasks = []
    for index, line in enumerate(content.split("\n")):
        match = TASK_PATTERN.match(line)
        if not match:
            continue
        marker, raw_text = match.groups()
        text = raw_text.strip()
        subtasks.append(
            SubtaskProjection(
                id=f"{index}-{hash_string(text)}",
                text=text,
                is_completed=marker.lower() == "x",
                line_index=index,
            )
        )
    return subtasks


def has_markdown_tasks(content: str) -> bool:
    """True if at least one line is a checkbox line."""
    return any(TASK_PATTERN.match(line) for line in content.split("\n"))


def has_multiple_tasks(content: str) -> bool:
    """True if more than one line is a checkbox line (the element will be split)."""
    count = 0
    for line in content.split("\n"):
        if TASK_PATTERN.match(line):
            count += 1
            if count > 1:
                return True
    return False


def extract_title(content: str) -> str:
    """First line of content without checkbox syntax, truncated for display."""
    first_line = content.split("\n")[0].strip()
    title = TITLE_CHECKBOX_PATTERN.sub("", first_line, count=1).strip()

    if not title:
        return UNTITLED_TASK
    if len(title) > MAX_TITLE_LENGTH:
        return title[: MAX_TITLE_LENGTH - 3] + "..."
    return title


def update_subtask_in_content(content: str, line_index: int, is_completed: bool) -> str:
    """
    Set the checkbox on one line to checked or unchecked.

    Only the marker character changes; every other character of the content is kept.
    Returns content unchanged when line_index is out of range, the line is not a
    checkbox line, or the box is already in the requested state.
    """
    lines = content.split("\n")
    if not 0 <= line_index < len(lines):
        return content

    line = lines[line_index]
    if not TASK_PATTERN.match(line):
        return content

    match = MARKER_PATTERN.match(line)
    if match is None or (match.group(2).lower() == "x") == is_completed:
        return content

    marker = "x" if is_completed else " "
    lines[line_index] = match.group(1) + marker + match.group(3) + line[match.end() :]
    return "\n".join(lines)
