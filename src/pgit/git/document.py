"""Parse and render `.git/info/exclude` around a marker-delimited managed section.

A document is split into four regions::

    preamble      free-form lines before the marker, kept verbatim
    marker        the managed-section comment, present iff entries exist
    entries       one pattern per line, unique, insertion ordered
    trailing      everything from the next comment after the entries

Rendering a parsed document with unchanged entries reproduces the input
(modulo blank lines between managed entries and duplicate entries, which are
collapsed).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


@dataclass(slots=True)
class ExcludeDocument:
    marker_comment: str
    preamble: list[str] = field(default_factory=list)
    entries: list[str] = field(default_factory=list)
    trailing: list[str] = field(default_factory=list)
    # Blank line between preamble and marker.
    separator: bool = True

    @property
    def marker(self) -> str | None:
        return self.marker_comment if self.entries else None

    @property
    def is_empty(self) -> bool:
        return not (self.preamble or self.entries or self.trailing)

    def __contains__(self, entry: object) -> bool:
        return entry in self.entries

    def add(self, entry: str) -> bool:
        """Append ``entry`` to the managed section; False if already present."""
        if entry in self.entries:
            return False
        self.entries.append(entry)
        return True

    def remove(self, entry: str) -> bool:
        """Drop ``entry`` from the managed section; False if it was absent."""
        try:
            self.entries.remove(entry)
        except ValueError:
            return False
        return True

    def patterns(self) -> Iterator[str]:
        """Yield every pattern line in the file, managed or not."""
        for line in self.preamble:
            if _is_pattern(line):
                yield line.strip()
        yield from self.entries
        for line in self.trailing:
            if _is_pattern(line):
                yield line.strip()

    def lines(self) -> list[str]:
        rendered = list(self.preamble)
        if self.entries:
            if self.preamble and self.separator:
                rendered.append("")
            rendered.append(self.marker_comment)
            rendered.extend(self.entries)
        rendered.extend(self.trailing)
        return rendered


def _is_pattern(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith("#")


def split_lines(text: str) -> list[str]:
    """Split file text into lines without a phantom entry for the final newline."""
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def parse(text: str, marker_comment: str) -> ExcludeDocument:
    """Parse raw exclude file text into an :class:`ExcludeDocument`."""
    marker = marker_comment.strip()
    lines = split_lines(text)
    document = ExcludeDocument(marker_comment=marker)

    try:
        start = next(i for i, line in enumerate(lines) if line.strip() == marker)
    except StopIteration:
        document.preamble = lines
        return document

    preamble = lines[:start]
    # A lone blank line is content, not a separator: lines() only emits the
    # separator after a non-empty preamble.
    if len(preamble) > 1 and not preamble[-1].strip():
        preamble.pop()
        document.separator = True
    else:
        document.separator = not preamble
    document.preamble = preamble

    end = len(lines)
    last_entry = start
    for index in range(start + 1, len(lines)):
        stripped = lines[index].strip()
        if not stripped:
            continue
        if stripped.startswith("#"):
            end = index
            break
        last_entry = index
        if stripped not in document.entries:
            document.entries.append(stripped)

    # Blank lines between the last entry and the next comment stay with the
    # trailing region so they survive a rewrite.
    if end < len(lines):
        document.trailing = lines[last_entry + 1 :]
    return document


def render(document: ExcludeDocument) -> str:
    """Serialize a document; non-empty output always ends with a newline."""
    lines = document.lines()
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
