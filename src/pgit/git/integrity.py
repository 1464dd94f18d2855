"""Advisory integrity heuristics for exclude file content."""

from __future__ import annotations

import re
from dataclasses import dataclass

MAX_FILE_BYTES = 1024 * 1024
MAX_LINE_COUNT = 10_000
MAX_LINE_LENGTH = 4096
BINARY_SAMPLE_BYTES = 8192
BINARY_RATIO = 0.3

_TEXT_CONTROL_BYTES = frozenset(b"\t\n\r\f\b")
_LINE_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


@dataclass(slots=True, frozen=True)
class IntegrityWarning:
    code: str
    message: str
    line: int | None = None

    def __str__(self) -> str:
        return self.message


def _looks_binary(data: bytes) -> bool:
    if b"\0" in data:
        return True
    sample = data[:BINARY_SAMPLE_BYTES]
    if not sample:
        return False
    suspicious = sum(1 for byte in sample if byte < 0x20 and byte not in _TEXT_CONTROL_BYTES)
    return suspicious / len(sample) > BINARY_RATIO


def inspect(content: bytes | str) -> list[IntegrityWarning]:
    """Return advisory warnings for ``content``; never raises on bad input."""
    data = content.encode("utf-8", errors="replace") if isinstance(content, str) else content
    text = content if isinstance(content, str) else data.decode("utf-8", errors="replace")
    warnings: list[IntegrityWarning] = []

    if _looks_binary(data):
        warnings.append(
            IntegrityWarning("binary", "Exclude file looks corrupted (binary content detected)")
        )

    if len(data) > MAX_FILE_BYTES:
        warnings.append(
            IntegrityWarning(
                "too_large",
                f"Exclude file unusually large ({len(data)} bytes > {MAX_FILE_BYTES})",
            )
        )

    lines = text.split("\n")
    if len(lines) > MAX_LINE_COUNT:
        warnings.append(
            IntegrityWarning(
                "too_many_lines",
                f"Exclude file has too many lines ({len(lines)} > {MAX_LINE_COUNT})",
            )
        )

    for number, line in enumerate(lines, start=1):
        if len(line) > MAX_LINE_LENGTH:
            warnings.append(
                IntegrityWarning(
                    "line_too_long",
                    f"Line {number} too long (>{MAX_LINE_LENGTH} characters)",
                    line=number,
                )
            )
        stripped = line.strip()
        if stripped and not stripped.startswith("#") and _LINE_CONTROL_CHARS.search(line):
            warnings.append(
                IntegrityWarning(
                    "control_characters",
                    f"Line {number} contains control characters",
                    line=number,
                )
            )

    return warnings
