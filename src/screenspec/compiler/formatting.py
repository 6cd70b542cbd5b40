"""
Deterministic output formatting.

Generated files are normalized before they are compared with what is on
disk, so the byte-identical skip only sees real changes.
"""

from __future__ import annotations

import re

# Files whose whitespace we own; anything else only gets newline normalization
SOURCE_SUFFIXES = (".tsx", ".ts", ".vue", ".svelte", ".html", ".js", ".css")

_BLANK_RUN = re.compile(r"\n{3,}")


def format_output(contents: str, path: str) -> str:
    """
    Normalize generated source text.

    - CRLF/CR line endings become LF
    - trailing whitespace is stripped from every line
    - runs of blank lines collapse to one
    - leading blank lines are dropped and the file ends with exactly one newline

    Formatting is idempotent: ``format_output(format_output(x, p), p) == format_output(x, p)``.
    """
    text = contents.replace("\r\n", "\n").replace("\r", "\n")
    if not path.endswith(SOURCE_SUFFIXES):
        return text if text.endswith("\n") else text + "\n"

    text = "\n".join(line.rstrip() for line in text.split("\n"))
    text = _BLANK_RUN.sub("\n\n", text)
    return text.strip("\n") + "\n"
