"""Low-level table and CSV rendering helpers (stdlib only)."""

import csv
import io
import re

from tdcli._utils import _text

_CONTROL_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

_PADDING = 2


def _sanitize_str(s):
    """Strip ANSI escape sequences and control chars from table output.
    Preserves newlines (\\n) and tabs (\\t)."""
    if not s:
        return s
    return _CONTROL_RE.sub("", str(s))


def _cell(value):
    """Table cell text. Tabs and newlines would break column alignment."""
    text = _sanitize_str(_text(value, "-"))
    return text.replace("\t", " ").replace("\n", " ") if text else ""


def _table(columns, rows, footer=None):
    """Build an aligned table string.
    columns: list of header names.
    rows: list of tuples matching columns.
    footer: optional footer line, separated by a blank line.
    Every column except the last is padded to its widest cell plus two spaces."""
    grid = [[_cell(c) for c in columns]] + [[_cell(v) for v in row] for row in rows]
    widths = [max(len(line[i]) for line in grid) for i in range(len(columns))]
    lines = []
    for line in grid:
        parts = []
        for i, text in enumerate(line):
            if i == len(line) - 1:
                parts.append(text)
            else:
                parts.append(text.ljust(widths[i] + _PADDING))
        lines.append("".join(parts))
    out = "\n".join(lines) + "\n"
    if footer:
        out += f"\n{footer}\n"
    return out


def _property_table(pairs, trailer=None):
    """Two-column PROPERTY/VALUE table for single-record views."""
    out = _table(["PROPERTY", "VALUE"], pairs)
    if trailer:
        out += trailer
    return out


def _csv_rows(rows):
    """CSV body (no header). Values with commas or quotes are quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if v is None else _text(v) for v in row])
    return buf.getvalue()
