"""Core output dispatcher and shared payload helpers."""

import json
import os
import sys
import tempfile

from tdcli.exceptions import OperationError
from tdcli.formatters._table import _csv_rows, _table

CONFIRMATION_CSV_HEADER = "resource,id,action,details"


def _items(payload, key):
    """Return the item list of a list payload. Mismatched shapes are bugs."""
    if not isinstance(payload, dict) or not isinstance(payload.get(key), list):
        raise TypeError(f"formatter expects a payload with a '{key}' list")
    return payload[key]


def _record(payload, key):
    """Return the single record of a detail payload. Mismatched shapes are bugs."""
    if not isinstance(payload, dict) or not isinstance(payload.get(key), dict):
        raise TypeError(f"formatter expects a payload with a '{key}' object")
    return payload[key]


def _list_table(payload, key, columns, row, resource=None, empty=None):
    """Table for a list payload, with the "No X found" and "Total: N X" lines."""
    resource = resource or key
    rows = [row(item) for item in _items(payload, key)]
    if not rows:
        return empty or f"No {resource} found\n"
    return _table(columns, rows, f"Total: {len(rows)} {resource}")


def _list_csv(payload, key, row):
    return _csv_rows([row(item) for item in _items(payload, key)])


def _render_text(payload, fmt, csv_header, csv_formatter, table_formatter):
    if fmt == "json":
        try:
            return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as e:
            raise OperationError(str(e), context="Failed to encode JSON output") from e
    if fmt == "csv":
        if csv_formatter is None:
            raise TypeError("csv output requested without a csv formatter")
        return csv_header + "\n" + csv_formatter(payload)
    if table_formatter is None:
        raise TypeError("table output requested without a table formatter")
    return table_formatter(payload)


def _write_file(path, text):
    """Write *text* to *path* via a temp file in the same directory."""
    out_dir = os.path.dirname(os.path.abspath(path))
    try:
        fd, tmp_path = tempfile.mkstemp(dir=out_dir, prefix=".tdcli_out_")
    except OSError as e:
        raise OperationError(str(e), context="Failed to write output") from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as e:
        try:
            os.remove(tmp_path)
        except OSError:
            pass
        raise OperationError(str(e), context="Failed to write output") from e
    try:
        os.chmod(path, 0o644)
    except (OSError, NotImplementedError):
        pass


def render(
    payload,
    fmt,
    output_path="",
    csv_header="",
    csv_formatter=None,
    table_formatter=None,
):
    """Render *payload* as json, csv or table and deliver it.

    Unknown formats render as table. With *output_path* the text goes to that
    file only; otherwise it is written verbatim to stdout. Returns the number
    of characters written.
    """
    text = _render_text(payload, fmt, csv_header, csv_formatter, table_formatter)
    if output_path:
        _write_file(output_path, text)
    else:
        sys.stdout.write(text)
        sys.stdout.flush()
    return len(text)


def output(data, formatter, flags, csv_header="", csv_formatter=None):
    """Render through the dispatcher using the global --format/--output flags."""
    return render(
        data,
        flags.format,
        flags.output,
        csv_header=csv_header,
        csv_formatter=csv_formatter,
        table_formatter=formatter,
    )


# ---------------------------------------------------------------------------
# Mutation confirmations
# ---------------------------------------------------------------------------


def format_confirmation_table(confirmation):
    lines = [confirmation.headline]
    for label, value in confirmation.details.items():
        lines.append(f"{label}: {'' if value is None else value}")
    return "\n".join(lines) + "\n"


def format_confirmation_csv(confirmation):
    details = json.dumps(confirmation.details, ensure_ascii=False) if confirmation.details else ""
    return _csv_rows([(confirmation.resource, confirmation.id, confirmation.action, details)])


def mutation_response(confirmation, flags):
    """Print a create/update/delete confirmation in the requested format."""
    payload = confirmation.to_dict() if flags.format == "json" else confirmation
    return render(
        payload,
        flags.format,
        flags.output,
        csv_header=CONFIRMATION_CSV_HEADER,
        csv_formatter=format_confirmation_csv,
        table_formatter=format_confirmation_table,
    )
