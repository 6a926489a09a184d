"""Formatters for `config show`."""

from tdcli.formatters._core import _items, _record
from tdcli.formatters._table import _csv_rows

CONFIG_CSV_HEADER = "key,value"


def format_config_csv(result):
    settings = _record(result, "settings")
    return _csv_rows(list(settings.items()))


def format_config_table(result):
    settings = _record(result, "settings")
    lines = ["Current configuration:"]
    for key, value in settings.items():
        lines.append(f"  {key}: {value or '(not set)'}")
    lines.append("")
    lines.append("Config file locations (in priority order):")
    for entry in _items(result, "files"):
        mark = "✓" if entry.get("exists") else " "
        lines.append(f"  {mark} {entry.get('path', '')}")
    lines.append("")
    lines.append("Environment variables: TD_API_KEY, TD_REGION, TD_FORMAT, TD_OUTPUT")
    return "\n".join(lines) + "\n"
