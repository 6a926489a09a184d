"""
Typed models for global flags, command payloads and mutation confirmations.
"""

from dataclasses import dataclass, field

from tdcli.exceptions import UsageError


@dataclass(frozen=True)
class Flags:
    """Global output flags, resolved once per invocation."""

    format: str = "table"
    output: str = ""
    verbose: bool = False


@dataclass(frozen=True)
class ObjectPayload:
    """Typed wrapper for raw JSON object payloads."""

    data: dict

    @classmethod
    def from_value(cls, value, context):
        if isinstance(value, dict):
            return cls(data=value)
        raise UsageError(f"Invalid JSON in {context}: expected object, got {type(value).__name__}.")


@dataclass(frozen=True)
class UpdateField:
    """One accepted key of a ``key=value`` update list.

    kind is one of:
      str       empty values are dropped
      optional  sent whenever present, even if empty
      bool      "true" means True, anything else False
      list      comma-separated values
      json      a JSON object
    """

    wire: str
    kind: str = "str"


@dataclass(frozen=True)
class Confirmation:
    """Result of a create/update/delete/run command."""

    resource: str
    id: str
    action: str
    details: dict = field(default_factory=dict)

    @property
    def headline(self):
        label = self.resource[:1].upper() + self.resource[1:]
        if self.id:
            return f"{label} {self.id} {self.action} successfully"
        return f"{label} {self.action} successfully"

    def to_dict(self):
        return {
            "ok": True,
            "mutation": {
                "resource": self.resource,
                "id": self.id,
                "action": self.action,
                "details": dict(self.details),
            },
        }
