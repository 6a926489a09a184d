"""tdcli — command-line client for Treasure Data databases, jobs, workflows and CDP."""

from tdcli.client import TDClient
from tdcli.config import VERSION
from tdcli.exceptions import CliError, ConfigError, OperationError, UsageError
from tdcli.models import Confirmation, Flags
from tdcli.types import (
    ActivationListResult,
    ActivationRow,
    AudienceListResult,
    AudienceRow,
    DatabaseListResult,
    DatabaseRow,
    JobListResult,
    JobRow,
    MutationResult,
    TableListResult,
    TableRow,
)

__all__ = [
    "VERSION",
    "TDClient",
    "CliError",
    "ConfigError",
    "OperationError",
    "UsageError",
    "Confirmation",
    "Flags",
    "ActivationListResult",
    "ActivationRow",
    "AudienceListResult",
    "AudienceRow",
    "DatabaseListResult",
    "DatabaseRow",
    "JobListResult",
    "JobRow",
    "MutationResult",
    "TableListResult",
    "TableRow",
]
