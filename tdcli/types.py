"""Typed response definitions for TDClient methods.

These TypedDicts document the shape of dicts returned by public API methods
and consumed by the formatters. They are optional; runtime behavior is
unchanged (plain dicts).
"""

from __future__ import annotations

from typing import Any, TypedDict

# ---------------------------------------------------------------------------
# Platform types
# ---------------------------------------------------------------------------


class DatabaseRow(TypedDict, total=False):
    name: str
    count: int
    created_at: str
    updated_at: str
    permission: str


class DatabaseListResult(TypedDict):
    """Return type of TDClient.list_databases()."""

    databases: list[DatabaseRow]
    total: int


class TableRow(TypedDict, total=False):
    name: str
    database: str
    type: str
    count: int
    estimated_storage_size: int
    created_at: str
    updated_at: str


class TableListResult(TypedDict):
    database: str
    tables: list[TableRow]
    total: int


class JobRow(TypedDict, total=False):
    job_id: str
    status: str
    type: str
    database: str
    created_at: str
    start_at: str | None
    end_at: str | None
    query: str
    result_size: int
    num_records: int
    cpu_time: int | None


class JobListResult(TypedDict):
    jobs: list[JobRow]
    total: int


class QueryResult(TypedDict, total=False):
    job_id: str
    status: str
    columns: list[str]
    rows: list[list[Any]]
    total: int
    error: str


class UserRow(TypedDict, total=False):
    id: int
    name: str
    email: str
    account_id: int
    administrator: bool
    email_verified: bool
    created_at: str


# ---------------------------------------------------------------------------
# Workflow types
# ---------------------------------------------------------------------------


class WorkflowRow(TypedDict, total=False):
    id: str
    name: str
    project: dict[str, Any]
    revision: str
    timezone: str
    createdAt: str
    updatedAt: str


class AttemptRow(TypedDict, total=False):
    id: str
    index: int
    status: str
    done: bool
    success: bool
    createdAt: str
    finishedAt: str | None


class ProjectRow(TypedDict, total=False):
    id: str
    name: str
    revision: str
    archiveType: str
    createdAt: str
    updatedAt: str


class TaskRow(TypedDict, total=False):
    id: str
    fullName: str
    parentId: str | None
    state: str
    isGroup: bool
    upstreams: list[str]
    config: dict[str, Any]
    startedAt: str | None
    updatedAt: str


class ScheduleRow(TypedDict, total=False):
    id: str
    workflowId: str
    cron: str
    timezone: str
    delay: int
    nextRunTime: str
    disabledAt: str | None


class LogResult(TypedDict, total=False):
    workflow_id: str
    attempt_id: str
    task_id: str
    log: str


# ---------------------------------------------------------------------------
# CDP types
# ---------------------------------------------------------------------------


class AudienceRow(TypedDict, total=False):
    """One parent segment. The CDP API uses camelCase keys."""

    id: str
    name: str
    description: str
    population: int
    scheduleType: str
    scheduleOption: str | None
    timezone: str
    createdAt: str
    updatedAt: str
    attributes: list[dict[str, Any]]
    behaviors: list[dict[str, Any]]


class AudienceListResult(TypedDict):
    """Return type of TDClient.list_audiences()."""

    audiences: list[AudienceRow]
    total: int


class SegmentRow(TypedDict, total=False):
    id: str
    audienceId: str
    name: str
    description: str
    query: str
    population: int
    createdAt: str
    updatedAt: str


class ActivationRow(TypedDict, total=False):
    id: str
    name: str
    type: str
    audienceId: str
    segmentId: str
    status: str
    createdAt: str
    updatedAt: str


class ActivationListResult(TypedDict, total=False):
    """Return type of the activation list methods and the fan-out collector."""

    activations: list[ActivationRow]
    total: int


class TokenRow(TypedDict, total=False):
    id: str
    name: str
    type: str
    status: str
    description: str
    createdAt: str
    updatedAt: str


class FolderRow(TypedDict, total=False):
    id: str
    audienceId: str
    name: str
    description: str
    parentFolderId: str | None
    createdAt: str
    updatedAt: str


class FunnelRow(TypedDict, total=False):
    id: str
    name: str
    description: str
    stages: list[dict[str, Any]]
    createdAt: str
    updatedAt: str


class JourneyRow(TypedDict, total=False):
    id: str
    type: str
    name: str
    description: str
    state: str
    createdAt: str
    updatedAt: str


class MutationResult(TypedDict):
    """JSON rendering of a Confirmation."""

    ok: bool
    mutation: dict[str, Any]
