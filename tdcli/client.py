"""
TDClient — public Python API for Treasure Data platform and CDP resources.

Single entry point for programmatic use and for the CLI handlers.
All methods return flat dicts suitable for JSON serialization. List
methods wrap their items as ``{"<resource>": [...], "total": N}``.
"""

from __future__ import annotations

import json
import urllib.parse

# TypedDict return types live in tdcli.types for documentation.
# Method signatures use plain dict[str, Any] for mypy compatibility.
from typing import Any

from tdcli import config
from tdcli.api import td_request
from tdcli.exceptions import OperationError

# ---------------------------------------------------------------------------
# Response shaping helpers
# ---------------------------------------------------------------------------


def _q(segment: str) -> str:
    """URL-quote one path segment."""
    return urllib.parse.quote(str(segment), safe="")


def _flatten_resource(resource: Any) -> Any:
    """Turn a JSON:API resource into a flat dict (id, type, attributes...)."""
    if not isinstance(resource, dict) or "attributes" not in resource:
        return resource
    flat = {"id": resource.get("id"), "type": resource.get("type")}
    attributes = resource.get("attributes") or {}
    if isinstance(attributes, dict):
        for key, value in attributes.items():
            flat.setdefault(key, value)
    return flat


def _items(result: Any, *keys: str) -> list[Any]:
    """Extract the item list from a bare array, a keyed object or JSON:API data."""
    if isinstance(result, list):
        return [_flatten_resource(r) for r in result]
    if isinstance(result, dict):
        for key in keys + ("data",):
            value = result.get(key)
            if isinstance(value, list):
                return [_flatten_resource(r) for r in value]
        return []
    raise OperationError(
        f"Unexpected response shape: expected JSON array or object, got {type(result).__name__}."
    )


def _record(result: Any) -> dict[str, Any]:
    """Extract a single object from a plain or JSON:API response."""
    if isinstance(result, dict) and isinstance(result.get("data"), dict):
        return _flatten_resource(result["data"])  # type: ignore[no-any-return]
    if isinstance(result, dict):
        return result
    raise OperationError(
        f"Unexpected response shape: expected JSON object, got {type(result).__name__}."
    )


def _listing(key: str, items: list[Any], **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = dict(extra)
    payload[key] = items
    payload["total"] = len(items)
    return payload


def _result_rows(text: str) -> list[list[Any]]:
    """Parse a ``format=json`` job result: one JSON array per line."""
    rows: list[list[Any]] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            row = json.loads(line)
        except json.JSONDecodeError:
            raise OperationError(
                "Unexpected job result from Treasure Data API (not valid JSON)."
            ) from None
        if isinstance(row, dict):
            row = list(row.values())
        rows.append(row if isinstance(row, list) else [row])
    return rows


def _result_columns(job: dict[str, Any]) -> list[str]:
    """Column names from a job's ``hive_result_schema`` (a JSON string of pairs)."""
    schema = job.get("hive_result_schema")
    if isinstance(schema, str):
        try:
            schema = json.loads(schema)
        except json.JSONDecodeError:
            return []
    if not isinstance(schema, list):
        return []
    return [str(col[0]) if isinstance(col, list) and col else str(col) for col in schema]


class TDClient:
    """Public API surface for Treasure Data.

    Raises OperationError on any API or transport failure.
    """

    def __init__(self, *, api_key: str | None = None, region: str | None = None):
        """Initialize the client.

        Args:
            api_key: ``account_id/api_key``. Defaults to the resolved config.
            region: One of us, eu, tokyo, ap02. Defaults to the resolved config.
        """
        self.api_key = api_key if api_key is not None else config.API_KEY
        self.region = region or config.REGION
        config.endpoints_for(self.region)

    def _request(
        self,
        service: str,
        path: str,
        *,
        method: str = "GET",
        data: Any = None,
        params: dict[str, Any] | None = None,
        text: bool = False,
    ) -> Any:
        return td_request(
            service,
            path,
            data=data,
            method=method,
            params=params,
            api_key=self.api_key,
            region=self.region,
            text=text,
        )

    def _api(self, path: str, **kwargs: Any) -> Any:
        return self._request("api", path, **kwargs)

    def _cdp(self, path: str, **kwargs: Any) -> Any:
        return self._request("cdp", path, **kwargs)

    def _workflow(self, path: str, **kwargs: Any) -> Any:
        return self._request("workflow", path, **kwargs)

    # -------------------------------------------------------------------
    # Databases
    # -------------------------------------------------------------------

    def list_databases(self) -> dict[str, Any]:
        """List all databases.

        Returns:
            dict with keys: databases (name, count, created_at, updated_at,
            permission), total.
        """
        return _listing("databases", _items(self._api("v3/database/list"), "databases"))

    def get_database(self, name: str) -> dict[str, Any]:
        return {"database": _record(self._api(f"v3/database/show/{_q(name)}"))}

    def create_database(self, name: str) -> dict[str, Any]:
        return _record(self._api(f"v3/database/create/{_q(name)}", method="POST"))

    def delete_database(self, name: str) -> dict[str, Any]:
        return _record(self._api(f"v3/database/delete/{_q(name)}", method="POST"))

    # -------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------

    def list_tables(self, database: str) -> dict[str, Any]:
        """List tables in a database.

        Returns:
            dict with keys: database, tables, total.
        """
        result = self._api(f"v3/table/list/{_q(database)}")
        return _listing("tables", _items(result, "tables"), database=database)

    def get_table(self, database: str, table: str) -> dict[str, Any]:
        result = _record(self._api(f"v3/table/show/{_q(database)}/{_q(table)}"))
        result.setdefault("database", database)
        return {"table": result}

    def create_table(self, database: str, table: str) -> dict[str, Any]:
        return _record(self._api(f"v3/table/create/{_q(database)}/{_q(table)}", method="POST"))

    def delete_table(self, database: str, table: str) -> dict[str, Any]:
        return _record(self._api(f"v3/table/delete/{_q(database)}/{_q(table)}", method="POST"))

    def swap_tables(self, database: str, table1: str, table2: str) -> dict[str, Any]:
        path = f"v3/table/swap/{_q(database)}/{_q(table1)}/{_q(table2)}"
        return _record(self._api(path, method="POST"))

    def rename_table(self, database: str, old_name: str, new_name: str) -> dict[str, Any]:
        path = f"v3/table/rename/{_q(database)}/{_q(old_name)}/{_q(new_name)}"
        return _record(self._api(path, method="POST"))

    # -------------------------------------------------------------------
    # Jobs
    # -------------------------------------------------------------------

    def list_jobs(self, *, limit: int | None = None, status: str | None = None) -> dict[str, Any]:
        """List recent jobs.

        Args:
            limit: Maximum number of jobs to return.
            status: Filter by job status (queued, running, success, error).

        Returns:
            dict with keys: jobs, total.
        """
        params: dict[str, Any] = {"status": status}
        if limit:
            params["from"] = 0
            params["to"] = limit - 1
        return _listing("jobs", _items(self._api("v3/job/list", params=params), "jobs"))

    def get_job(self, job_id: str) -> dict[str, Any]:
        return {"job": _record(self._api(f"v3/job/show/{_q(job_id)}"))}

    def kill_job(self, job_id: str) -> dict[str, Any]:
        return _record(self._api(f"v3/job/kill/{_q(job_id)}", method="POST"))

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------

    def issue_query(
        self,
        query: str,
        database: str,
        *,
        engine: str = config.DEFAULT_QUERY_ENGINE,
        priority: int | None = None,
    ) -> dict[str, Any]:
        """Submit a query job.

        Args:
            query: SQL text.
            database: Database the query runs against.
            engine: trino, hive or presto.
            priority: -2 (very low) to 2 (very high). Server default when None.

        Returns:
            dict with keys: job_id, database, engine.
        """
        body: dict[str, Any] = {"query": query}
        if priority is not None:
            body["priority"] = priority
        path = f"v3/job/issue/{_q(engine)}/{_q(database)}"
        result = _record(self._api(path, method="POST", data=body))
        return {
            "job_id": str(result.get("job_id") or result.get("job") or ""),
            "database": result.get("database") or database,
            "engine": engine,
        }

    def list_queries(
        self, *, limit: int | None = None, status: str | None = None
    ) -> dict[str, Any]:
        """List recent jobs that ran a trino, hive or presto query."""
        jobs = self.list_jobs(limit=limit, status=status)["jobs"]
        return _listing(
            "jobs",
            [j for j in jobs if isinstance(j, dict) and j.get("type") in config.QUERY_JOB_TYPES],
        )

    def get_query_result(self, job_id: str, *, limit: int | None = None) -> dict[str, Any]:
        """Fetch the rows of a query job.

        The job is looked up first. A job that has not succeeded comes back
        with its status and no rows; a failed job also carries ``error``.

        Returns:
            dict with keys: job_id, status, columns, rows, total.
        """
        job = _record(self._api(f"v3/job/show/{_q(job_id)}"))
        status = job.get("status", "")
        if status != "success":
            payload = _listing("rows", [], job_id=job_id, status=status, columns=[])
            debug = job.get("debug")
            if isinstance(debug, dict) and debug.get("stderr"):
                payload["error"] = debug["stderr"]
            return payload
        text = self._api(
            f"v3/job/result/{_q(job_id)}",
            params={"format": "json", "limit": limit},
            text=True,
        )
        return _listing(
            "rows", _result_rows(text), job_id=job_id, status=status, columns=_result_columns(job)
        )

    # -------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------

    def list_users(self) -> dict[str, Any]:
        return _listing("users", _items(self._api("v3/user/list"), "users"))

    def get_user(self, email: str) -> dict[str, Any]:
        return {"user": _record(self._api(f"v3/user/show/{_q(email)}"))}

    # -------------------------------------------------------------------
    # Workflows
    # -------------------------------------------------------------------

    def list_workflows(self) -> dict[str, Any]:
        return _listing("workflows", _items(self._workflow("api/workflows"), "workflows"))

    def get_workflow(self, workflow_id: str) -> dict[str, Any]:
        return {"workflow": _record(self._workflow(f"api/workflows/{_q(workflow_id)}"))}

    def start_workflow(
        self, workflow_id: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Start a new attempt of a workflow.

        Args:
            workflow_id: Workflow to run.
            params: Optional session parameters passed to the attempt.

        Returns:
            dict with key: attempt.
        """
        body: dict[str, Any] = {}
        if params:
            body["params"] = params
        result = self._workflow(
            f"api/workflows/{_q(workflow_id)}/attempts", method="POST", data=body
        )
        return {"attempt": _record(result)}

    def create_workflow(self, name: str, project: str, definition: str) -> dict[str, Any]:
        body = {"name": name, "project": project, "config": definition}
        return {"workflow": _record(self._workflow("api/workflows", method="POST", data=body))}

    def update_workflow(self, workflow_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        result = self._workflow(f"api/workflows/{_q(workflow_id)}", method="PUT", data=updates)
        return {"workflow": _record(result)}

    def delete_workflow(self, workflow_id: str) -> dict[str, Any]:
        return _record(self._workflow(f"api/workflows/{_q(workflow_id)}", method="DELETE"))

    def list_attempts(self, workflow_id: str) -> dict[str, Any]:
        result = self._workflow(f"api/workflows/{_q(workflow_id)}/attempts")
        return _listing("attempts", _items(result, "attempts"), workflow_id=workflow_id)

    def get_attempt(self, workflow_id: str, attempt_id: str) -> dict[str, Any]:
        path = f"api/workflows/{_q(workflow_id)}/attempts/{_q(attempt_id)}"
        return {"attempt": _record(self._workflow(path))}

    def kill_attempt(self, workflow_id: str, attempt_id: str) -> dict[str, Any]:
        path = f"api/workflows/{_q(workflow_id)}/attempts/{_q(attempt_id)}/kill"
        return _record(self._workflow(path, method="POST"))

    def retry_attempt(
        self, workflow_id: str, attempt_id: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if params:
            body["params"] = params
        path = f"api/workflows/{_q(workflow_id)}/attempts/{_q(attempt_id)}/retry"
        return {"attempt": _record(self._workflow(path, method="POST", data=body))}

    def list_tasks(self, workflow_id: str, attempt_id: str) -> dict[str, Any]:
        """List the tasks of one attempt.

        Returns:
            dict with keys: workflow_id, attempt_id, tasks, total.
        """
        path = f"api/workflows/{_q(workflow_id)}/attempts/{_q(attempt_id)}/tasks"
        return _listing(
            "tasks",
            _items(self._workflow(path), "tasks"),
            workflow_id=workflow_id,
            attempt_id=attempt_id,
        )

    def get_task(self, workflow_id: str, attempt_id: str, task_id: str) -> dict[str, Any]:
        path = f"api/workflows/{_q(workflow_id)}/attempts/{_q(attempt_id)}/tasks/{_q(task_id)}"
        return {"task": _record(self._workflow(path))}

    def get_attempt_log(self, workflow_id: str, attempt_id: str) -> dict[str, Any]:
        path = f"api/workflows/{_q(workflow_id)}/attempts/{_q(attempt_id)}/log"
        return {
            "workflow_id": workflow_id,
            "attempt_id": attempt_id,
            "log": self._workflow(path, text=True),
        }

    def get_task_log(self, workflow_id: str, attempt_id: str, task_id: str) -> dict[str, Any]:
        path = (
            f"api/workflows/{_q(workflow_id)}/attempts/{_q(attempt_id)}"
            f"/tasks/{_q(task_id)}/log"
        )
        return {
            "workflow_id": workflow_id,
            "attempt_id": attempt_id,
            "task_id": task_id,
            "log": self._workflow(path, text=True),
        }

    def get_schedule(self, workflow_id: str) -> dict[str, Any]:
        return {"schedule": _record(self._workflow(f"api/workflows/{_q(workflow_id)}/schedule"))}

    def enable_schedule(self, workflow_id: str) -> dict[str, Any]:
        path = f"api/workflows/{_q(workflow_id)}/schedule/enable"
        return {"schedule": _record(self._workflow(path, method="POST"))}

    def disable_schedule(self, workflow_id: str) -> dict[str, Any]:
        path = f"api/workflows/{_q(workflow_id)}/schedule/disable"
        return {"schedule": _record(self._workflow(path, method="POST"))}

    def update_schedule(
        self, workflow_id: str, cron: str, timezone: str, delay: int
    ) -> dict[str, Any]:
        """Replace a workflow's schedule.

        Args:
            workflow_id: Workflow to reschedule.
            cron: Cron expression (5 or 6 fields, or @daily style).
            timezone: IANA timezone name, e.g. ``Asia/Tokyo``.
            delay: Seconds to delay each run.

        Returns:
            dict with key: schedule.
        """
        body = {"cron": cron, "timezone": timezone, "delay": delay}
        result = self._workflow(
            f"api/workflows/{_q(workflow_id)}/schedule", method="PUT", data=body
        )
        return {"schedule": _record(result)}

    def list_projects(self) -> dict[str, Any]:
        return _listing("projects", _items(self._workflow("api/projects"), "projects"))

    def get_project(self, project_id: str) -> dict[str, Any]:
        return {"project": _record(self._workflow(f"api/projects/{_q(project_id)}"))}

    def list_project_workflows(self, project_id: str) -> dict[str, Any]:
        result = self._workflow(f"api/projects/{_q(project_id)}/workflows")
        return _listing("workflows", _items(result, "workflows"), project_id=project_id)

    def list_project_secrets(self, project_id: str) -> dict[str, Any]:
        """List the secret keys of a project.

        The API answers with either a key/value map or a list of
        ``{"key": ...}`` objects; both become ``{"key", "value"}`` rows.
        """
        result = self._workflow(f"api/projects/{_q(project_id)}/secrets")
        secrets = result.get("secrets") if isinstance(result, dict) else result
        if isinstance(secrets, dict):
            rows = [{"key": k, "value": v} for k, v in sorted(secrets.items())]
        else:
            rows = [s if isinstance(s, dict) else {"key": s} for s in secrets or []]
        return _listing("secrets", rows, project_id=project_id)

    def set_project_secret(self, project_id: str, key: str, value: str) -> dict[str, Any]:
        path = f"api/projects/{_q(project_id)}/secrets/{_q(key)}"
        return _record(self._workflow(path, method="PUT", data={"value": value}))

    def delete_project_secret(self, project_id: str, key: str) -> dict[str, Any]:
        path = f"api/projects/{_q(project_id)}/secrets/{_q(key)}"
        return _record(self._workflow(path, method="DELETE"))

    # -------------------------------------------------------------------
    # CDP audiences
    # -------------------------------------------------------------------

    def list_audiences(self) -> dict[str, Any]:
        """List all parent segments (audiences).

        Returns:
            dict with keys: audiences, total.
        """
        return _listing("audiences", _items(self._cdp("audiences"), "audiences"))

    def get_audience(self, audience_id: str) -> dict[str, Any]:
        return {"audience": _record(self._cdp(f"audiences/{_q(audience_id)}"))}

    def create_audience(
        self, name: str, description: str, parent_database: str, parent_table: str
    ) -> dict[str, Any]:
        body = {
            "name": name,
            "description": description,
            "master": {
                "parentDatabaseName": parent_database,
                "parentTableName": parent_table,
            },
        }
        return {"audience": _record(self._cdp("audiences", method="POST", data=body))}

    def update_audience(self, audience_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        """Update an audience.

        Args:
            audience_id: Audience to update.
            updates: Wire-format (camelCase) fields to send.

        Returns:
            dict with key: audience.
        """
        result = self._cdp(f"audiences/{_q(audience_id)}", method="PUT", data=updates)
        return {"audience": _record(result)}

    def delete_audience(self, audience_id: str) -> dict[str, Any]:
        return _record(self._cdp(f"audiences/{_q(audience_id)}", method="DELETE"))

    def get_audience_attributes(self, audience_id: str) -> dict[str, Any]:
        result = self._cdp(f"audiences/{_q(audience_id)}/attributes")
        return _listing("attributes", _items(result, "attributes"), audience_id=audience_id)

    def get_audience_behaviors(self, audience_id: str) -> dict[str, Any]:
        result = self._cdp(f"audiences/{_q(audience_id)}/behaviors")
        return _listing("behaviors", _items(result, "behaviors"), audience_id=audience_id)

    def run_audience(self, audience_id: str) -> dict[str, Any]:
        result = self._cdp(f"audiences/{_q(audience_id)}/run", method="POST")
        return {"execution": _record(result)}

    def get_audience_executions(self, audience_id: str) -> dict[str, Any]:
        result = self._cdp(f"audiences/{_q(audience_id)}/executions")
        return _listing("executions", _items(result, "executions"), audience_id=audience_id)

    def get_audience_statistics(self, audience_id: str) -> dict[str, Any]:
        result = self._cdp(f"audiences/{_q(audience_id)}/statistics")
        return _listing("statistics", _items(result, "statistics"), audience_id=audience_id)

    def get_audience_sample_values(self, audience_id: str, column: str) -> dict[str, Any]:
        """Sample values of one audience column.

        The API answers with ``[value, frequency]`` pairs.

        Returns:
            dict with keys: audience_id, column, values, total.
        """
        result = self._cdp(
            f"audiences/{_q(audience_id)}/sample_values", params={"column": column}
        )
        return _listing(
            "values", _items(result, "values"), audience_id=audience_id, column=column
        )

    def get_behavior_sample_values(
        self, audience_id: str, behavior_id: str, column: str
    ) -> dict[str, Any]:
        path = f"audiences/{_q(audience_id)}/behaviors/{_q(behavior_id)}/sample_values"
        result = self._cdp(path, params={"column": column})
        return _listing(
            "values", _items(result, "values"), audience_id=audience_id, column=column
        )

    # -------------------------------------------------------------------
    # CDP segments
    # -------------------------------------------------------------------

    def list_segments(
        self, audience_id: str, *, limit: int | None = None, offset: int | None = None
    ) -> dict[str, Any]:
        result = self._cdp(
            f"audiences/{_q(audience_id)}/segments",
            params={"limit": limit, "offset": offset},
        )
        return _listing("segments", _items(result, "segments"), audience_id=audience_id)

    def get_segment(self, audience_id: str, segment_id: str) -> dict[str, Any]:
        path = f"audiences/{_q(audience_id)}/segments/{_q(segment_id)}"
        return {"segment": _record(self._cdp(path))}

    def create_segment(
        self, audience_id: str, name: str, description: str, query: str
    ) -> dict[str, Any]:
        body = {"name": name, "description": description, "query": query}
        result = self._cdp(f"audiences/{_q(audience_id)}/segments", method="POST", data=body)
        return {"segment": _record(result)}

    def update_segment(
        self, audience_id: str, segment_id: str, updates: dict[str, Any]
    ) -> dict[str, Any]:
        path = f"audiences/{_q(audience_id)}/segments/{_q(segment_id)}"
        return {"segment": _record(self._cdp(path, method="PUT", data=updates))}

    def delete_segment(self, audience_id: str, segment_id: str) -> dict[str, Any]:
        path = f"audiences/{_q(audience_id)}/segments/{_q(segment_id)}"
        return _record(self._cdp(path, method="DELETE"))

    def list_folder_segments(self, audience_id: str, folder_id: str) -> dict[str, Any]:
        result = self._cdp(f"audiences/{_q(audience_id)}/folders/{_q(folder_id)}/segments")
        return _listing(
            "segments", _items(result, "segments"), audience_id=audience_id, folder_id=folder_id
        )

    def get_segment_statistics(self, audience_id: str, segment_id: str) -> dict[str, Any]:
        path = f"audiences/{_q(audience_id)}/segments/{_q(segment_id)}/statistics"
        return _listing(
            "statistics",
            _items(self._cdp(path), "statistics"),
            audience_id=audience_id,
            segment_id=segment_id,
        )

    def create_segment_query(self, audience_id: str, query: str) -> dict[str, Any]:
        """Start an ad-hoc segment query; poll it with get_segment_query_status."""
        result = self._cdp(
            f"audiences/{_q(audience_id)}/segments/queries",
            method="POST",
            data={"query": query},
        )
        return {"query": _record(result)}

    def get_segment_sql(self, audience_id: str, rules: dict[str, Any]) -> dict[str, Any]:
        """Translate segment rules into the SQL the CDP would run."""
        result = self._cdp(
            f"audiences/{_q(audience_id)}/segments/query", method="POST", data=rules
        )
        return {"audience_id": audience_id, "sql": _record(result).get("sql", "")}

    def get_segment_query_status(self, audience_id: str, query_id: str) -> dict[str, Any]:
        path = f"audiences/{_q(audience_id)}/segments/queries/{_q(query_id)}"
        return {"query": _record(self._cdp(path))}

    def kill_segment_query(self, audience_id: str, query_id: str) -> dict[str, Any]:
        path = f"audiences/{_q(audience_id)}/segments/queries/{_q(query_id)}/kill"
        return _record(self._cdp(path, method="POST"))

    def get_segment_query_customers(
        self,
        audience_id: str,
        query_id: str,
        *,
        limit: int | None = None,
        offset: int | None = None,
        fields: str | None = None,
    ) -> dict[str, Any]:
        """Customers matched by a finished segment query.

        Args:
            audience_id: Audience the query ran on.
            query_id: Segment query id.
            limit: Page size (server default 100).
            offset: Rows to skip.
            fields: Comma-separated customer columns to include.

        Returns:
            dict with keys: audience_id, query_id, customers, total.
        """
        path = f"audiences/{_q(audience_id)}/segments/queries/{_q(query_id)}/customers"
        result = self._cdp(path, params={"limit": limit, "offset": offset, "fields": fields})
        return _listing(
            "customers", _items(result, "customers"), audience_id=audience_id, query_id=query_id
        )

    # -------------------------------------------------------------------
    # CDP activations (syndications)
    # -------------------------------------------------------------------

    def list_audience_activations(self, audience_id: str) -> dict[str, Any]:
        """List activations configured on one audience.

        Returns:
            dict with keys: audience_id, activations, total.
        """
        result = self._cdp(f"audiences/{_q(audience_id)}/syndications")
        return _listing("activations", _items(result, "activations"), audience_id=audience_id)

    def list_segment_folder_activations(self, folder_id: str) -> dict[str, Any]:
        result = self._cdp(f"segment_folders/{_q(folder_id)}/activations")
        return _listing("activations", _items(result, "activations"), folder_id=folder_id)

    def list_parent_segment_activations(self, parent_segment_id: str) -> dict[str, Any]:
        result = self._cdp(f"entities/parent_segments/{_q(parent_segment_id)}/activations")
        return _listing(
            "activations",
            _items(result, "activations"),
            parent_segment_id=parent_segment_id,
        )

    def _activation_path(self, audience_id: str, segment_id: str, activation_id: str) -> str:
        return (
            f"audiences/{_q(audience_id)}/segments/{_q(segment_id)}"
            f"/syndications/{_q(activation_id)}"
        )

    def get_activation(
        self, audience_id: str, segment_id: str, activation_id: str
    ) -> dict[str, Any]:
        path = self._activation_path(audience_id, segment_id, activation_id)
        return {"activation": _record(self._cdp(path))}

    def delete_activation(
        self, audience_id: str, segment_id: str, activation_id: str
    ) -> dict[str, Any]:
        path = self._activation_path(audience_id, segment_id, activation_id)
        return _record(self._cdp(path, method="DELETE"))

    def execute_activation(
        self, audience_id: str, segment_id: str, activation_id: str
    ) -> dict[str, Any]:
        path = self._activation_path(audience_id, segment_id, activation_id) + "/runs"
        return {"execution": _record(self._cdp(path, method="POST"))}

    def get_activation_executions(
        self, audience_id: str, segment_id: str, activation_id: str
    ) -> dict[str, Any]:
        path = self._activation_path(audience_id, segment_id, activation_id) + "/runs"
        return _listing("executions", _items(self._cdp(path), "executions"))

    def create_activation(
        self,
        segment_id: str,
        name: str,
        description: str,
        configuration: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create an activation on an entity segment.

        Args:
            segment_id: Entity segment that feeds the activation.
            name: Activation name.
            description: Free text.
            configuration: Extra attributes (connection id, columns...) merged
                into the JSON:API attributes.

        Returns:
            dict with key: activation.
        """
        attributes: dict[str, Any] = {"name": name, "description": description}
        attributes.update(configuration or {})
        body = {"type": "syndication", "attributes": attributes}
        result = self._cdp(
            f"entities/segments/{_q(segment_id)}/syndications", method="POST", data=body
        )
        return {"activation": _record(result)}

    def update_activation(
        self, audience_id: str, segment_id: str, activation_id: str, updates: dict[str, Any]
    ) -> dict[str, Any]:
        path = self._activation_path(audience_id, segment_id, activation_id)
        return {"activation": _record(self._cdp(path, method="PUT", data=updates))}

    def update_activation_status(
        self, audience_id: str, segment_id: str, activation_id: str, status: str
    ) -> dict[str, Any]:
        path = self._activation_path(audience_id, segment_id, activation_id)
        result = self._cdp(path, method="PATCH", data={"status": status})
        return {"activation": _record(result)}

    def run_segment_activation(self, segment_id: str, activation_id: str) -> dict[str, Any]:
        path = f"entities/segments/{_q(segment_id)}/activations/{_q(activation_id)}/run"
        return {"execution": _record(self._cdp(path, method="POST"))}

    # -------------------------------------------------------------------
    # CDP folders and entities
    # -------------------------------------------------------------------

    def list_folders(self, audience_id: str) -> dict[str, Any]:
        result = self._cdp(f"audiences/{_q(audience_id)}/folders")
        return _listing("folders", _items(result, "folders"), audience_id=audience_id)

    def create_audience_folder(
        self,
        audience_id: str,
        name: str,
        description: str = "",
        parent_id: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"name": name, "description": description}
        if parent_id:
            body["parent_id"] = parent_id
        result = self._cdp(f"audiences/{_q(audience_id)}/folders", method="POST", data=body)
        return {"folder": _record(result)}

    def get_audience_folder(self, audience_id: str, folder_id: str) -> dict[str, Any]:
        path = f"audiences/{_q(audience_id)}/folders/{_q(folder_id)}"
        return {"folder": _record(self._cdp(path))}

    def create_entity_folder(
        self, name: str, description: str = "", parent_folder_id: str | None = None
    ) -> dict[str, Any]:
        """Create an entity folder (JSON:API body, not wrapped in ``data``)."""
        body: dict[str, Any] = {
            "type": "folder-segment",
            "attributes": {"name": name, "description": description},
        }
        if parent_folder_id:
            body["relationships"] = {
                "parentFolder": {"data": {"id": parent_folder_id, "type": "folder-segment"}}
            }
        return {"folder": _record(self._cdp("entities/folders", method="POST", data=body))}

    def get_entity_folder(self, folder_id: str) -> dict[str, Any]:
        return {"folder": _record(self._cdp(f"entities/folders/{_q(folder_id)}"))}

    def get_entities_by_folder(self, folder_id: str) -> dict[str, Any]:
        result = self._cdp(f"entities/by-folder/{_q(folder_id)}")
        return _listing("entities", _items(result, "entities"), folder_id=folder_id)

    def update_entity_folder(self, folder_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        """Update an entity folder via a JSON:API PATCH.

        Args:
            folder_id: Folder to update.
            updates: Attribute values; ``parent_folder_id`` moves the folder.
        """
        attributes = {k: v for k, v in updates.items() if k != "parent_folder_id"}
        data: dict[str, Any] = {"id": folder_id, "type": "folder-segment", "attributes": attributes}
        if "parent_folder_id" in updates:
            parent = updates["parent_folder_id"]
            data["relationships"] = {
                "parentFolder": {
                    "data": {"id": parent, "type": "folder-segment"} if parent else None
                }
            }
        result = self._cdp(f"entities/folders/{_q(folder_id)}", method="PATCH", data={"data": data})
        return {"folder": _record(result)}

    def delete_entity_folder(self, folder_id: str) -> dict[str, Any]:
        return _record(self._cdp(f"entities/folders/{_q(folder_id)}", method="DELETE"))

    # -------------------------------------------------------------------
    # CDP tokens
    # -------------------------------------------------------------------

    def list_tokens(
        self,
        audience_id: str,
        *,
        limit: int | None = None,
        offset: int | None = None,
        token_type: str | None = None,
        status: str | None = None,
    ) -> dict[str, Any]:
        params = {"limit": limit, "offset": offset, "type": token_type, "status": status}
        result = self._cdp(f"audiences/{_q(audience_id)}/tokens", params=params)
        return _listing("tokens", _items(result, "tokens"), audience_id=audience_id)

    def get_entity_token(self, token_id: str) -> dict[str, Any]:
        return {"token": _record(self._cdp(f"entities/tokens/{_q(token_id)}"))}

    def update_entity_token(self, token_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        result = self._cdp(f"entities/tokens/{_q(token_id)}", method="PATCH", data=updates)
        return {"token": _record(result)}

    def delete_entity_token(self, token_id: str) -> dict[str, Any]:
        return _record(self._cdp(f"entities/tokens/{_q(token_id)}", method="DELETE"))

    # -------------------------------------------------------------------
    # CDP funnels
    # -------------------------------------------------------------------

    def list_funnels(self, audience_id: str) -> dict[str, Any]:
        result = self._cdp(f"audiences/{_q(audience_id)}/funnels")
        return _listing("funnels", _items(result, "funnels"), audience_id=audience_id)

    def get_funnel(self, audience_id: str, funnel_id: str) -> dict[str, Any]:
        path = f"audiences/{_q(audience_id)}/funnels/{_q(funnel_id)}"
        return {"funnel": _record(self._cdp(path))}

    def delete_funnel(self, audience_id: str, funnel_id: str) -> dict[str, Any]:
        path = f"audiences/{_q(audience_id)}/funnels/{_q(funnel_id)}"
        return _record(self._cdp(path, method="DELETE"))

    # -------------------------------------------------------------------
    # CDP journeys
    # -------------------------------------------------------------------

    def list_journeys(self, folder_id: str) -> dict[str, Any]:
        result = self._cdp("entities/journeys", params={"folder_id": folder_id})
        return _listing("journeys", _items(result, "journeys"), folder_id=folder_id)

    def get_journey(self, journey_id: str) -> dict[str, Any]:
        return {"journey": _record(self._cdp(f"entities/journeys/{_q(journey_id)}"))}

    def create_journey(self, request: dict[str, Any]) -> dict[str, Any]:
        """Create a journey from a JSON:API request body (``{"data": {...}}``)."""
        return {"journey": _record(self._cdp("entities/journeys", method="POST", data=request))}

    def delete_journey(self, journey_id: str) -> dict[str, Any]:
        return _record(self._cdp(f"entities/journeys/{_q(journey_id)}", method="DELETE"))

    def pause_journey(self, journey_id: str) -> dict[str, Any]:
        result = self._cdp(f"entities/journeys/{_q(journey_id)}/pause", method="PATCH")
        return {"journey": _record(result)}

    def resume_journey(self, journey_id: str) -> dict[str, Any]:
        result = self._cdp(f"entities/journeys/{_q(journey_id)}/resume", method="PATCH")
        return {"journey": _record(result)}
