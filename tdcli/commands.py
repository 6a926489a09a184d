"""
Command implementations for tdcli.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

Business logic lives in client.py (TDClient). These thin wrappers check the
positional arguments, parse key=value updates, make one client call and hand
the payload to the output dispatcher. Positional tokens are in ``ns.args``;
global output flags are in ``ns.flags``.
"""

import os
import re
import sys
import time

from tdcli import config
from tdcli.api import _safe_json_parse
from tdcli.client import TDClient
from tdcli.exceptions import ConfigError, OperationError, UsageError
from tdcli.formatters import (
    ACTIVATION_EXECUTIONS_CSV_HEADER,
    ACTIVATIONS_CSV_HEADER,
    ATTEMPT_CSV_HEADER,
    ATTEMPTS_CSV_HEADER,
    ATTRIBUTES_CSV_HEADER,
    AUDIENCE_EXECUTIONS_CSV_HEADER,
    AUDIENCES_CSV_HEADER,
    BEHAVIORS_CSV_HEADER,
    CUSTOMERS_CSV_HEADER,
    CONFIG_CSV_HEADER,
    DATABASES_CSV_HEADER,
    ENTITIES_CSV_HEADER,
    FOLDERS_CSV_HEADER,
    FUNNEL_CSV_HEADER,
    FUNNELS_CSV_HEADER,
    JOBS_CSV_HEADER,
    JOURNEYS_CSV_HEADER,
    LOG_CSV_HEADER,
    PROJECTS_CSV_HEADER,
    SAMPLE_VALUES_CSV_HEADER,
    SCHEDULE_CSV_HEADER,
    SECRETS_CSV_HEADER,
    SEGMENT_QUERY_CSV_HEADER,
    SEGMENT_SQL_CSV_HEADER,
    SEGMENTS_CSV_HEADER,
    STATISTICS_CSV_HEADER,
    TABLES_CSV_HEADER,
    TASKS_CSV_HEADER,
    TOKEN_CSV_HEADER,
    TOKENS_CSV_HEADER,
    USERS_CSV_HEADER,
    WORKFLOW_CSV_HEADER,
    WORKFLOWS_CSV_HEADER,
    attempt_status,
    format_activation_csv,
    format_activation_detail,
    format_activation_executions_csv,
    format_activation_executions_table,
    format_activations_csv,
    format_activations_table,
    format_attempt_csv,
    format_attempt_detail,
    format_attempts_csv,
    format_attempts_table,
    format_attributes_csv,
    format_attributes_table,
    format_audience_csv,
    format_audience_detail,
    format_audience_executions_csv,
    format_audience_executions_table,
    format_audiences_csv,
    format_audiences_table,
    format_behaviors_csv,
    format_behaviors_table,
    format_customers_csv,
    format_customers_table,
    format_config_csv,
    format_config_table,
    format_database_csv,
    format_database_detail,
    format_databases_csv,
    format_databases_table,
    format_entities_csv,
    format_entities_table,
    format_folder_activations_table,
    format_folder_csv,
    format_folder_detail,
    format_folder_segments_table,
    format_folders_csv,
    format_folders_table,
    format_funnel_csv,
    format_funnel_detail,
    format_funnels_csv,
    format_funnels_table,
    format_job_csv,
    format_job_detail,
    format_jobs_csv,
    format_jobs_table,
    format_journey_csv,
    format_journey_detail,
    format_journeys_csv,
    format_journeys_table,
    format_log_csv,
    format_log_text,
    format_parent_segment_activations_table,
    format_project_csv,
    format_project_detail,
    format_project_workflows_table,
    format_projects_csv,
    format_projects_table,
    format_query_result_csv,
    format_query_result_table,
    format_sample_values_csv,
    format_sample_values_table,
    format_schedule_csv,
    format_schedule_detail,
    format_secrets_csv,
    format_secrets_table,
    format_segment_csv,
    format_segment_detail,
    format_segment_query_csv,
    format_segment_query_detail,
    format_segment_sql_csv,
    format_segment_sql_text,
    format_segments_csv,
    format_segments_table,
    format_statistics_csv,
    format_statistics_table,
    format_table_csv,
    format_table_detail,
    format_tables_csv,
    format_tables_table,
    format_task_csv,
    format_task_detail,
    format_tasks_csv,
    format_tasks_table,
    format_token_csv,
    format_token_detail,
    format_tokens_csv,
    format_tokens_table,
    format_user_csv,
    format_user_detail,
    format_users_csv,
    format_users_table,
    format_workflow_csv,
    format_workflow_detail,
    format_workflows_csv,
    format_workflows_table,
    mutation_response,
    output,
    query_result_csv_header,
)
from tdcli.models import Confirmation, ObjectPayload, UpdateField

# ---------------------------------------------------------------------------
# Update field tables (CLI key -> wire key and kind)
# ---------------------------------------------------------------------------

AUDIENCE_UPDATE_FIELDS = {
    "name": UpdateField("name"),
    "description": UpdateField("description"),
    "schedule_type": UpdateField("scheduleType"),
    "schedule_option": UpdateField("scheduleOption", "optional"),
    "timezone": UpdateField("timezone"),
    "workflow_hive_only": UpdateField("workflowHiveOnly", "bool"),
    "hive_engine_version": UpdateField("hiveEngineVersion"),
    "hive_pool_name": UpdateField("hivePoolName", "optional"),
    "presto_pool_name": UpdateField("prestoPoolName", "optional"),
}

TOKEN_UPDATE_FIELDS = {
    "name": UpdateField("name"),
    "description": UpdateField("description"),
    "status": UpdateField("status"),
    "scopes": UpdateField("scopes", "list"),
    "metadata": UpdateField("metadata", "json"),
}

FOLDER_UPDATE_FIELDS = {
    "name": UpdateField("name"),
    "description": UpdateField("description"),
    "parent_folder_id": UpdateField("parent_folder_id", "optional"),
}

ACTIVATION_UPDATE_FIELDS = {
    "name": UpdateField("name"),
    "description": UpdateField("description"),
    "configuration": UpdateField("configuration", "json"),
    "status": UpdateField("status"),
}

CRON_SPECIALS = frozenset(
    ["@yearly", "@annually", "@monthly", "@weekly", "@daily", "@midnight", "@hourly"]
)
_CRON_FIELD_RE = re.compile(r"^[*0-9,\-/]+$")

ACTIVATIONS_FANOUT_BANNER = """\
Warning: 'cdp activations ls' lists activations from ALL audiences.
    For better performance, use specific commands:
    - cdp activations list-by-audience <audience-id>        List activations for one audience
    - cdp activations list-by-segment-folder <folder-id>   List activations for one folder
    - cdp activations list-by-parent-segment <segment-id>  List activations for one parent segment
    - cdp audiences ls                                      List available audiences first
"""

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

_client = None


def _get_client():
    """Return a cached TDClient, creating one on first use."""
    global _client
    if _client is None:
        _client = TDClient()
    return _client


def _require_args(ns, count, usage, message="Missing required arguments"):
    """Raise UsageError before any API call when fewer than *count* args are given."""
    if len(ns.args) < count:
        raise UsageError(message, usage=usage)
    return ns.args


def _call(context, method_name, *args, **kwargs):
    """Make one TDClient call, labelling a failure with *context*."""
    try:
        return getattr(_get_client(), method_name)(*args, **kwargs)
    except OperationError as e:
        raise e.with_context(context) from e


def _status(message):
    """Progress/status text. Kept off stdout so payload output stays clean."""
    print(message, file=sys.stderr, flush=True)


def _confirm(prompt):
    """Ask a y/N question on the terminal. Anything but y/yes is a no."""
    print(prompt, end="", file=sys.stderr, flush=True)
    try:
        answer = input()
    except EOFError:
        answer = ""
    return answer.strip().lower() in ("y", "yes")


def _confirm_or_cancel(ns, prompt):
    if getattr(ns, "force", False):
        return True
    if _confirm(prompt):
        return True
    _status("Operation cancelled.")
    return False


def parse_updates(tokens, fields=None):
    """Parse ``key=value`` tokens into a wire-format update dict.

    With *fields* (a dict of CLI key -> UpdateField) unknown keys are
    rejected and values are coerced per field kind. Without it every key is
    passed through as a string.
    """
    updates = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep or not key:
            raise UsageError(f"Invalid update format: {token} (expected key=value)")
        if fields is None:
            updates[key] = value
            continue
        field = fields.get(key)
        if field is None:
            raise UsageError(
                f"Unknown field: {key}", usage=f"valid fields: {', '.join(sorted(fields))}"
            )
        if field.kind == "str":
            if value:
                updates[field.wire] = value
        elif field.kind == "optional":
            updates[field.wire] = value
        elif field.kind == "bool":
            updates[field.wire] = value == "true"
        elif field.kind == "list":
            updates[field.wire] = [v.strip() for v in value.split(",") if v.strip()]
        elif field.kind == "json":
            parsed = _safe_json_parse(value, f"field '{key}'")
            updates[field.wire] = ObjectPayload.from_value(parsed, f"field '{key}'").data
        else:
            raise ValueError(f"unknown update field kind: {field.kind}")
    return updates


def _updates_or_fail(tokens, fields, usage):
    updates = parse_updates(tokens, fields)
    if not updates:
        raise UsageError("No updates specified", usage=usage)
    return updates


def _read_json_file(path, context):
    """Load a JSON object from *path* ("-" reads stdin)."""
    try:
        if path == "-":
            text = sys.stdin.read()
        else:
            with open(path, encoding="utf-8") as f:
                text = f.read()
    except OSError as e:
        raise OperationError(str(e.strerror or e), context=f"Failed to read {path}") from e
    return ObjectPayload.from_value(_safe_json_parse(text, context), context).data


def _json_arg(text, context):
    return ObjectPayload.from_value(_safe_json_parse(text, context), context).data


def validate_cron(expression):
    """Accept @daily style names or 5/6 fields of digits, ``*``, ``,``, ``-`` and ``/``."""
    if expression in CRON_SPECIALS:
        return expression
    fields = expression.split()
    if len(fields) not in (5, 6) or not all(_CRON_FIELD_RE.match(f) for f in fields):
        raise UsageError(
            f"Invalid cron expression: {expression!r}",
            usage="expected 5 or 6 fields (e.g. '0 9 * * *') or one of "
            + ", ".join(sorted(CRON_SPECIALS)),
        )
    return expression


# ---------------------------------------------------------------------------
# Version and config
# ---------------------------------------------------------------------------


def cmd_version(ns):
    print(f"tdcli {config.VERSION}")


def _config_target(ns):
    if getattr(ns, "global_scope", False):
        return config.home_config_path()
    return os.path.join(os.getcwd(), config.CONFIG_FILENAME)


def _display_value(key, value):
    if key == "api_key":
        return config.mask_api_key(value)
    return value


def cmd_config_show(ns):
    settings = config.SETTINGS
    payload = {
        "settings": {key: _display_value(key, settings.get(key, "")) for key in config.CONFIG_KEYS},
        "files": [
            {"path": path, "exists": os.path.exists(path)} for path in config.config_search_paths()
        ],
    }
    output(payload, format_config_table, ns.flags, CONFIG_CSV_HEADER, format_config_csv)


def cmd_config_get(ns):
    (key,) = _require_args(ns, 1, "config get <key>", "Config key required")[:1]
    if key not in config.CONFIG_KEYS:
        raise ConfigError(f"Unknown config key: {key}. Valid keys: {', '.join(config.CONFIG_KEYS)}")
    value = config.SETTINGS.get(key, "")
    print(f"{key}: {_display_value(key, value) if value else '(not set)'}")


def _validate_config_value(key, value):
    if key == "api_key":
        config.validate_api_key(value)
    elif key == "region":
        config.validate_region(value)
    elif key == "format":
        config.validate_format(value)
    elif key not in config.CONFIG_KEYS:
        raise ConfigError(f"Unknown config key: {key}. Valid keys: {', '.join(config.CONFIG_KEYS)}")


def cmd_config_set(ns):
    key, value = _require_args(ns, 2, "config set <key> <value> [--global]")[:2]
    _validate_config_value(key, value)
    path = _config_target(ns)
    config.save_config_value(path, key, value)
    print(f"Configuration saved to {path}")
    print(f"Set {key} = {_display_value(key, value)}")


def _prompt(label, default=""):
    suffix = f" [{default}]" if default else ""
    try:
        answer = input(f"{label}{suffix}: ").strip()
    except EOFError:
        answer = ""
    return answer or default


def cmd_config_init(ns):
    path = _config_target(ns)
    if os.path.exists(path) and not getattr(ns, "force", False):
        if not _confirm(f"Config file {path} already exists. Overwrite? (y/N): "):
            _status("Operation cancelled.")
            return

    print("tdcli configuration")
    print("API keys look like account_id/api_key.")
    while True:
        api_key = _prompt("API key")
        try:
            config.validate_api_key(api_key)
            break
        except ConfigError as e:
            print(str(e))
    while True:
        region = _prompt(f"Region ({', '.join(config.VALID_REGIONS)})", config.DEFAULT_REGION)
        if region in config.VALID_REGIONS:
            break
        print(f"Invalid region: {region}")
    while True:
        fmt = _prompt(f"Default format ({', '.join(config.VALID_FORMATS)})", config.DEFAULT_FORMAT)
        if fmt in config.VALID_FORMATS:
            break
        print(f"Invalid format: {fmt}")
    output_path = _prompt("Default output file (empty for stdout)")

    data = {"api_key": api_key, "region": region, "format": fmt}
    if output_path:
        data["output"] = output_path
    config.write_config(path, data)
    print(f"Configuration saved to {path}")


# ---------------------------------------------------------------------------
# Databases
# ---------------------------------------------------------------------------


def cmd_db_list(ns):
    result = _call("Failed to list databases", "list_databases")
    output(result, format_databases_table, ns.flags, DATABASES_CSV_HEADER, format_databases_csv)


def cmd_db_get(ns):
    name = _require_args(ns, 1, "db get <database_name>", "Database name required")[0]
    result = _call("Failed to get database", "get_database", name)
    output(result, format_database_detail, ns.flags, DATABASES_CSV_HEADER, format_database_csv)


def cmd_db_create(ns):
    name = _require_args(ns, 1, "db create <database_name>", "Database name required")[0]
    _call("Failed to create database", "create_database", name)
    mutation_response(Confirmation("database", name, "created"), ns.flags)


def cmd_db_delete(ns):
    name = _require_args(ns, 1, "db delete <database_name> [--force]", "Database name required")[0]
    if not _confirm_or_cancel(ns, f"Are you sure you want to delete database '{name}'? (y/N): "):
        return
    _call("Failed to delete database", "delete_database", name)
    mutation_response(Confirmation("database", name, "deleted"), ns.flags)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def cmd_table_list(ns):
    database = _require_args(ns, 1, "table list <database_name>", "Database name required")[0]
    result = _call("Failed to list tables", "list_tables", database)
    output(result, format_tables_table, ns.flags, TABLES_CSV_HEADER, format_tables_csv)


def cmd_table_get(ns):
    database, table = _require_args(
        ns, 2, "table get <database_name> <table_name>", "Database and table name required"
    )[:2]
    result = _call("Failed to get table", "get_table", database, table)
    output(result, format_table_detail, ns.flags, TABLES_CSV_HEADER, format_table_csv)


def cmd_table_create(ns):
    database, table = _require_args(
        ns, 2, "table create <database_name> <table_name>", "Database and table name required"
    )[:2]
    _call("Failed to create table", "create_table", database, table)
    mutation_response(
        Confirmation("table", f"{database}.{table}", "created"),
        ns.flags,
    )


def cmd_table_delete(ns):
    database, table = _require_args(
        ns,
        2,
        "table delete <database_name> <table_name> [--force]",
        "Database and table name required",
    )[:2]
    if not _confirm_or_cancel(
        ns, f"Are you sure you want to delete table '{database}.{table}'? (y/N): "
    ):
        return
    _call("Failed to delete table", "delete_table", database, table)
    mutation_response(Confirmation("table", f"{database}.{table}", "deleted"), ns.flags)


def cmd_table_swap(ns):
    database, table1, table2 = _require_args(
        ns, 3, "table swap <database_name> <table1> <table2>", "Database and two table names required"
    )[:3]
    _call("Failed to swap tables", "swap_tables", database, table1, table2)
    mutation_response(
        Confirmation("table", f"{database}.{table1}", "swapped", {"Swapped With": table2}),
        ns.flags,
    )


def cmd_table_rename(ns):
    database, old_name, new_name = _require_args(
        ns,
        3,
        "table rename <database_name> <old_name> <new_name>",
        "Database, current and new table name required",
    )[:3]
    _call("Failed to rename table", "rename_table", database, old_name, new_name)
    mutation_response(
        Confirmation("table", f"{database}.{old_name}", "renamed", {"New Name": new_name}),
        ns.flags,
    )


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


def cmd_job_list(ns):
    result = _call(
        "Failed to list jobs",
        "list_jobs",
        limit=getattr(ns, "limit", None),
        status=getattr(ns, "status", None),
    )
    output(result, format_jobs_table, ns.flags, JOBS_CSV_HEADER, format_jobs_csv)


def cmd_job_get(ns):
    job_id = _require_args(ns, 1, "job get <job_id>", "Job ID required")[0]
    result = _call("Failed to get job", "get_job", job_id)
    output(result, format_job_detail, ns.flags, JOBS_CSV_HEADER, format_job_csv)


def cmd_job_cancel(ns):
    job_id = _require_args(ns, 1, "job cancel <job_id> [--force]", "Job ID required")[0]
    if not _confirm_or_cancel(ns, f"Are you sure you want to cancel job '{job_id}'? (y/N): "):
        return
    _call("Failed to cancel job", "kill_job", job_id)
    mutation_response(Confirmation("job", job_id, "cancelled"), ns.flags)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def _job_error(job):
    debug = job.get("debug")
    if isinstance(debug, dict) and debug.get("stderr"):
        return debug["stderr"]
    return ""


def wait_for_job(job_id, timeout):
    """Poll a job every JOB_POLL_SECONDS until it finishes.

    Returns the job record on success. A failed, killed or timed-out job
    raises OperationError.
    """
    _status(f"Waiting for job {job_id} to complete (timeout: {timeout}s)...")
    deadline = time.monotonic() + timeout
    while True:
        job = _call("Failed to get job status", "get_job", job_id).get("job", {})
        status = job.get("status", "")
        if status == "success":
            _status(f"Job {job_id} completed successfully")
            return job
        if status == "error":
            error = _job_error(job)
            raise OperationError(f"Job {job_id} failed" + (f"\nError: {error}" if error else ""))
        if status == "killed":
            raise OperationError(f"Job {job_id} was cancelled")
        if time.monotonic() >= deadline:
            raise OperationError(f"Timeout waiting for job {job_id}")
        time.sleep(config.JOB_POLL_SECONDS)


def cmd_query_submit(ns):
    usage = 'query submit "<sql>" --database <database> [--engine trino|hive|presto] [--wait]'
    query = _require_args(ns, 1, usage, "Query string required")[0]
    database = getattr(ns, "database", None)
    if not database:
        raise UsageError("Database name required", usage=usage)
    engine = config.resolve_query_engine(getattr(ns, "engine", None))
    result = _call(
        "Failed to submit query",
        "issue_query",
        query,
        database,
        engine=engine,
        priority=getattr(ns, "priority", None),
    )
    job_id = result["job_id"]
    details = {"Database": result["database"], "Engine": engine}
    if not getattr(ns, "wait", False):
        mutation_response(Confirmation("query job", job_id, "submitted", details), ns.flags)
        return
    _status(f"Job {job_id} submitted")
    timeout = getattr(ns, "timeout", None) or config.JOB_WAIT_TIMEOUT_SECONDS
    job = wait_for_job(job_id, timeout)
    details["Status"] = job.get("status", "")
    mutation_response(Confirmation("query job", job_id, "completed", details), ns.flags)


def cmd_query_list(ns):
    result = _call(
        "Failed to list jobs",
        "list_queries",
        limit=getattr(ns, "limit", None),
        status=getattr(ns, "status", None),
    )
    output(result, format_jobs_table, ns.flags, JOBS_CSV_HEADER, format_jobs_csv)


def cmd_query_result(ns):
    job_id = _require_args(ns, 1, "query result <job_id> [--limit N]", "Job ID required")[0]
    result = _call(
        "Failed to get query results",
        "get_query_result",
        job_id,
        limit=getattr(ns, "limit", None),
    )
    status = result.get("status", "")
    if status in ("error", "killed"):
        message = f"Job {job_id} did not succeed (status: {status})"
        if result.get("error"):
            message += f"\nError: {result['error']}"
        raise OperationError(message, context="Failed to get query results")
    if status != "success":
        _status(f"Job status: {status}")
        return
    output(
        result,
        format_query_result_table,
        ns.flags,
        query_result_csv_header(result),
        format_query_result_csv,
    )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def cmd_user_list(ns):
    result = _call("Failed to list users", "list_users")
    output(result, format_users_table, ns.flags, USERS_CSV_HEADER, format_users_csv)


def cmd_user_get(ns):
    email = _require_args(ns, 1, "user get <email>", "User email required")[0]
    result = _call("Failed to get user", "get_user", email)
    output(result, format_user_detail, ns.flags, USERS_CSV_HEADER, format_user_csv)


# ---------------------------------------------------------------------------
# Workflows
# ---------------------------------------------------------------------------


def cmd_workflow_list(ns):
    result = _call("Failed to list workflows", "list_workflows")
    output(result, format_workflows_table, ns.flags, WORKFLOWS_CSV_HEADER, format_workflows_csv)


def cmd_workflow_get(ns):
    workflow_id = _require_args(ns, 1, "workflow get <workflow_id>", "Workflow ID required")[0]
    result = _call("Failed to get workflow", "get_workflow", workflow_id)
    output(result, format_workflow_detail, ns.flags, WORKFLOW_CSV_HEADER, format_workflow_csv)


def cmd_workflow_start(ns):
    args = _require_args(ns, 1, "workflow start <workflow_id> [params-json]", "Workflow ID required")
    params = None
    if len(args) > 1:
        params = _json_arg(args[1], "params")
    result = _call("Failed to start workflow", "start_workflow", args[0], params)
    attempt = result.get("attempt", {})
    mutation_response(
        Confirmation(
            "workflow",
            args[0],
            "started",
            {"Attempt ID": attempt.get("id", ""), "Status": attempt_status(attempt)},
        ),
        ns.flags,
    )


def cmd_workflow_create(ns):
    name, project, definition = _require_args(
        ns,
        3,
        "workflow create <name> <project> <config>",
        "Name, project and config required",
    )[:3]
    result = _call("Failed to create workflow", "create_workflow", name, project, definition)
    workflow = result.get("workflow", {})
    mutation_response(
        Confirmation(
            "workflow", workflow.get("id", ""), "created", {"Name": workflow.get("name") or name}
        ),
        ns.flags,
    )


def cmd_workflow_update(ns):
    usage = "workflow update <workflow_id> <key=value>..."
    args = _require_args(ns, 2, usage, "Workflow ID and at least one update required")
    updates = _updates_or_fail(args[1:], None, usage)
    result = _call("Failed to update workflow", "update_workflow", args[0], updates)
    workflow = result.get("workflow", {})
    mutation_response(
        Confirmation(
            "workflow",
            workflow.get("id") or args[0],
            "updated",
            {"Updated Fields": ", ".join(sorted(updates))},
        ),
        ns.flags,
    )


def cmd_workflow_delete(ns):
    workflow_id = _require_args(
        ns, 1, "workflow delete <workflow_id> [--force]", "Workflow ID required"
    )[0]
    if not _confirm_or_cancel(
        ns, f"Are you sure you want to delete workflow '{workflow_id}'? (y/N): "
    ):
        return
    _call("Failed to delete workflow", "delete_workflow", workflow_id)
    mutation_response(Confirmation("workflow", workflow_id, "deleted"), ns.flags)


def cmd_attempt_list(ns):
    workflow_id = _require_args(
        ns, 1, "workflow attempts list <workflow_id>", "Workflow ID required"
    )[0]
    result = _call("Failed to list workflow attempts", "list_attempts", workflow_id)
    output(result, format_attempts_table, ns.flags, ATTEMPTS_CSV_HEADER, format_attempts_csv)


def cmd_attempt_get(ns):
    workflow_id, attempt_id = _require_args(
        ns,
        2,
        "workflow attempts get <workflow_id> <attempt_id>",
        "Workflow ID and attempt ID required",
    )[:2]
    result = _call("Failed to get workflow attempt", "get_attempt", workflow_id, attempt_id)
    output(result, format_attempt_detail, ns.flags, ATTEMPT_CSV_HEADER, format_attempt_csv)


def cmd_attempt_kill(ns):
    workflow_id, attempt_id = _require_args(
        ns,
        2,
        "workflow attempts kill <workflow_id> <attempt_id>",
        "Workflow ID and attempt ID required",
    )[:2]
    _call("Failed to kill workflow attempt", "kill_attempt", workflow_id, attempt_id)
    mutation_response(
        Confirmation("attempt", attempt_id, "killed", {"Workflow ID": workflow_id}), ns.flags
    )


def cmd_attempt_retry(ns):
    args = _require_args(
        ns,
        2,
        "workflow attempts retry <workflow_id> <attempt_id> [params-json]",
        "Workflow ID and attempt ID required",
    )
    params = _json_arg(args[2], "params") if len(args) > 2 else None
    result = _call("Failed to retry workflow attempt", "retry_attempt", args[0], args[1], params)
    attempt = result.get("attempt", {})
    mutation_response(
        Confirmation(
            "attempt",
            args[1],
            "retried",
            {"New Attempt ID": attempt.get("id", ""), "Status": attempt_status(attempt)},
        ),
        ns.flags,
    )


def cmd_task_list(ns):
    workflow_id, attempt_id = _require_args(
        ns,
        2,
        "workflow tasks list <workflow_id> <attempt_id>",
        "Workflow ID and attempt ID required",
    )[:2]
    result = _call("Failed to list workflow tasks", "list_tasks", workflow_id, attempt_id)
    output(result, format_tasks_table, ns.flags, TASKS_CSV_HEADER, format_tasks_csv)


def cmd_task_get(ns):
    ids = _require_args(
        ns,
        3,
        "workflow tasks get <workflow_id> <attempt_id> <task_id>",
        "Workflow ID, attempt ID and task ID required",
    )[:3]
    result = _call("Failed to get workflow task", "get_task", *ids)
    output(result, format_task_detail, ns.flags, TASKS_CSV_HEADER, format_task_csv)


def cmd_log_attempt(ns):
    workflow_id, attempt_id = _require_args(
        ns,
        2,
        "workflow logs attempt <workflow_id> <attempt_id>",
        "Workflow ID and attempt ID required",
    )[:2]
    result = _call("Failed to get workflow attempt log", "get_attempt_log", workflow_id, attempt_id)
    output(result, format_log_text, ns.flags, LOG_CSV_HEADER, format_log_csv)


def cmd_log_task(ns):
    ids = _require_args(
        ns,
        3,
        "workflow logs task <workflow_id> <attempt_id> <task_id>",
        "Workflow ID, attempt ID and task ID required",
    )[:3]
    result = _call("Failed to get workflow task log", "get_task_log", *ids)
    output(result, format_log_text, ns.flags, LOG_CSV_HEADER, format_log_csv)


def cmd_schedule_get(ns):
    workflow_id = _require_args(
        ns, 1, "workflow schedule get <workflow_id>", "Workflow ID required"
    )[0]
    result = _call("Failed to get workflow schedule", "get_schedule", workflow_id)
    output(result, format_schedule_detail, ns.flags, SCHEDULE_CSV_HEADER, format_schedule_csv)


def cmd_schedule_enable(ns):
    workflow_id = _require_args(
        ns, 1, "workflow schedule enable <workflow_id>", "Workflow ID required"
    )[0]
    _call("Failed to enable workflow schedule", "enable_schedule", workflow_id)
    mutation_response(Confirmation("workflow schedule", workflow_id, "enabled"), ns.flags)


def cmd_schedule_disable(ns):
    workflow_id = _require_args(
        ns, 1, "workflow schedule disable <workflow_id>", "Workflow ID required"
    )[0]
    _call("Failed to disable workflow schedule", "disable_schedule", workflow_id)
    mutation_response(Confirmation("workflow schedule", workflow_id, "disabled"), ns.flags)


def cmd_schedule_update(ns):
    usage = "workflow schedule update <workflow_id> <cron> <timezone> <delay_seconds>"
    workflow_id, cron, timezone, delay = _require_args(
        ns, 4, usage, "Workflow ID, cron expression, timezone and delay required"
    )[:4]
    validate_cron(cron)
    try:
        delay_seconds = int(delay)
    except ValueError:
        raise UsageError(f"Invalid delay: {delay}", usage=usage) from None
    if delay_seconds < 0:
        raise UsageError(f"Invalid delay: {delay} (must be 0 or more seconds)", usage=usage)
    result = _call(
        "Failed to update workflow schedule",
        "update_schedule",
        workflow_id,
        cron,
        timezone,
        delay_seconds,
    )
    schedule = result.get("schedule", {})
    mutation_response(
        Confirmation(
            "workflow schedule",
            workflow_id,
            "updated",
            {
                "Cron": schedule.get("cron") or cron,
                "Timezone": schedule.get("timezone") or timezone,
                "Delay": f"{schedule.get('delay', delay_seconds)} seconds",
            },
        ),
        ns.flags,
    )


def cmd_project_list(ns):
    result = _call("Failed to list projects", "list_projects")
    output(result, format_projects_table, ns.flags, PROJECTS_CSV_HEADER, format_projects_csv)


def cmd_project_get(ns):
    project_id = _require_args(
        ns, 1, "workflow projects get <project_id>", "Project ID required"
    )[0]
    result = _call("Failed to get project", "get_project", project_id)
    output(result, format_project_detail, ns.flags, PROJECTS_CSV_HEADER, format_project_csv)


def cmd_project_workflows(ns):
    project_id = _require_args(
        ns, 1, "workflow projects workflows <project_id>", "Project ID required"
    )[0]
    result = _call("Failed to list project workflows", "list_project_workflows", project_id)
    output(
        result,
        format_project_workflows_table,
        ns.flags,
        WORKFLOWS_CSV_HEADER,
        format_workflows_csv,
    )


def cmd_secret_list(ns):
    project_id = _require_args(
        ns, 1, "workflow projects secrets list <project_id>", "Project ID required"
    )[0]
    result = _call("Failed to list project secrets", "list_project_secrets", project_id)
    output(result, format_secrets_table, ns.flags, SECRETS_CSV_HEADER, format_secrets_csv)


def cmd_secret_set(ns):
    project_id, key, value = _require_args(
        ns,
        3,
        "workflow projects secrets set <project_id> <key> <value>",
        "Project ID, secret key and secret value required",
    )[:3]
    _call("Failed to set project secret", "set_project_secret", project_id, key, value)
    mutation_response(
        Confirmation("secret", key, "set", {"Project ID": project_id}), ns.flags
    )


def cmd_secret_delete(ns):
    project_id, key = _require_args(
        ns,
        2,
        "workflow projects secrets delete <project_id> <key> [--force]",
        "Project ID and secret key required",
    )[:2]
    if not _confirm_or_cancel(
        ns, f"Are you sure you want to delete secret '{key}' from project {project_id}? (y/N): "
    ):
        return
    _call("Failed to delete project secret", "delete_project_secret", project_id, key)
    mutation_response(
        Confirmation("secret", key, "deleted", {"Project ID": project_id}), ns.flags
    )


# ---------------------------------------------------------------------------
# CDP audiences
# ---------------------------------------------------------------------------


def cmd_audience_create(ns):
    name, description, parent_db, parent_table = _require_args(
        ns,
        4,
        "cdp audience create <name> <description> <parent_database> <parent_table>",
        "Name, description, parent database and parent table required",
    )[:4]
    result = _call(
        "Failed to create audience", "create_audience", name, description, parent_db, parent_table
    )
    audience = result.get("audience", {})
    mutation_response(
        Confirmation(
            "audience",
            audience.get("id", ""),
            "created",
            {"Name": audience.get("name") or name},
        ),
        ns.flags,
    )


def cmd_audience_list(ns):
    result = _call("Failed to list audiences", "list_audiences")
    output(result, format_audiences_table, ns.flags, AUDIENCES_CSV_HEADER, format_audiences_csv)


def cmd_audience_get(ns):
    audience_id = _require_args(ns, 1, "cdp audience get <audience-id>", "Audience ID required")[0]
    result = _call("Failed to get audience", "get_audience", audience_id)
    output(result, format_audience_detail, ns.flags, AUDIENCES_CSV_HEADER, format_audience_csv)


def cmd_audience_delete(ns):
    audience_id = _require_args(
        ns, 1, "cdp audience delete <audience-id>", "Audience ID required"
    )[0]
    _call("Failed to delete audience", "delete_audience", audience_id)
    mutation_response(Confirmation("audience", audience_id, "deleted"), ns.flags)


def cmd_audience_update(ns):
    usage = "cdp audience update <audience-id> <key=value>..."
    args = _require_args(ns, 2, usage, "Audience ID and at least one update required")
    updates = _updates_or_fail(args[1:], AUDIENCE_UPDATE_FIELDS, usage)
    result = _call("Failed to update audience", "update_audience", args[0], updates)
    audience = result.get("audience", {})
    mutation_response(
        Confirmation(
            "audience",
            audience.get("id") or args[0],
            "updated",
            {"Updated Fields": ", ".join(sorted(updates))},
        ),
        ns.flags,
    )


def cmd_audience_attributes(ns):
    audience_id = _require_args(
        ns, 1, "cdp audience attributes <audience-id>", "Audience ID required"
    )[0]
    result = _call("Failed to get audience attributes", "get_audience_attributes", audience_id)
    output(
        result, format_attributes_table, ns.flags, ATTRIBUTES_CSV_HEADER, format_attributes_csv
    )


def cmd_audience_behaviors(ns):
    audience_id = _require_args(
        ns, 1, "cdp audience behaviors <audience-id>", "Audience ID required"
    )[0]
    result = _call("Failed to get audience behaviors", "get_audience_behaviors", audience_id)
    output(result, format_behaviors_table, ns.flags, BEHAVIORS_CSV_HEADER, format_behaviors_csv)


def cmd_audience_run(ns):
    audience_id = _require_args(ns, 1, "cdp audience run <audience-id>", "Audience ID required")[0]
    result = _call("Failed to run audience", "run_audience", audience_id)
    execution = result.get("execution", {})
    mutation_response(
        Confirmation(
            "audience execution",
            audience_id,
            "started",
            {"Status": execution.get("status", "")},
        ),
        ns.flags,
    )


def cmd_audience_executions(ns):
    audience_id = _require_args(
        ns, 1, "cdp audience executions <audience-id>", "Audience ID required"
    )[0]
    result = _call("Failed to get audience executions", "get_audience_executions", audience_id)
    output(
        result,
        format_audience_executions_table,
        ns.flags,
        AUDIENCE_EXECUTIONS_CSV_HEADER,
        format_audience_executions_csv,
    )


def cmd_audience_statistics(ns):
    audience_id = _require_args(
        ns, 1, "cdp audience statistics <audience-id>", "Audience ID required"
    )[0]
    result = _call("Failed to get audience statistics", "get_audience_statistics", audience_id)
    output(
        result, format_statistics_table, ns.flags, STATISTICS_CSV_HEADER, format_statistics_csv
    )


def cmd_audience_sample_values(ns):
    audience_id, column = _require_args(
        ns,
        2,
        "cdp audience sample-values <audience-id> <column>",
        "Audience ID and column name required",
    )[:2]
    result = _call(
        "Failed to get sample values", "get_audience_sample_values", audience_id, column
    )
    output(
        result,
        format_sample_values_table,
        ns.flags,
        SAMPLE_VALUES_CSV_HEADER,
        format_sample_values_csv,
    )


def cmd_audience_behavior_samples(ns):
    audience_id, behavior_id, column = _require_args(
        ns,
        3,
        "cdp audience behavior-samples <audience-id> <behavior-id> <column>",
        "Audience ID, behavior ID and column name required",
    )[:3]
    result = _call(
        "Failed to get behavior sample values",
        "get_behavior_sample_values",
        audience_id,
        behavior_id,
        column,
    )
    output(
        result,
        format_sample_values_table,
        ns.flags,
        SAMPLE_VALUES_CSV_HEADER,
        format_sample_values_csv,
    )


# ---------------------------------------------------------------------------
# CDP segments
# ---------------------------------------------------------------------------


def cmd_segment_create(ns):
    audience_id, name, description, query = _require_args(
        ns,
        4,
        "cdp segment create <audience-id> <name> <description> <query>",
        "Audience ID, name, description and query required",
    )[:4]
    result = _call(
        "Failed to create segment", "create_segment", audience_id, name, description, query
    )
    segment = result.get("segment", {})
    mutation_response(
        Confirmation("segment", segment.get("id", ""), "created", {"Name": segment.get("name") or name}),
        ns.flags,
    )


def cmd_segment_list(ns):
    audience_id = _require_args(ns, 1, "cdp segment list <audience-id>", "Audience ID required")[0]
    result = _call(
        "Failed to list segments",
        "list_segments",
        audience_id,
        limit=getattr(ns, "limit", None),
        offset=getattr(ns, "offset", None),
    )
    output(result, format_segments_table, ns.flags, SEGMENTS_CSV_HEADER, format_segments_csv)


def cmd_segment_get(ns):
    audience_id, segment_id = _require_args(
        ns, 2, "cdp segment get <audience-id> <segment-id>", "Audience ID and segment ID required"
    )[:2]
    result = _call("Failed to get segment", "get_segment", audience_id, segment_id)
    output(result, format_segment_detail, ns.flags, SEGMENTS_CSV_HEADER, format_segment_csv)


def cmd_segment_update(ns):
    usage = "cdp segment update <audience-id> <segment-id> <key=value>..."
    args = _require_args(ns, 3, usage, "Audience ID, segment ID and at least one update required")
    updates = _updates_or_fail(args[2:], None, usage)
    result = _call("Failed to update segment", "update_segment", args[0], args[1], updates)
    segment = result.get("segment", {})
    mutation_response(
        Confirmation(
            "segment",
            segment.get("id") or args[1],
            "updated",
            {"Updated Fields": ", ".join(sorted(updates))},
        ),
        ns.flags,
    )


def cmd_segment_delete(ns):
    audience_id, segment_id = _require_args(
        ns,
        2,
        "cdp segment delete <audience-id> <segment-id>",
        "Audience ID and segment ID required",
    )[:2]
    _call("Failed to delete segment", "delete_segment", audience_id, segment_id)
    mutation_response(Confirmation("segment", segment_id, "deleted"), ns.flags)


def cmd_segment_folders(ns):
    audience_id, folder_id = _require_args(
        ns,
        2,
        "cdp segment folders <audience-id> <folder-id>",
        "Audience ID and folder ID required",
    )[:2]
    result = _call("Failed to list folder segments", "list_folder_segments", audience_id, folder_id)
    output(
        result, format_folder_segments_table, ns.flags, SEGMENTS_CSV_HEADER, format_segments_csv
    )


def cmd_segment_statistics(ns):
    audience_id, segment_id = _require_args(
        ns,
        2,
        "cdp segment statistics <audience-id> <segment-id>",
        "Audience ID and segment ID required",
    )[:2]
    result = _call(
        "Failed to get segment statistics", "get_segment_statistics", audience_id, segment_id
    )
    output(
        result, format_statistics_table, ns.flags, STATISTICS_CSV_HEADER, format_statistics_csv
    )


def cmd_segment_query(ns):
    audience_id, query = _require_args(
        ns, 2, "cdp segment query <audience-id> <query>", "Audience ID and query required"
    )[:2]
    result = _call("Failed to create segment query", "create_segment_query", audience_id, query)
    segment_query = result.get("query", {})
    mutation_response(
        Confirmation(
            "segment query",
            segment_query.get("id", ""),
            "started",
            {"Status": segment_query.get("status", "")},
        ),
        ns.flags,
    )


def cmd_segment_sql(ns):
    audience_id, rules = _require_args(
        ns, 2, "cdp segment sql <audience-id> <rules-json>", "Audience ID and rules JSON required"
    )[:2]
    result = _call(
        "Failed to get segment SQL", "get_segment_sql", audience_id, _json_arg(rules, "rules")
    )
    output(
        result, format_segment_sql_text, ns.flags, SEGMENT_SQL_CSV_HEADER, format_segment_sql_csv
    )


def cmd_segment_query_status(ns):
    audience_id, query_id = _require_args(
        ns,
        2,
        "cdp segment query-status <audience-id> <query-id>",
        "Audience ID and query ID required",
    )[:2]
    result = _call(
        "Failed to get segment query status", "get_segment_query_status", audience_id, query_id
    )
    output(
        result,
        format_segment_query_detail,
        ns.flags,
        SEGMENT_QUERY_CSV_HEADER,
        format_segment_query_csv,
    )


def cmd_segment_kill_query(ns):
    audience_id, query_id = _require_args(
        ns,
        2,
        "cdp segment kill-query <audience-id> <query-id>",
        "Audience ID and query ID required",
    )[:2]
    _call("Failed to kill segment query", "kill_segment_query", audience_id, query_id)
    mutation_response(Confirmation("segment query", query_id, "killed"), ns.flags)


def cmd_segment_customers(ns):
    audience_id, query_id = _require_args(
        ns,
        2,
        "cdp segment customers <audience-id> <query-id> [--limit N] [--offset N] [--fields a,b]",
        "Audience ID and query ID required",
    )[:2]
    result = _call(
        "Failed to get segment customers",
        "get_segment_query_customers",
        audience_id,
        query_id,
        limit=getattr(ns, "limit", None),
        offset=getattr(ns, "offset", None),
        fields=getattr(ns, "fields", None),
    )
    output(result, format_customers_table, ns.flags, CUSTOMERS_CSV_HEADER, format_customers_csv)


# ---------------------------------------------------------------------------
# CDP activations
# ---------------------------------------------------------------------------


def collect_all_activations(ns):
    """Collect activations from every audience, one API call per audience.

    Returns {"activations": [...], "total": N}, or None when there is
    nothing to collect or the user declined the prompt. A failure for one
    audience is reported and skipped.
    """
    _status(ACTIVATIONS_FANOUT_BANNER)
    audiences = _call("Failed to list audiences", "list_audiences").get("audiences", [])
    if not audiences:
        _status("No audiences found")
        return None

    total = len(audiences)
    _status(f"Found {total} audiences. This will make {total} API calls to collect all activations.")
    if getattr(ns, "force", False):
        _status("Force flag enabled, skipping confirmation...")
    elif not _confirm(
        "Do you want to continue? This may take a while and put load on the API server. [y/N]: "
    ):
        _status("Operation cancelled.")
        return None

    _status(f"Collecting activations from {total} audiences...")
    client = _get_client()
    activations = []
    for i, audience in enumerate(audiences):
        if i % 10 == 0 or i == total - 1:
            _status(f"Progress: {i + 1}/{total} audiences processed...")
        audience_id = audience.get("id", "")
        try:
            result = client.list_audience_activations(audience_id)
        except OperationError as e:
            _status(f"Warning: Failed to get activations for audience {audience_id}: {e}")
            continue
        activations.extend(result.get("activations", []))

    _status(f"Completed! Collected {len(activations)} total activations from {total} audiences.")
    return {"activations": activations, "total": len(activations)}


def cmd_activation_list(ns):
    result = collect_all_activations(ns)
    if result is None:
        return
    output(
        result, format_activations_table, ns.flags, ACTIVATIONS_CSV_HEADER, format_activations_csv
    )


def cmd_activation_list_by_audience(ns):
    audience_id = _require_args(
        ns, 1, "cdp activation list-by-audience <audience-id>", "Audience ID required"
    )[0]
    result = _call("Failed to list activations", "list_audience_activations", audience_id)
    output(
        result, format_activations_table, ns.flags, ACTIVATIONS_CSV_HEADER, format_activations_csv
    )


def cmd_activation_list_by_segment_folder(ns):
    folder_id = _require_args(
        ns, 1, "cdp activation list-by-segment-folder <folder-id>", "Segment folder ID required"
    )[0]
    result = _call(
        "Failed to list segment folder activations", "list_segment_folder_activations", folder_id
    )
    output(
        result,
        format_folder_activations_table,
        ns.flags,
        ACTIVATIONS_CSV_HEADER,
        format_activations_csv,
    )


def cmd_activation_list_by_parent_segment(ns):
    parent_id = _require_args(
        ns,
        1,
        "cdp activation list-by-parent-segment <parent-segment-id>",
        "Parent segment ID required",
    )[0]
    result = _call(
        "Failed to list parent segment activations", "list_parent_segment_activations", parent_id
    )
    output(
        result,
        format_parent_segment_activations_table,
        ns.flags,
        ACTIVATIONS_CSV_HEADER,
        format_activations_csv,
    )


_ACTIVATION_IDS_MESSAGE = "Audience ID, segment ID and activation ID required"


def _activation_ids(ns, verb):
    usage = f"cdp activation {verb} <audience-id> <segment-id> <activation-id>"
    return _require_args(ns, 3, usage, _ACTIVATION_IDS_MESSAGE)[:3]


def cmd_activation_get(ns):
    ids = _activation_ids(ns, "get")
    result = _call("Failed to get activation", "get_activation", *ids)
    output(
        result, format_activation_detail, ns.flags, ACTIVATIONS_CSV_HEADER, format_activation_csv
    )


def cmd_activation_delete(ns):
    ids = _activation_ids(ns, "delete")
    _call("Failed to delete activation", "delete_activation", *ids)
    mutation_response(Confirmation("activation", ids[2], "deleted"), ns.flags)


def cmd_activation_execute(ns):
    ids = _activation_ids(ns, "execute")
    result = _call("Failed to execute activation", "execute_activation", *ids)
    execution = result.get("execution", {})
    mutation_response(
        Confirmation(
            "activation",
            ids[2],
            "executed",
            {"Execution ID": execution.get("id", ""), "Status": execution.get("status", "")},
        ),
        ns.flags,
    )


def cmd_activation_create(ns):
    args = _require_args(
        ns,
        3,
        "cdp activation create <segment-id> <name> <description> [config-json]",
        "Segment ID, name and description required",
    )
    configuration = _json_arg(args[3], "activation config") if len(args) > 3 else None
    result = _call(
        "Failed to create activation", "create_activation", args[0], args[1], args[2], configuration
    )
    activation = result.get("activation", {})
    mutation_response(
        Confirmation(
            "activation",
            activation.get("id", ""),
            "created",
            {"Name": activation.get("name") or args[1], "Segment ID": args[0]},
        ),
        ns.flags,
    )


def cmd_activation_update(ns):
    usage = "cdp activation update <audience-id> <segment-id> <activation-id> <key=value>..."
    args = _require_args(ns, 4, usage, f"{_ACTIVATION_IDS_MESSAGE}, plus at least one update")
    updates = _updates_or_fail(args[3:], ACTIVATION_UPDATE_FIELDS, usage)
    _call("Failed to update activation", "update_activation", *args[:3], updates)
    mutation_response(
        Confirmation(
            "activation", args[2], "updated", {"Updated Fields": ", ".join(sorted(updates))}
        ),
        ns.flags,
    )


def cmd_activation_update_status(ns):
    usage = "cdp activation update-status <audience-id> <segment-id> <activation-id> <status>"
    args = _require_args(ns, 4, usage, f"{_ACTIVATION_IDS_MESSAGE}, plus a status")
    _call("Failed to update activation status", "update_activation_status", *args[:4])
    mutation_response(
        Confirmation("activation", args[2], "updated", {"Status": args[3]}), ns.flags
    )


def cmd_activation_run_segment(ns):
    segment_id, activation_id = _require_args(
        ns,
        2,
        "cdp activation run-segment <segment-id> <activation-id>",
        "Segment ID and activation ID required",
    )[:2]
    result = _call(
        "Failed to run segment activation", "run_segment_activation", segment_id, activation_id
    )
    execution = result.get("execution", {})
    mutation_response(
        Confirmation(
            "activation",
            activation_id,
            "executed",
            {"Execution ID": execution.get("id", ""), "Status": execution.get("status", "")},
        ),
        ns.flags,
    )


def cmd_activation_executions(ns):
    ids = _activation_ids(ns, "executions")
    result = _call("Failed to get activation executions", "get_activation_executions", *ids)
    output(
        result,
        format_activation_executions_table,
        ns.flags,
        ACTIVATION_EXECUTIONS_CSV_HEADER,
        format_activation_executions_csv,
    )


# ---------------------------------------------------------------------------
# CDP folders
# ---------------------------------------------------------------------------


def cmd_folder_list(ns):
    audience_id = _require_args(ns, 1, "cdp folder list <audience-id>", "Audience ID required")[0]
    result = _call("Failed to list folders", "list_folders", audience_id)
    output(result, format_folders_table, ns.flags, FOLDERS_CSV_HEADER, format_folders_csv)


def cmd_folder_create(ns):
    args = _require_args(
        ns,
        2,
        "cdp folder create <audience-id> <name> [description] [parent-folder-id]",
        "Audience ID and folder name required",
    )
    description = args[2] if len(args) > 2 else ""
    parent_id = args[3] if len(args) > 3 else None
    result = _call(
        "Failed to create audience folder",
        "create_audience_folder",
        args[0],
        args[1],
        description,
        parent_id,
    )
    folder = result.get("folder", {})
    mutation_response(
        Confirmation(
            "folder", folder.get("id", ""), "created", {"Name": folder.get("name") or args[1]}
        ),
        ns.flags,
    )


def cmd_folder_get(ns):
    audience_id, folder_id = _require_args(
        ns, 2, "cdp folder get <audience-id> <folder-id>", "Audience ID and folder ID required"
    )[:2]
    result = _call("Failed to get folder", "get_audience_folder", audience_id, folder_id)
    output(result, format_folder_detail, ns.flags, FOLDERS_CSV_HEADER, format_folder_csv)


def cmd_folder_create_entity(ns):
    args = _require_args(
        ns,
        1,
        "cdp folder create-entity <name> [description] [parent-folder-id]",
        "Folder name required",
    )
    description = args[1] if len(args) > 1 else ""
    parent_id = args[2] if len(args) > 2 else None
    result = _call(
        "Failed to create folder", "create_entity_folder", args[0], description, parent_id
    )
    folder = result.get("folder", {})
    mutation_response(
        Confirmation(
            "folder", folder.get("id", ""), "created", {"Name": folder.get("name") or args[0]}
        ),
        ns.flags,
    )


def cmd_folder_get_entity(ns):
    folder_id = _require_args(ns, 1, "cdp folder get-entity <folder-id>", "Folder ID required")[0]
    result = _call("Failed to get folder", "get_entity_folder", folder_id)
    output(result, format_folder_detail, ns.flags, FOLDERS_CSV_HEADER, format_folder_csv)


def cmd_folder_get_entities(ns):
    folder_id = _require_args(
        ns, 1, "cdp folder get-entities <folder-id>", "Folder ID required"
    )[0]
    result = _call("Failed to get folder entities", "get_entities_by_folder", folder_id)
    output(result, format_entities_table, ns.flags, ENTITIES_CSV_HEADER, format_entities_csv)


def cmd_folder_update_entity(ns):
    usage = "cdp folder update-entity <folder-id> <key=value>..."
    args = _require_args(ns, 2, usage, "Folder ID and at least one update required")
    updates = _updates_or_fail(args[1:], FOLDER_UPDATE_FIELDS, usage)
    _call("Failed to update folder", "update_entity_folder", args[0], updates)
    mutation_response(
        Confirmation("folder", args[0], "updated", {"Updated Fields": ", ".join(sorted(updates))}),
        ns.flags,
    )


def cmd_folder_delete_entity(ns):
    folder_id = _require_args(
        ns, 1, "cdp folder delete-entity <folder-id>", "Folder ID required"
    )[0]
    _call("Failed to delete folder", "delete_entity_folder", folder_id)
    mutation_response(Confirmation("folder", folder_id, "deleted"), ns.flags)


# ---------------------------------------------------------------------------
# CDP tokens
# ---------------------------------------------------------------------------


def cmd_token_list(ns):
    audience_id = _require_args(ns, 1, "cdp token list <audience-id>", "Audience ID required")[0]
    result = _call(
        "Failed to list tokens",
        "list_tokens",
        audience_id,
        limit=getattr(ns, "limit", None),
        offset=getattr(ns, "offset", None),
        token_type=getattr(ns, "type", None),
        status=getattr(ns, "status", None),
    )
    output(result, format_tokens_table, ns.flags, TOKENS_CSV_HEADER, format_tokens_csv)


def cmd_token_get(ns):
    token_id = _require_args(ns, 1, "cdp token get-entity <token-id>", "Token ID required")[0]
    result = _call("Failed to get token", "get_entity_token", token_id)
    output(result, format_token_detail, ns.flags, TOKEN_CSV_HEADER, format_token_csv)


def cmd_token_update(ns):
    usage = "cdp token update-entity <token-id> <key=value>..."
    args = _require_args(ns, 2, usage, "Token ID and at least one update required")
    updates = _updates_or_fail(args[1:], TOKEN_UPDATE_FIELDS, usage)
    _call("Failed to update token", "update_entity_token", args[0], updates)
    mutation_response(
        Confirmation("token", args[0], "updated", {"Updated Fields": ", ".join(sorted(updates))}),
        ns.flags,
    )


def cmd_token_delete(ns):
    token_id = _require_args(ns, 1, "cdp token delete-entity <token-id>", "Token ID required")[0]
    _call("Failed to delete token", "delete_entity_token", token_id)
    mutation_response(Confirmation("token", token_id, "deleted"), ns.flags)


# ---------------------------------------------------------------------------
# CDP funnels
# ---------------------------------------------------------------------------


def cmd_funnel_list(ns):
    audience_id = _require_args(ns, 1, "cdp funnel list <audience-id>", "Audience ID required")[0]
    result = _call("Failed to list funnels", "list_funnels", audience_id)
    output(result, format_funnels_table, ns.flags, FUNNELS_CSV_HEADER, format_funnels_csv)


def cmd_funnel_get(ns):
    audience_id, funnel_id = _require_args(
        ns, 2, "cdp funnel get <audience-id> <funnel-id>", "Audience ID and funnel ID required"
    )[:2]
    result = _call("Failed to get funnel", "get_funnel", audience_id, funnel_id)
    output(result, format_funnel_detail, ns.flags, FUNNEL_CSV_HEADER, format_funnel_csv)


def cmd_funnel_delete(ns):
    audience_id, funnel_id = _require_args(
        ns, 2, "cdp funnel delete <audience-id> <funnel-id>", "Audience ID and funnel ID required"
    )[:2]
    _call("Failed to delete funnel", "delete_funnel", audience_id, funnel_id)
    mutation_response(Confirmation("funnel", funnel_id, "deleted"), ns.flags)


# ---------------------------------------------------------------------------
# CDP journeys
# ---------------------------------------------------------------------------


def cmd_journey_list(ns):
    folder_id = _require_args(ns, 1, "cdp journey list <folder-id>", "Folder ID required")[0]
    result = _call("Failed to list journeys", "list_journeys", folder_id)
    output(result, format_journeys_table, ns.flags, JOURNEYS_CSV_HEADER, format_journeys_csv)


def cmd_journey_get(ns):
    journey_id = _require_args(ns, 1, "cdp journey get <journey-id>", "Journey ID required")[0]
    result = _call("Failed to get journey", "get_journey", journey_id)
    output(result, format_journey_detail, ns.flags, JOURNEYS_CSV_HEADER, format_journey_csv)


def cmd_journey_create(ns):
    path = _require_args(
        ns, 1, "cdp journey create <request.json>", "Journey request file required"
    )[0]
    request = _read_json_file(path, "journey request")
    result = _call("Failed to create journey", "create_journey", request)
    journey = result.get("journey", {})
    mutation_response(
        Confirmation("journey", journey.get("id", ""), "created", {"Name": journey.get("name", "")}),
        ns.flags,
    )


def cmd_journey_delete(ns):
    journey_id = _require_args(ns, 1, "cdp journey delete <journey-id>", "Journey ID required")[0]
    _call("Failed to delete journey", "delete_journey", journey_id)
    mutation_response(Confirmation("journey", journey_id, "deleted"), ns.flags)


def cmd_journey_pause(ns):
    journey_id = _require_args(ns, 1, "cdp journey pause <journey-id>", "Journey ID required")[0]
    _call("Failed to pause journey", "pause_journey", journey_id)
    mutation_response(Confirmation("journey", journey_id, "paused"), ns.flags)


def cmd_journey_resume(ns):
    journey_id = _require_args(ns, 1, "cdp journey resume <journey-id>", "Journey ID required")[0]
    _call("Failed to resume journey", "resume_journey", journey_id)
    mutation_response(Confirmation("journey", journey_id, "resumed"), ns.flags)
