"""Formatters for workflows and their attempts, tasks, schedules and projects."""

import json

from tdcli._utils import _get_field, format_td_time
from tdcli.formatters._core import _list_csv, _list_table, _record
from tdcli.formatters._table import _csv_rows, _property_table

WORKFLOWS_CSV_HEADER = "id,name,project,status,created_at,updated_at"
WORKFLOW_CSV_HEADER = "id,name,project,status,revision,timezone,created_at,updated_at"
ATTEMPTS_CSV_HEADER = "id,index,status,created_at,finished_at"
ATTEMPT_CSV_HEADER = "id,index,status,created_at,finished_at,done,success"
PROJECTS_CSV_HEADER = "id,name,revision,archive_type,created_at,updated_at"
TASKS_CSV_HEADER = "id,full_name,state,is_group,started_at,updated_at"
LOG_CSV_HEADER = "log"
SCHEDULE_CSV_HEADER = "id,workflow_id,cron,timezone,delay,next_time,disabled_at"
SECRETS_CSV_HEADER = "key,value"


def _ts(d, snake, camel, empty="-"):
    return format_td_time(_get_field(d, snake, camel), empty)


def _project_name(w):
    project = w.get("project")
    if isinstance(project, dict):
        return project.get("name") or project.get("id") or ""
    return project or ""


def attempt_status(a):
    """Derive a display status from an attempt's done/success flags."""
    if a.get("status"):
        return a["status"]
    if a.get("cancelRequested") and not a.get("done"):
        return "killing"
    if a.get("done"):
        return "success" if a.get("success") else "error"
    return "running"


# ---------------------------------------------------------------------------
# Workflows
# ---------------------------------------------------------------------------


def format_workflows_csv(result):
    return _list_csv(
        result,
        "workflows",
        lambda w: (
            w.get("id", ""),
            w.get("name", ""),
            _project_name(w),
            w.get("status", ""),
            _ts(w, "created_at", "createdAt", ""),
            _ts(w, "updated_at", "updatedAt", ""),
        ),
    )


def format_workflows_table(result):
    """Accepts {"workflows": [...], "total": N}."""
    return _list_table(
        result,
        "workflows",
        ["ID", "NAME", "PROJECT", "STATUS", "TIMEZONE"],
        lambda w: (
            w.get("id", ""),
            w.get("name", ""),
            _project_name(w),
            w.get("status") or "-",
            w.get("timezone") or "-",
        ),
    )


def format_project_workflows_table(result):
    return _list_table(
        result,
        "workflows",
        ["ID", "NAME", "STATUS", "TIMEZONE"],
        lambda w: (
            w.get("id", ""),
            w.get("name", ""),
            w.get("status") or "-",
            w.get("timezone") or "-",
        ),
        empty="No workflows found in this project\n",
    )


def format_workflow_csv(result):
    w = _record(result, "workflow")
    return _csv_rows(
        [
            (
                w.get("id", ""),
                w.get("name", ""),
                _project_name(w),
                w.get("status", ""),
                w.get("revision", ""),
                w.get("timezone", ""),
                _ts(w, "created_at", "createdAt", ""),
                _ts(w, "updated_at", "updatedAt", ""),
            )
        ]
    )


def format_workflow_detail(result):
    w = _record(result, "workflow")
    return _property_table(
        [
            ("ID", w.get("id", "")),
            ("Name", w.get("name", "")),
            ("Project", _project_name(w)),
            ("Revision", w.get("revision") or "-"),
            ("Timezone", w.get("timezone") or "-"),
            ("Created", _ts(w, "created_at", "createdAt")),
            ("Updated", _ts(w, "updated_at", "updatedAt")),
        ]
    )


# ---------------------------------------------------------------------------
# Attempts
# ---------------------------------------------------------------------------


def format_attempts_csv(result):
    return _list_csv(
        result,
        "attempts",
        lambda a: (
            a.get("id", ""),
            a.get("index", ""),
            attempt_status(a),
            _ts(a, "created_at", "createdAt", ""),
            _ts(a, "finished_at", "finishedAt", ""),
        ),
    )


def format_attempts_table(result):
    return _list_table(
        result,
        "attempts",
        ["ID", "INDEX", "STATUS", "CREATED", "FINISHED"],
        lambda a: (
            a.get("id", ""),
            a.get("index", ""),
            attempt_status(a),
            _ts(a, "created_at", "createdAt"),
            _ts(a, "finished_at", "finishedAt"),
        ),
    )


def format_attempt_csv(result):
    a = _record(result, "attempt")
    return _csv_rows(
        [
            (
                a.get("id", ""),
                a.get("index", ""),
                attempt_status(a),
                _ts(a, "created_at", "createdAt", ""),
                _ts(a, "finished_at", "finishedAt", ""),
                bool(a.get("done")),
                bool(a.get("success")),
            )
        ]
    )


def format_attempt_detail(result):
    a = _record(result, "attempt")
    workflow = a.get("workflow") if isinstance(a.get("workflow"), dict) else {}
    return _property_table(
        [
            ("ID", a.get("id", "")),
            ("Index", a.get("index", "")),
            ("Workflow", workflow.get("name") or workflow.get("id") or "-"),
            ("Status", attempt_status(a)),
            ("Session Time", _ts(a, "session_time", "sessionTime")),
            ("Created", _ts(a, "created_at", "createdAt")),
            ("Finished", _ts(a, "finished_at", "finishedAt")),
        ]
    )


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def format_projects_csv(result):
    return _list_csv(
        result,
        "projects",
        lambda p: (
            p.get("id", ""),
            p.get("name", ""),
            p.get("revision", ""),
            _get_field(p, "archive_type", "archiveType") or "",
            _ts(p, "created_at", "createdAt", ""),
            _ts(p, "updated_at", "updatedAt", ""),
        ),
    )


def format_projects_table(result):
    return _list_table(
        result,
        "projects",
        ["ID", "NAME", "REVISION", "TYPE", "CREATED"],
        lambda p: (
            p.get("id", ""),
            p.get("name", ""),
            p.get("revision") or "-",
            _get_field(p, "archive_type", "archiveType") or "-",
            _ts(p, "created_at", "createdAt"),
        ),
    )


def format_project_csv(result):
    p = _record(result, "project")
    return format_projects_csv({"projects": [p]})


def format_project_detail(result):
    p = _record(result, "project")
    return _property_table(
        [
            ("ID", p.get("id", "")),
            ("Name", p.get("name", "")),
            ("Revision", p.get("revision") or "-"),
            ("Archive Type", _get_field(p, "archive_type", "archiveType") or "-"),
            ("Created", _ts(p, "created_at", "createdAt")),
            ("Updated", _ts(p, "updated_at", "updatedAt")),
        ]
    )


# ---------------------------------------------------------------------------
# Tasks and logs
# ---------------------------------------------------------------------------


def _task_row(t, empty):
    return (
        t.get("id", ""),
        _get_field(t, "full_name", "fullName") or "",
        t.get("state", ""),
        bool(_get_field(t, "is_group", "isGroup")),
        _ts(t, "started_at", "startedAt", empty),
        _ts(t, "updated_at", "updatedAt", empty),
    )


def format_tasks_csv(result):
    return _list_csv(result, "tasks", lambda t: _task_row(t, ""))


def format_tasks_table(result):
    return _list_table(
        result,
        "tasks",
        ["ID", "NAME", "STATE", "GROUP", "STARTED", "UPDATED"],
        lambda t: _task_row(t, "-"),
    )


def format_task_csv(result):
    return _csv_rows([_task_row(_record(result, "task"), "")])


def format_task_detail(result):
    t = _record(result, "task")
    upstreams = t.get("upstreams") or []
    trailer = ""
    task_config = t.get("config")
    if task_config:
        trailer = f"\nConfig:\n{json.dumps(task_config, indent=2, ensure_ascii=False)}\n"
    return _property_table(
        [
            ("ID", t.get("id", "")),
            ("Name", _get_field(t, "full_name", "fullName") or ""),
            ("State", t.get("state", "")),
            ("Parent", _get_field(t, "parent_id", "parentId") or "-"),
            ("Group", "yes" if _get_field(t, "is_group", "isGroup") else "no"),
            ("Upstreams", ", ".join(str(u) for u in upstreams) or "-"),
            ("Started", _ts(t, "started_at", "startedAt")),
            ("Updated", _ts(t, "updated_at", "updatedAt")),
        ],
        trailer,
    )


def format_log_csv(result):
    return _csv_rows([(result.get("log", ""),)])


def format_log_text(result):
    """Raw attempt or task log text."""
    log = result.get("log") if isinstance(result, dict) else None
    if not isinstance(log, str):
        raise TypeError("formatter expects a payload with a 'log' string")
    if not log:
        return "No log output\n"
    return log if log.endswith("\n") else log + "\n"


# ---------------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------------


def _schedule_row(s, empty):
    return (
        s.get("id", ""),
        _get_field(s, "workflow_id", "workflowId") or "",
        s.get("cron", ""),
        s.get("timezone", ""),
        s.get("delay", 0),
        _ts(s, "next_time", "nextRunTime", empty),
        _ts(s, "disabled_at", "disabledAt", empty),
    )


def format_schedule_csv(result):
    return _csv_rows([_schedule_row(_record(result, "schedule"), "")])


def format_schedule_detail(result):
    s = _record(result, "schedule")
    disabled = _get_field(s, "disabled_at", "disabledAt")
    return _property_table(
        [
            ("ID", s.get("id", "")),
            ("Workflow", _get_field(s, "workflow_id", "workflowId") or "-"),
            ("Cron", s.get("cron") or "-"),
            ("Timezone", s.get("timezone") or "-"),
            ("Delay", f"{s.get('delay', 0)}s"),
            ("Next Run", _ts(s, "next_time", "nextRunTime")),
            ("Status", "disabled" if disabled else "enabled"),
        ]
    )


# ---------------------------------------------------------------------------
# Project secrets
# ---------------------------------------------------------------------------


def format_secrets_csv(result):
    return _list_csv(result, "secrets", lambda s: (s.get("key", ""), s.get("value", "")))


def format_secrets_table(result):
    return _list_table(
        result,
        "secrets",
        ["KEY", "VALUE"],
        lambda s: (s.get("key", ""), s.get("value") or "-"),
        empty="No secrets found in this project\n",
    )
