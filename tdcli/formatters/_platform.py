"""Formatters for TD v3 API resources: databases through users (snake_case keys)."""

from tdcli._utils import _duration_seconds, format_td_time
from tdcli.formatters._core import _items, _list_csv, _list_table, _record
from tdcli.formatters._table import _csv_rows, _property_table

DATABASES_CSV_HEADER = "name,tables,created,updated,permission"
TABLES_CSV_HEADER = "name,database,type,rows,size_bytes,created,updated"
JOBS_CSV_HEADER = "job_id,status,type,database,created,duration_seconds"
USERS_CSV_HEADER = "id,name,email,account_id,created_at,administrator,email_verified,restricted"


def _human_bytes(size):
    if size is None:
        return "-"
    size = float(size)
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size < 1024 or unit == "TB":
            return f"{int(size)} B" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return "-"


# ---------------------------------------------------------------------------
# Databases
# ---------------------------------------------------------------------------


def _database_csv_row(db):
    return (
        db.get("name", ""),
        db.get("count", 0),
        format_td_time(db.get("created_at"), ""),
        format_td_time(db.get("updated_at"), ""),
        db.get("permission", ""),
    )


def format_databases_csv(result):
    return _list_csv(result, "databases", _database_csv_row)


def format_databases_table(result):
    """Accepts {"databases": [...], "total": N} from TDClient.list_databases()."""
    return _list_table(
        result,
        "databases",
        ["NAME", "TABLES", "CREATED", "UPDATED", "PERMISSION"],
        lambda db: (
            db.get("name", ""),
            db.get("count", 0),
            format_td_time(db.get("created_at")),
            format_td_time(db.get("updated_at")),
            db.get("permission", ""),
        ),
    )


def format_database_csv(result):
    return _csv_rows([_database_csv_row(_record(result, "database"))])


def format_database_detail(result):
    db = _record(result, "database")
    return _property_table(
        [
            ("Name", db.get("name", "")),
            ("Tables", db.get("count", 0)),
            ("Created", format_td_time(db.get("created_at"))),
            ("Updated", format_td_time(db.get("updated_at"))),
            ("Permission", db.get("permission", "")),
        ]
    )


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def _table_csv_row(table, database):
    return (
        table.get("name", ""),
        table.get("database") or database,
        table.get("type", ""),
        table.get("count", 0),
        table.get("estimated_storage_size", 0),
        format_td_time(table.get("created_at"), ""),
        format_td_time(table.get("updated_at"), ""),
    )


def format_tables_csv(result):
    database = result.get("database", "") if isinstance(result, dict) else ""
    return _list_csv(result, "tables", lambda t: _table_csv_row(t, database))


def format_tables_table(result):
    return _list_table(
        result,
        "tables",
        ["NAME", "ROWS", "SIZE", "CREATED", "UPDATED", "TYPE"],
        lambda t: (
            t.get("name", ""),
            t.get("count", 0),
            _human_bytes(t.get("estimated_storage_size")),
            format_td_time(t.get("created_at")),
            format_td_time(t.get("updated_at")),
            t.get("type", ""),
        ),
    )


def format_table_csv(result):
    table = _record(result, "table")
    return _csv_rows([_table_csv_row(table, table.get("database", ""))])


def format_table_detail(result):
    table = _record(result, "table")
    trailer = ""
    schema = table.get("schema")
    if isinstance(schema, str) and schema:
        trailer = f"\nSchema:\n{schema}\n"
    return _property_table(
        [
            ("Name", table.get("name", "")),
            ("Database", table.get("database", "")),
            ("Type", table.get("type", "")),
            ("Rows", table.get("count", 0)),
            ("Size", _human_bytes(table.get("estimated_storage_size"))),
            ("Created", format_td_time(table.get("created_at"))),
            ("Updated", format_td_time(table.get("updated_at"))),
        ],
        trailer,
    )


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


def _job_csv_row(job):
    seconds = _duration_seconds(job.get("start_at"), job.get("end_at"))
    return (
        job.get("job_id", ""),
        job.get("status", ""),
        job.get("type", ""),
        job.get("database", ""),
        format_td_time(job.get("created_at"), ""),
        "" if seconds is None else f"{seconds:.1f}",
    )


def format_jobs_csv(result):
    return _list_csv(result, "jobs", _job_csv_row)


def format_jobs_table(result):
    def row(job):
        seconds = _duration_seconds(job.get("start_at"), job.get("end_at"))
        return (
            job.get("job_id", ""),
            job.get("status", ""),
            job.get("type", ""),
            job.get("database", ""),
            format_td_time(job.get("created_at")),
            "-" if seconds is None else f"{seconds:.1f}s",
        )

    return _list_table(
        result, "jobs", ["JOB_ID", "STATUS", "TYPE", "DATABASE", "CREATED", "DURATION"], row
    )


def format_job_csv(result):
    return _csv_rows([_job_csv_row(_record(result, "job"))])


def format_job_detail(result):
    job = _record(result, "job")
    pairs = [
        ("Job ID", job.get("job_id", "")),
        ("Status", job.get("status", "")),
        ("Type", job.get("type", "")),
        ("Database", job.get("database", "")),
        ("Created", format_td_time(job.get("created_at"))),
    ]
    if job.get("start_at"):
        pairs.append(("Started", format_td_time(job.get("start_at"))))
    if job.get("end_at"):
        pairs.append(("Ended", format_td_time(job.get("end_at"))))
    if job.get("cpu_time") is not None:
        pairs.append(("CPU Time", f"{job['cpu_time']}s"))
    pairs.append(("Result Size", job.get("result_size", 0)))
    pairs.append(("Records", job.get("num_records", 0)))

    trailer = ""
    query = job.get("query")
    if isinstance(query, dict):
        query = query.get("value") or query.get("query")
    if query:
        trailer += f"\nQuery:\n{query}\n"
    debug = job.get("debug")
    if isinstance(debug, dict) and debug.get("stderr"):
        trailer += f"\nError Details:\n{debug['stderr']}\n"
    return _property_table(pairs, trailer)


# ---------------------------------------------------------------------------
# Query results
# ---------------------------------------------------------------------------


def _result_columns(result, width):
    names = list(result.get("columns") or [])
    names += [f"_col{i}" for i in range(len(names), width)]
    return names


def _result_width(result):
    return max([len(row) for row in result.get("rows") or []] + [len(result.get("columns") or [])])


def query_result_csv_header(result):
    """Header line for a query result; the columns come from the job's schema."""
    names = _result_columns(result, _result_width(result))
    return _csv_rows([names]).rstrip("\n")


def format_query_result_csv(result):
    return _list_csv(result, "rows", tuple)


def format_query_result_table(result):
    """Accepts {"job_id", "status", "columns", "rows", "total"} from get_query_result()."""
    _items(result, "rows")
    width = _result_width(result)
    return _list_table(
        result,
        "rows",
        [name.upper() for name in _result_columns(result, width)],
        lambda row: tuple(row) + ("",) * (width - len(row)),
    )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def _user_csv_row(u):
    return (
        u.get("id", ""),
        u.get("name", ""),
        u.get("email", ""),
        u.get("account_id", ""),
        format_td_time(u.get("created_at"), ""),
        bool(u.get("administrator")),
        bool(u.get("email_verified")),
        bool(u.get("restricted")),
    )


def format_users_csv(result):
    return _list_csv(result, "users", _user_csv_row)


def format_users_table(result):
    return _list_table(
        result,
        "users",
        ["ID", "NAME", "EMAIL", "ADMIN", "VERIFIED", "CREATED"],
        lambda u: (
            u.get("id", ""),
            u.get("name", ""),
            u.get("email", ""),
            "yes" if u.get("administrator") else "no",
            "yes" if u.get("email_verified") else "no",
            format_td_time(u.get("created_at")),
        ),
    )


def format_user_csv(result):
    return _csv_rows([_user_csv_row(_record(result, "user"))])


def format_user_detail(result):
    u = _record(result, "user")
    return _property_table(
        [
            ("ID", u.get("id", "")),
            ("Name", u.get("name", "")),
            ("Email", u.get("email", "")),
            ("Account ID", u.get("account_id", "")),
            ("Administrator", "yes" if u.get("administrator") else "no"),
            ("Email Verified", "yes" if u.get("email_verified") else "no"),
            ("Restricted", "yes" if u.get("restricted") else "no"),
            ("Created", format_td_time(u.get("created_at"))),
        ]
    )
