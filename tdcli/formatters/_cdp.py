"""Formatters for CDP resources.

The CDP API mixes camelCase (audiences, segments) and snake_case (tokens)
keys, so every lookup goes through _get_field.
"""

from tdcli._utils import _get_field, format_td_time
from tdcli.formatters._core import _list_csv, _list_table, _record
from tdcli.formatters._table import _csv_rows

AUDIENCES_CSV_HEADER = "id,name,population,schedule_type,created_at,updated_at"
ATTRIBUTES_CSV_HEADER = "name,type,parent_database_name,parent_table_name,parent_column"
BEHAVIORS_CSV_HEADER = "id,name"
AUDIENCE_EXECUTIONS_CSV_HEADER = "audience_id,status,created_at"
STATISTICS_CSV_HEADER = "timestamp,population,has_data"
SEGMENTS_CSV_HEADER = "id,name,profile_count,created_at,updated_at"
ACTIVATIONS_CSV_HEADER = "id,name,type,audience_id,status,created_at,updated_at"
ACTIVATION_EXECUTIONS_CSV_HEADER = "id,status,created_at"
FOLDERS_CSV_HEADER = "id,audience_id,name,description,parent_id,created_at,updated_at"
ENTITIES_CSV_HEADER = "id,type,name"
TOKENS_CSV_HEADER = "id,name,type,status,created_at,updated_at"
TOKEN_CSV_HEADER = "id,name,type,status,description,created_at,updated_at"
FUNNELS_CSV_HEADER = "id,name,created_at,updated_at"
FUNNEL_CSV_HEADER = "id,name,step_count,created_at,updated_at"
JOURNEYS_CSV_HEADER = "id,name,state,created_at,updated_at"
SAMPLE_VALUES_CSV_HEADER = "value,frequency"
SEGMENT_QUERY_CSV_HEADER = "query_id,status,error,created_at"
SEGMENT_SQL_CSV_HEADER = "sql"
CUSTOMERS_CSV_HEADER = "customer_id"


def _created(d, empty="-"):
    return format_td_time(_get_field(d, "created_at", "createdAt"), empty)


def _updated(d, empty="-"):
    return format_td_time(_get_field(d, "updated_at", "updatedAt"), empty)


# ---------------------------------------------------------------------------
# Audiences
# ---------------------------------------------------------------------------


def _audience_csv_row(a):
    return (
        a.get("id", ""),
        a.get("name", ""),
        a.get("population", 0),
        _get_field(a, "schedule_type", "scheduleType") or "",
        _created(a, ""),
        _updated(a, ""),
    )


def format_audiences_csv(result):
    """Accepts {"audiences": [...], "total": N} from TDClient.list_audiences()."""
    return _list_csv(result, "audiences", _audience_csv_row)


def format_audiences_table(result):
    return _list_table(
        result,
        "audiences",
        ["ID", "NAME", "POPULATION", "SCHEDULE", "CREATED"],
        lambda a: (
            a.get("id", ""),
            a.get("name", ""),
            a.get("population", 0),
            _get_field(a, "schedule_type", "scheduleType") or "",
            _created(a),
        ),
    )


def format_audience_csv(result):
    return _csv_rows([_audience_csv_row(_record(result, "audience"))])


def format_audience_detail(result):
    a = _record(result, "audience")
    lines = [
        f"ID: {a.get('id', '')}",
        f"Name: {a.get('name', '')}",
        f"Description: {a.get('description') or ''}",
        f"Population: {a.get('population', 0)}",
        f"Schedule Type: {_get_field(a, 'schedule_type', 'scheduleType') or ''}",
    ]
    schedule_option = _get_field(a, "schedule_option", "scheduleOption")
    if schedule_option:
        lines.append(f"Schedule Option: {schedule_option}")
    lines.append(f"Timezone: {a.get('timezone') or ''}")
    lines.append(f"Created: {_created(a)}")
    lines.append(f"Updated: {_updated(a)}")
    attributes = a.get("attributes") or []
    if attributes:
        lines.append("")
        lines.append(f"Attributes ({len(attributes)}):")
        for attr in attributes:
            lines.append(f"  - {attr.get('name', '')} ({attr.get('type', '')})")
    behaviors = a.get("behaviors") or []
    if behaviors:
        lines.append("")
        lines.append(f"Behaviors ({len(behaviors)}):")
        for behavior in behaviors:
            lines.append(f"  - {behavior.get('name', '')}")
    return "\n".join(lines) + "\n"


def _attribute_row(attr):
    return (
        attr.get("name", ""),
        attr.get("type", ""),
        _get_field(attr, "parent_database_name", "parentDatabaseName") or "",
        _get_field(attr, "parent_table_name", "parentTableName") or "",
        _get_field(attr, "parent_column", "parentColumn") or "",
    )


def format_attributes_csv(result):
    return _list_csv(result, "attributes", _attribute_row)


def format_attributes_table(result):
    return _list_table(
        result,
        "attributes",
        ["NAME", "TYPE", "DATABASE", "TABLE", "COLUMN"],
        _attribute_row,
    )


def format_behaviors_csv(result):
    return _list_csv(result, "behaviors", lambda b: (b.get("id", ""), b.get("name", "")))


def format_behaviors_table(result):
    return _list_table(
        result, "behaviors", ["ID", "NAME"], lambda b: (b.get("id", ""), b.get("name", ""))
    )


def _audience_execution_row(e, empty):
    audience_id = _get_field(e, "audience_id", "audienceId") or ""
    return (audience_id, e.get("status", ""), _created(e, empty))


def format_audience_executions_csv(result):
    return _list_csv(result, "executions", lambda e: _audience_execution_row(e, ""))


def format_audience_executions_table(result):
    return _list_table(
        result,
        "executions",
        ["AUDIENCE_ID", "STATUS", "CREATED"],
        lambda e: _audience_execution_row(e, "-"),
    )


def _statistics_row(point):
    values = list(point) if isinstance(point, (list, tuple)) else [point]
    values += [None] * (3 - len(values))
    return tuple(values[:3])


def format_statistics_csv(result):
    return _list_csv(result, "statistics", _statistics_row)


def format_statistics_table(result):
    return _list_table(
        result, "statistics", ["TIMESTAMP", "POPULATION", "HAS_DATA"], _statistics_row
    )


def _sample_row(sample):
    if isinstance(sample, dict):
        return (sample.get("value"), sample.get("frequency"))
    values = list(sample) if isinstance(sample, (list, tuple)) else [sample]
    values += [None] * (2 - len(values))
    return tuple(values[:2])


def format_sample_values_csv(result):
    return _list_csv(result, "values", _sample_row)


def format_sample_values_table(result):
    """Accepts {"column", "values": [[value, frequency], ...], "total": N}."""
    return _list_table(
        result,
        "values",
        ["VALUE", "FREQUENCY"],
        _sample_row,
        resource="sample values",
        empty="No sample values found\n",
    )


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------


def _segment_csv_row(s):
    return (
        s.get("id", ""),
        s.get("name", ""),
        s.get("population", 0),
        _created(s, ""),
        _updated(s, ""),
    )


def format_segments_csv(result):
    return _list_csv(result, "segments", _segment_csv_row)


def format_segments_table(result):
    return _list_table(
        result,
        "segments",
        ["ID", "NAME", "PROFILES", "CREATED"],
        lambda s: (s.get("id", ""), s.get("name", ""), s.get("population", 0), _created(s)),
    )


def format_segment_csv(result):
    return _csv_rows([_segment_csv_row(_record(result, "segment"))])


def format_segment_detail(result):
    s = _record(result, "segment")
    lines = [
        f"ID: {s.get('id', '')}",
        f"Name: {s.get('name', '')}",
        f"Description: {s.get('description') or ''}",
        f"Audience ID: {_get_field(s, 'audience_id', 'audienceId') or ''}",
        f"Profiles: {s.get('population', 0)}",
        f"Created: {_created(s)}",
        f"Updated: {_updated(s)}",
    ]
    query = s.get("query")
    if query:
        lines.append("")
        lines.append("Query:")
        lines.append(str(query))
    return "\n".join(lines) + "\n"


def format_folder_segments_table(result):
    return _list_table(
        result,
        "segments",
        ["ID", "NAME", "PROFILES", "CREATED"],
        lambda s: (s.get("id", ""), s.get("name", ""), s.get("population", 0), _created(s)),
        empty="No segments found in folder\n",
    )


def _segment_query_row(q, empty):
    return (
        q.get("id", ""),
        q.get("status", ""),
        q.get("error") or "",
        _created(q, empty),
    )


def format_segment_query_csv(result):
    return _csv_rows([_segment_query_row(_record(result, "query"), "")])


def format_segment_query_detail(result):
    q = _record(result, "query")
    lines = [
        f"Query ID: {q.get('id', '')}",
        f"Status: {q.get('status', '')}",
        f"Created: {_created(q)}",
    ]
    if q.get("count") is not None:
        lines.append(f"Count: {q['count']}")
    if q.get("error"):
        lines.append(f"Error: {q['error']}")
    return "\n".join(lines) + "\n"


def format_segment_sql_csv(result):
    return _csv_rows([(result.get("sql", ""),)])


def format_segment_sql_text(result):
    sql = result.get("sql") if isinstance(result, dict) else None
    if not isinstance(sql, str):
        raise TypeError("formatter expects a payload with a 'sql' string")
    return sql if sql.endswith("\n") else sql + "\n"


def _customer_id(c):
    if isinstance(c, dict):
        return _get_field(c, "customer_id", "customerId") or c.get("cdp_customer_id", "")
    return c


def format_customers_csv(result):
    return _list_csv(result, "customers", lambda c: (_customer_id(c),))


def format_customers_table(result):
    return _list_table(result, "customers", ["CUSTOMER_ID"], lambda c: (_customer_id(c),))


# ---------------------------------------------------------------------------
# Activations
# ---------------------------------------------------------------------------


def _activation_csv_row(a):
    return (
        a.get("id", ""),
        a.get("name", ""),
        a.get("type", ""),
        _get_field(a, "audience_id", "audienceId") or "",
        a.get("status", ""),
        _created(a, ""),
        _updated(a, ""),
    )


def format_activations_csv(result):
    """Accepts {"activations": [...], "total": N}."""
    return _list_csv(result, "activations", _activation_csv_row)


def _activations_table(result, empty=None):
    return _list_table(
        result,
        "activations",
        ["ID", "NAME", "TYPE", "STATUS", "CREATED"],
        lambda a: (
            a.get("id", ""),
            a.get("name", ""),
            a.get("type", ""),
            a.get("status", ""),
            _created(a),
        ),
        empty=empty,
    )


def format_activations_table(result):
    return _activations_table(result)


def format_folder_activations_table(result):
    return _activations_table(result, "No activations found for segment folder\n")


def format_parent_segment_activations_table(result):
    return _activations_table(result, "No activations found for parent segment\n")


def format_activation_csv(result):
    return _csv_rows([_activation_csv_row(_record(result, "activation"))])


def format_activation_detail(result):
    a = _record(result, "activation")
    lines = [
        f"ID: {a.get('id', '')}",
        f"Name: {a.get('name', '')}",
        f"Type: {a.get('type', '')}",
        f"Description: {a.get('description') or ''}",
        f"Audience ID: {_get_field(a, 'audience_id', 'audienceId') or ''}",
        f"Segment ID: {_get_field(a, 'segment_id', 'segmentId') or ''}",
        f"Status: {a.get('status') or ''}",
        f"Schedule Type: {_get_field(a, 'schedule_type', 'scheduleType') or ''}",
        f"Created: {_created(a)}",
        f"Updated: {_updated(a)}",
    ]
    return "\n".join(lines) + "\n"


def format_activation_executions_csv(result):
    return _list_csv(
        result, "executions", lambda e: (e.get("id", ""), e.get("status", ""), _created(e, ""))
    )


def format_activation_executions_table(result):
    return _list_table(
        result,
        "executions",
        ["ID", "STATUS", "CREATED"],
        lambda e: (e.get("id", ""), e.get("status", ""), _created(e)),
    )


# ---------------------------------------------------------------------------
# Folders and entities
# ---------------------------------------------------------------------------


def _folder_csv_row(f):
    return (
        f.get("id", ""),
        _get_field(f, "audience_id", "audienceId") or "",
        f.get("name", ""),
        f.get("description") or "",
        _get_field(f, "parent_folder_id", "parentFolderId") or "",
        _created(f, ""),
        _updated(f, ""),
    )


def format_folders_csv(result):
    return _list_csv(result, "folders", _folder_csv_row)


def format_folders_table(result):
    return _list_table(
        result,
        "folders",
        ["ID", "NAME", "DESCRIPTION", "PARENT", "CREATED"],
        lambda f: (
            f.get("id", ""),
            f.get("name", ""),
            f.get("description") or "",
            _get_field(f, "parent_folder_id", "parentFolderId") or "-",
            _created(f),
        ),
    )


def format_folder_csv(result):
    return _csv_rows([_folder_csv_row(_record(result, "folder"))])


def format_folder_detail(result):
    f = _record(result, "folder")
    lines = [
        f"ID: {f.get('id', '')}",
        f"Name: {f.get('name', '')}",
        f"Description: {f.get('description') or ''}",
        f"Parent: {_get_field(f, 'parent_folder_id', 'parentFolderId') or '-'}",
        f"Created: {_created(f)}",
        f"Updated: {_updated(f)}",
    ]
    return "\n".join(lines) + "\n"


def _entity_row(e):
    return (e.get("id", ""), e.get("type", ""), e.get("name", ""))


def format_entities_csv(result):
    return _list_csv(result, "entities", _entity_row)


def format_entities_table(result):
    return _list_table(
        result,
        "entities",
        ["ID", "TYPE", "NAME"],
        _entity_row,
        empty="No entities found in folder\n",
    )


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def format_tokens_csv(result):
    return _list_csv(
        result,
        "tokens",
        lambda t: (
            t.get("id", ""),
            t.get("name", ""),
            t.get("type", ""),
            t.get("status", ""),
            _created(t, ""),
            _updated(t, ""),
        ),
    )


def format_tokens_table(result):
    return _list_table(
        result,
        "tokens",
        ["ID", "NAME", "TYPE", "STATUS", "CREATED"],
        lambda t: (
            t.get("id", ""),
            t.get("name", ""),
            t.get("type", ""),
            t.get("status", ""),
            _created(t),
        ),
    )


def format_token_csv(result):
    t = _record(result, "token")
    return _csv_rows(
        [
            (
                t.get("id", ""),
                t.get("name", ""),
                t.get("type", ""),
                t.get("status", ""),
                t.get("description") or "",
                _created(t, ""),
                _updated(t, ""),
            )
        ]
    )


def format_token_detail(result):
    t = _record(result, "token")
    lines = [
        f"ID: {t.get('id', '')}",
        f"Name: {t.get('name', '')}",
        f"Type: {t.get('type', '')}",
        f"Status: {t.get('status', '')}",
        f"Description: {t.get('description') or ''}",
    ]
    scopes = t.get("scopes") or []
    if scopes:
        lines.append(f"Scopes: {', '.join(str(s) for s in scopes)}")
    expires = _get_field(t, "expires_at", "expiresAt")
    if expires:
        lines.append(f"Expires: {format_td_time(expires)}")
    lines.append(f"Created: {_created(t)}")
    lines.append(f"Updated: {_updated(t)}")
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Funnels
# ---------------------------------------------------------------------------


def format_funnels_csv(result):
    return _list_csv(
        result,
        "funnels",
        lambda f: (f.get("id", ""), f.get("name", ""), _created(f, ""), _updated(f, "")),
    )


def format_funnels_table(result):
    return _list_table(
        result,
        "funnels",
        ["ID", "NAME", "CREATED", "UPDATED"],
        lambda f: (f.get("id", ""), f.get("name", ""), _created(f), _updated(f)),
    )


def format_funnel_csv(result):
    f = _record(result, "funnel")
    stages = f.get("stages") or []
    return _csv_rows(
        [(f.get("id", ""), f.get("name", ""), len(stages), _created(f, ""), _updated(f, ""))]
    )


def format_funnel_detail(result):
    f = _record(result, "funnel")
    lines = [
        f"ID: {f.get('id', '')}",
        f"Name: {f.get('name', '')}",
        f"Description: {f.get('description') or ''}",
        f"Created: {_created(f)}",
        f"Updated: {_updated(f)}",
    ]
    stages = f.get("stages") or []
    if stages:
        lines.append("")
        lines.append(f"Stages ({len(stages)}):")
        for i, stage in enumerate(stages, 1):
            lines.append(f"  {i}. {stage.get('name', '')}")
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Journeys
# ---------------------------------------------------------------------------


def _journey_row(j, empty):
    return (
        j.get("id", ""),
        j.get("name", ""),
        j.get("state") or "",
        _created(j, empty),
        _updated(j, empty),
    )


def format_journeys_csv(result):
    return _list_csv(result, "journeys", lambda j: _journey_row(j, ""))


def format_journeys_table(result):
    return _list_table(
        result,
        "journeys",
        ["ID", "NAME", "STATE", "CREATED", "UPDATED"],
        lambda j: _journey_row(j, "-"),
    )


def format_journey_csv(result):
    return _csv_rows([_journey_row(_record(result, "journey"), "")])


def format_journey_detail(result):
    j = _record(result, "journey")
    lines = [
        f"ID: {j.get('id', '')}",
        f"Name: {j.get('name', '')}",
        f"Description: {j.get('description') or ''}",
        f"State: {j.get('state') or ''}",
        f"Created: {_created(j)}",
        f"Updated: {_updated(j)}",
    ]
    return "\n".join(lines) + "\n"
