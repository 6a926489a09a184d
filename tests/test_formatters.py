"""Tests for the formatters package — dispatcher, tables, CSV and detail views."""

import csv
import json

import pytest

from tdcli.exceptions import OperationError
from tdcli.formatters import (
    ACTIVATIONS_CSV_HEADER,
    AUDIENCES_CSV_HEADER,
    DATABASES_CSV_HEADER,
    JOBS_CSV_HEADER,
    STATISTICS_CSV_HEADER,
    USERS_CSV_HEADER,
    _csv_rows,
    _sanitize_str,
    _table,
    attempt_status,
    format_activations_csv,
    format_activations_table,
    format_audience_detail,
    format_audiences_csv,
    format_audiences_table,
    format_config_table,
    format_confirmation_table,
    format_databases_csv,
    format_databases_table,
    format_entities_table,
    format_folder_activations_table,
    format_folder_segments_table,
    format_job_detail,
    format_jobs_csv,
    format_jobs_table,
    format_log_csv,
    format_log_text,
    format_project_workflows_table,
    format_query_result_csv,
    format_query_result_table,
    format_sample_values_csv,
    format_sample_values_table,
    format_schedule_detail,
    format_secrets_csv,
    format_secrets_table,
    format_segment_query_detail,
    format_statistics_csv,
    format_statistics_table,
    format_table_detail,
    format_tables_table,
    format_task_detail,
    format_tasks_csv,
    format_tasks_table,
    format_users_csv,
    format_users_table,
    mutation_response,
    output,
    query_result_csv_header,
    render,
)
from tdcli.models import Confirmation, Flags

AUDIENCES = {
    "audiences": [
        {
            "id": "123",
            "name": "Test Audience",
            "population": 1000,
            "scheduleType": "daily",
            "createdAt": "2023-01-01T00:00:00Z",
            "updatedAt": "2023-01-02T00:00:00Z",
        }
    ],
    "total": 1,
}


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class TestRender:
    def test_json_round_trips(self, capsys):
        render(AUDIENCES, "json", csv_header=AUDIENCES_CSV_HEADER)
        assert json.loads(capsys.readouterr().out) == AUDIENCES

    def test_json_keeps_non_ascii(self, capsys):
        render({"name": "日本語"}, "json")
        assert "日本語" in capsys.readouterr().out

    def test_csv_first_line_is_header(self, capsys):
        render(AUDIENCES, "csv", csv_header=AUDIENCES_CSV_HEADER, csv_formatter=format_audiences_csv)
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == AUDIENCES_CSV_HEADER
        assert len(lines) == 2

    def test_csv_header_with_zero_rows(self, capsys):
        render(
            {"audiences": [], "total": 0},
            "csv",
            csv_header=AUDIENCES_CSV_HEADER,
            csv_formatter=format_audiences_csv,
        )
        assert capsys.readouterr().out == AUDIENCES_CSV_HEADER + "\n"

    def test_empty_list_table(self, capsys):
        render({"audiences": [], "total": 0}, "table", table_formatter=format_audiences_table)
        assert capsys.readouterr().out == "No audiences found\n"

    def test_table_total_line(self, capsys):
        payload = {"audiences": [{"id": str(i), "name": f"a{i}"} for i in range(3)], "total": 3}
        render(payload, "table", table_formatter=format_audiences_table)
        out = capsys.readouterr().out
        assert "Total: 3 audiences" in out
        assert out.endswith("Total: 3 audiences\n")

    def test_unknown_format_falls_back_to_table(self, capsys):
        render(AUDIENCES, "xml", table_formatter=format_audiences_table)
        out = capsys.readouterr().out
        assert out.startswith("ID")
        assert "Test Audience" in out

    def test_returns_written_length(self, capsys):
        written = render({"a": 1}, "json")
        assert written == len(capsys.readouterr().out)

    def test_output_file_matches_stdout(self, capsys, tmp_path):
        render(AUDIENCES, "table", table_formatter=format_audiences_table)
        stdout_text = capsys.readouterr().out

        path = tmp_path / "out.txt"
        render(AUDIENCES, "table", str(path), table_formatter=format_audiences_table)
        assert capsys.readouterr().out == ""
        assert path.read_text(encoding="utf-8") == stdout_text

    def test_output_file_overwrites(self, tmp_path):
        path = tmp_path / "out.json"
        path.write_text("old contents that are longer than the new ones", encoding="utf-8")
        render({"a": 1}, "json", str(path))
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": 1}

    def test_output_to_missing_directory_fails(self, tmp_path):
        path = tmp_path / "missing" / "out.json"
        with pytest.raises(OperationError) as exc_info:
            render({"a": 1}, "json", str(path))
        assert str(exc_info.value).startswith("Failed to write output")
        assert not path.exists()

    def test_unencodable_json_is_operation_error(self):
        with pytest.raises(OperationError) as exc_info:
            render({"a": object()}, "json")
        assert exc_info.value.context == "Failed to encode JSON output"

    def test_mismatched_formatter_is_type_error(self):
        with pytest.raises(TypeError):
            render({"databases": []}, "table", table_formatter=format_audiences_table)

    def test_output_uses_flags(self, capsys):
        output(AUDIENCES, format_audiences_table, Flags(format="json"), AUDIENCES_CSV_HEADER)
        assert json.loads(capsys.readouterr().out)["total"] == 1


# ---------------------------------------------------------------------------
# Audience CSV scenario
# ---------------------------------------------------------------------------


class TestAudienceCsv:
    def test_scenario(self, capsys):
        render(AUDIENCES, "csv", csv_header=AUDIENCES_CSV_HEADER, csv_formatter=format_audiences_csv)
        assert capsys.readouterr().out == (
            "id,name,population,schedule_type,created_at,updated_at\n"
            "123,Test Audience,1000,daily,2023-01-01 00:00:00,2023-01-02 00:00:00\n"
        )

    def test_values_with_commas_are_quoted(self):
        out = format_audiences_csv({"audiences": [{"id": "1", "name": "a, b"}]})
        assert out == '1,"a, b",0,,,\n'

    def test_millisecond_epoch_does_not_break_table(self, capsys):
        payload = {"audiences": [{"id": "1", "name": "a", "createdAt": 1672576200000}]}
        render(payload, "table", table_formatter=format_audiences_table)
        row = capsys.readouterr().out.splitlines()[1]
        assert row.split()[:2] == ["1", "a"]
        assert "-" in row.split()

    def test_detail_lists_attributes(self):
        payload = {
            "audience": {
                "id": "1",
                "name": "A",
                "population": 5,
                "attributes": [{"name": "age", "type": "number"}],
            }
        }
        out = format_audience_detail(payload)
        assert "Population: 5" in out
        assert "Attributes (1):" in out
        assert "  - age (number)" in out


# ---------------------------------------------------------------------------
# Table helpers
# ---------------------------------------------------------------------------


class TestTableHelpers:
    def test_columns_are_aligned(self):
        out = _table(["A", "BB"], [("long value", "x"), ("s", "y")])
        lines = out.splitlines()
        assert lines[0] == "A".ljust(12) + "BB"
        assert lines[1] == "long value  x"
        assert lines[2] == "s".ljust(12) + "y"

    def test_none_cell_renders_dash(self):
        out = _table(["A", "B"], [(None, "x")])
        assert out.splitlines()[1].startswith("-")

    def test_footer_separated_by_blank_line(self):
        out = _table(["A"], [("x",)], "Total: 1 things")
        assert out == "A\nx\n\nTotal: 1 things\n"

    def test_sanitize_strips_ansi(self):
        assert _sanitize_str("\x1b[31mred\x1b[0m") == "red"

    def test_csv_rows_booleans(self):
        assert _csv_rows([(True, False, None)]) == "true,false,\n"


# ---------------------------------------------------------------------------
# Platform formatters
# ---------------------------------------------------------------------------


class TestPlatformFormatters:
    def test_databases_table_and_csv(self):
        payload = {
            "databases": [
                {
                    "name": "sample_db",
                    "count": 3,
                    "created_at": "2020-06-11 10:25:10 UTC",
                    "updated_at": "2020-06-12 10:25:10 UTC",
                    "permission": "owner",
                }
            ],
            "total": 1,
        }
        table = format_databases_table(payload)
        assert "sample_db" in table
        assert "2020-06-11 10:25:10" in table
        assert "Total: 1 databases" in table
        assert DATABASES_CSV_HEADER.split(",")[0] == "name"
        assert format_databases_csv(payload) == (
            "sample_db,3,2020-06-11 10:25:10,2020-06-12 10:25:10,owner\n"
        )

    def test_tables_table_human_size(self):
        payload = {
            "database": "db",
            "tables": [{"name": "t", "count": 10, "estimated_storage_size": 2048}],
            "total": 1,
        }
        assert "2.0 KB" in format_tables_table(payload)

    def test_table_detail_schema_trailer(self):
        out = format_table_detail({"table": {"name": "t", "schema": '[["a","int"]]'}})
        assert out.startswith("PROPERTY")
        assert '\nSchema:\n[["a","int"]]\n' in out

    def test_jobs_duration(self):
        payload = {
            "jobs": [
                {
                    "job_id": "42",
                    "status": "success",
                    "type": "presto",
                    "database": "db",
                    "created_at": "2023-01-01 00:00:00 UTC",
                    "start_at": "2023-01-01 00:00:00 UTC",
                    "end_at": "2023-01-01 00:00:12 UTC",
                },
                {"job_id": "43", "status": "running"},
            ],
            "total": 2,
        }
        table = format_jobs_table(payload)
        assert "12.0s" in table
        assert "Total: 2 jobs" in table
        csv_lines = format_jobs_csv(payload).splitlines()
        assert csv_lines[0] == "42,success,presto,db,2023-01-01 00:00:00,12.0"
        assert csv_lines[1] == "43,running,,,,"
        assert JOBS_CSV_HEADER.endswith("duration_seconds")

    def test_job_detail_query_and_error(self):
        job = {
            "job_id": "42",
            "status": "error",
            "query": "SELECT 1",
            "debug": {"stderr": "boom"},
        }
        out = format_job_detail({"job": job})
        assert "\nQuery:\nSELECT 1\n" in out
        assert "\nError Details:\nboom\n" in out

    def test_query_result_pads_missing_columns(self):
        result = {"columns": ["n"], "rows": [[1, "a"], [2]], "total": 2}
        lines = format_query_result_table(result).splitlines()
        assert lines[0].split() == ["N", "_COL1"]
        assert lines[1].split() == ["1", "a"]
        assert lines[2].split() == ["2"]
        assert lines[-1] == "Total: 2 rows"
        assert query_result_csv_header(result) == "n,_col1"
        assert format_query_result_csv(result) == "1,a\n2\n"

    def test_query_result_empty(self):
        result = {"columns": ["n"], "rows": [], "total": 0}
        assert format_query_result_table(result) == "No rows found\n"
        assert query_result_csv_header(result) == "n"

    def test_query_result_rejects_other_payloads(self):
        with pytest.raises(TypeError):
            format_query_result_table({"jobs": []})

    def test_users_table_flags(self):
        payload = {
            "users": [
                {"id": 1, "name": "Ann", "email": "ann@example.com", "administrator": True},
                {"id": 2, "name": "Bo", "email": "bo@example.com", "email_verified": True},
            ],
            "total": 2,
        }
        lines = format_users_table(payload).splitlines()
        assert lines[0].split() == ["ID", "NAME", "EMAIL", "ADMIN", "VERIFIED", "CREATED"]
        assert lines[1].split() == ["1", "Ann", "ann@example.com", "yes", "no", "-"]
        assert lines[2].split() == ["2", "Bo", "bo@example.com", "no", "yes", "-"]
        csv_row = format_users_csv(payload).splitlines()[0]
        assert csv_row == "1,Ann,ann@example.com,,,true,false,false"
        assert len(USERS_CSV_HEADER.split(",")) == 8


# ---------------------------------------------------------------------------
# CDP and workflow formatters
# ---------------------------------------------------------------------------


class TestCdpFormatters:
    def test_activations_custom_empty_messages(self):
        empty = {"activations": [], "total": 0}
        assert format_activations_table(empty) == "No activations found\n"
        assert format_folder_activations_table(empty) == "No activations found for segment folder\n"

    def test_activations_csv_header_matches_row_width(self):
        payload = {"activations": [{"id": "a1", "name": "n", "audienceId": "9"}], "total": 1}
        row = format_activations_csv(payload).splitlines()[0]
        assert len(row.split(",")) == len(ACTIVATIONS_CSV_HEADER.split(","))
        assert row.split(",")[3] == "9"

    def test_entities_empty(self):
        assert format_entities_table({"entities": [], "total": 0}) == "No entities found in folder\n"

    def test_statistics_empty(self):
        assert format_statistics_table({"statistics": [], "total": 0}) == "No statistics found\n"

    def test_statistics_points_split_into_columns(self):
        payload = {"statistics": [[1, 2, True], [3, 4, False]], "total": 2}
        lines = format_statistics_table(payload).splitlines()
        assert lines[0].split() == ["TIMESTAMP", "POPULATION", "HAS_DATA"]
        assert lines[1].split() == ["1", "2", "true"]
        assert lines[2].split() == ["3", "4", "false"]
        assert lines[-1] == "Total: 2 statistics"

    def test_statistics_csv(self):
        payload = {"statistics": [[1, 2, True], [5]], "total": 2}
        assert STATISTICS_CSV_HEADER == "timestamp,population,has_data"
        assert format_statistics_csv(payload) == "1,2,true\n5,,\n"

    def test_project_workflows_empty(self):
        assert format_project_workflows_table({"workflows": [], "total": 0}) == (
            "No workflows found in this project\n"
        )

    @pytest.mark.parametrize(
        "attempt,expected",
        [
            ({"done": True, "success": True}, "success"),
            ({"done": True, "success": False}, "error"),
            ({"done": False, "cancelRequested": True}, "killing"),
            ({}, "running"),
            ({"status": "queued"}, "queued"),
        ],
    )
    def test_attempt_status(self, attempt, expected):
        assert attempt_status(attempt) == expected

    def test_sample_values_shapes(self):
        payload = {
            "column": "city",
            "values": [["tokyo", 12], {"value": "osaka", "frequency": 3}, "nara"],
            "total": 3,
        }
        assert format_sample_values_csv(payload) == "tokyo,12\nosaka,3\nnara,\n"
        assert format_sample_values_table(payload).endswith("\nTotal: 3 sample values\n")
        assert format_sample_values_table({"values": [], "total": 0}) == (
            "No sample values found\n"
        )

    def test_segment_query_detail(self):
        out = format_segment_query_detail({"query": {"id": "q1", "status": "ok", "count": 10}})
        assert out == "Query ID: q1\nStatus: ok\nCreated: -\nCount: 10\n"
        failed = format_segment_query_detail({"query": {"id": "q2", "error": "bad rule"}})
        assert failed.endswith("Error: bad rule\n")

    def test_folder_segments_empty(self):
        assert format_folder_segments_table({"segments": [], "total": 0}) == (
            "No segments found in folder\n"
        )


class TestWorkflowFormatters:
    def test_secrets_table(self):
        assert format_secrets_table({"secrets": [], "total": 0}) == (
            "No secrets found in this project\n"
        )
        lines = format_secrets_table({"secrets": [{"key": "token"}], "total": 1}).splitlines()
        assert lines[1].split() == ["token", "-"]
        assert format_secrets_csv({"secrets": [{"key": "token"}], "total": 1}) == "token,\n"

    def test_log_text(self):
        assert format_log_text({"log": "a\nb"}) == "a\nb\n"
        assert format_log_text({"log": "a\n"}) == "a\n"
        assert format_log_text({"log": ""}) == "No log output\n"
        with pytest.raises(TypeError):
            format_log_text({"log": None})

    def test_log_csv_quotes_newlines(self):
        rows = list(csv.reader(format_log_csv({"log": "a,b\nc"}).splitlines(keepends=True)))
        assert rows == [["a,b\nc"]]

    def test_tasks_table_camel_case(self):
        payload = {
            "tasks": [{"id": "1", "fullName": "+main", "state": "success", "isGroup": True}],
            "total": 1,
        }
        lines = format_tasks_table(payload).splitlines()
        assert lines[1].split() == ["1", "+main", "success", "true", "-", "-"]
        assert format_tasks_csv(payload) == "1,+main,success,true,,\n"

    def test_task_detail_config_trailer(self):
        out = format_task_detail({"task": {"id": "1", "config": {"sh>": "run.sh"}}})
        assert "\nConfig:\n{\n" in out
        assert '"sh>": "run.sh"' in out

    @pytest.mark.parametrize(
        "schedule,status",
        [
            ({"id": "s1"}, "enabled"),
            ({"id": "s1", "disabledAt": "2024-01-01T00:00:00Z"}, "disabled"),
        ],
    )
    def test_schedule_status(self, schedule, status):
        lines = format_schedule_detail({"schedule": schedule}).splitlines()
        assert lines[-1].split() == ["Status", status]


# ---------------------------------------------------------------------------
# Confirmations and config
# ---------------------------------------------------------------------------


class TestConfirmation:
    def test_table(self, capsys):
        mutation_response(Confirmation("audience", "123", "deleted"), Flags())
        assert capsys.readouterr().out == "Audience 123 deleted successfully\n"

    def test_table_with_details(self):
        out = format_confirmation_table(
            Confirmation("audience", "1", "updated", {"Updated Fields": "name"})
        )
        assert out == "Audience 1 updated successfully\nUpdated Fields: name\n"

    def test_json(self, capsys):
        mutation_response(Confirmation("database", "db", "created"), Flags(format="json"))
        data = json.loads(capsys.readouterr().out)
        assert data == {
            "ok": True,
            "mutation": {"resource": "database", "id": "db", "action": "created", "details": {}},
        }

    def test_csv(self, capsys):
        mutation_response(Confirmation("journey", "j1", "paused"), Flags(format="csv"))
        assert capsys.readouterr().out == "resource,id,action,details\njourney,j1,paused,\n"

    def test_csv_keeps_details(self, capsys):
        confirmation = Confirmation(
            "workflow", "5", "started", {"Attempt ID": "99", "Status": "running"}
        )
        mutation_response(confirmation, Flags(format="csv"))
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "resource,id,action,details"
        row = next(csv.reader([lines[1]]))
        assert row[:3] == ["workflow", "5", "started"]
        assert json.loads(row[3]) == {"Attempt ID": "99", "Status": "running"}

    def test_output_file(self, capsys, tmp_path):
        path = tmp_path / "confirm.txt"
        mutation_response(Confirmation("token", "t1", "deleted"), Flags(output=str(path)))
        assert capsys.readouterr().out == ""
        assert path.read_text(encoding="utf-8") == "Token t1 deleted successfully\n"


class TestConfigTable:
    def test_marks_existing_files(self):
        payload = {
            "settings": {"api_key": "1234***5678", "region": "us", "format": "table", "output": ""},
            "files": [{"path": "/a/tdcli.toml", "exists": True}, {"path": "/b", "exists": False}],
        }
        out = format_config_table(payload)
        assert "  api_key: 1234***5678" in out
        assert "  output: (not set)" in out
        assert "  ✓ /a/tdcli.toml" in out
        assert "    /b" in out
