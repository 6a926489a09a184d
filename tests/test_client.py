"""Tests for client.py — TDClient endpoints and response shaping."""

from unittest.mock import patch

import pytest

from tdcli.client import (
    TDClient,
    _flatten_resource,
    _items,
    _record,
    _result_columns,
    _result_rows,
)
from tdcli.exceptions import ConfigError, OperationError


@pytest.fixture
def client():
    return TDClient(api_key="1/abc", region="us")


# ---------------------------------------------------------------------------
# Response shaping
# ---------------------------------------------------------------------------


class TestShaping:
    def test_flatten_json_api_resource(self):
        flat = _flatten_resource({"id": "7", "type": "folder", "attributes": {"name": "F"}})
        assert flat == {"id": "7", "type": "folder", "name": "F"}

    def test_plain_dict_untouched(self):
        assert _flatten_resource({"id": "1", "name": "x"}) == {"id": "1", "name": "x"}

    def test_items_from_bare_list(self):
        assert _items([{"id": "1"}], "audiences") == [{"id": "1"}]

    def test_items_from_keyed_object(self):
        assert _items({"databases": [{"name": "d"}]}, "databases") == [{"name": "d"}]

    def test_items_from_data(self):
        result = {"data": [{"id": "1", "type": "t", "attributes": {"name": "n"}}]}
        assert _items(result, "tokens") == [{"id": "1", "type": "t", "name": "n"}]

    def test_items_rejects_scalars(self):
        with pytest.raises(OperationError, match="Unexpected response shape"):
            _items("oops", "audiences")

    def test_record_from_data(self):
        assert _record({"data": {"id": "1", "attributes": {"a": 2}}}) == {
            "id": "1",
            "type": None,
            "a": 2,
        }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


class TestClientInit:
    def test_invalid_region(self):
        with pytest.raises(ConfigError, match="Invalid region"):
            TDClient(api_key="1/abc", region="mars")


@patch("tdcli.client.td_request")
class TestPlatformEndpoints:
    def test_list_databases(self, mock_request, client):
        mock_request.return_value = {"databases": [{"name": "a"}, {"name": "b"}]}
        assert client.list_databases() == {
            "databases": [{"name": "a"}, {"name": "b"}],
            "total": 2,
        }
        args, kwargs = mock_request.call_args
        assert args == ("api", "v3/database/list")
        assert kwargs["method"] == "GET"
        assert kwargs["api_key"] == "1/abc"

    def test_list_tables_keeps_database(self, mock_request, client):
        mock_request.return_value = {"tables": []}
        assert client.list_tables("my db") == {"database": "my db", "tables": [], "total": 0}
        assert mock_request.call_args[0][1] == "v3/table/list/my%20db"

    def test_list_jobs_limit(self, mock_request, client):
        mock_request.return_value = {"jobs": []}
        client.list_jobs(limit=10, status="running")
        params = mock_request.call_args[1]["params"]
        assert params == {"status": "running", "from": 0, "to": 9}

    def test_kill_job_is_post(self, mock_request, client):
        mock_request.return_value = {}
        client.kill_job("42")
        assert mock_request.call_args[0][1] == "v3/job/kill/42"
        assert mock_request.call_args[1]["method"] == "POST"


@patch("tdcli.client.td_request")
class TestWorkflowEndpoints:
    def test_start_workflow(self, mock_request, client):
        mock_request.return_value = {"id": "99", "done": False}
        result = client.start_workflow("5", {"k": "v"})
        assert result == {"attempt": {"id": "99", "done": False}}
        args, kwargs = mock_request.call_args
        assert args == ("workflow", "api/workflows/5/attempts")
        assert kwargs["data"] == {"params": {"k": "v"}}

    def test_kill_attempt(self, mock_request, client):
        mock_request.return_value = {}
        client.kill_attempt("5", "99")
        assert mock_request.call_args[1]["method"] == "POST"

    def test_retry_attempt_sends_params(self, mock_request, client):
        mock_request.return_value = {"id": "100"}
        assert client.retry_attempt("5", "99", {"date": "2024-01-01"}) == {
            "attempt": {"id": "100"}
        }
        args, kwargs = mock_request.call_args
        assert args == ("workflow", "api/workflows/5/attempts/99/retry")
        assert kwargs["method"] == "POST"
        assert kwargs["data"] == {"params": {"date": "2024-01-01"}}

    def test_retry_attempt_without_params(self, mock_request, client):
        mock_request.return_value = {}
        client.retry_attempt("5", "99")
        assert mock_request.call_args[1]["data"] == {}

    def test_create_workflow_body(self, mock_request, client):
        mock_request.return_value = {"id": "7", "name": "daily"}
        client.create_workflow("daily", "etl", "+step:\n  echo>: hi\n")
        assert mock_request.call_args[0] == ("workflow", "api/workflows")
        assert mock_request.call_args[1]["data"] == {
            "name": "daily",
            "project": "etl",
            "config": "+step:\n  echo>: hi\n",
        }

    def test_list_tasks(self, mock_request, client):
        mock_request.return_value = {"tasks": [{"id": "1", "fullName": "+main"}]}
        result = client.list_tasks("5", "99")
        assert result["workflow_id"] == "5"
        assert result["attempt_id"] == "99"
        assert result["total"] == 1
        assert mock_request.call_args[0][1] == "api/workflows/5/attempts/99/tasks"

    def test_attempt_log_is_plain_text(self, mock_request, client):
        mock_request.return_value = "line one\nline two\n"
        result = client.get_attempt_log("5", "99")
        assert result["log"] == "line one\nline two\n"
        assert mock_request.call_args[0][1] == "api/workflows/5/attempts/99/log"
        assert mock_request.call_args[1]["text"] is True

    def test_task_log_path(self, mock_request, client):
        mock_request.return_value = ""
        result = client.get_task_log("5", "99", "3")
        assert result["task_id"] == "3"
        assert mock_request.call_args[0][1] == "api/workflows/5/attempts/99/tasks/3/log"

    def test_update_schedule_body(self, mock_request, client):
        mock_request.return_value = {"id": "s1", "cron": "0 9 * * *"}
        client.update_schedule("5", "0 9 * * *", "Asia/Tokyo", 60)
        args, kwargs = mock_request.call_args
        assert args == ("workflow", "api/workflows/5/schedule")
        assert kwargs["method"] == "PUT"
        assert kwargs["data"] == {"cron": "0 9 * * *", "timezone": "Asia/Tokyo", "delay": 60}

    def test_enable_and_disable_schedule(self, mock_request, client):
        mock_request.return_value = {}
        client.enable_schedule("5")
        assert mock_request.call_args[0][1] == "api/workflows/5/schedule/enable"
        client.disable_schedule("5")
        assert mock_request.call_args[0][1] == "api/workflows/5/schedule/disable"
        assert mock_request.call_args[1]["method"] == "POST"

    def test_secrets_map_becomes_sorted_rows(self, mock_request, client):
        mock_request.return_value = {"secrets": {"b_key": "***", "a_key": "***"}}
        result = client.list_project_secrets("1")
        assert result == {
            "project_id": "1",
            "secrets": [{"key": "a_key", "value": "***"}, {"key": "b_key", "value": "***"}],
            "total": 2,
        }

    def test_secrets_list_of_keys(self, mock_request, client):
        mock_request.return_value = {"secrets": ["token"]}
        assert client.list_project_secrets("1")["secrets"] == [{"key": "token"}]

    def test_set_secret_quotes_key(self, mock_request, client):
        mock_request.return_value = {}
        client.set_project_secret("1", "api/key", "s3cr3t")
        args, kwargs = mock_request.call_args
        assert args == ("workflow", "api/projects/1/secrets/api%2Fkey")
        assert kwargs["method"] == "PUT"
        assert kwargs["data"] == {"value": "s3cr3t"}

    def test_delete_secret(self, mock_request, client):
        mock_request.return_value = {}
        client.delete_project_secret("1", "token")
        assert mock_request.call_args[1]["method"] == "DELETE"


@patch("tdcli.client.td_request")
class TestCdpEndpoints:
    def test_list_audiences(self, mock_request, client):
        mock_request.return_value = [{"id": "1"}]
        assert client.list_audiences() == {"audiences": [{"id": "1"}], "total": 1}
        assert mock_request.call_args[0] == ("cdp", "audiences")

    def test_update_audience_is_put(self, mock_request, client):
        mock_request.return_value = {"id": "1", "name": "New"}
        result = client.update_audience("1", {"name": "New"})
        assert result == {"audience": {"id": "1", "name": "New"}}
        assert mock_request.call_args[1]["method"] == "PUT"
        assert mock_request.call_args[1]["data"] == {"name": "New"}

    def test_create_audience_body(self, mock_request, client):
        mock_request.return_value = {"id": "3"}
        client.create_audience("n", "d", "db", "tbl")
        assert mock_request.call_args[1]["data"] == {
            "name": "n",
            "description": "d",
            "master": {"parentDatabaseName": "db", "parentTableName": "tbl"},
        }

    def test_audience_activations(self, mock_request, client):
        mock_request.return_value = [{"id": "s1"}]
        result = client.list_audience_activations("9")
        assert result["activations"] == [{"id": "s1"}]
        assert result["total"] == 1
        assert mock_request.call_args[0][1] == "audiences/9/syndications"

    def test_update_folder_moves_parent(self, mock_request, client):
        mock_request.return_value = {"data": {"id": "f1", "attributes": {"name": "F"}}}
        client.update_entity_folder("f1", {"name": "F", "parent_folder_id": "f0"})
        kwargs = mock_request.call_args[1]
        assert kwargs["method"] == "PATCH"
        body = kwargs["data"]["data"]
        assert body["attributes"] == {"name": "F"}
        assert body["relationships"]["parentFolder"]["data"] == {
            "id": "f0",
            "type": "folder-segment",
        }

    def test_update_folder_clears_parent(self, mock_request, client):
        mock_request.return_value = {}
        client.update_entity_folder("f1", {"parent_folder_id": ""})
        body = mock_request.call_args[1]["data"]["data"]
        assert body["relationships"]["parentFolder"]["data"] is None

    def test_list_tokens_params(self, mock_request, client):
        mock_request.return_value = {"data": []}
        client.list_tokens("a1", limit=5, token_type="key")
        assert mock_request.call_args[1]["params"] == {
            "limit": 5,
            "offset": None,
            "type": "key",
            "status": None,
        }

    def test_journeys_by_folder(self, mock_request, client):
        mock_request.return_value = {"data": []}
        assert client.list_journeys("f9") == {"folder_id": "f9", "journeys": [], "total": 0}
        assert mock_request.call_args[1]["params"] == {"folder_id": "f9"}

    def test_pause_journey_is_patch(self, mock_request, client):
        mock_request.return_value = {}
        client.pause_journey("j1")
        assert mock_request.call_args[0][1] == "entities/journeys/j1/pause"
        assert mock_request.call_args[1]["method"] == "PATCH"

    def test_execute_activation_posts_to_runs(self, mock_request, client):
        mock_request.return_value = {"id": "r1", "status": "running"}
        result = client.execute_activation("a1", "s1", "x1")
        assert result == {"execution": {"id": "r1", "status": "running"}}
        assert mock_request.call_args[0][1] == "audiences/a1/segments/s1/syndications/x1/runs"
        assert mock_request.call_args[1]["method"] == "POST"

    def test_activation_executions_read_runs(self, mock_request, client):
        mock_request.return_value = [{"id": "r1"}]
        assert client.get_activation_executions("a1", "s1", "x1")["total"] == 1
        assert mock_request.call_args[0][1] == "audiences/a1/segments/s1/syndications/x1/runs"
        assert mock_request.call_args[1]["method"] == "GET"

    def test_create_activation_body(self, mock_request, client):
        mock_request.return_value = {"data": {"id": "x9", "attributes": {"name": "Push"}}}
        result = client.create_activation("s1", "Push", "to S3", {"connectionId": "c1"})
        assert result["activation"]["id"] == "x9"
        args, kwargs = mock_request.call_args
        assert args == ("cdp", "entities/segments/s1/syndications")
        assert kwargs["method"] == "POST"
        assert kwargs["data"] == {
            "type": "syndication",
            "attributes": {"name": "Push", "description": "to S3", "connectionId": "c1"},
        }

    def test_update_activation_status_is_patch(self, mock_request, client):
        mock_request.return_value = {}
        client.update_activation_status("a1", "s1", "x1", "paused")
        assert mock_request.call_args[0][1] == "audiences/a1/segments/s1/syndications/x1"
        assert mock_request.call_args[1]["method"] == "PATCH"
        assert mock_request.call_args[1]["data"] == {"status": "paused"}

    def test_run_segment_activation(self, mock_request, client):
        mock_request.return_value = {"id": "e1"}
        client.run_segment_activation("s1", "x1")
        assert mock_request.call_args[0][1] == "entities/segments/s1/activations/x1/run"
        assert mock_request.call_args[1]["method"] == "POST"

    def test_sample_values_pass_column(self, mock_request, client):
        mock_request.return_value = [["tokyo", 12], ["osaka", 3]]
        result = client.get_audience_sample_values("a1", "city")
        assert result == {
            "audience_id": "a1",
            "column": "city",
            "values": [["tokyo", 12], ["osaka", 3]],
            "total": 2,
        }
        assert mock_request.call_args[0][1] == "audiences/a1/sample_values"
        assert mock_request.call_args[1]["params"] == {"column": "city"}

    def test_behavior_sample_values_path(self, mock_request, client):
        mock_request.return_value = []
        client.get_behavior_sample_values("a1", "b2", "item")
        assert mock_request.call_args[0][1] == "audiences/a1/behaviors/b2/sample_values"

    def test_segment_query_lifecycle_paths(self, mock_request, client):
        mock_request.return_value = {"id": "q1", "status": "running"}
        assert client.create_segment_query("a1", "age > 20") == {
            "query": {"id": "q1", "status": "running"}
        }
        assert mock_request.call_args[0][1] == "audiences/a1/segments/queries"
        assert mock_request.call_args[1]["data"] == {"query": "age > 20"}

        client.get_segment_query_status("a1", "q1")
        assert mock_request.call_args[0][1] == "audiences/a1/segments/queries/q1"

        client.kill_segment_query("a1", "q1")
        assert mock_request.call_args[0][1] == "audiences/a1/segments/queries/q1/kill"
        assert mock_request.call_args[1]["method"] == "POST"

    def test_segment_customers_params(self, mock_request, client):
        mock_request.return_value = [{"customer_id": "c1"}]
        result = client.get_segment_query_customers("a1", "q1", limit=10, fields="email")
        assert result["customers"] == [{"customer_id": "c1"}]
        assert mock_request.call_args[0][1] == "audiences/a1/segments/queries/q1/customers"
        assert mock_request.call_args[1]["params"] == {
            "limit": 10,
            "offset": None,
            "fields": "email",
        }

    def test_segment_sql(self, mock_request, client):
        mock_request.return_value = {"sql": "SELECT 1"}
        rules = {"type": "And", "conditions": []}
        assert client.get_segment_sql("a1", rules) == {"audience_id": "a1", "sql": "SELECT 1"}
        assert mock_request.call_args[0][1] == "audiences/a1/segments/query"
        assert mock_request.call_args[1]["data"] == rules

    def test_folder_segments_and_statistics(self, mock_request, client):
        mock_request.return_value = []
        assert client.list_folder_segments("a1", "f1")["folder_id"] == "f1"
        assert mock_request.call_args[0][1] == "audiences/a1/folders/f1/segments"
        client.get_segment_statistics("a1", "s1")
        assert mock_request.call_args[0][1] == "audiences/a1/segments/s1/statistics"

    def test_create_audience_folder_body(self, mock_request, client):
        mock_request.return_value = {"id": "f2", "name": "Promo"}
        client.create_audience_folder("a1", "Promo", "spring", "f0")
        assert mock_request.call_args[0][1] == "audiences/a1/folders"
        assert mock_request.call_args[1]["data"] == {
            "name": "Promo",
            "description": "spring",
            "parent_id": "f0",
        }

    def test_create_entity_folder_without_parent(self, mock_request, client):
        mock_request.return_value = {"data": {"id": "f3", "attributes": {"name": "Root"}}}
        result = client.create_entity_folder("Root")
        assert result == {"folder": {"id": "f3", "type": None, "name": "Root"}}
        assert mock_request.call_args[1]["data"] == {
            "type": "folder-segment",
            "attributes": {"name": "Root", "description": ""},
        }

    def test_create_entity_folder_with_parent(self, mock_request, client):
        mock_request.return_value = {}
        client.create_entity_folder("Child", "d", "f0")
        body = mock_request.call_args[1]["data"]
        assert body["relationships"] == {
            "parentFolder": {"data": {"id": "f0", "type": "folder-segment"}}
        }


# ---------------------------------------------------------------------------
# Queries and users
# ---------------------------------------------------------------------------


@patch("tdcli.client.td_request")
class TestQueryEndpoints:
    def test_issue_query(self, mock_request, client):
        mock_request.return_value = {"job_id": "123", "database": "sample"}
        result = client.issue_query("SELECT 1", "sample", engine="hive", priority=1)
        assert result == {"job_id": "123", "database": "sample", "engine": "hive"}
        args, kwargs = mock_request.call_args
        assert args == ("api", "v3/job/issue/hive/sample")
        assert kwargs["method"] == "POST"
        assert kwargs["data"] == {"query": "SELECT 1", "priority": 1}

    def test_issue_query_defaults(self, mock_request, client):
        mock_request.return_value = {"job": 77}
        result = client.issue_query("SELECT 1", "db")
        assert result["job_id"] == "77"
        assert mock_request.call_args[0][1] == "v3/job/issue/trino/db"
        assert mock_request.call_args[1]["data"] == {"query": "SELECT 1"}

    def test_list_queries_keeps_query_jobs(self, mock_request, client):
        mock_request.return_value = {
            "jobs": [
                {"job_id": "1", "type": "trino"},
                {"job_id": "2", "type": "bulkload"},
                {"job_id": "3", "type": "hive"},
            ]
        }
        result = client.list_queries(limit=3)
        assert [j["job_id"] for j in result["jobs"]] == ["1", "3"]
        assert result["total"] == 2

    def test_result_of_finished_job(self, mock_request, client):
        mock_request.side_effect = [
            {
                "job_id": "9",
                "status": "success",
                "hive_result_schema": '[["n","bigint"],["s","varchar"]]',
            },
            '[1,"a"]\n[2,"b"]\n',
        ]
        result = client.get_query_result("9", limit=2)
        assert result == {
            "job_id": "9",
            "status": "success",
            "columns": ["n", "s"],
            "rows": [[1, "a"], [2, "b"]],
            "total": 2,
        }
        args, kwargs = mock_request.call_args
        assert args == ("api", "v3/job/result/9")
        assert kwargs["params"] == {"format": "json", "limit": 2}
        assert kwargs["text"] is True

    def test_result_of_running_job_skips_download(self, mock_request, client):
        mock_request.return_value = {"job_id": "9", "status": "running"}
        result = client.get_query_result("9")
        assert result["status"] == "running"
        assert result["rows"] == []
        assert mock_request.call_count == 1

    def test_result_of_failed_job_carries_stderr(self, mock_request, client):
        mock_request.return_value = {"status": "error", "debug": {"stderr": "syntax error"}}
        assert client.get_query_result("9")["error"] == "syntax error"

    def test_result_rejects_garbage(self, mock_request, client):
        mock_request.side_effect = [{"status": "success"}, "not json\n"]
        with pytest.raises(OperationError, match="not valid JSON"):
            client.get_query_result("9")

    def test_list_users(self, mock_request, client):
        mock_request.return_value = {"users": [{"email": "a@example.com"}]}
        assert client.list_users() == {"users": [{"email": "a@example.com"}], "total": 1}
        assert mock_request.call_args[0] == ("api", "v3/user/list")

    def test_get_user_quotes_email(self, mock_request, client):
        mock_request.return_value = {"email": "a+b@example.com"}
        client.get_user("a+b@example.com")
        assert mock_request.call_args[0][1] == "v3/user/show/a%2Bb%40example.com"


class TestResultParsing:
    def test_object_rows_become_lists(self):
        assert _result_rows('{"a": 1, "b": 2}\n\n') == [[1, 2]]

    def test_scalar_rows_are_wrapped(self):
        assert _result_rows("5\n") == [[5]]

    def test_columns_from_list_schema(self):
        assert _result_columns({"hive_result_schema": [["x", "int"]]}) == ["x"]

    def test_columns_missing_or_broken(self):
        assert _result_columns({}) == []
        assert _result_columns({"hive_result_schema": "{oops"}) == []
