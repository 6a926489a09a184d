"""Output formatting package for tdcli.

Re-exports all public names so consumers can do:
    from tdcli.formatters import format_audiences_table
"""

from tdcli.formatters._cdp import (
    ACTIVATION_EXECUTIONS_CSV_HEADER,
    ACTIVATIONS_CSV_HEADER,
    ATTRIBUTES_CSV_HEADER,
    AUDIENCE_EXECUTIONS_CSV_HEADER,
    AUDIENCES_CSV_HEADER,
    BEHAVIORS_CSV_HEADER,
    CUSTOMERS_CSV_HEADER,
    ENTITIES_CSV_HEADER,
    FOLDERS_CSV_HEADER,
    FUNNEL_CSV_HEADER,
    FUNNELS_CSV_HEADER,
    JOURNEYS_CSV_HEADER,
    SAMPLE_VALUES_CSV_HEADER,
    SEGMENTS_CSV_HEADER,
    SEGMENT_QUERY_CSV_HEADER,
    SEGMENT_SQL_CSV_HEADER,
    STATISTICS_CSV_HEADER,
    TOKEN_CSV_HEADER,
    TOKENS_CSV_HEADER,
    format_activation_csv,
    format_activation_detail,
    format_activation_executions_csv,
    format_activation_executions_table,
    format_activations_csv,
    format_activations_table,
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
    format_journey_csv,
    format_journey_detail,
    format_journeys_csv,
    format_journeys_table,
    format_parent_segment_activations_table,
    format_sample_values_csv,
    format_sample_values_table,
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
    format_token_csv,
    format_token_detail,
    format_tokens_csv,
    format_tokens_table,
)
from tdcli.formatters._config import (
    CONFIG_CSV_HEADER,
    format_config_csv,
    format_config_table,
)
from tdcli.formatters._core import (
    CONFIRMATION_CSV_HEADER,
    format_confirmation_csv,
    format_confirmation_table,
    mutation_response,
    output,
    render,
)
from tdcli.formatters._platform import (
    DATABASES_CSV_HEADER,
    JOBS_CSV_HEADER,
    TABLES_CSV_HEADER,
    USERS_CSV_HEADER,
    format_database_csv,
    format_database_detail,
    format_databases_csv,
    format_databases_table,
    format_job_csv,
    format_job_detail,
    format_jobs_csv,
    format_jobs_table,
    format_query_result_csv,
    format_query_result_table,
    format_table_csv,
    format_table_detail,
    format_tables_csv,
    format_tables_table,
    format_user_csv,
    format_user_detail,
    format_users_csv,
    format_users_table,
    query_result_csv_header,
)
from tdcli.formatters._table import (
    _CONTROL_RE,
    _csv_rows,
    _sanitize_str,
    _table,
)
from tdcli.formatters._workflows import (
    ATTEMPT_CSV_HEADER,
    ATTEMPTS_CSV_HEADER,
    LOG_CSV_HEADER,
    PROJECTS_CSV_HEADER,
    SCHEDULE_CSV_HEADER,
    SECRETS_CSV_HEADER,
    TASKS_CSV_HEADER,
    WORKFLOW_CSV_HEADER,
    WORKFLOWS_CSV_HEADER,
    attempt_status,
    format_attempt_csv,
    format_attempt_detail,
    format_attempts_csv,
    format_attempts_table,
    format_log_csv,
    format_log_text,
    format_project_csv,
    format_project_detail,
    format_project_workflows_table,
    format_projects_csv,
    format_projects_table,
    format_schedule_csv,
    format_schedule_detail,
    format_secrets_csv,
    format_secrets_table,
    format_task_csv,
    format_task_detail,
    format_tasks_csv,
    format_tasks_table,
    format_workflow_csv,
    format_workflow_detail,
    format_workflows_csv,
    format_workflows_table,
)

__all__ = [
    "ACTIVATION_EXECUTIONS_CSV_HEADER",
    "ACTIVATIONS_CSV_HEADER",
    "ATTEMPT_CSV_HEADER",
    "ATTEMPTS_CSV_HEADER",
    "ATTRIBUTES_CSV_HEADER",
    "AUDIENCE_EXECUTIONS_CSV_HEADER",
    "AUDIENCES_CSV_HEADER",
    "BEHAVIORS_CSV_HEADER",
    "CUSTOMERS_CSV_HEADER",
    "CONFIG_CSV_HEADER",
    "CONFIRMATION_CSV_HEADER",
    "DATABASES_CSV_HEADER",
    "ENTITIES_CSV_HEADER",
    "FOLDERS_CSV_HEADER",
    "FUNNEL_CSV_HEADER",
    "FUNNELS_CSV_HEADER",
    "JOBS_CSV_HEADER",
    "JOURNEYS_CSV_HEADER",
    "LOG_CSV_HEADER",
    "PROJECTS_CSV_HEADER",
    "SAMPLE_VALUES_CSV_HEADER",
    "SCHEDULE_CSV_HEADER",
    "SECRETS_CSV_HEADER",
    "SEGMENT_QUERY_CSV_HEADER",
    "SEGMENT_SQL_CSV_HEADER",
    "SEGMENTS_CSV_HEADER",
    "STATISTICS_CSV_HEADER",
    "TABLES_CSV_HEADER",
    "TASKS_CSV_HEADER",
    "TOKEN_CSV_HEADER",
    "TOKENS_CSV_HEADER",
    "USERS_CSV_HEADER",
    "WORKFLOW_CSV_HEADER",
    "WORKFLOWS_CSV_HEADER",
    "_CONTROL_RE",
    "_csv_rows",
    "_sanitize_str",
    "_table",
    "attempt_status",
    "format_activation_csv",
    "format_activation_detail",
    "format_activation_executions_csv",
    "format_activation_executions_table",
    "format_activations_csv",
    "format_activations_table",
    "format_attempt_csv",
    "format_attempt_detail",
    "format_attempts_csv",
    "format_attempts_table",
    "format_attributes_csv",
    "format_attributes_table",
    "format_audience_csv",
    "format_audience_detail",
    "format_audience_executions_csv",
    "format_audience_executions_table",
    "format_audiences_csv",
    "format_audiences_table",
    "format_behaviors_csv",
    "format_behaviors_table",
    "format_customers_csv",
    "format_customers_table",
    "format_config_csv",
    "format_config_table",
    "format_confirmation_csv",
    "format_confirmation_table",
    "format_database_csv",
    "format_database_detail",
    "format_databases_csv",
    "format_databases_table",
    "format_entities_csv",
    "format_entities_table",
    "format_folder_activations_table",
    "format_folder_csv",
    "format_folder_detail",
    "format_folder_segments_table",
    "format_folders_csv",
    "format_folders_table",
    "format_funnel_csv",
    "format_funnel_detail",
    "format_funnels_csv",
    "format_funnels_table",
    "format_job_csv",
    "format_job_detail",
    "format_jobs_csv",
    "format_jobs_table",
    "format_journey_csv",
    "format_journey_detail",
    "format_journeys_csv",
    "format_journeys_table",
    "format_log_csv",
    "format_log_text",
    "format_parent_segment_activations_table",
    "format_project_csv",
    "format_project_detail",
    "format_project_workflows_table",
    "format_projects_csv",
    "format_projects_table",
    "format_query_result_csv",
    "format_query_result_table",
    "format_sample_values_csv",
    "format_sample_values_table",
    "format_schedule_csv",
    "format_schedule_detail",
    "format_secrets_csv",
    "format_secrets_table",
    "format_segment_csv",
    "format_segment_detail",
    "format_segment_query_csv",
    "format_segment_query_detail",
    "format_segment_sql_csv",
    "format_segment_sql_text",
    "format_segments_csv",
    "format_segments_table",
    "format_statistics_csv",
    "format_statistics_table",
    "format_table_csv",
    "format_table_detail",
    "format_tables_csv",
    "format_tables_table",
    "format_task_csv",
    "format_task_detail",
    "format_tasks_csv",
    "format_tasks_table",
    "format_token_csv",
    "format_token_detail",
    "format_tokens_csv",
    "format_tokens_table",
    "format_user_csv",
    "format_user_detail",
    "format_users_csv",
    "format_users_table",
    "format_workflow_csv",
    "format_workflow_detail",
    "format_workflows_csv",
    "format_workflows_table",
    "mutation_response",
    "output",
    "query_result_csv_header",
    "render",
]
