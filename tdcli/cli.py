"""
tdcli — command-line client for Treasure Data databases, jobs, workflows and CDP
"""

import argparse
import sys

from tdcli import commands, config
from tdcli.exceptions import CliError, ConfigError, OperationError, UsageError
from tdcli.models import Flags

HELP_TEXT = """\
Usage: tdcli [global flags] <resource> <verb> [args...]

Global flags:
  --format, -f <fmt>      Output format: table, csv, json (default: table)
  --output, -o <path>     Write output to a file instead of stdout
  --verbose, -v           Verbose errors and HTTP request logging
  --api-key <key>         API key (account_id/api_key) for this run
  --region <region>       API region: us, eu, tokyo, ap02 (default: us)
  --version               Show version number
  --help, -h              Show this help

Commands:
  version                                   - Show version number
  config show                               - Show effective configuration
  config get <key>                          - Show one config value
  config set <key> <value> [--global]       - Save a config value
  config init [--global] [--force]          - Interactive configuration

  databases (db)
    list | get <name> | create <name> | delete <name> [--force]
  tables (table)
    list <db> | get <db> <table> | create <db> <table>
    delete <db> <table> [--force] | swap <db> <t1> <t2> | rename <db> <old> <new>
  jobs (job)
    list [--limit N] [--status S] | get <job_id> | cancel <job_id> [--force]
  queries (query, q)
    submit "<sql>" --database <db> [--engine trino|hive|presto] [--priority -2..2]
           [--wait] [--timeout S]
    status <job_id> | result <job_id> [--limit N] | list [--limit N] [--status S]
    cancel <job_id> [--force]
  results (result)
    get <job_id> [--limit N]
  users (user)
    list | get <email>
  workflow (wf)
    list | get <id> | create <name> <project> <config> | update <id> <key=value>...
    delete <id> [--force] | start <id> [params-json]
    attempts list <wf_id> | attempts get <wf_id> <attempt_id>
    attempts kill <wf_id> <attempt_id> | attempts retry <wf_id> <attempt_id> [params-json]
    tasks list <wf_id> <attempt_id> | tasks get <wf_id> <attempt_id> <task_id>
    logs attempt <wf_id> <attempt_id> | logs task <wf_id> <attempt_id> <task_id>
    schedule get|enable|disable <wf_id>
    schedule update <wf_id> <cron> <timezone> <delay_seconds>
    projects list | projects get <id> | projects workflows <id>
    projects secrets list <id> | projects secrets set <id> <key> <value>
    projects secrets delete <id> <key> [--force]

  cdp audiences (audience)
    create <name> <description> <parent_db> <parent_table> | list | get <id>
    delete <id> | update <id> <key=value>... | attributes <id> | behaviors <id>
    run <id> | executions <id> | statistics <id>
    sample-values <id> <column> | behavior-samples <id> <behavior> <column>
  cdp segments (segment)
    create <audience> <name> <description> <query>
    list <audience> [--limit N] [--offset N] | get <audience> <segment>
    update <audience> <segment> <key=value>... | delete <audience> <segment>
    folders <audience> <folder> | statistics <audience> <segment>
    query <audience> <query> | sql <audience> <rules-json>
    query-status <audience> <query_id> | kill-query <audience> <query_id>
    customers <audience> <query_id> [--limit N] [--offset N] [--fields a,b]
  cdp activations (activation)
    list [--force]                          - Activations from ALL audiences (slow)
    list-by-audience <audience> | list-by-segment-folder <folder>
    list-by-parent-segment <parent_segment>
    get | delete | execute | executions <audience> <segment> <activation>
    create <segment> <name> <description> [config-json]
    update <audience> <segment> <activation> <key=value>...
    update-status <audience> <segment> <activation> <status>
    run-segment <segment> <activation>
  cdp folders (folder)
    list <audience> | create <audience> <name> [description] [parent]
    get <audience> <folder> | create-entity <name> [description] [parent]
    get-entity <folder> | get-entities <folder>
    update-entity <folder> <key=value>... | delete-entity <folder>
  cdp tokens (token)
    list <audience> [--limit N] [--offset N] [--type T] [--status S]
    get-entity <token> | update-entity <token> <key=value>... | delete-entity <token>
  cdp funnels (funnel)
    list <audience> | get <audience> <funnel> | delete <audience> <funnel>
  cdp journeys (journey)
    list <folder> | get <journey> | create <request.json> | delete <journey>
    pause <journey> | resume <journey>

Configuration is read from ./tdcli.toml (or ./.tdcli.toml), then
~/.tdcli/.tdcli.toml. Environment: TD_API_KEY, TD_REGION, TD_FORMAT, TD_OUTPUT,
TD_QUERY_ENGINE and TD_TIMEOUT (seconds for query submit --wait).
"""


# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so --format works after subcommand)
# ---------------------------------------------------------------------------

_VALUE_FLAGS = {
    "--format": "format",
    "-f": "format",
    "--output": "output",
    "-o": "output",
    "--api-key": "api_key",
    "--region": "region",
}


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (options, remaining_argv). ``options`` holds only the flags that
    were given, plus the booleans verbose/show_help/show_version.
    """
    options = {"verbose": False, "show_help": False, "show_version": False}
    remaining = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--version":
            options["show_version"] = True
        elif arg in ("--help", "-h"):
            options["show_help"] = True
        elif arg in ("--verbose", "-v"):
            options["verbose"] = True
        elif arg in _VALUE_FLAGS:
            if i + 1 >= len(argv):
                raise UsageError(f"Flag {arg} requires a value")
            options[_VALUE_FLAGS[arg]] = argv[i + 1]
            i += 2
            continue
        elif "=" in arg and arg.split("=", 1)[0] in _VALUE_FLAGS and arg.startswith("--"):
            flag, value = arg.split("=", 1)
            options[_VALUE_FLAGS[flag]] = value
        else:
            remaining.append(arg)
        i += 1
    return options, remaining


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Subparser that raises UsageError instead of printing full help text."""

    def error(self, message):
        parts = self.prog.split(" ", 1)
        usage = f"{parts[1]} ..." if len(parts) > 1 else "<resource> <verb> [args...]"
        raise UsageError(message, usage=usage)


def _positive_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _non_negative_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a non-negative integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("must be a non-negative integer")
    return parsed


def _resource(sub, name, aliases=(), usage=""):
    """Add a resource parser and return the subparsers action for its verbs."""
    p = sub.add_parser(name, aliases=list(aliases))
    p.set_defaults(func=None, usage=usage or f"{name} <verb> [args...]")
    return p.add_subparsers(dest="verb", parser_class=_SubcommandParser)


def _verb(sub, name, func, aliases=(), force=False):
    p = sub.add_parser(name, aliases=list(aliases))
    p.add_argument("args", nargs="*")
    if force:
        p.add_argument("--force", action="store_true")
    p.set_defaults(func=func)
    return p


def build_parser():
    parser = _SubcommandParser(
        prog="tdcli",
        description="Command-line client for Treasure Data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    sub = parser.add_subparsers(dest="command", parser_class=_SubcommandParser)

    # --- version ---
    sub.add_parser("version").set_defaults(func=commands.cmd_version)

    # --- config ---
    cfg = _resource(sub, "config", usage="config show|get|set|init")
    _verb(cfg, "show", commands.cmd_config_show)
    _verb(cfg, "get", commands.cmd_config_get)
    p = _verb(cfg, "set", commands.cmd_config_set)
    p.add_argument("--global", action="store_true", dest="global_scope")
    p = _verb(cfg, "init", commands.cmd_config_init, force=True)
    p.add_argument("--global", action="store_true", dest="global_scope")

    # --- databases ---
    db = _resource(sub, "databases", ["db"], "databases list|get|create|delete")
    _verb(db, "list", commands.cmd_db_list, ["ls"])
    _verb(db, "get", commands.cmd_db_get, ["show"])
    _verb(db, "create", commands.cmd_db_create)
    _verb(db, "delete", commands.cmd_db_delete, ["rm"], force=True)

    # --- tables ---
    tbl = _resource(sub, "tables", ["table"], "tables list|get|create|delete|swap|rename")
    _verb(tbl, "list", commands.cmd_table_list, ["ls"])
    _verb(tbl, "get", commands.cmd_table_get, ["show"])
    _verb(tbl, "create", commands.cmd_table_create)
    _verb(tbl, "delete", commands.cmd_table_delete, ["rm"], force=True)
    _verb(tbl, "swap", commands.cmd_table_swap)
    _verb(tbl, "rename", commands.cmd_table_rename, ["mv"])

    # --- jobs ---
    jobs = _resource(sub, "jobs", ["job"], "jobs list|get|cancel")
    p = _verb(jobs, "list", commands.cmd_job_list, ["ls"])
    p.add_argument("--limit", type=_positive_int)
    p.add_argument("--status")
    _verb(jobs, "get", commands.cmd_job_get, ["show"])
    _verb(jobs, "cancel", commands.cmd_job_cancel, ["kill"], force=True)

    # --- queries ---
    qry = _resource(sub, "queries", ["query", "q"], "queries submit|status|result|list|cancel")
    p = _verb(qry, "submit", commands.cmd_query_submit, ["run"])
    p.add_argument("--database")
    p.add_argument("--engine", type=str.lower, choices=config.QUERY_ENGINES)
    p.add_argument("--priority", type=int, choices=range(-2, 3))
    p.add_argument("--wait", action="store_true")
    p.add_argument("--timeout", type=_positive_int)
    _verb(qry, "status", commands.cmd_job_get)
    p = _verb(qry, "result", commands.cmd_query_result, ["results"])
    p.add_argument("--limit", type=_positive_int)
    p = _verb(qry, "list", commands.cmd_query_list, ["ls"])
    p.add_argument("--limit", type=_positive_int)
    p.add_argument("--status")
    _verb(qry, "cancel", commands.cmd_job_cancel, ["kill"], force=True)

    res = _resource(sub, "results", ["result"], "results get <job_id> [--limit N]")
    p = _verb(res, "get", commands.cmd_query_result, ["show"])
    p.add_argument("--limit", type=_positive_int)

    # --- users ---
    usr = _resource(sub, "users", ["user"], "users list|get")
    _verb(usr, "list", commands.cmd_user_list, ["ls"])
    _verb(usr, "get", commands.cmd_user_get, ["show"])

    # --- workflow ---
    wf = _resource(
        sub,
        "workflow",
        ["wf"],
        "workflow list|get|create|update|delete|start|attempts|tasks|logs|schedule|projects",
    )
    _verb(wf, "list", commands.cmd_workflow_list, ["ls"])
    _verb(wf, "get", commands.cmd_workflow_get, ["show"])
    _verb(wf, "create", commands.cmd_workflow_create)
    _verb(wf, "update", commands.cmd_workflow_update)
    _verb(wf, "delete", commands.cmd_workflow_delete, ["rm"], force=True)
    _verb(wf, "start", commands.cmd_workflow_start, ["run"])
    att = _resource(wf, "attempts", ["attempt"], "workflow attempts list|get|kill|retry")
    _verb(att, "list", commands.cmd_attempt_list, ["ls"])
    _verb(att, "get", commands.cmd_attempt_get, ["show"])
    _verb(att, "kill", commands.cmd_attempt_kill)
    _verb(att, "retry", commands.cmd_attempt_retry)
    tsk = _resource(wf, "tasks", ["task"], "workflow tasks list|get")
    _verb(tsk, "list", commands.cmd_task_list, ["ls"])
    _verb(tsk, "get", commands.cmd_task_get, ["show"])
    logs = _resource(wf, "logs", ["log"], "workflow logs attempt|task")
    _verb(logs, "attempt", commands.cmd_log_attempt)
    _verb(logs, "task", commands.cmd_log_task)
    sch = _resource(wf, "schedule", ["sched"], "workflow schedule get|enable|disable|update")
    _verb(sch, "get", commands.cmd_schedule_get, ["show"])
    _verb(sch, "enable", commands.cmd_schedule_enable)
    _verb(sch, "disable", commands.cmd_schedule_disable)
    _verb(sch, "update", commands.cmd_schedule_update)
    proj = _resource(
        wf, "projects", ["project", "proj"], "workflow projects list|get|workflows|secrets"
    )
    _verb(proj, "list", commands.cmd_project_list, ["ls"])
    _verb(proj, "get", commands.cmd_project_get, ["show"])
    _verb(proj, "workflows", commands.cmd_project_workflows, ["wf"])
    sec = _resource(proj, "secrets", ["secret"], "workflow projects secrets list|set|delete")
    _verb(sec, "list", commands.cmd_secret_list, ["ls"])
    _verb(sec, "set", commands.cmd_secret_set)
    _verb(sec, "delete", commands.cmd_secret_delete, ["rm"], force=True)

    # --- cdp ---
    cdp = _resource(
        sub, "cdp", usage="cdp audiences|segments|activations|folders|tokens|funnels|journeys"
    )

    aud = _resource(cdp, "audiences", ["audience"], "cdp audiences <verb> [args...]")
    _verb(aud, "create", commands.cmd_audience_create)
    _verb(aud, "list", commands.cmd_audience_list, ["ls"])
    _verb(aud, "get", commands.cmd_audience_get, ["show"])
    _verb(aud, "delete", commands.cmd_audience_delete, ["rm"])
    _verb(aud, "update", commands.cmd_audience_update)
    _verb(aud, "attributes", commands.cmd_audience_attributes)
    _verb(aud, "behaviors", commands.cmd_audience_behaviors)
    _verb(aud, "run", commands.cmd_audience_run)
    _verb(aud, "executions", commands.cmd_audience_executions)
    _verb(aud, "statistics", commands.cmd_audience_statistics, ["stats"])
    _verb(aud, "sample-values", commands.cmd_audience_sample_values)
    _verb(aud, "behavior-samples", commands.cmd_audience_behavior_samples)

    seg = _resource(cdp, "segments", ["segment"], "cdp segments <verb> [args...]")
    _verb(seg, "create", commands.cmd_segment_create)
    p = _verb(seg, "list", commands.cmd_segment_list, ["ls"])
    p.add_argument("--limit", type=_positive_int)
    p.add_argument("--offset", type=_non_negative_int)
    _verb(seg, "get", commands.cmd_segment_get, ["show"])
    _verb(seg, "update", commands.cmd_segment_update)
    _verb(seg, "delete", commands.cmd_segment_delete, ["rm"])
    _verb(seg, "folders", commands.cmd_segment_folders)
    _verb(seg, "statistics", commands.cmd_segment_statistics, ["stats"])
    _verb(seg, "query", commands.cmd_segment_query)
    _verb(seg, "sql", commands.cmd_segment_sql)
    _verb(seg, "query-status", commands.cmd_segment_query_status)
    _verb(seg, "kill-query", commands.cmd_segment_kill_query)
    p = _verb(seg, "customers", commands.cmd_segment_customers)
    p.add_argument("--limit", type=_positive_int)
    p.add_argument("--offset", type=_non_negative_int)
    p.add_argument("--fields")

    act = _resource(cdp, "activations", ["activation"], "cdp activations <verb> [args...]")
    _verb(act, "list", commands.cmd_activation_list, ["ls"], force=True)
    _verb(act, "list-by-audience", commands.cmd_activation_list_by_audience)
    _verb(act, "list-by-segment-folder", commands.cmd_activation_list_by_segment_folder)
    _verb(act, "list-by-parent-segment", commands.cmd_activation_list_by_parent_segment)
    _verb(act, "get", commands.cmd_activation_get, ["show"])
    _verb(act, "delete", commands.cmd_activation_delete, ["rm"])
    _verb(act, "execute", commands.cmd_activation_execute)
    _verb(act, "executions", commands.cmd_activation_executions)
    _verb(act, "create", commands.cmd_activation_create)
    _verb(act, "update", commands.cmd_activation_update)
    _verb(act, "update-status", commands.cmd_activation_update_status)
    _verb(act, "run-segment", commands.cmd_activation_run_segment)

    fld = _resource(cdp, "folders", ["folder"], "cdp folders <verb> [args...]")
    _verb(fld, "list", commands.cmd_folder_list, ["ls"])
    _verb(fld, "create", commands.cmd_folder_create)
    _verb(fld, "get", commands.cmd_folder_get, ["show"])
    _verb(fld, "create-entity", commands.cmd_folder_create_entity)
    _verb(fld, "get-entity", commands.cmd_folder_get_entity)
    _verb(fld, "get-entities", commands.cmd_folder_get_entities)
    _verb(fld, "update-entity", commands.cmd_folder_update_entity)
    _verb(fld, "delete-entity", commands.cmd_folder_delete_entity)

    tok = _resource(cdp, "tokens", ["token"], "cdp tokens <verb> [args...]")
    p = _verb(tok, "list", commands.cmd_token_list, ["ls"])
    p.add_argument("--limit", type=_positive_int)
    p.add_argument("--offset", type=_non_negative_int)
    p.add_argument("--type")
    p.add_argument("--status")
    _verb(tok, "get-entity", commands.cmd_token_get, ["get", "show"])
    _verb(tok, "update-entity", commands.cmd_token_update)
    _verb(tok, "delete-entity", commands.cmd_token_delete, ["rm"])

    fun = _resource(cdp, "funnels", ["funnel"], "cdp funnels <verb> [args...]")
    _verb(fun, "list", commands.cmd_funnel_list, ["ls"])
    _verb(fun, "get", commands.cmd_funnel_get, ["show"])
    _verb(fun, "delete", commands.cmd_funnel_delete, ["rm"])

    jrn = _resource(cdp, "journeys", ["journey"], "cdp journeys <verb> [args...]")
    _verb(jrn, "list", commands.cmd_journey_list, ["ls"])
    _verb(jrn, "get", commands.cmd_journey_get, ["show"])
    _verb(jrn, "create", commands.cmd_journey_create)
    _verb(jrn, "delete", commands.cmd_journey_delete, ["rm"])
    _verb(jrn, "pause", commands.cmd_journey_pause)
    _verb(jrn, "resume", commands.cmd_journey_resume)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

NO_TOKEN_COMMANDS = {"version", "config"}

MISSING_API_KEY_MESSAGE = (
    "API key is not set. Use one of:\n"
    "  tdcli config init\n"
    "  tdcli config set api_key <account_id/api_key>\n"
    "  export TD_API_KEY=<account_id/api_key>\n"
    "  tdcli --api-key <account_id/api_key> ..."
)


def _emit_cli_error(err, verbose):
    if isinstance(err, OperationError) and verbose:
        msg = err.verbose_str()
    else:
        msg = str(err)
    print(msg, file=sys.stderr)
    if isinstance(err, UsageError) and err.usage:
        print(f"Usage: tdcli {err.usage}", file=sys.stderr)


def _build_flags(settings, verbose):
    fmt = settings.get("format") or config.DEFAULT_FORMAT
    if fmt not in config.VALID_FORMATS:
        fmt = "table"
    return Flags(format=fmt, output=settings.get("output") or "", verbose=verbose)


def _check_api_key(api_key):
    if not api_key:
        raise ConfigError(MISSING_API_KEY_MESSAGE)
    config.validate_api_key(api_key)


def main():
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    verbose = False
    try:
        options, remaining_argv = _extract_global_flags(sys.argv[1:])
        verbose = options["verbose"]
        if verbose:
            config.HTTP_LOG_ENABLED = True

        if options["show_version"]:
            print(f"tdcli {config.VERSION}")
            sys.exit(0)
        if options["show_help"] or not remaining_argv:
            print(HELP_TEXT)
            sys.exit(0)

        settings = config.resolve_settings(
            api_key=options.get("api_key"),
            region=options.get("region"),
            fmt=options.get("format"),
            output=options.get("output"),
        )
        config.SETTINGS = settings
        config.API_KEY = settings["api_key"]
        config.REGION = settings["region"]

        parser = build_parser()
        ns = parser.parse_args(remaining_argv)
        ns.flags = _build_flags(settings, verbose)

        handler = getattr(ns, "func", None)
        if handler is None:
            raise UsageError("Missing subcommand", usage=getattr(ns, "usage", None))

        if ns.command not in NO_TOKEN_COMMANDS:
            _check_api_key(config.API_KEY)

        handler(ns)

    except CliError as e:
        _emit_cli_error(e, verbose)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
