"""
tdcli shared configuration, constants, and module-level state.

Settings resolve in this order (highest wins): command-line flags,
TD_* environment variables, TOML config files, built-in defaults.
"""

import os
import tempfile

import tomli
import tomli_w

from tdcli.exceptions import ConfigError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.3.0"

CONFIG_FILENAME = ".tdcli.toml"
CONFIG_KEYS = ("api_key", "region", "format", "output")
VALID_REGIONS = ("us", "eu", "tokyo", "ap02")
VALID_FORMATS = ("table", "json", "csv")
DEFAULT_REGION = "us"
DEFAULT_FORMAT = "table"

ENDPOINTS = {
    "us": {
        "api": "https://api.treasuredata.com",
        "cdp": "https://api-cdp.us01.treasuredata.com",
        "workflow": "https://api-workflow.us01.treasuredata.com",
    },
    "eu": {
        "api": "https://api.eu01.treasuredata.com",
        "cdp": "https://api-cdp.eu01.treasuredata.com",
        "workflow": "https://api-workflow.eu01.treasuredata.com",
    },
    "tokyo": {
        "api": "https://api.treasuredata.co.jp",
        "cdp": "https://api-cdp.treasuredata.co.jp",
        "workflow": "https://api-workflow.treasuredata.co.jp",
    },
    "ap02": {
        "api": "https://api.ap02.treasuredata.com",
        "cdp": "https://api-cdp.ap02.treasuredata.com",
        "workflow": "https://api-workflow.ap02.treasuredata.com",
    },
}


# ---------------------------------------------------------------------------
# Environment helpers
# ---------------------------------------------------------------------------


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(key, default):
    """Parse float env values with fallback."""
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Config files
# ---------------------------------------------------------------------------


def home_config_path():
    return os.path.join(os.path.expanduser("~"), ".tdcli", CONFIG_FILENAME)


def local_config_paths():
    """Project-level config candidates, first existing one wins."""
    cwd = os.getcwd()
    return [os.path.join(cwd, "tdcli.toml"), os.path.join(cwd, CONFIG_FILENAME)]


def config_search_paths():
    """All config locations in priority order (highest first)."""
    return local_config_paths() + [home_config_path()]


def load_toml(path):
    """Read one TOML config file. A missing file yields an empty dict."""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "rb") as f:
            data = tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e.strerror or e}") from e
    return {k: v for k, v in data.items() if k in CONFIG_KEYS and isinstance(v, str)}


def load_file_config():
    """Merge the home config with the first existing project config."""
    merged = dict(load_toml(home_config_path()))
    for path in local_config_paths():
        if os.path.exists(path):
            merged.update(load_toml(path))
            break
    return merged


def save_config_value(path, key, value):
    """Set one key in a TOML config file, keeping the others."""
    if key not in CONFIG_KEYS:
        raise ConfigError(f"Unknown config key: {key}. Valid keys: {', '.join(CONFIG_KEYS)}")
    data = load_toml(path)
    data[key] = value
    write_config(path, data)


def write_config(path, data):
    """Write a TOML config file (atomic write-then-rename, owner-only)."""
    cfg_dir = os.path.dirname(path) or "."
    try:
        os.makedirs(cfg_dir, mode=0o700, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=cfg_dir, prefix=".tdcli_tmp_")
    except OSError as e:
        raise ConfigError(f"Cannot write config file {path}: {e.strerror or e}") from e
    try:
        with os.fdopen(fd, "wb") as f:
            tomli_w.dump(data, f)
        os.replace(tmp_path, path)
    except OSError as e:
        try:
            os.remove(tmp_path)
        except OSError:
            pass
        raise ConfigError(f"Cannot write config file {path}: {e.strerror or e}") from e
    try:
        os.chmod(path, 0o600)
    except (OSError, NotImplementedError):
        pass


# ---------------------------------------------------------------------------
# Validation and resolution
# ---------------------------------------------------------------------------


def validate_api_key(key):
    """API keys look like ``account_id/api_key``."""
    parts = key.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ConfigError("Invalid API key format. Expected format: account_id/api_key")
    return key


def validate_region(region):
    if region not in VALID_REGIONS:
        raise ConfigError(f"Invalid region: {region}. Valid regions: {', '.join(VALID_REGIONS)}")
    return region


def validate_format(fmt):
    if fmt not in VALID_FORMATS:
        raise ConfigError(f"Invalid format: {fmt}. Valid formats: {', '.join(VALID_FORMATS)}")
    return fmt


def mask_api_key(key):
    """Show only the first and last 4 chars of an API key."""
    if not key:
        return "(not set)"
    if len(key) <= 8:
        return "***"
    return key[:4] + "***" + key[-4:]


def endpoints_for(region):
    """Return the api/cdp/workflow base URLs for *region*."""
    validate_region(region)
    return ENDPOINTS[region]


def resolve_settings(api_key=None, region=None, fmt=None, output=None):
    """Merge flag values over env, config files and defaults.

    Flag arguments that are None (not given) fall through to lower layers.
    """
    settings = {"api_key": "", "region": DEFAULT_REGION, "format": DEFAULT_FORMAT, "output": ""}
    settings.update(load_file_config())
    env_map = {
        "api_key": "TD_API_KEY",
        "region": "TD_REGION",
        "format": "TD_FORMAT",
        "output": "TD_OUTPUT",
    }
    for key, env_key in env_map.items():
        value = os.environ.get(env_key)
        if value:
            settings[key] = value
    flags = {"api_key": api_key, "region": region, "format": fmt, "output": output}
    for key, value in flags.items():
        if value is not None:
            settings[key] = value
    return settings


# ---------------------------------------------------------------------------
# HTTP tuning (env only)
# ---------------------------------------------------------------------------

HTTP_TIMEOUT_SECONDS = _env_int("TD_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RETRIES = _env_int("TD_HTTP_MAX_RETRIES", 2)
HTTP_RETRY_BASE_SECONDS = _env_float("TD_HTTP_RETRY_BASE_SECONDS", 1.0)
HTTP_MAX_RESPONSE_BYTES = _env_int("TD_HTTP_MAX_RESPONSE_BYTES", 10_000_000)
HTTP_LOG_ENABLED = _env_bool("TD_HTTP_LOG", False)
HTTP_LOG_SAMPLE_RATE = min(1.0, max(0.0, _env_float("TD_HTTP_LOG_SAMPLE_RATE", 1.0)))

# ---------------------------------------------------------------------------
# Query jobs
# ---------------------------------------------------------------------------

QUERY_ENGINES = ("trino", "hive", "presto")
DEFAULT_QUERY_ENGINE = "trino"
QUERY_JOB_TYPES = frozenset(QUERY_ENGINES)
JOB_WAIT_TIMEOUT_SECONDS = _env_int("TD_TIMEOUT", 300)
JOB_POLL_SECONDS = 2


def resolve_query_engine(engine=None):
    """--engine flag, then TD_QUERY_ENGINE, then trino."""
    value = (engine or os.environ.get("TD_QUERY_ENGINE") or DEFAULT_QUERY_ENGINE).lower()
    if value not in QUERY_ENGINES:
        raise ConfigError(
            f"Invalid query engine: {value}. Valid engines: {', '.join(QUERY_ENGINES)}"
        )
    return value

# ---------------------------------------------------------------------------
# Runtime state (set by cli.main)
# ---------------------------------------------------------------------------

API_KEY = ""
REGION = DEFAULT_REGION
SETTINGS = {}
