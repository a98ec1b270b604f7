"""
Config loader: YAML file + environment -> frozen dataclass tree.

Precedence (lowest first): built-in defaults, config.yaml, environment
variables, command-line overrides (see ``with_overrides``).

Environment variables:
  SYMBOL, BENCHMARK_SYMBOL (or MASI_SYMBOL), START, END, OUT, DEBUG
  APCA_API_KEY_ID, APCA_API_SECRET_KEY   (secrets; never read from YAML)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path
from typing import Any, Mapping

import jsonschema
import yaml

logger = logging.getLogger("barfeat.config")

DEFAULT_CONFIG_PATH = Path("config.yaml")
SCHEMA_PATH = Path(__file__).resolve().parent / "export_config.schema.json"

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(Exception):
    """Raised when config loading or validation fails."""


@dataclass(frozen=True)
class DataConfig:
    source: str = "yahoo"
    history_bars: int = 5000
    file_dir: str = "data/bars"
    api_key: str = ""
    api_secret: str = ""


@dataclass(frozen=True)
class LoggingConfig:
    structured_events: bool = True


@dataclass(frozen=True)
class AppConfig:
    symbol: str = "SPY"
    benchmark_symbol: str = "^GSPC"
    timeframe: str = "1d"
    start: date | None = None
    end: date | None = None
    output: str = "bar_features.csv"
    debug: bool = False
    data: DataConfig = field(default_factory=DataConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def parse_date(value: Any, name: str) -> date | None:
    """Accept None, a date, or an ISO string (YYYY-MM-DD, optionally with a time part)."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ConfigError(f"Invalid {name} date {value!r}; expected YYYY-MM-DD") from exc


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file is not valid YAML: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(raw).__name__}")
    # YAML turns bare 2024-01-31 into a date; the schema sees strings
    for key in ("start", "end"):
        if isinstance(raw.get(key), date):
            raw[key] = raw[key].isoformat()
    return raw


def _validate_schema(data: dict[str, Any], schema_path: Path = SCHEMA_PATH) -> None:
    with open(schema_path) as f:
        schema = json.load(f)
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as exc:
        where = ".".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ConfigError(f"Config validation failed at {where}: {exc.message}") from exc


def load_config(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """
    Load configuration.

    An explicit *path* must exist. With no path, ``config.yaml`` in the
    working directory is used when present; otherwise only defaults and the
    environment apply.
    """
    env = os.environ if environ is None else environ

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        raw = _read_yaml(config_path)
    elif DEFAULT_CONFIG_PATH.exists():
        raw = _read_yaml(DEFAULT_CONFIG_PATH)
    else:
        logger.debug("No %s found; using defaults and environment", DEFAULT_CONFIG_PATH)
        raw = {}

    _validate_schema(raw)

    defaults = AppConfig()
    data_raw = raw.get("data", {})
    data_cfg = DataConfig(
        source=data_raw.get("source", defaults.data.source),
        history_bars=int(data_raw.get("history_bars", defaults.data.history_bars)),
        file_dir=str(data_raw.get("file_dir", defaults.data.file_dir)),
        api_key=env.get("APCA_API_KEY_ID", ""),
        api_secret=env.get("APCA_API_SECRET_KEY", ""),
    )

    log_raw = raw.get("logging", {})
    log_cfg = LoggingConfig(
        structured_events=bool(log_raw.get("structured_events", defaults.logging.structured_events)),
    )

    benchmark = env.get("BENCHMARK_SYMBOL") or env.get("MASI_SYMBOL") or raw.get("benchmark_symbol", defaults.benchmark_symbol)
    debug = parse_bool(env["DEBUG"]) if "DEBUG" in env else bool(raw.get("debug", defaults.debug))

    return AppConfig(
        symbol=env.get("SYMBOL") or raw.get("symbol", defaults.symbol),
        benchmark_symbol=benchmark,
        timeframe=raw.get("timeframe", defaults.timeframe),
        start=parse_date(env.get("START") or raw.get("start"), "start"),
        end=parse_date(env.get("END") or raw.get("end"), "end"),
        output=env.get("OUT") or raw.get("output", defaults.output),
        debug=debug,
        data=data_cfg,
        logging=log_cfg,
    )


def with_overrides(
    cfg: AppConfig,
    *,
    symbol: str | None = None,
    benchmark_symbol: str | None = None,
    start: str | None = None,
    end: str | None = None,
    output: str | None = None,
    source: str | None = None,
    debug: bool | None = None,
) -> AppConfig:
    """Apply command-line overrides; None means "not given"."""
    changes: dict[str, Any] = {}
    if symbol:
        changes["symbol"] = symbol
    if benchmark_symbol:
        changes["benchmark_symbol"] = benchmark_symbol
    if start:
        changes["start"] = parse_date(start, "start")
    if end:
        changes["end"] = parse_date(end, "end")
    if output:
        changes["output"] = output
    if debug:
        changes["debug"] = True
    if source:
        changes["data"] = replace(cfg.data, source=source)
    cfg = replace(cfg, **changes)
    if cfg.start and cfg.end and cfg.start > cfg.end:
        raise ConfigError(f"start {cfg.start} is after end {cfg.end}")
    return cfg
