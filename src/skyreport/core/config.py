"""Central configuration and constants for ``skyreport``."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import tomllib
from dataclasses import dataclass, field
from functools import cache
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any

from skyreport import logger
from skyreport.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

ENV_TOKEN = "GH_TOKEN"
ENV_LOG = "SKYREPORT_LOG"

_LOG_LEVELS: dict[str, int] = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

_SCHEMA_FILES: dict[str, str] = {
    "baseline": "baseline.schema.json",
    "raw-report": "raw_report.schema.json",
}


@dataclass(frozen=True, slots=True)
class Settings:
    """Everything a run needs to know about the outside world."""

    # --- source under test ---------------------------------------------- #
    source_repo: str = "https://github.com/skytable/skytable.git"
    org: str = "skytable"
    repo: str = "skytable"
    next_branch: str = "next"

    # --- results repository --------------------------------------------- #
    perf_repo: str = "perf"
    push_user: str = "glydr"
    data_dir: Path = Path()
    report_title: str = "Skyreport"
    commit_base_url: str = "https://github.com/skytable/skytable/commit"
    pr_base_url: str = "https://github.com/skytable/skytable/pull"
    report_base_url: str = "https://github.com/skytable/perf/blob/next/reports"
    api_url: str = "https://api.github.com"

    # --- build / run ----------------------------------------------------- #
    build_command: tuple[str, ...] = ("cargo", "build", "-p", "skyd", "-p", "sky-bench", "--release")
    release_dir: str = "target/release"
    server_binary: str = "skyd"
    server_args: tuple[str, ...] = ("--noart",)
    bench_binary: str = "sky-bench"
    workspace_root: Path | None = None

    # --- server readiness ----------------------------------------------- #
    server_host: str = "127.0.0.1"
    server_port: int = 2003
    ready_timeout: float = 10.0
    ready_interval: float = 0.25

    # --- timeouts (seconds) ---------------------------------------------- #
    clone_timeout: float = 900.0
    build_timeout: float = 3600.0
    bench_timeout: float = 1800.0
    stop_timeout: float = 10.0

    # --- benchmark parameters -------------------------------------------- #
    connections: int = 50
    queries: int = 1_000_000
    payload_size: int = 4

    # --- environment ----------------------------------------------------- #
    token: str | None = field(default=None, repr=False)
    log_level: str | None = None

    @property
    def preset_dir(self) -> Path:
        return self.data_dir / "preset"

    @property
    def results_dir(self) -> Path:
        return self.data_dir / "results"

    @property
    def reports_dir(self) -> Path:
        return self.data_dir / "reports"

    def require_token(self) -> str:
        if not self.token:
            msg = f"{ENV_TOKEN} is not set; it is required to push results (or pass --no-publish)"
            raise ConfigError(msg)
        return self.token


_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "str": (str,),
    "int": (int,),
    "float": (int, float),
    "Path": (str,),
    "Path | None": (str,),
    "tuple[str, ...]": (list,),
}

# Never read from configuration files.
_ENV_ONLY = frozenset({"token", "log_level"})


def _coerce(name: str, annotation: str, value: object) -> object:
    allowed = _FIELD_TYPES.get(annotation)
    if allowed is None or not isinstance(value, allowed) or isinstance(value, bool):
        msg = f"invalid value for {name!r}: {value!r}"
        raise ConfigError(msg)
    if annotation.startswith("Path"):
        return Path(str(value))
    if annotation == "float":
        return float(value)  # type: ignore[arg-type]
    if annotation == "tuple[str, ...]":
        items = list(value)  # type: ignore[call-overload]
        if not all(isinstance(item, str) for item in items):
            msg = f"invalid value for {name!r}: expected a list of strings"
            raise ConfigError(msg)
        return tuple(items)
    return value


def settings_from_mapping(data: Mapping[str, Any], *, base: Settings | None = None) -> Settings:
    """Apply *data* (a ``[tool.skyreport]`` table) on top of *base*."""
    fields = {f.name: str(f.type) for f in dataclasses.fields(Settings)}
    changes: dict[str, object] = {}
    for key, value in data.items():
        name = key.replace("-", "_")
        if name not in fields or name in _ENV_ONLY:
            logger.warning("ignoring unknown configuration key %r", key)
            continue
        changes[name] = _coerce(name, fields[name], value)
    return dataclasses.replace(base or Settings(), **changes)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"failed to parse {path}: {exc}"
        raise ConfigError(msg) from exc


def _config_table(path: Path) -> dict[str, Any]:
    data = _read_toml(path)
    if path.name == "pyproject.toml":
        table = data.get("tool", {}).get("skyreport", {})
    else:
        table = data
    if not isinstance(table, dict):
        msg = f"[tool.skyreport] in {path} must be a table"
        raise ConfigError(msg)
    return table


def find_config_file(cwd: Path) -> Path | None:
    """Return the first configuration file in *cwd* that mentions skyreport."""
    dedicated = cwd / "skyreport.toml"
    if dedicated.is_file():
        return dedicated
    pyproject = cwd / "pyproject.toml"
    if pyproject.is_file() and "skyreport" in _read_toml(pyproject).get("tool", {}):
        return pyproject
    return None


def load_settings(
    cwd: Path | None = None,
    *,
    config_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build settings from defaults, an optional config file and the environment."""
    cwd = cwd or Path.cwd()
    environ = os.environ if environ is None else environ

    path = config_file or find_config_file(cwd)
    settings = Settings(data_dir=cwd)
    if path is not None:
        logger.debug("loading configuration from %s", path)
        settings = settings_from_mapping(_config_table(path), base=settings)
        if not settings.data_dir.is_absolute():
            settings = dataclasses.replace(settings, data_dir=cwd / settings.data_dir)

    return dataclasses.replace(
        settings,
        token=environ.get(ENV_TOKEN) or None,
        log_level=environ.get(ENV_LOG) or None,
    )


def resolve_log_level(*, quiet: bool, verbose: bool, env_value: str | None) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    if not env_value:
        return logging.INFO
    level = _LOG_LEVELS.get(env_value.strip().lower())
    if level is None:
        logger.warning("unknown %s value %r; using info", ENV_LOG, env_value)
        return logging.INFO
    return level


def configure_logging(level: int) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)


@cache
def get_schema(name: str) -> dict[str, object]:
    """Load and cache one of the bundled JSON schemas."""
    try:
        filename = _SCHEMA_FILES[name]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema: {name!r}. Available schemas: {choices}"
        raise ValueError(msg) from exc
    return json.loads(resources.files("skyreport.data").joinpath(filename).read_text(encoding="utf-8"))


__all__ = [
    "ENV_LOG",
    "ENV_TOKEN",
    "LOG_FORMAT",
    "Settings",
    "configure_logging",
    "find_config_file",
    "get_schema",
    "load_settings",
    "resolve_log_level",
    "settings_from_mapping",
]
