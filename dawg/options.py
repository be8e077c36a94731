"""
Run options for dawg.

Options come from three layers, later layers winning: built-in defaults,
a JSON config file (``--config`` or ``./.dawg``) and the command line.
"""
from __future__ import annotations

import dataclasses
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .config import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_SOURCE, RCFILE
from .shared import ConfigParseError, get_logger
from .utils import parse_bool

logger = get_logger(__name__)

_BOOL_FIELDS = frozenset({"clear", "dev", "quiet"})
_TRISTATE_FIELDS = frozenset({"serve", "watch"})
_PATH_FIELDS = frozenset({"source", "output", "config", "template"})


@dataclass
class Options:
    source: str = DEFAULT_SOURCE
    output: str | None = None
    config: str | None = None
    clear: bool = False
    watch: bool | None = None
    serve: bool | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    dev: bool = False
    quiet: bool = False
    template: str | None = None
    styles: list[str] | None = None

    @property
    def should_serve(self) -> bool:
        """Serve explicitly requested, or implied because there is no output."""
        if self.serve is None:
            return self.output is None
        return bool(self.serve)

    @property
    def should_watch(self) -> bool:
        """Watch explicitly requested, or implied because the site is served."""
        if self.watch is None:
            return self.should_serve
        return bool(self.watch)

    @property
    def should_convert(self) -> bool:
        return self.output is not None

    def merged(self, values: Mapping[str, Any]) -> "Options":
        """
        Return a copy with ``values`` applied on top.

        ``None`` values are skipped so unset command-line flags do not clobber
        config-file values. Unknown keys are ignored with a warning.
        """
        known = {f.name for f in dataclasses.fields(self)}
        updates: dict[str, Any] = {}
        for key, value in values.items():
            if key not in known:
                logger.warning("Ignoring unknown option %r", key)
                continue
            if value is None:
                continue
            updates[key] = _coerce(key, value)
        return dataclasses.replace(self, **updates)


def _coerce(key: str, value: Any) -> Any:
    if key in _BOOL_FIELDS:
        return parse_bool(value)
    if key in _TRISTATE_FIELDS:
        return parse_bool(value, default=True)
    if key == "port":
        try:
            port = int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigParseError(f"Invalid port: {value!r}") from exc
        if not 0 <= port <= 65535:
            raise ConfigParseError(f"Port out of range: {port}")
        return port
    if key == "styles":
        if isinstance(value, (str, os.PathLike)):
            return [os.fspath(value)]
        if not isinstance(value, (list, tuple)):
            raise ConfigParseError(f"Invalid styles value: {value!r}")
        return [os.fspath(item) for item in value]
    if key in _PATH_FIELDS or key == "host":
        return os.fspath(value) if isinstance(value, os.PathLike) else str(value)
    return value


def load_config_file(path: str | os.PathLike[str]) -> dict[str, Any]:
    """
    Read a ``.dawg`` JSON config file.

    Raises:
        ConfigParseError: the file cannot be read, is not valid JSON, or does
            not hold a JSON object.
    """
    cfg_path = Path(path)
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigParseError(f'Could not read config file "{cfg_path}": {exc}', path=cfg_path) from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(
            f'Invalid JSON in config file "{cfg_path}" (line {exc.lineno}, column {exc.colno}): {exc.msg}',
            path=cfg_path,
        ) from exc
    if not isinstance(data, dict):
        raise ConfigParseError(f'Config file "{cfg_path}" must contain a JSON object', path=cfg_path)
    logger.debug("Loaded config file %s", cfg_path)
    return data


def resolve_options(
    cli_values: Mapping[str, Any] | None = None,
    *,
    cwd: str | os.PathLike[str] | None = None,
) -> Options:
    """
    Build the effective options: defaults, then config file, then ``cli_values``.

    The config file is ``cli_values["config"]`` when given, else ``.dawg`` in
    ``cwd`` when present. A missing explicit config file is an error; a
    missing implicit one is not.
    """
    values = dict(cli_values or {})
    base = Path(cwd) if cwd is not None else Path.cwd()
    options = Options()

    explicit = values.get("config")
    if explicit:
        options = options.merged(load_config_file(explicit))
    else:
        rcfile = base / RCFILE
        if rcfile.is_file():
            options = options.merged(load_config_file(rcfile))
            options = dataclasses.replace(options, config=str(rcfile))

    return options.merged(values)
