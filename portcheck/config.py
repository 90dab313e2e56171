from __future__ import annotations
from dataclasses import dataclass, fields
import json
import logging
import os
import signal
from pathlib import Path
from typing import Mapping, Optional

import yaml

from . import __version__
from .errors import ConfigError
from .utils.path import to_abs_path, default_config_path

log = logging.getLogger(__name__)

BACKENDS = ("auto", "psutil", "lsof")

ENV_VARS = {
    "version": "PORTCHECK_VERSION",
    "backend": "PORTCHECK_BACKEND",
    "lsof": "PORTCHECK_LSOF",
    "signal": "PORTCHECK_SIGNAL",
    "log_level": "PORTCHECK_LOG_LEVEL",
}
CONFIG_ENV = "PORTCHECK_CONFIG"

@dataclass
class CFG:
    version: Optional[str] = None
    backend: str = "auto"
    lsof: str = "lsof"
    signal: str = "TERM"
    log_level: str = "WARNING"

    @property
    def display_version(self) -> str:
        return self.version or __version__

    @property
    def signum(self) -> int:
        return resolve_signal(self.signal)

    @property
    def level(self) -> int:
        return resolve_level(self.log_level)

def resolve_level(name: str) -> int:
    lvl = logging.getLevelName(str(name).strip().upper())
    if not isinstance(lvl, int):
        raise ConfigError(f"unknown log level: {name}")
    return lvl

def resolve_signal(name: str | int) -> int:
    s = str(name).strip().upper()
    if s.isdigit():
        return int(s)
    if not s.startswith("SIG"):
        s = "SIG" + s
    try:
        return int(getattr(signal.Signals, s))
    except AttributeError:
        raise ConfigError(f"unknown signal: {name}") from None

def load_file(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"config not found: {path}")
    try:
        txt = path.read_text(encoding="utf-8")
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(txt)
        else:
            data = json.loads(txt)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must be a mapping")
    return data

def apply(cfg: CFG, values: Mapping[str, object], source: str) -> CFG:
    known = {f.name for f in fields(CFG)}
    for k, v in values.items():
        if k not in known:
            raise ConfigError(f"unknown config key '{k}' in {source}")
        if v is None:
            continue
        # unquoted YAML scalars arrive typed
        if isinstance(v, int) and not isinstance(v, bool) and k == "signal":
            v = str(v)
        if not isinstance(v, str):
            raise ConfigError(f"config key '{k}' in {source} must be a string, quote it")
        setattr(cfg, k, v)
    return cfg

def validate(cfg: CFG) -> CFG:
    cfg.backend = cfg.backend.strip().lower()
    if cfg.backend not in BACKENDS:
        raise ConfigError(f"backend must be one of {', '.join(BACKENDS)}, got '{cfg.backend}'")
    resolve_signal(cfg.signal)
    resolve_level(cfg.log_level)
    return cfg

def load_cfg(environ: Optional[Mapping[str, str]] = None) -> CFG:
    env = os.environ if environ is None else environ
    cfg = CFG()

    path = to_abs_path(env.get(CONFIG_ENV)) if env.get(CONFIG_ENV) else default_config_path()
    if path:
        log.debug("loading config from %s", path)
        apply(cfg, load_file(path), str(path))

    overrides = {k: env[var] for k, var in ENV_VARS.items() if env.get(var)}
    if overrides:
        log.debug("environment overrides: %s", sorted(overrides))
        apply(cfg, overrides, "environment")
    return validate(cfg)
