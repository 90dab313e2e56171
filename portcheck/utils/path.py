from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

DEFAULT_CONFIG = Path("~/.config/portcheck/config.yaml")

def to_abs_path(p: Optional[str | os.PathLike]) -> Optional[Path]:
    """Convert p to an absolute path.
    Sequence:
      1) Absolute: expanduser+resolve
      2) Relative to CWD
    """
    if not p:
        return None
    pp = Path(p).expanduser()
    if pp.is_absolute():
        return pp.resolve()
    return (Path.cwd() / pp).resolve()

def default_config_path() -> Optional[Path]:
    p = to_abs_path(DEFAULT_CONFIG)
    return p if p and p.is_file() else None
