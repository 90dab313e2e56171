from __future__ import annotations
import logging

from ..config import CFG
from .auto import AutoCollector
from .generic import PsutilCollector
from .lsof import LsofCollector

log = logging.getLogger(__name__)

def make_collector(cfg: CFG):
    if cfg.backend == "psutil":
        c = PsutilCollector()
    elif cfg.backend == "lsof":
        c = LsofCollector(cfg.lsof)
    else:
        c = AutoCollector(cfg.lsof)
    log.debug("collector backend: %s", c.name)
    return c

__all__ = ["AutoCollector", "LsofCollector", "PsutilCollector", "make_collector"]
