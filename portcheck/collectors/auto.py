from __future__ import annotations
import logging
import platform
from typing import List

import psutil

from ..models import ConnectionRecord
from .generic import PsutilCollector
from .lsof import LsofCollector

log = logging.getLogger(__name__)

class AutoCollector:
    """psutil first; lsof once the OS refuses access to its socket tables."""

    name = "auto"

    def __init__(self, lsof_binary: str = "lsof"):
        self.primary = PsutilCollector()
        self.fallback = LsofCollector(lsof_binary)
        self.active = self.primary

    def _call(self, op: str, *args) -> List[ConnectionRecord]:
        if self.active is self.primary:
            try:
                return getattr(self.primary, op)(*args)
            except psutil.AccessDenied:
                log.debug("psutil denied socket table access on %s, using lsof", platform.system())
                self.active = self.fallback
        return getattr(self.fallback, op)(*args)

    def query_port(self, port: int) -> List[ConnectionRecord]:
        return self._call("query_port", port)

    def list_listening(self) -> List[ConnectionRecord]:
        return self._call("list_listening")

    def list_all(self) -> List[ConnectionRecord]:
        return self._call("list_all")
