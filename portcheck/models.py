from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from .utils.net import addr_port

PORT_MIN = 1
PORT_MAX = 65535

# validated by manager.validate_port
PortQuery = int

@dataclass(frozen=True)
class ConnectionRecord:
    command: str
    pid: int
    user: str = "?"
    fd: str = "?"
    address: str = ""
    state: str = ""  # 'LISTEN', 'ESTABLISHED', '' if unknown

    @property
    def local(self) -> str:
        return self.address.split("->", 1)[0]

    @property
    def remote(self) -> str:
        parts = self.address.split("->", 1)
        return parts[1] if len(parts) == 2 else ""

    @property
    def port(self) -> int | None:
        """Port of the local endpoint, None if not numeric."""
        return addr_port(self.local)

    @property
    def listening(self) -> bool:
        return "LISTEN" in self.state.upper()

class ProcessSet(tuple):
    """Sorted, duplicate-free pids taken from connection records."""

    def __new__(cls, records: Iterable[ConnectionRecord]):
        return super().__new__(cls, sorted({r.pid for r in records}))
