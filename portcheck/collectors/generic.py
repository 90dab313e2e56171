from __future__ import annotations
import logging
from typing import Dict, List, Optional, Tuple

import psutil

from ..models import ConnectionRecord
from ..utils.net import addr_port, format_addr

log = logging.getLogger(__name__)

def _addr(a) -> Optional[Tuple[str, int]]:
    if not a:
        return None
    ip = a.ip if hasattr(a, 'ip') else a[0]
    port = a.port if hasattr(a, 'port') else a[1]
    return ip, port

def proc_info(pid: int, cache: Dict[int, Tuple[str, str]]) -> Tuple[str, str]:
    if pid in cache:
        return cache[pid]
    name = "?"; user = "?"
    try:
        p = psutil.Process(pid)
        name = p.name() or "?"
        try:
            user = p.username()
        except (psutil.AccessDenied, KeyError):
            user = "?"
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        pass
    cache[pid] = (name, user)
    return cache[pid]

def to_record(c, cache: Dict[int, Tuple[str, str]]) -> Optional[ConnectionRecord]:
    l = _addr(c.laddr)
    if not c.pid or not l:
        return None
    name, user = proc_info(c.pid, cache)
    address = format_addr(*l)
    r = _addr(c.raddr)
    if r:
        address += "->" + format_addr(*r)
    state = "" if c.status == psutil.CONN_NONE else str(c.status)
    fd = str(c.fd) if c.fd is not None and c.fd >= 0 else "?"
    return ConnectionRecord(command=name, pid=c.pid, user=user, fd=fd, address=address, state=state)

class PsutilCollector:
    """Socket enumeration through the OS socket tables via psutil."""

    name = "psutil"

    def _collect(self, kind: str = "inet") -> List[ConnectionRecord]:
        cache: Dict[int, Tuple[str, str]] = {}
        records: List[ConnectionRecord] = []
        for c in psutil.net_connections(kind=kind):
            rec = to_record(c, cache)
            if rec is None:
                continue
            records.append(rec)
        log.debug("psutil: %d sockets with an owning process", len(records))
        return records

    def query_port(self, port: int) -> List[ConnectionRecord]:
        return [r for r in self._collect() if port in (r.port, addr_port(r.remote))]

    def list_listening(self) -> List[ConnectionRecord]:
        return [r for r in self._collect(kind="tcp") if r.listening]

    def list_all(self) -> List[ConnectionRecord]:
        return self._collect()
