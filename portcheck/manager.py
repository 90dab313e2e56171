from __future__ import annotations
import logging
import sys
from typing import Callable, List, Optional, Tuple

import psutil

from .collectors import make_collector
from .config import CFG
from .errors import InvalidPort, KillFailed
from .models import PORT_MAX, PORT_MIN, ConnectionRecord, PortQuery, ProcessSet
from .utils.table import format_table
from .utils.tty import confirm as tty_confirm

log = logging.getLogger(__name__)

PROG = "portcheck"

HELP = """\
{prog} v{version}
Check and kill processes by port

Usage:
  {prog} <port>              Show the process using <port>
  {prog} <port> --kill       Kill the process(es) using <port> (asks first)
  {prog} <port> -k           Kill the process(es) using <port> without asking
  {prog} --list, -l          List listening ports
  {prog} --list --all, -l -a List all open connections
  {prog} --help, -h          Show this help message
  {prog} --version, -v       Show version information
"""

def validate_port(value) -> PortQuery:
    s = "" if value is None else str(value).strip()
    if not (s.isascii() and s.isdigit()):
        raise InvalidPort(value)
    port = int(s)
    if not PORT_MIN <= port <= PORT_MAX:
        raise InvalidPort(value)
    return port

def kill_pid(pid: int, sig: int) -> None:
    """Deliver sig to pid without waiting for the process to exit."""
    try:
        psutil.Process(pid).send_signal(sig)
    except psutil.NoSuchProcess:
        raise KillFailed(pid, "no such process") from None
    except psutil.AccessDenied:
        raise KillFailed(pid, "permission denied") from None
    except OSError as e:
        raise KillFailed(pid, e.strerror or str(e)) from e

class PortManager:
    def __init__(self, cfg: CFG, collector=None,
                 confirm: Callable[[str], bool] = tty_confirm,
                 kill: Callable[[int, int], None] = kill_pid):
        self.cfg = cfg
        self.collector = collector if collector is not None else make_collector(cfg)
        self.confirm = confirm
        self.kill = kill

    def show_help(self, file=None) -> int:
        print(HELP.format(prog=PROG, version=self.cfg.display_version), end="", file=file or sys.stdout)
        return 0

    def show_version(self) -> int:
        print(f"{PROG} v{self.cfg.display_version}")
        return 0

    def query_port(self, port: PortQuery) -> List[ConnectionRecord]:
        records = self.collector.query_port(port)
        log.debug("port %d: %d record(s)", port, len(records))
        return records

    def show_port(self, port: PortQuery) -> int:
        records = self.query_port(port)
        if not records:
            print(f"No process found on port {port}.")
            return 0
        print(f"Processes on port {port}:")
        self._print_records(records)
        return 0

    def kill_port(self, port: PortQuery, force: bool = False) -> int:
        records = self.query_port(port)
        if not records:
            print(f"No process found on port {port}.")
            return 0

        pids = ProcessSet(records)
        print(f"Processes on port {port}:")
        self._print_records(records)

        if not force:
            prompt = f"Kill {len(pids)} process(es) on port {port}? [y/N] "
            try:
                ok = self.confirm(prompt)
            except OSError as e:
                log.debug("terminal unavailable: %s", e)
                print("Error: cannot read confirmation from the terminal; use -k to kill without asking.",
                      file=sys.stderr)
                return 1
            if not ok:
                print("Aborted.")
                return 0

        names = {r.pid: r.command for r in records}
        killed, failed = self._kill_all(pids, names)
        if failed:
            print(f"Killed {len(killed)} process(es), {len(failed)} failed.", file=sys.stderr)
            return 1
        print(f"Killed {len(killed)} process(es).")
        return 0

    def _kill_all(self, pids: ProcessSet, names: dict) -> Tuple[List[int], List[int]]:
        sig = self.cfg.signum
        killed: List[int] = []
        failed: List[int] = []
        for pid in pids:
            try:
                self.kill(pid, sig)
            except KillFailed as e:
                print(str(e), file=sys.stderr)
                failed.append(pid)
                continue
            print(f"Killed PID {pid} ({names.get(pid, '?')})")
            killed.append(pid)
        return killed, failed

    def list_ports(self, all: bool = False) -> int:
        if all:
            rows = sorted({(r.command, str(r.pid), r.user, r.address)
                           for r in self.collector.list_all()})
            if not rows:
                print("No open connections found.")
                return 0
            self._print_table(("COMMAND", "PID", "USER", "ADDRESS"), rows)
            return 0

        listening = set()
        for r in self.collector.list_listening():
            port: Optional[int] = r.port
            if port is None:
                log.debug("no numeric port in %r, skipped", r.address)
                continue
            listening.add((port, r.command, r.pid, r.user))
        if not listening:
            print("No listening ports found.")
            return 0
        self._print_table(("PORT", "COMMAND", "PID", "USER"), sorted(listening))
        return 0

    def _print_records(self, records: List[ConnectionRecord]) -> None:
        rows = []
        for r in records:
            row = (r.command, r.pid, r.user, r.fd, r.address + (f" ({r.state})" if r.state else ""))
            if row not in rows:
                rows.append(row)
        self._print_table(("COMMAND", "PID", "USER", "FD", "ADDRESS"), rows)

    @staticmethod
    def _print_table(headers, rows) -> None:
        for line in format_table(headers, rows):
            print(line)
