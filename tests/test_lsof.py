import subprocess

import pytest

from portcheck.collectors import lsof
from portcheck.collectors.lsof import LsofCollector, parse, parse_line
from portcheck.errors import ToolUnavailable

SAMPLE = """\
COMMAND   PID  USER   FD   TYPE             DEVICE SIZE/OFF NODE NAME
node      111 alice   23u  IPv4 0x1a2b3c4d5e6f7a80      0t0  TCP *:8080 (LISTEN)
node      111 alice   24u  IPv6 0x1a2b3c4d5e6f7a81      0t0  TCP [::1]:8080 (LISTEN)
python    222   bob    5u  IPv4 0x1a2b3c4d5e6f7a82      0t0  TCP 127.0.0.1:52000->127.0.0.1:8080 (ESTABLISHED)
dnsmasq   333  root    4u  IPv4 0x1a2b3c4d5e6f7a83      0t0  UDP *:53
"""

def test_parse_rows():
    rows = parse(SAMPLE)
    assert len(rows) == 4
    first = rows[0]
    assert (first.command, first.pid, first.user, first.fd) == ("node", 111, "alice", "23u")
    assert first.address == "*:8080"
    assert first.state == "LISTEN"
    assert first.listening
    assert first.port == 8080

def test_parse_connected_row():
    row = parse(SAMPLE)[2]
    assert row.local == "127.0.0.1:52000"
    assert row.remote == "127.0.0.1:8080"
    assert row.state == "ESTABLISHED"
    assert row.port == 52000
    assert not row.listening

def test_parse_row_without_state():
    row = parse(SAMPLE)[3]
    assert row.address == "*:53"
    assert row.state == ""

@pytest.mark.parametrize("line", ["", "COMMAND PID USER FD TYPE DEVICE SIZE/OFF NODE NAME",
                                  "node abc alice 23u IPv4 0x1 0t0 TCP *:80", "too short row"])
def test_parse_line_rejects(line):
    assert parse_line(line) is None

class FakeRun:
    def __init__(self, stdout="", returncode=0):
        self.stdout = stdout
        self.returncode = returncode
        self.cmds = []

    def __call__(self, cmd, **kw):
        self.cmds.append(cmd)
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.stdout, stderr="")

@pytest.fixture
def fake_run(monkeypatch):
    run = FakeRun(SAMPLE)
    monkeypatch.setattr(lsof.shutil, "which", lambda name: "/usr/bin/" + name)
    monkeypatch.setattr(lsof.subprocess, "run", run)
    return run

def test_missing_binary(monkeypatch):
    monkeypatch.setattr(lsof.shutil, "which", lambda name: None)
    with pytest.raises(ToolUnavailable) as ei:
        LsofCollector().query_port(80)
    assert ei.value.tool == "lsof"
    assert any("apt-get" in line for line in ei.value.hint_lines())

def test_query_port_command(fake_run):
    rows = LsofCollector().query_port(8080)
    assert fake_run.cmds == [["/usr/bin/lsof", "-nP", "-i", ":8080"]]
    assert len(rows) == 4

def test_list_listening_filters_state(fake_run):
    rows = LsofCollector().list_listening()
    assert fake_run.cmds[0][2:] == ["-iTCP", "-sTCP:LISTEN"]
    assert {r.pid for r in rows} == {111}

def test_nothing_found(fake_run):
    fake_run.stdout = ""
    fake_run.returncode = 1
    assert LsofCollector().list_all() == []
