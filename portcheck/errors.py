from __future__ import annotations

INSTALL_HINTS = {
    "macOS": "lsof ships with macOS; if missing: brew install lsof",
    "Debian/Ubuntu": "sudo apt-get install lsof",
    "Fedora/RHEL": "sudo dnf install lsof",
    "Arch": "sudo pacman -S lsof",
    "Alpine": "sudo apk add lsof",
}

class PortcheckError(Exception):
    exit_code = 1

class ToolUnavailable(PortcheckError):
    def __init__(self, tool: str, hints: dict[str, str] | None = None):
        self.tool = tool
        self.hints = dict(INSTALL_HINTS if hints is None else hints)
        super().__init__(f"'{tool}' is not installed or not on PATH")

    def hint_lines(self) -> list[str]:
        return [f"  {family}: {cmd}" for family, cmd in self.hints.items()]

class InvalidPort(PortcheckError):
    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid port number: '{value}' (must be 1-65535)")

class KillFailed(PortcheckError):
    def __init__(self, pid: int, reason: str):
        self.pid = pid
        self.reason = reason
        super().__init__(f"Failed to kill PID {pid}: {reason}")

class UnknownOption(PortcheckError):
    pass

class ConfigError(PortcheckError):
    pass
