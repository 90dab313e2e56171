from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from .config import CFG, ENV_VARS, load_cfg
from .errors import PortcheckError, ToolUnavailable, UnknownOption
from .manager import PROG, PortManager, validate_port

log = logging.getLogger(__name__)

class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise UnknownOption(message)

def build_parser() -> argparse.ArgumentParser:
    ap = _Parser(prog=PROG, add_help=False, allow_abbrev=False,
                 description='Check and kill processes by port')
    ap.add_argument('target', nargs='?', help='port number, or "help" / "version"')
    ap.add_argument('--kill', action='store_true', help='kill the owning process(es) after confirmation')
    ap.add_argument('-k', dest='force', action='store_true', help='kill without confirmation')
    ap.add_argument('-l', '--list', action='store_true', help='list listening ports')
    ap.add_argument('-a', '--all', action='store_true', help='with --list: every open connection')
    ap.add_argument('-h', '--help', action='store_true')
    ap.add_argument('-v', '--version', action='store_true')
    return ap

def setup_logging(level: int) -> None:
    logging.basicConfig(level=level, stream=sys.stderr,
                        format='[%(levelname)s] %(name)s: %(message)s')

def static_cfg() -> CFG:
    """Defaults plus the version override; never fails on a broken config."""
    return CFG(version=os.environ.get(ENV_VARS["version"]) or None)

def usage_error(e: UnknownOption, pm: PortManager) -> int:
    log.debug("usage error: %s", e)
    pm.show_help(file=sys.stderr)
    return e.exit_code

def run(args: argparse.Namespace, pm: PortManager) -> int:
    if args.list:
        if args.target is not None or args.kill or args.force:
            raise UnknownOption('--list does not take a port')
        return pm.list_ports(all=args.all)
    if args.target is None or args.all:
        raise UnknownOption('missing port')
    port = validate_port(args.target)
    if args.kill or args.force:
        return pm.kill_port(port, force=args.force)
    return pm.show_port(port)

def main(argv: Optional[Sequence[str]] = None, collector=None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        if not argv:
            raise UnknownOption('no arguments')
        args = build_parser().parse_args(argv)
    except UnknownOption as e:
        return usage_error(e, PortManager(static_cfg(), collector=collector))
    if args.help or args.target == 'help':
        return PortManager(static_cfg(), collector=collector).show_help()
    if args.version or args.target == 'version':
        return PortManager(static_cfg(), collector=collector).show_version()

    try:
        cfg = load_cfg()
    except PortcheckError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    setup_logging(cfg.level)

    pm = PortManager(cfg, collector=collector)
    try:
        return run(args, pm)
    except UnknownOption as e:
        return usage_error(e, pm)
    except ToolUnavailable as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Install it with:", file=sys.stderr)
        for line in e.hint_lines():
            print(line, file=sys.stderr)
        return e.exit_code
    except PortcheckError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return 130

if __name__ == '__main__':
    sys.exit(main())
