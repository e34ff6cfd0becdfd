#!/usr/bin/env python3
"""
cli.py
Command-line interface for tm-mnt.
Parses arguments, loads config, checks required tools, and invokes the orchestrator.
With no arguments it mounts the configured Time Machine share, image and snapshots.
"""
from __future__ import annotations
import argparse, sys
from .config import DEFAULT_CONFIG_PATH, find_config, load_config
from .orchestrator import list_plan, mount_timemachine, print_plan
from .preflight import require_tools
from .types import MountError, MountReport


def print_err(msg: str) -> None:
    print(f"Error: {msg}", file=sys.stderr)


def report_advisories(report: MountReport) -> None:
    failed = report.advisories
    if failed:
        names = ", ".join(f"{s.step}:{s.target or '-'}" for s in failed)
        print(f"[warn] {len(failed)} step(s) did not succeed: {names}", file=sys.stderr)


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(
        prog="tm-mnt",
        description="tm-mnt: mount a network Time Machine backup and its snapshots read-only",
        epilog="\nMust be run as root on macOS.",
    )
    ap.add_argument(
        "--config",
        default=None,
        help=f"path to tm-mnt.toml (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    ap.add_argument("--dry-run", action="store_true", help="show mount commands without executing")
    ap.add_argument("--list", action="store_true", help="show discovered share, image and backups only")
    args = ap.parse_args(argv)

    try:
        try:
            cfg = load_config(find_config(args.config))
        except FileNotFoundError as e:
            print_err(str(e))
            return 1
        except Exception as e:
            print_err(f"Invalid configuration file {args.config or DEFAULT_CONFIG_PATH}: {e}")
            return 1

        require_tools(cfg.required_tools)

        if args.list:
            print_plan(list_plan(cfg))
            return 0

        report = mount_timemachine(cfg, dry=args.dry_run)
        report_advisories(report)
        return 0

    except MountError as e:
        print_err(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        print_err(f"unexpected failure: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
