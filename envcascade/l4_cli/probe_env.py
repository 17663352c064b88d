from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from envcascade.bootstrap import init
from envcascade.domain.profile import EnvCascadeError
from envcascade.l2_services.config import load_settings
from envcascade.l2_services.logger_setup import setup_logging
from envcascade.observability.status import snapshot
from envcascade.utils.env import pick

DEFAULT_KEYS = ["APP_ENV", "TEST"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="envcascade-probe", description="Load the .env cascade and show the result.")
    parser.add_argument("--app", default=os.environ.get("APP", os.getcwd()), help="APP path (default: $APP or cwd)")
    parser.add_argument("--key", action="append", dest="keys", metavar="NAME",
                        help="Variable to print (repeatable, default: APP_ENV and TEST)")
    parser.add_argument("--json", action="store_true", help="Output raw JSON")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $LOG_LEVEL or INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    log = logging.getLogger("probe_env")

    settings = load_settings().model_copy(update={"app_root": Path(args.app)})
    try:
        report = init(settings=settings)
    except EnvCascadeError as e:
        log.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1

    keys = args.keys or DEFAULT_KEYS
    values = pick(os.environ, keys)
    snap = snapshot(report.profile, str(settings.app_root))
    if args.json:
        print(json.dumps({"load": report.as_dict(), "status": snap, "vars": values}, indent=2))
        return 0

    c = Console()
    c.print(f"[bold]Environment cascade[/bold] (app=[italic]{escape(snap['app'])}[/italic], profile=[bold]{snap['profile']}[/bold])")

    t1 = Table(title="Candidate files (later wins)", box=box.SIMPLE_HEAVY)
    t1.add_column("File")
    t1.add_column("Exists")
    t1.add_column("Size")
    t1.add_column("Keys")
    for status, loaded in zip(snap["files"], report.files):
        exists_txt = "[green]yes[/green]" if status["exists"] else "[yellow]no[/yellow]"
        size = str(status["size"]) if status["size"] is not None else "-"
        t1.add_row(status["name"], exists_txt, size, escape(", ".join(loaded.keys)) or "-")
    c.print(t1)

    t2 = Table(title="Variables", box=box.SIMPLE_HEAVY)
    t2.add_column("Name")
    t2.add_column("Value")
    for k, v in values.items():
        t2.add_row(escape(k), escape(v) if v is not None else "[dim]not set[/dim]")
    c.print(t2)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
