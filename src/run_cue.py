from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Set

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from cue.config import CONFIG
from cue.corpus.file_scanner import load_sources
from cue.pipeline import run_concepts, run_representative, run_typicality
from cue.types import Command
from cue.utils import read_lines

console = Console()

def relevant_names(args: argparse.Namespace) -> Set[str]:
    names: Set[str] = set(args.relevant or [])
    if args.from_file:
        names.update(read_lines(Path(args.from_file)))
    return names

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="cue", description="Concepts, typicality and representatives of Python code")
    sub = ap.add_subparsers(dest="command", required=True)
    for cmd in Command:
        p = sub.add_parser(cmd.value)
        p.add_argument("-d", "--directory", type=str, required=True, help="Corpus directory, or a single .py file")
        p.add_argument("-f", "--from", dest="from_file", type=str, help="File listing relevant function names, one per line")
        p.add_argument("-r", "--relevant", nargs="*", default=[], help="Relevant function names")
        p.add_argument("-k", "--topk", type=int, default=None, help="Number of results")
        p.add_argument("--bandwidth", type=float, default=CONFIG.bandwidth, help="Kernel bandwidth h")
        p.add_argument("--artifacts", type=str, default=None, help="Write JSON reports under this directory")
        p.add_argument("--log-level", type=str, default=CONFIG.log_level)
        if cmd is Command.CONCEPTS:
            p.add_argument("-c", "--cluster", action="store_true", help="Also group the collected words by co-occurrence")
    return ap

def print_concepts(out) -> None:
    table = Table(title=f"Concepts ({out['sources']} sources)")
    table.add_column("#", justify="right")
    table.add_column("word")
    table.add_column("count", justify="right")
    table.add_column("origins")
    for i, w in enumerate(out["concepts"], start=1):
        table.add_row(str(i), w.text, str(w.count), ", ".join(sorted(w.origins)))
    console.print(table)
    for i, group in enumerate(out.get("clusters", []), start=1):
        console.print(f"[bold]cluster {i}[/bold]: " + ", ".join(w.text for w in group))

def print_typicality(out) -> None:
    table = Table(title=f"Typical documents ({out['documents']} analysed)")
    table.add_column("#", justify="right")
    table.add_column("document")
    table.add_column("score", justify="right")
    for i, d in enumerate(out["typical"], start=1):
        table.add_row(str(i), d.name, f"{out['scores'][d]:.4f}")
    console.print(table)

def print_representative(out) -> None:
    table = Table(title=f"Representatives ({out['documents']} analysed)")
    table.add_column("#", justify="right")
    table.add_column("document")
    table.add_column("covers")
    for i, d in enumerate(out["representatives"], start=1):
        table.add_row(str(i), d.name, ", ".join(x.name for x in out["region"][d]))
    console.print(table)

def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    if args.topk is not None and args.topk <= 0:
        ap.error("--topk must be positive")
    if args.bandwidth <= 0:
        ap.error("--bandwidth must be positive")

    root = Path(args.directory)
    if not root.exists():
        ap.error(f"No such file or directory: {root}")

    sources = load_sources(root)
    if not sources:
        console.print(f"[yellow]No Python sources under {root}[/yellow]")
        return 1

    relevant = relevant_names(args)
    artifacts_root = Path(args.artifacts) if args.artifacts else None
    progress = tqdm(sources, desc=args.command, disable=len(sources) == 1)
    command = Command(args.command)

    if command is Command.CONCEPTS:
        out = run_concepts(progress, relevant, args.topk or CONFIG.concepts_k, artifacts_root, cluster=args.cluster)
        print_concepts(out)
        found = bool(out["concepts"])
    elif command is Command.TYPICALITY:
        out = run_typicality(progress, relevant, args.topk or CONFIG.default_topk, args.bandwidth, artifacts_root)
        print_typicality(out)
        found = bool(out["documents"])
    else:
        out = run_representative(progress, relevant, args.topk or CONFIG.typical_k, args.bandwidth, artifacts_root)
        print_representative(out)
        found = bool(out["documents"])

    if not found:
        console.print("[yellow]Nothing could be analysed[/yellow]")
        return 1
    console.print("[green]Done.[/green]")
    return 0

if __name__ == "__main__":
    sys.exit(main())
