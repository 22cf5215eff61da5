"""
cli.py - command line front end for the emoji search engine
Features:
- search / suggest / tips / stats subcommands for scripting and debugging
- pick: interactive picker that records the chosen emoji's frequency
- catalog from a JSON file (emoji.list response or cached catalog),
  frequencies persisted to JSON between runs
- Uses Rich for tables and prompts
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from emoji_search.core.catalog_sources import JsonCatalogSource
from emoji_search.core.errors import CatalogUnavailable
from emoji_search.core.models import EmojiKind, SearchResult
from emoji_search.core.search_engine import EmojiSearchEngine
from emoji_search.utils.config_manager import Config
from emoji_search.utils.logger_utils import Log
from emoji_search.utils.model_store import FREQUENCY_PATH, JsonFrequencyStore

# initialise console for rich output
console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="emoji-search", description="Search custom and standard emoji.")
    parser.add_argument("--catalog", help="JSON catalog file (emoji.list response or cached catalog)")
    parser.add_argument("--frequency", default=FREQUENCY_PATH, help="frequency store path")
    parser.add_argument("--no-frequency", action="store_true", help="do not load or save frequencies")
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--no-enrich", action="store_true", help="skip lexicon aliases and categories")
    parser.add_argument("--verbose", action="store_true", help="echo log lines to the console")

    sub = parser.add_subparsers(dest="command")

    p_search = sub.add_parser("search", help="ranked results for a query")
    p_search.add_argument("query", nargs="?", default="")
    p_search.add_argument("--limit", type=int, default=None)
    p_search.add_argument("--json", action="store_true", help="print results as JSON")

    p_suggest = sub.add_parser("suggest", help="alternate queries")
    p_suggest.add_argument("query", nargs="?", default="")

    sub.add_parser("tips", help="search tips")
    sub.add_parser("stats", help="index and usage statistics")

    p_pick = sub.add_parser("pick", help="interactive picker; records the chosen emoji")
    p_pick.add_argument("query", nargs="?", default=None)
    return parser


def make_engine(args: argparse.Namespace) -> EmojiSearchEngine:
    """Engine for the parsed options; raises CatalogUnavailable when --catalog cannot be read."""
    cfg = Config(args.config)
    if args.no_enrich:
        cfg.set("enrich_catalog", False, save=False)
    persistence = None if args.no_frequency else JsonFrequencyStore(args.frequency)

    if args.catalog:
        source = JsonCatalogSource(args.catalog)
        return asyncio.run(EmojiSearchEngine.create(source, config=cfg, persistence=persistence))
    return EmojiSearchEngine.from_catalog({}, config=cfg, persistence=persistence)


def results_table(results: List[SearchResult], title: str = "Results") -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Emoji")
    table.add_column("Name", style="bold cyan")
    table.add_column("Kind")
    table.add_column("Match", style="magenta")
    table.add_column("On", style="green")
    table.add_column("Uses", justify="right")
    for i, res in enumerate(results, 1):
        shown = "(image)" if res.kind is EmojiKind.CUSTOM else res.render_value
        table.add_row(
            str(i),
            shown,
            res.id,
            res.kind.value,
            res.match_type.value if res.match_type else "-",
            res.matched_on or "-",
            str(res.frequency),
        )
    return table


class CLI:
    """Dispatches one subcommand against an engine."""

    def __init__(self, engine: EmojiSearchEngine):
        self.engine = engine

    def search(self, query: str, limit: Optional[int] = None, as_json: bool = False) -> int:
        results = self.engine.search(query, limit=limit)
        if as_json:
            console.print_json(data=[r.as_dict() for r in results])
            return 0
        if not results:
            console.print(f"[yellow]No emoji found for[/yellow] {query!r}")
            suggestions = self.engine.get_suggestions(query)
            if suggestions:
                console.print("Did you mean: " + ", ".join(suggestions))
            return 1
        console.print(results_table(results, title=f"Results for {query!r}" if query.strip() else "Popular"))
        return 0

    def suggest(self, query: str) -> int:
        for s in self.engine.get_suggestions(query):
            console.print(s)
        return 0

    def tips(self) -> int:
        for tip in self.engine.get_search_tips():
            console.print(f"• {tip}")
        return 0

    def stats(self) -> int:
        st = self.engine.stats()
        table = Table(title="Engine stats", box=box.SIMPLE)
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key in ("entries", "custom", "standard", "rebuilds", "recent_searches"):
            table.add_row(key, str(st[key]))
        for key, val in st["index"].items():
            table.add_row(f"index.{key}", str(val))
        for key, val in st["cache"].items():
            table.add_row(f"cache.{key}", str(val))
        for emoji_id, count in st["top_frequency"]:
            table.add_row(f"uses.{emoji_id}", str(count))
        console.print(table)
        return 0

    def pick(self, query: Optional[str] = None) -> int:
        """Loop: query -> numbered preview -> choose -> record. Empty choice re-queries."""
        console.rule("[bold magenta]Emoji picker[/bold magenta]")
        console.print("[cyan]Type a query, then the number to pick. Ctrl-D quits.[/cyan]")
        try:
            while True:
                if query is None:
                    query = Prompt.ask("[green]Search[/green]", default="")
                results = self.engine.preview(query)
                if not results:
                    console.print("[yellow]No matches.[/yellow]")
                    query = None
                    continue
                console.print(results_table(results, title="Preview"))
                choice = Prompt.ask("Pick #", default="")
                query = None
                if not choice.strip():
                    continue
                if not choice.isdigit() or not 1 <= int(choice) <= len(results):
                    console.print("[red]Invalid choice[/red]")
                    continue
                picked = results[int(choice) - 1]
                count = self.engine.update_frequency(picked.id)
                console.print(f"Picked [bold]{picked.id}[/bold] ({count} uses)")
        except (EOFError, KeyboardInterrupt):
            console.print()
        self.engine.save()
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        Log.configure(path=Log.path, echo=True)
    if not args.command:
        parser.print_help()
        return 2

    try:
        engine = make_engine(args)
    except CatalogUnavailable as e:
        console.print(f"[red]Catalog unavailable:[/red] {e}")
        return 2

    cli = CLI(engine)
    if args.command == "search":
        return cli.search(args.query, limit=args.limit, as_json=args.json)
    if args.command == "suggest":
        return cli.suggest(args.query)
    if args.command == "tips":
        return cli.tips()
    if args.command == "stats":
        return cli.stats()
    if args.command == "pick":
        return cli.pick(args.query)
    parser.error(f"unknown command {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
