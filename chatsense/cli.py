"""CLI commands for chatsense.

Provides subcommands for trying the classifier from a terminal.

Commands:
    chatsense analyze       - Classify a sentence
    chatsense resolve       - Pick one category for ambiguous keywords
    chatsense canonicalize  - Rewrite synonyms to canonical terms
    chatsense group         - Bucket keywords by topic
    chatsense vocabulary    - Print the active vocabulary as YAML
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from ruamel.yaml import YAML

from .config import AppConfig
from .core.disambiguation import KeywordAmbiguityResolver, KeywordMatch
from .core.grouping import group_related_keywords
from .core.intent import create_analyzer
from .core.matching import find_keyword_matches
from .core.synonyms import SynonymCanonicalizer
from .core.vocabulary import Vocabulary, load_category_index

console = Console()


def load_config(args: argparse.Namespace) -> AppConfig:
    """Build settings for a command, applying command-line overrides."""
    config = AppConfig.load(Path(args.project_path).resolve())
    if args.vocabulary:
        # Command-line paths are relative to the working directory, not the project
        config.vocabulary_path = Path(args.vocabulary).resolve()
    return config


def print_json(data: Any) -> None:
    console.print(json.dumps(data, indent=2), markup=False, highlight=False, soft_wrap=True)


def load_history(path: Path) -> list[dict[str, str]]:
    """Load conversation history from a JSON or YAML file.

    The file holds a list of {sender, text} objects, oldest first.
    """
    yaml = YAML(typ="safe")
    with path.open(encoding="utf-8") as f:
        data = yaml.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of conversation turns")
    return data


def parse_match(value: str) -> KeywordMatch:
    """Parse a KEYWORD=SIMILARITY command-line value."""
    keyword, sep, similarity = value.rpartition("=")
    if not sep or not keyword:
        raise argparse.ArgumentTypeError(f"expected KEYWORD=SIMILARITY, got {value!r}")
    try:
        return KeywordMatch(keyword=keyword, similarity=float(similarity))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid similarity in {value!r}") from None


def analyze(args: argparse.Namespace) -> int:
    """Classify a sentence.

    Args:
        args: Parsed arguments (sentence, history_file, canonicalize)

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args)
    if args.canonicalize:
        config.canonicalize = True

    history = load_history(Path(args.history_file)) if args.history_file else None
    result = create_analyzer(config).analyze(args.sentence, history)

    if args.json:
        print_json(result.to_dict())
        return 0

    table = Table(title="Intent Analysis")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Intent", f"[bold]{result.intent}[/bold]")
    table.add_row("Confidence", f"{result.confidence:.2f}")
    table.add_row("Keywords", ", ".join(result.keywords) or "-")
    table.add_row("Modifiers", ", ".join(result.modifiers) or "-")
    table.add_row("Question", "yes" if result.is_question else "no")
    table.add_row("Command", "yes" if result.is_command else "no")
    table.add_row("Suggestion", "yes" if result.is_suggestion else "no")
    table.add_row("Actionable", "yes" if result.actionable else "no")
    if result.matched_pattern:
        table.add_row("Rule", f"[dim]{result.matched_pattern}[/dim]")

    console.print(table)
    return 0


def resolve(args: argparse.Namespace) -> int:
    """Resolve ambiguous keyword matches to one category.

    Args:
        args: Parsed arguments (text, categories, match, threshold)

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args)

    if args.categories:
        categories = load_category_index(Path(args.categories).resolve())
    else:
        categories = config.load_categories()

    if args.match:
        matches = list(args.match)
    else:
        threshold = args.threshold if args.threshold is not None else config.match_threshold
        matches = find_keyword_matches(args.text, categories, threshold=threshold)

    vocabulary = config.load_vocabulary()
    resolution = KeywordAmbiguityResolver(vocabulary.priorities).resolve(
        args.text, matches, categories
    )

    if args.json:
        print_json(resolution.to_dict())
        return 0

    if resolution.keyword is None:
        console.print(f"[yellow]No keyword resolved[/yellow] -> {resolution.category}")
        return 0

    console.print(
        f"[green]✓[/green] [bold]{resolution.keyword}[/bold] -> {resolution.category} "
        f"(confidence {resolution.confidence:.2f})"
    )

    if resolution.all_matches:
        table = Table(title="Ranked Candidates")
        table.add_column("Keyword", style="cyan")
        table.add_column("Priority", justify="right")
        table.add_column("Similarity", justify="right")
        for match in resolution.all_matches:
            table.add_row(match.keyword, str(match.priority), f"{match.similarity:.2f}")
        console.print(table)

    return 0


def canonicalize(args: argparse.Namespace) -> int:
    """Rewrite synonyms in text to canonical terms.

    Args:
        args: Parsed arguments (text)

    Returns:
        Exit code (0 for success)
    """
    vocabulary = load_config(args).load_vocabulary()
    output = SynonymCanonicalizer(vocabulary.synonyms).canonicalize(args.text)

    if args.json:
        print_json({"input": args.text, "canonical": output})
    else:
        console.print(output, markup=False)
    return 0


def group(args: argparse.Namespace) -> int:
    """Bucket keywords by topic.

    Args:
        args: Parsed arguments (keywords)

    Returns:
        Exit code (0 for success)
    """
    vocabulary = load_config(args).load_vocabulary()
    groups = group_related_keywords(list(args.keywords), vocabulary.keyword_groups)

    if args.json:
        print_json(groups)
        return 0

    for name, keywords in groups.items():
        console.print(f"[bold]{name}[/bold]: {', '.join(keywords)}")
    return 0


def show_vocabulary(args: argparse.Namespace) -> int:
    """Print the active vocabulary as YAML.

    Useful as a starting point for a custom vocabulary file.

    Args:
        args: Parsed arguments

    Returns:
        Exit code (0 for success)
    """
    vocabulary: Vocabulary = load_config(args).load_vocabulary()

    if args.json:
        print_json(vocabulary.to_yaml_data())
        return 0

    yaml = YAML()
    yaml.default_flow_style = False
    yaml.dump(vocabulary.to_yaml_data(), sys.stdout)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="chatsense",
        description="chatsense: intent analysis and keyword disambiguation for support chat",
    )
    parser.add_argument(
        "--project",
        "-p",
        dest="project_path",
        default=".",
        help="Directory holding .chatsense/config.yaml (default: current directory)",
    )
    parser.add_argument(
        "--vocabulary",
        help="Vocabulary YAML file (overrides the configured one)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # =========================================================================
    # analyze command
    # =========================================================================
    analyze_parser = subparsers.add_parser("analyze", help="Classify a sentence")
    analyze_parser.add_argument("sentence", help="Sentence to classify")
    analyze_parser.add_argument(
        "--history-file",
        help="JSON/YAML list of {sender, text} turns, oldest first",
    )
    analyze_parser.add_argument(
        "--canonicalize",
        action="store_true",
        help="Rewrite synonyms before classifying",
    )
    analyze_parser.set_defaults(func=analyze)

    # =========================================================================
    # resolve command
    # =========================================================================
    resolve_parser = subparsers.add_parser(
        "resolve", help="Pick one category for ambiguous keyword matches"
    )
    resolve_parser.add_argument("text", help="User input text")
    resolve_parser.add_argument(
        "--categories",
        help="Category index YAML (default: configured categories_path)",
    )
    resolve_parser.add_argument(
        "--match",
        "-m",
        action="append",
        type=parse_match,
        metavar="KEYWORD=SIMILARITY",
        help="Candidate match (repeatable); fuzzy-matched from categories when omitted",
    )
    resolve_parser.add_argument(
        "--threshold",
        "-t",
        type=float,
        help="Minimum fuzzy match score (default: configured match_threshold)",
    )
    resolve_parser.set_defaults(func=resolve)

    # =========================================================================
    # canonicalize command
    # =========================================================================
    canonical_parser = subparsers.add_parser(
        "canonicalize", help="Rewrite synonyms to canonical terms"
    )
    canonical_parser.add_argument("text", help="Text to rewrite")
    canonical_parser.set_defaults(func=canonicalize)

    # =========================================================================
    # group command
    # =========================================================================
    group_parser = subparsers.add_parser("group", help="Bucket keywords by topic")
    group_parser.add_argument("keywords", nargs="+", help="Keywords to group")
    group_parser.set_defaults(func=group)

    # =========================================================================
    # vocabulary command
    # =========================================================================
    vocab_parser = subparsers.add_parser("vocabulary", help="Print the active vocabulary")
    vocab_parser.set_defaults(func=show_vocabulary)

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def run_cli(args: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not hasattr(parsed, "func"):
        parser.print_help()
        return 0

    configure_logging(parsed.verbose)

    try:
        return parsed.func(parsed)
    except KeyboardInterrupt:
        console.print("\n[dim]Cancelled.[/dim]")
        return 130
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1


def main() -> None:
    """Console script entry point."""
    sys.exit(run_cli())


__all__ = [
    "analyze",
    "canonicalize",
    "create_parser",
    "group",
    "main",
    "resolve",
    "run_cli",
    "show_vocabulary",
]
