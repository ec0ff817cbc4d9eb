#!/usr/bin/env python3
"""
Beider-Morse phonetic encoding CLI.

Loads the engine from bmpm.toml by default, or override with flags:

    python -m bmpm.cli "Schwarzenegger"
    python -m bmpm.cli "Renault" --config bmpm.toml --rule-type exact
    python -m bmpm.cli --rules rules/ --name-type ash "Moskowitz"
    python -m bmpm.cli --rules rules/ --guess "Mickiewicz"
    python -m bmpm.cli --rules rules/ --alternatives --soundex "Thompson"
"""

import argparse
import logging
import sys
from pathlib import Path

from bmpm.errors import PhoneticError


def _find_default_config() -> Path | None:
    """Look for bmpm.toml in CWD."""
    candidate = Path("bmpm.toml")
    if candidate.exists():
        return candidate
    return None


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Beider-Morse phonetic name encoder"
    )
    parser.add_argument(
        "names",
        nargs="*",
        help="Name(s) to encode",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="Path to TOML config file (default: auto-detect bmpm.toml)",
    )
    parser.add_argument(
        "--rules",
        metavar="DIR",
        help="Path to the rule corpus directory (overrides config)",
    )
    parser.add_argument(
        "--name-type",
        choices=["ash", "gen", "sep"],
        help="Rule corpus to use (default: gen)",
    )
    parser.add_argument(
        "--rule-type",
        choices=["approx", "exact"],
        help="Final pass precision (default: approx)",
    )
    parser.add_argument(
        "--languages",
        nargs="+",
        metavar="LANG",
        help="Restrict encoding to these languages",
    )
    parser.add_argument(
        "--max-phonemes",
        type=int,
        metavar="N",
        help="Maximum number of alternatives per word",
    )
    parser.add_argument(
        "--separator",
        help="String placed between encoded words",
    )
    parser.add_argument(
        "--concat",
        action="store_true",
        default=None,
        help="Encode multi-word names as a single word",
    )
    parser.add_argument(
        "--guess",
        action="store_true",
        help="Print the guessed languages of each word",
    )
    parser.add_argument(
        "--alternatives",
        action="store_true",
        help="Print every alternative with its languages",
    )
    parser.add_argument(
        "--soundex",
        action="store_true",
        help="Also print the American Soundex code",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print the engine and corpus summary",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    # ── Build engine ─────────────────────────────────────────────────────

    from bmpm.corpus import RuleCorpus
    from bmpm.engine import PhoneticEngine

    settings = {
        "name_type": args.name_type,
        "rule_type": args.rule_type,
        "languages": args.languages,
        "max_phonemes": args.max_phonemes,
        "separator": args.separator,
        "concat": args.concat,
    }

    try:
        if args.rules:
            # Explicit rules dir: build engine manually (flags override config)
            settings = {k: v for k, v in settings.items() if v is not None}
            corpus = RuleCorpus.from_dir(
                args.rules, name_types=[settings.get("name_type", "gen")]
            )
            engine = PhoneticEngine(corpus, **settings)
        else:
            config_path = Path(args.config) if args.config else _find_default_config()
            if config_path is None:
                parser.error(
                    "No bmpm.toml found and no --rules flag given.\n"
                    "  Either create a config file or pass --rules explicitly."
                )
            engine = PhoneticEngine.from_config(config_path, **settings)
    except (PhoneticError, FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    if args.summary:
        print(engine.summary())
        print()

    # ── Encode ───────────────────────────────────────────────────────────

    if not args.names and not args.summary:
        parser.error("No names given")

    soundex = None
    if args.soundex:
        from bmpm.soundex import Soundex

        soundex = Soundex()

    status = 0
    for name in args.names:
        try:
            if args.guess:
                for word in engine.words(name):
                    print(f"{word}: {engine.guess(word)}")

            alternatives = engine.encode_alternatives(name)
            print(f"{name}\t{engine.format_alternatives(alternatives)}")

            if args.alternatives:
                for word, phonemes in zip(engine.words(name), alternatives):
                    print(f"  ═══ {word} ({len(phonemes)} alternatives) ═══")
                    for p in phonemes:
                        print(f"    {p.text:30s}  {p.languages}")

            if soundex is not None:
                print(f"  soundex: {soundex.encode(name)}")
        except PhoneticError as e:
            print(f"ERROR: {name}: {e}", file=sys.stderr)
            status = 1

    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
