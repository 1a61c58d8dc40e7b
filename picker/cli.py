"""
Command-line front end.

    pypicker pick  TABLE_FILE [AMOUNT] [-n] [-f]
    pypicker calc  TABLE_FILE [AMOUNT] [--workers N]
    pypicker test  TABLE_FILE [AMOUNT] [--trials N] [-f]
    pypicker conf  TABLE_FILE

``AMOUNT`` defaults to 1. In non-repetitive mode it must not exceed the number
of drawable items in the table.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from picker.config import PickerConfig, format_table
from picker.draw import DrawEngine
from picker.errors import PickerError
from picker.random_source import SeededRandomSource

logger = logging.getLogger(__name__)

DEFAULT_TRIALS = 5_000_000


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("table_file", type=Path, help="Weight table file")
    common.add_argument("amount", nargs="?", type=int, default=1, help="Items per draw (default: 1)")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(
        prog="pypicker",
        description="Weighted random picker and exact inclusion probability calculator.",
    )
    sub = parser.add_subparsers(dest="operation", required=True)

    p_pick = sub.add_parser("pick", parents=[common], help="Draw one group of items")
    p_pick.add_argument("-n", dest="know_nonuniform", action="store_true",
                        help="Do not print the warning for a nonuniform table")
    p_pick.add_argument("-f", dest="fast", action="store_true",
                        help="Use the fast pseudo random generator instead of the OS source")

    p_calc = sub.add_parser("calc", parents=[common], help="Print exact inclusion probabilities")
    p_calc.add_argument("--workers", type=int, default=None, help="Maximum parallel workers")

    p_test = sub.add_parser("test", parents=[common], help="Print empirical inclusion frequencies")
    p_test.add_argument("--trials", type=_positive_int, default=None, help="Amount of groups to draw")
    p_test.add_argument("-f", dest="fast", action="store_true",
                        help="Use the fast pseudo random generator instead of the OS source")

    sub.add_parser("conf", parents=[common], help="Create or edit the table file interactively")
    return parser


def main(argv: Optional[Sequence[str]] = None, input_fn: Callable[[str], str] = input) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    path: Path = args.table_file
    conf = PickerConfig.from_file(path) if path.is_file() else PickerConfig()

    if args.operation == "conf":
        return _configure(conf, path, input_fn)

    if not path.is_file():
        print(f"Table file not found: {path}", file=sys.stderr)
        return 1

    try:
        conf.check()
        if args.operation == "pick":
            _pick(conf, args)
        elif args.operation == "calc":
            _calc(conf, args)
        else:
            _test(conf, args, input_fn)
    except PickerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _engine(conf: PickerConfig, fast: bool) -> DrawEngine:
    return conf.build_engine(SeededRandomSource() if fast else None)


def _pick(conf: PickerConfig, args: argparse.Namespace) -> None:
    items = _engine(conf, args.fast).draw_many(args.amount)
    line = " ".join(str(item) for item in items)
    if not conf.is_fair() and not args.know_nonuniform:
        line += " (nonuniform)"
    print(line)


def _calc(conf: PickerConfig, args: argparse.Namespace) -> None:
    print("Calculating, please wait...")
    start = time.perf_counter()
    probs = conf.calc_probabilities(args.amount, max_workers=args.workers)
    print(f"Time passed: {(time.perf_counter() - start) * 1000:.0f} ms")
    print(format_table({k: v * 100.0 for k, v in probs.items()}), end="")


def _test(conf: PickerConfig, args: argparse.Namespace, input_fn: Callable[[str], str]) -> None:
    trials = args.trials
    if trials is None:
        answer = input_fn("Input amount of result groups for making statistics: ")
        try:
            trials = int(answer.strip())
        except ValueError:
            trials = DEFAULT_TRIALS
        if trials <= 0:
            trials = DEFAULT_TRIALS
    print(f"Testing for {trials} times, please wait...")
    start = time.perf_counter()
    freqs = _engine(conf, args.fast).sample_frequencies(args.amount, trials)
    print(f"Time passed: {(time.perf_counter() - start) * 1000:.0f} ms")
    print(format_table({k: v * 100.0 for k, v in freqs.items()}), end="")


def _ask_yes_no(question: str, input_fn: Callable[[str], str]) -> Optional[bool]:
    answer = input_fn(f"{question} (Y/n) ").strip()
    if not answer:
        return None
    if answer[0] in "Yy":
        return True
    if answer[0] in "Nn":
        return False
    return None


def _configure(conf: PickerConfig, path: Path, input_fn: Callable[[str], str]) -> int:
    if conf.is_valid():
        print(f"Existing configuration:\n{conf}")
    answer = _ask_yes_no("Is it allowed to pick items repetitively?", input_fn)
    if answer is not None:
        conf.repetitive = answer
    answer = _ask_yes_no("Should the probability values be inversed (x -> 1/x)?", input_fn)
    if answer is not None:
        conf.inversed = answer

    print("Input items by line (or use ';' separator): <name> [=] <val>")
    print("(name: string without space, val: positive numeric value)")
    print("delete item with `delete <name>`, enter `end` to end input: ")
    while True:
        try:
            line = input_fn("")
        except EOFError:
            break
        if line.strip() == "end":
            break
        conf.append_str(line)

    print(f"\nNew configuration:\n{conf}", end="")
    try:
        conf.check()
    except PickerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    conf.save(path)
    logger.debug(f"Saved configuration to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
