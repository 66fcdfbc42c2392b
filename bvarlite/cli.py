"""Command that demonstrates recorders and the variable registry."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .recorder import IntRecorder
from .variable import ExposeError, count_exposed


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bvarlite", description="Record some samples and expose them."
    )
    parser.add_argument("--name", default="test_recorder")
    parser.add_argument("--prefix", default="stats")
    parser.add_argument("--second-name", default="second_recorder")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the demonstration and return the exit status."""
    args = _parser().parse_args(argv)

    print("Hello, world!")

    recorder = IntRecorder()
    print(f"is_hidden (initial): {str(recorder.is_hidden()).lower()}")

    for sample in (99, 1, 99, 105):
        recorder.add(sample)

    print(f"v: {recorder.get_value()}")
    print(f"avg: {recorder.average()}")

    try:
        exposed = recorder.expose(args.name)
        print(f"expose result: {exposed}")
    except ExposeError as error:
        print(f"expose failed: {error}")
    print(f"is_hidden (after expose): {str(recorder.is_hidden()).lower()}")
    print(f"name: {recorder.name()}")

    recorder2 = IntRecorder.with_prefix_name(args.prefix, args.second_name)
    recorder2.add(10)
    recorder2.add(20)
    print(f"recorder2 name: {recorder2.name()}")
    print(f"recorder2 average: {recorder2.average()}")

    print(f"exposed count: {count_exposed()}")

    print(f"hide result: {str(recorder.hide()).lower()}")
    print(f"exposed count after hide: {count_exposed()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())