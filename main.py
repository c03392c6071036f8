# main.py
import argparse
import logging
import sys

from config import CacheConfig
from errors import SimulationError
from simulator import TraceSimulator
from visualize import plot_hit_miss_rate


def build_parser():
    parser = argparse.ArgumentParser(
        prog="cachesim",
        description="Simulate a cache over an address trace and report the miss rate.",
    )
    parser.add_argument("cache_size", type=int, help="total cache size in bytes")
    parser.add_argument("associativity", type=int,
                        help="0 = fully-associative, 1 = direct-mapped, 2 = 2-way set-associative")
    parser.add_argument("block_size", type=int, help="block size in bytes")
    parser.add_argument("trace", help="file of whitespace-separated decimal addresses")
    parser.add_argument("--results", metavar="PATH", help="also write a JSON summary to PATH")
    parser.add_argument("--plot", metavar="PATH", help="also save a hit/miss pie chart to PATH")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = CacheConfig(args.cache_size, args.associativity, args.block_size)
        runner = TraceSimulator(config)
        summary = runner.run(args.trace)
        if args.results:
            runner.save_results(summary, args.results)
        if args.plot:
            plot_hit_miss_rate(summary["miss_rate"], args.plot)
    except SimulationError as e:
        print(f"cachesim: {e}", file=sys.stderr)
        return 1

    print(f"Miss Rate: {summary['miss_rate']:g}%")
    return 0


if __name__ == "__main__":
    sys.exit(main())
