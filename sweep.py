# sweep.py
import argparse
import logging
import os
import sys

from config import CacheConfig, load_config
from errors import InvalidConfiguration, SimulationError
from simulator import simulate, write_json
from traces import generate_addresses, read_addresses, write_trace
from visualize import plot_miss_rate_sweep

logger = logging.getLogger(__name__)


def load_trace(trace_cfg):
    """Addresses from `trace.path`, or a generated trace from `trace.generate`."""
    if "path" in trace_cfg:
        return read_addresses(trace_cfg["path"])
    gen = trace_cfg.get("generate")
    if gen is None:
        raise InvalidConfiguration("config needs either trace.path or trace.generate")
    addresses = generate_addresses(
        pattern=gen.get("access_pattern", "mixed"),
        num_requests=gen.get("num_requests", 10000),
        working_set_kb=gen.get("working_set_kb", 1024),
        block_size=gen.get("block_size", 64),
        seed=gen.get("random_seed", None),
    )
    if gen.get("save_to"):
        write_trace(gen["save_to"], addresses)
    return addresses


def run_sweep(cfg):
    sweep_cfg = cfg.get("sweep", {})
    cache_sizes = sweep_cfg.get("cache_sizes", [1024, 2048, 4096, 8192])
    block_size = sweep_cfg.get("block_size", 64)
    associativities = sweep_cfg.get("associativities", [0, 1, 2])

    addresses = load_trace(cfg.get("trace", {}))
    rows = []
    for assoc in associativities:
        for size in cache_sizes:
            config = CacheConfig(size, assoc, block_size)
            acc = simulate(config, addresses)
            row = {
                "cache_size": size,
                "associativity": int(config.associativity),
                "block_size": block_size,
                "accesses": acc.access_count,
                "misses": acc.miss_count,
                "miss_rate": acc.miss_rate(),
            }
            print(f"  {config.associativity.label:>17} {size:>8} B: miss rate {row['miss_rate']:g}%")
            rows.append(row)
    return rows


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="cachesim-sweep",
        description="Run a trace through a grid of cache sizes and associativities.",
    )
    parser.add_argument("--config", default="config.json", help="JSON sweep configuration")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        cfg = load_config(args.config)
        print("Starting sweep with config:", cfg.get("sweep", {}))
        rows = run_sweep(cfg)

        out_cfg = cfg.get("output", {})
        results_dir = out_cfg.get("results_dir", "results")
        results_path = write_json(rows, os.path.join(results_dir, "sweep.json"))
        print("Results saved to:", results_path)
        plot_path = plot_miss_rate_sweep(
            rows, out_cfg.get("miss_rate_plot", os.path.join(results_dir, "miss_rate_vs_size.png")))
        print("Plot saved to:", plot_path)
    except SimulationError as e:
        print(f"cachesim-sweep: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
