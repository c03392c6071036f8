# simulator.py
import os
import json
import time
import logging

from cache import build_cache
from config import CacheConfig
from errors import EmptyTraceError, OutputError
from traces import TraceFile

logger = logging.getLogger(__name__)


class MissRateAccumulator:
    def __init__(self):
        self.access_count = 0
        self.miss_count = 0

    def record(self, hit):
        self.access_count += 1
        if not hit:
            self.miss_count += 1

    @property
    def hit_count(self):
        return self.access_count - self.miss_count

    def miss_rate(self):
        """Miss percentage over all recorded accesses. Undefined for an empty trace."""
        if self.access_count == 0:
            raise EmptyTraceError()
        return (self.miss_count / self.access_count) * 100


def simulate(config: CacheConfig, addresses, cache=None):
    """
    Feed `addresses` through a fresh cache built from `config`.
    Returns the accumulator; call `miss_rate()` on it for the result.
    """
    if cache is None:
        cache = build_cache(config)
    acc = MissRateAccumulator()
    for addr in addresses:
        acc.record(cache.access(addr))
    logger.debug("%s: %d accesses, %d misses", config, acc.access_count, acc.miss_count)
    return acc


class TraceSimulator:
    def __init__(self, config: CacheConfig):
        self.config = config
        self.cache = None

    def run(self, trace_path):
        self.cache = build_cache(self.config)
        start = time.time()
        with TraceFile(trace_path) as trace:
            acc = simulate(self.config, trace, cache=self.cache)
        end = time.time()

        summary = {
            "config": self.config.to_dict(),
            "trace": trace_path,
            "accesses": acc.access_count,
            "misses": acc.miss_count,
            "hits": acc.hit_count,
            "miss_rate": acc.miss_rate(),
            "duration_s": end - start,
            "cache": self.cache.stats(),
        }
        return summary

    def save_results(self, summary, path):
        return write_json(summary, path)


def write_json(obj, path):
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w") as f:
            json.dump(obj, f, indent=2)
    except OSError as e:
        raise OutputError(path, e.strerror) from e
    return path
