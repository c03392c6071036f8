# visualize.py
import os
from collections import defaultdict

import matplotlib.pyplot as plt

from config import Associativity
from errors import OutputError


def _save(outpath):
    try:
        parent = os.path.dirname(outpath)
        if parent:
            os.makedirs(parent, exist_ok=True)
        plt.savefig(outpath)
    except OSError as e:
        raise OutputError(outpath, e.strerror) from e
    finally:
        plt.close()
    return outpath


def plot_miss_rate_sweep(rows, outpath):
    """One line per associativity: miss rate (%) against cache size."""
    series = defaultdict(list)
    for row in rows:
        series[row["associativity"]].append((row["cache_size"], row["miss_rate"]))

    plt.figure(figsize=(8,4))
    for code in sorted(series):
        points = sorted(series[code])
        sizes = [p[0] for p in points]
        rates = [p[1] for p in points]
        plt.plot(sizes, rates, marker='o', label=Associativity(code).label)
    plt.xscale('log', base=2)
    plt.title("Miss Rate vs Cache Size")
    plt.xlabel("Cache size (bytes)")
    plt.ylabel("Miss rate (%)")
    plt.legend()
    plt.grid(True)
    plt.tight_layout()
    return _save(outpath)


def plot_hit_miss_rate(miss_rate, outpath):
    plt.figure(figsize=(4,4))
    labels = ['Hit', 'Miss']
    sizes = [100.0 - miss_rate, miss_rate]
    plt.pie(sizes, labels=labels, autopct='%1.1f%%')
    plt.title("Cache Hit/Miss Rate")
    plt.tight_layout()
    return _save(outpath)
