# traces.py
import logging
import os
import re

import numpy as np

from errors import FileOpenError, InvalidConfiguration, MalformedTraceToken, OutputError

logger = logging.getLogger(__name__)

_DECIMAL = re.compile(r"[0-9]+")

PATTERNS = ("sequential", "random", "mixed")


def parse_address(token, line_no=0):
    if not _DECIMAL.fullmatch(token):
        raise MalformedTraceToken(token, line_no)
    return int(token)


class TraceFile:
    """
    Whitespace-separated decimal addresses, read lazily in file order.

        with TraceFile(path) as trace:
            for addr in trace:
                ...
    """

    def __init__(self, path):
        self.path = path
        self._f = None

    def __enter__(self):
        try:
            self._f = open(self.path, "rb")
        except OSError as e:
            raise FileOpenError(self.path, e.strerror) from e
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def close(self):
        if self._f is not None:
            self._f.close()
            self._f = None

    def __iter__(self):
        if self._f is None:
            raise ValueError("trace file is not open")
        for line_no, line in enumerate(self._f, start=1):
            for raw in line.split():
                try:
                    token = raw.decode("ascii")
                except UnicodeDecodeError:
                    raise MalformedTraceToken(raw.decode("ascii", "replace"), line_no) from None
                yield parse_address(token, line_no)


def read_addresses(path):
    with TraceFile(path) as trace:
        return list(trace)


def write_trace(path, addresses, per_line=1):
    addresses = [int(a) for a in addresses]
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w") as f:
            for i in range(0, len(addresses), per_line):
                f.write(" ".join(str(a) for a in addresses[i:i + per_line]) + "\n")
    except OSError as e:
        raise OutputError(path, e.strerror) from e
    return path


def generate_addresses(pattern="mixed", num_requests=10000, working_set_kb=1024,
                       block_size=64, seed=None):
    """
    Build a synthetic trace of byte addresses.

    The working set is split into blocks of `block_size` bytes. "sequential"
    walks the blocks in order with wrap-around, "random" draws blocks
    uniformly, and "mixed" is mostly sequential with 20% random jumps.
    """
    if pattern not in PATTERNS:
        raise InvalidConfiguration(f"unknown access pattern {pattern!r}, expected one of {PATTERNS}")
    if block_size <= 0:
        raise InvalidConfiguration("block size must be positive")
    if not isinstance(num_requests, int) or num_requests < 0:
        raise InvalidConfiguration(f"num_requests must be a non-negative integer, got {num_requests!r}")
    rng = np.random.default_rng(seed)
    num_blocks = max(1, (working_set_kb * 1024) // block_size)

    if pattern == "sequential":
        blocks = np.arange(num_requests) % num_blocks
    elif pattern == "random":
        blocks = rng.integers(0, num_blocks, size=num_requests)
    else:
        jumps = rng.random(num_requests) >= 0.8
        targets = rng.integers(0, num_blocks, size=num_requests)
        blocks = np.empty(num_requests, dtype=np.int64)
        seq_ptr = 0
        for i in range(num_requests):
            if jumps[i]:
                blocks[i] = targets[i]
            else:
                blocks[i] = seq_ptr
                seq_ptr = (seq_ptr + 1) % num_blocks

    logger.debug("generated %d %s addresses over %d blocks", num_requests, pattern, num_blocks)
    return [int(b) * block_size for b in blocks]
