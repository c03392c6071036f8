# config.py
import json
from enum import IntEnum

from errors import InvalidConfiguration

ADDRESS_WIDTH = 32


class Associativity(IntEnum):
    FULLY_ASSOCIATIVE = 0
    ONE_WAY = 1
    TWO_WAY = 2

    @property
    def label(self):
        return {
            Associativity.FULLY_ASSOCIATIVE: "fully-associative",
            Associativity.ONE_WAY: "direct-mapped",
            Associativity.TWO_WAY: "2-way",
        }[self]


def _is_size(value):
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class CacheConfig:
    """
    Validated cache configuration, built once and passed to the simulator.
    All sizes are in bytes.
    """

    def __init__(self, cache_size, associativity, block_size):
        if not _is_size(cache_size):
            raise InvalidConfiguration(f"cache size must be a positive integer, got {cache_size!r}")
        if not _is_size(block_size):
            raise InvalidConfiguration(f"block size must be a positive integer, got {block_size!r}")
        try:
            associativity = Associativity(associativity)
        except ValueError:
            raise InvalidConfiguration(
                f"unrecognized associativity code {associativity!r} (expected 0, 1 or 2)"
            ) from None

        self.cache_size = cache_size
        self.associativity = associativity
        self.block_size = block_size
        self.address_width = ADDRESS_WIDTH

        if self.capacity == 0:
            raise InvalidConfiguration(
                f"cache of {cache_size} bytes cannot hold a single {block_size}-byte block"
            )
        if associativity == Associativity.TWO_WAY and self.num_sets == 0:
            raise InvalidConfiguration("a 2-way cache needs at least two lines")
        if self.tag_bits < 0:
            raise InvalidConfiguration(
                f"offset and set fields need {self.offset_bits + self.set_bits} bits, "
                f"more than the {ADDRESS_WIDTH}-bit address"
            )

    # Geometry. Non power-of-two sizes round their bit widths down.
    @property
    def capacity(self):
        return self.cache_size // self.block_size

    @property
    def num_sets(self):
        if self.associativity == Associativity.TWO_WAY:
            return self.capacity // 2
        return self.capacity

    @property
    def offset_bits(self):
        return self.block_size.bit_length() - 1

    @property
    def set_bits(self):
        if self.associativity == Associativity.FULLY_ASSOCIATIVE:
            return 0
        return self.num_sets.bit_length() - 1

    @property
    def tag_bits(self):
        return self.address_width - self.offset_bits - self.set_bits

    def to_dict(self) -> dict:
        return {
            "cache_size": self.cache_size,
            "associativity": int(self.associativity),
            "block_size": self.block_size,
            "capacity": self.capacity,
            "num_sets": self.num_sets,
            "offset_bits": self.offset_bits,
            "set_bits": self.set_bits,
            "tag_bits": self.tag_bits,
        }

    def __eq__(self, other):
        if not isinstance(other, CacheConfig):
            return NotImplemented
        return (self.cache_size, self.associativity, self.block_size) == (
            other.cache_size, other.associativity, other.block_size)

    def __repr__(self):
        return (f"CacheConfig(cache_size={self.cache_size}, "
                f"associativity={self.associativity.label}, block_size={self.block_size})")


def load_config(path="config.json"):
    try:
        with open(path, "r") as f:
            return json.load(f)
    except OSError as e:
        raise InvalidConfiguration(f"cannot read config file {path}: {e.strerror}") from e
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"config file {path} is not valid JSON: {e}") from e
