# cache.py
import logging

from config import Associativity, CacheConfig
from errors import AllocationError

logger = logging.getLogger(__name__)

ADDRESS_MASK = 0xFFFFFFFF


class AddressFields:
    __slots__ = ("tag", "set")

    def __init__(self, tag, set_index):
        self.tag = tag
        self.set = set_index

    def __eq__(self, other):
        if not isinstance(other, AddressFields):
            return NotImplemented
        return self.tag == other.tag and self.set == other.set

    def __repr__(self):
        return f"AddressFields(tag={self.tag}, set={self.set})"


def decode_address(address, tag_bits, set_bits, address_width=32):
    """
    Split an address into its tag and set fields.

    Only the low `address_width` bits take part. The tag is the top
    `tag_bits` bits, the set the next `set_bits` bits; the remaining
    offset bits select a byte inside the block and are dropped.
    """
    address &= (1 << address_width) - 1
    offset_bits = address_width - tag_bits - set_bits
    tag = address >> (offset_bits + set_bits)
    set_index = (address >> offset_bits) & ((1 << set_bits) - 1)
    return AddressFields(tag, set_index)


class CacheLine:
    __slots__ = ("tag", "recency", "occupied")

    def __init__(self):
        self.tag = 0
        self.recency = 0
        self.occupied = False

    def matches(self, tag):
        return self.occupied and self.tag == tag

    def fill(self, tag):
        self.tag = tag
        self.occupied = True

    def __repr__(self):
        state = f"tag={self.tag}" if self.occupied else "empty"
        return f"CacheLine({state}, recency={self.recency})"


def _allocate_lines(n):
    try:
        return [CacheLine() for _ in range(n)]
    except MemoryError:
        raise AllocationError(n) from None


class Cache:
    """
    Cache state shared by all associativity schemes.
    Subclasses implement `_lookup(fields)`, which returns True on a hit and
    updates the lines on a miss.
    """

    def __init__(self, config: CacheConfig):
        self.config = config
        self.capacity = config.capacity
        self.num_sets = config.num_sets
        self.tag_bits = config.tag_bits
        self.set_bits = config.set_bits
        logger.debug("allocating %s: %d lines, %d sets, tag/set/offset bits %d/%d/%d",
                     config.associativity.label, self.capacity, self.num_sets,
                     self.tag_bits, self.set_bits, config.offset_bits)

    def decode(self, addr):
        return decode_address(addr, self.tag_bits, self.set_bits, self.config.address_width)

    def access(self, addr):
        """
        Access byte address `addr`. Return True if hit, False if miss.
        """
        return self._lookup(self.decode(addr))

    def _lookup(self, fields):
        raise NotImplementedError

    def lines(self):
        raise NotImplementedError

    def stats(self):
        used_lines = sum(1 for line in self.lines() if line.occupied)
        return {
            "cache_size_bytes": self.config.cache_size,
            "line_size": self.config.block_size,
            "associativity": self.config.associativity.label,
            "num_lines": self.capacity,
            "num_sets": self.num_sets,
            "used_lines": used_lines,
        }


class FullyAssociativeCache(Cache):
    """Any block may live in any line; the victim is the line with the lowest recency count."""

    def __init__(self, config):
        super().__init__(config)
        self.storage = _allocate_lines(self.capacity)

    def lines(self):
        return list(self.storage)

    def _lookup(self, fields):
        for line in self.storage:
            if line.matches(fields.tag):
                line.recency += 1
                return True

        # first minimum wins ties, so empty lines fill in index order
        victim = self.storage[0]
        for line in self.storage[1:]:
            if line.recency < victim.recency:
                victim = line
        victim.fill(fields.tag)
        victim.recency += 1
        return False


class DirectMappedCache(Cache):
    def __init__(self, config):
        super().__init__(config)
        self.storage = _allocate_lines(self.num_sets)

    def lines(self):
        return list(self.storage)

    def _lookup(self, fields):
        line = self.storage[fields.set]
        if line.matches(fields.tag):
            return True
        line.fill(fields.tag)
        return False


class TwoWayCache(Cache):
    """
    Two ways per set with a one-bit LRU flag per set.
    mru[s] is 0 before the set is touched, 1 when way 0 was used last
    and 2 when way 1 was.
    """

    def __init__(self, config):
        super().__init__(config)
        self.way0 = _allocate_lines(self.num_sets)
        self.way1 = _allocate_lines(self.num_sets)
        self.mru = [0] * self.num_sets

    def lines(self):
        return self.way0 + self.way1

    def _lookup(self, fields):
        s = fields.set
        if self.way0[s].matches(fields.tag):
            self.mru[s] = 1
            return True
        if self.way1[s].matches(fields.tag):
            self.mru[s] = 2
            return True

        if self.mru[s] == 1:
            self.way1[s].fill(fields.tag)
            self.mru[s] = 2
        else:
            self.way0[s].fill(fields.tag)
            self.mru[s] = 1
        return False


CACHE_TYPES = {
    Associativity.FULLY_ASSOCIATIVE: FullyAssociativeCache,
    Associativity.ONE_WAY: DirectMappedCache,
    Associativity.TWO_WAY: TwoWayCache,
}


def build_cache(config: CacheConfig) -> Cache:
    return CACHE_TYPES[config.associativity](config)
