"""storage.py - the in-memory database. dataset -> sections -> pairs.

two ways to back it:

    heap   create_dataset() asks an Allocator for slot blocks and doubles
           them when they fill up. release() hands everything back.
    fixed  fixed_dataset() writes into lists the caller already owns.
           nothing grows; running out of slots is StorageExhaustedError.

both look the same to the grammar, the reader and the queries.
section names are unique, pairs keep insertion order, and a key may
repeat inside a section (the first one wins on lookup).

in the world: the filing cabinet. drawers are sections, cards are pairs.
either you can buy more drawers, or you got the cabinet you got.
"""

from dataclasses import dataclass

from inidb.config import DEFAULT_LIMITS, Limits
from inidb.errors import DuplicateSectionError, StorageExhaustedError
from inidb.log import debug


@dataclass(frozen=True)
class Pair:
    """one key=value entry."""
    key: str
    value: str


# ============================================================
# ALLOCATORS
# ============================================================

class Allocator:
    """hands out blocks of storage slots. None means out of memory.

    pass one to create_dataset() to control where storage comes from.
    subclass it to meter, cap or refuse allocation.
    """

    def allocate(self, slots: int) -> list | None:
        raise NotImplementedError

    def reallocate(self, block: list, slots: int) -> list | None:
        """grow block to `slots`, keeping every element in place."""
        raise NotImplementedError

    def free(self, block: list) -> None:
        raise NotImplementedError


class HeapAllocator(Allocator):
    """plain python lists. the default."""

    def allocate(self, slots: int) -> list | None:
        return [None] * slots

    def reallocate(self, block: list, slots: int) -> list | None:
        if slots > len(block):
            block.extend([None] * (slots - len(block)))
        return block

    def free(self, block: list) -> None:
        block.clear()


class NoHeapAllocator(Allocator):
    """every request fails. for code that must run on caller storage only."""

    def allocate(self, slots: int) -> list | None:
        return None

    def reallocate(self, block: list, slots: int) -> list | None:
        return None

    def free(self, block: list) -> None:
        pass


class BudgetAllocator(HeapAllocator):
    """heap allocation with a hard ceiling on live slots."""

    def __init__(self, max_slots: int):
        self.max_slots = max_slots
        self.in_use = 0

    def allocate(self, slots: int) -> list | None:
        if self.in_use + slots > self.max_slots:
            return None
        self.in_use += slots
        return super().allocate(slots)

    def reallocate(self, block: list, slots: int) -> list | None:
        extra = max(0, slots - len(block))
        if self.in_use + extra > self.max_slots:
            return None
        self.in_use += extra
        return super().reallocate(block, slots)

    def free(self, block: list) -> None:
        self.in_use -= len(block)
        super().free(block)


# ============================================================
# SECTION
# ============================================================

class Section:
    """a named, ordered run of pairs. owns its pair block."""

    def __init__(self, name: str, block: list, allocator: Allocator | None = None,
                 limits: Limits = DEFAULT_LIMITS):
        self.name = name
        self._block = block
        self._count = 0
        self._allocator = allocator  # None: fixed capacity
        self._limits = limits

    @property
    def count(self) -> int:
        return self._count

    @property
    def capacity(self) -> int:
        return len(self._block)

    @property
    def fixed(self) -> bool:
        return self._allocator is None

    @property
    def pairs(self) -> tuple:
        return tuple(self._block[:self._count])

    def __len__(self):
        return self._count

    def __iter__(self):
        return iter(self.pairs)

    def __repr__(self):
        return f"Section({self.name!r}, pairs={self._count}/{self.capacity})"

    def add_pair(self, pair: Pair) -> Pair:
        """append a pair, growing the block if allowed. keys may repeat."""
        pair = _bounded(pair, self._limits.max_string)
        if self._count >= self.capacity:
            self._grow()
        self._block[self._count] = pair
        self._count += 1
        return pair

    def add(self, key: str, value: str) -> Pair:
        return self.add_pair(Pair(key, value))

    def get(self, key: str, default=None):
        """value of the first pair with this key."""
        if key is None:
            return default
        for pair in self._block[:self._count]:
            if pair.key == key:
                return pair.value
        return default

    def _grow(self):
        if self._allocator is None:
            raise StorageExhaustedError(
                f"section '{self.name}' is full ({self.capacity} pairs)")
        old = self.capacity
        block = self._allocator.reallocate(self._block, max(1, old * 2))
        if block is None:
            raise StorageExhaustedError(
                f"could not grow section '{self.name}' past {old} pairs")
        self._block = block
        debug("storage", f"section '{self.name}' grew {old} -> {self.capacity} pairs")

    def _free(self):
        if self._allocator is not None:
            self._allocator.free(self._block)
            self._block = []
        self._count = 0


# ============================================================
# DATASET
# ============================================================

class Dataset:
    """every section of one INI document, in insertion order.

    build one with create_dataset() or fixed_dataset().
    """

    def __init__(self, block: list, allocator: Allocator | None = None,
                 pair_buffers: list | None = None, limits: Limits = DEFAULT_LIMITS):
        self._block = block
        self._count = 0
        self._allocator = allocator      # None: fixed capacity
        self._pair_buffers = pair_buffers
        self._limits = limits
        self._last_hit = -1              # index of the last section has_section found
        self.released = False

    @property
    def limits(self) -> Limits:
        return self._limits

    @property
    def count(self) -> int:
        return self._count

    @property
    def capacity(self) -> int:
        return len(self._block)

    @property
    def fixed(self) -> bool:
        return self._allocator is None

    @property
    def sections(self) -> tuple:
        return tuple(self._block[:self._count])

    @property
    def pair_count(self) -> int:
        return sum(s.count for s in self.sections)

    def __len__(self):
        return self._count

    def __iter__(self):
        return iter(self.sections)

    def __contains__(self, name):
        return self.has_section(name) is not None

    def __repr__(self):
        mode = "fixed" if self.fixed else "heap"
        return f"Dataset({mode}, sections={self._count}/{self.capacity})"

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()
        return False

    # -- insertion --

    def add_section(self, name: str) -> Section:
        """append an empty section. names are truncated to max_string."""
        if name is None:
            raise ValueError("section name is required")
        name = name[:self._limits.max_string]
        if self.has_section(name) is not None:
            raise DuplicateSectionError(name)

        if self._count >= self.capacity:
            self._grow()

        if self._allocator is None:
            buffers = self._pair_buffers or []
            if self._count >= len(buffers):
                raise StorageExhaustedError(f"no pair buffer for section '{name}'")
            section = Section(name, buffers[self._count], None, self._limits)
        else:
            pairs = self._allocator.allocate(self._limits.initial_pairs)
            if pairs is None:
                raise StorageExhaustedError(f"could not allocate pairs for section '{name}'")
            section = Section(name, pairs, self._allocator, self._limits)

        self._block[self._count] = section
        self._count += 1
        return section

    def add_pair(self, section: str, pair: Pair) -> Pair:
        """append a pair to the section with this name."""
        found = self.has_section(section)
        if found is None:
            raise KeyError(f"no section named '{section}'")
        return found.add_pair(pair)

    def _grow(self):
        if self._allocator is None:
            raise StorageExhaustedError(f"dataset is full ({self.capacity} sections)")
        old = self.capacity
        block = self._allocator.reallocate(self._block, max(1, old * 2))
        if block is None:
            raise StorageExhaustedError(f"could not grow dataset past {old} sections")
        self._block = block
        debug("storage", f"dataset grew {old} -> {self.capacity} sections")

    # -- lookup --

    def has_section(self, name: str) -> Section | None:
        """the section with exactly this name, or None."""
        if name is None:
            return None
        hit = self._last_hit
        if 0 <= hit < self._count and self._block[hit].name == name:
            return self._block[hit]
        for i in range(self._count):
            if self._block[i].name == name:
                self._last_hit = i
                return self._block[i]
        return None

    def get_value(self, section: str, key: str) -> str | None:
        """first value for key in section, or None."""
        found = self.has_section(section)
        if found is None:
            return None
        return found.get(key)

    def to_dict(self) -> dict:
        """{section: {key: value}}. repeated keys keep their first value."""
        result = {}
        for section in self.sections:
            values = {}
            for pair in section:
                values.setdefault(pair.key, pair.value)
            result[section.name] = values
        return result

    # -- teardown --

    def release(self):
        """free heap storage. a no-op for caller-owned fixed storage."""
        if self._allocator is None or self.released:
            return
        for section in self._block[:self._count]:
            section._free()
        self._allocator.free(self._block)
        self._block = []
        self._count = 0
        self._last_hit = -1
        self.released = True


def _bounded(pair: Pair, limit: int) -> Pair:
    if len(pair.key) <= limit and len(pair.value) <= limit:
        return pair
    return Pair(pair.key[:limit], pair.value[:limit])


# ============================================================
# CONSTRUCTION
# ============================================================

def create_dataset(allocator: Allocator | None = None,
                   limits: Limits | None = None) -> Dataset:
    """an empty heap-backed dataset."""
    allocator = allocator if allocator is not None else HeapAllocator()
    limits = limits or DEFAULT_LIMITS
    block = allocator.allocate(limits.initial_sections)
    if block is None:
        raise StorageExhaustedError("could not allocate sections")
    return Dataset(block, allocator=allocator, limits=limits)


def fixed_buffers(max_sections: int, max_pairs: int) -> tuple[list, list]:
    """caller-side storage for fixed_dataset(): one section list, one pair list per section."""
    return [None] * max_sections, [[None] * max_pairs for _ in range(max_sections)]


def fixed_dataset(section_buffer: list, pair_buffers: list,
                  limits: Limits | None = None) -> Dataset:
    """an empty dataset over caller-owned lists. never grows, never frees."""
    return Dataset(section_buffer, allocator=None, pair_buffers=pair_buffers,
                   limits=limits or DEFAULT_LIMITS)
