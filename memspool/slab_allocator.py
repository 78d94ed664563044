"""Fixed-size object cache carved out of equally sized slabs."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Slab:
    """A contiguous region holding objects of one size."""

    memory: int
    free_list: list[int] = field(default_factory=list)


class SlabAllocator:
    """Hands out fixed-size objects, adding a slab whenever all are in use.

    Use the allocator as a context manager to hold its lock across calls.
    """

    def __init__(self, object_size: int, slab_size: int = 65536, *, max_slabs: Optional[int] = None) -> None:
        if object_size <= 0:
            raise ValueError("object size must be positive")
        if slab_size < object_size:
            raise ValueError("slab must hold at least one object")
        self.object_size = object_size
        self.slab_size = slab_size
        self.objects_per_slab = slab_size // object_size
        self.max_slabs = max_slabs
        self.slabs: list[Slab] = []
        self._lock = threading.Lock()

    def __enter__(self) -> "SlabAllocator":
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self._lock.release()

    def _grow(self) -> Optional[Slab]:
        if self.max_slabs is not None and len(self.slabs) >= self.max_slabs:
            return None
        base = (len(self.slabs) + 1) * self.slab_size
        slab = Slab(base, [base + n * self.object_size for n in range(self.objects_per_slab)])
        self.slabs.append(slab)
        return slab

    def alloc(self) -> Optional[int]:
        """Return the address of a free object, or ``None`` when no slab can be added."""
        slab = next((s for s in self.slabs if s.free_list), None) or self._grow()
        if slab is None:
            return None
        return slab.free_list.pop()

    def free(self, address: int) -> None:
        """Return an object to its slab; foreign or misaligned addresses raise ValueError."""
        for slab in self.slabs:
            if slab.memory <= address < slab.memory + self.slab_size:
                if (address - slab.memory) % self.object_size:
                    raise ValueError(f"address {address:#x} is not aligned to an object in its slab")
                slab.free_list.append(address)
                return
        raise ValueError(f"address {address:#x} does not belong to this allocator")