"""Page-granular memory pool with first-fit and best-fit placement."""

from __future__ import annotations

import enum
import mmap
import threading
from dataclasses import dataclass
from itertools import groupby, islice, takewhile
from typing import Optional, TextIO


class Strategy(enum.Enum):
    """How a free run of pages is chosen for a new allocation."""

    FIRST_FIT = enum.auto()
    BEST_FIT = enum.auto()


@dataclass(frozen=True)
class AllocInfo:
    """Where an allocation lives inside the pool."""

    start_page: int
    page_count: int


class MemoryManager:
    """A fixed-size pool handing out whole pages, tracked by a free-page bitmap.

    Addresses are plain integers inside the pool's address range; ``None``
    stands for a failed allocation.
    """

    def __init__(
        self,
        total_bytes: int,
        strategy: Strategy = Strategy.FIRST_FIT,
        *,
        page_size: int = mmap.PAGESIZE,
        log: Optional[TextIO] = None,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page size must be positive")
        if total_bytes <= 0:
            raise ValueError("pool size must be positive")
        self.page_size = page_size
        self.strategy = strategy
        self.total_pages = -(-total_bytes // page_size)
        self.base_address = page_size
        self._free = [True] * self.total_pages
        self._allocations: dict[int, AllocInfo] = {}
        self._lock = threading.Lock()
        self._log_lock = threading.Lock()
        self._log = log
        self._event_count = 0
        if log is not None:
            log.write("ID EVENT DETAILS\n")

    def _log_event(self, message: str) -> None:
        if self._log is None:
            return
        with self._log_lock:
            self._event_count += 1
            self._log.write(f"{self._event_count} {message}\n")

    def _free_run(self, start: int, limit: int) -> int:
        return sum(1 for _ in takewhile(bool, islice(self._free, start, start + limit)))

    def _find_block(self, num_pages: int) -> Optional[int]:
        best_start: Optional[int] = None
        best_size: Optional[int] = None
        i = 0
        while i + num_pages <= self.total_pages:
            if not self._free[i]:
                i += 1
                continue
            run = self._free_run(i, num_pages)
            if run < num_pages:
                i += run + 1
                continue
            if self.strategy is Strategy.FIRST_FIT:
                return i
            if best_size is None or run < best_size:
                best_size, best_start = run, i
            i += 1
        return best_start

    def alloc(self, size: int) -> Optional[int]:
        """Reserve enough whole pages for ``size`` bytes; ``None`` if impossible."""
        if size < 0:
            raise ValueError("size must not be negative")
        if size == 0:
            return None
        num_pages = -(-size // self.page_size)
        with self._lock:
            start = self._find_block(num_pages)
            if start is None:
                return None
            self._free[start:start + num_pages] = [False] * num_pages
            address = self.base_address + start * self.page_size
            self._allocations[address] = AllocInfo(start, num_pages)
            self._log_event(f"ALLOC ADDR={address:#x} SIZE={size} PAGES={num_pages}")
        return address

    def free(self, address: Optional[int]) -> None:
        """Release an allocation; ``None`` and unknown addresses are ignored."""
        if address is None:
            return
        with self._lock:
            info = self._allocations.pop(address, None)
            if info is None:
                return
            end = info.start_page + info.page_count
            self._free[info.start_page:end] = [True] * info.page_count
            self._log_event(f"FREE  ADDR={address:#x} PAGES={info.page_count}")

    def fragmentation(self) -> float:
        """One minus the share of free pages lying in the largest free run."""
        with self._lock:
            runs = [sum(1 for _ in group) for is_free, group in groupby(self._free) if is_free]
        total_free = sum(runs)
        if total_free == 0:
            return 0.0
        return 1.0 - max(runs) / total_free