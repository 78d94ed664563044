import io
import threading

import pytest

from memspool.memory_manager import MemoryManager, Strategy

PAGE = 4096


def make(total=1024 * 1024, strategy=Strategy.FIRST_FIT, **kwargs):
    return MemoryManager(total, strategy, page_size=PAGE, **kwargs)


def test_alloc_zero_returns_none():
    assert make().alloc(0) is None


def test_alloc_too_big_returns_none():
    assert make().alloc(2 * 1024 * 1024) is None


def test_free_none_leaves_pool_untouched():
    mm = make()
    mm.free(None)
    assert mm.fragmentation() == 0.0
    assert mm.alloc(1024 * 1024) == mm.base_address


def test_double_free_is_safe():
    mm = make()
    p = mm.alloc(100)
    assert p is not None
    mm.free(p)
    mm.free(p)
    assert mm.alloc(100) == p


def test_basic_alloc_and_free():
    mm = make()
    p1 = mm.alloc(100)
    p2 = mm.alloc(200)
    assert p1 is not None and p2 is not None
    assert p1 != p2
    mm.free(p1)
    mm.free(p2)
    assert mm.alloc(1024 * 1024) == mm.base_address


def test_small_and_large_allocations():
    mm = make()
    p1 = mm.alloc(32)
    p2 = mm.alloc(8192)
    assert p1 is not None and p2 is not None
    assert p2 - p1 == PAGE
    mm.free(p1)
    mm.free(p2)
    assert mm.fragmentation() == 0.0


def test_fragmentation_calculation():
    mm = make(4 * 4096)
    assert mm.fragmentation() == pytest.approx(0.0)
    p1, p2, p3, p4 = (mm.alloc(4096) for _ in range(4))
    assert None not in (p1, p2, p3, p4)
    mm.free(p1)
    mm.free(p3)
    assert mm.fragmentation() == pytest.approx(0.5, abs=1e-6)
    mm.free(p2)
    assert mm.fragmentation() == pytest.approx(0.0, abs=1e-6)


def test_full_pool_has_zero_fragmentation():
    mm = make(2 * PAGE)
    assert mm.alloc(2 * PAGE) is not None
    assert mm.fragmentation() == 0.0
    assert mm.alloc(1) is None


def test_pool_size_rounds_up_to_whole_pages():
    mm = make(PAGE + 1)
    assert mm.total_pages == 2
    assert mm.alloc(2 * PAGE) == mm.base_address


@pytest.mark.parametrize("strategy", list(Strategy))
def test_search_skips_too_small_holes(strategy):
    mm = make(5 * PAGE, strategy)
    pages = [mm.alloc(PAGE) for _ in range(5)]
    mm.free(pages[1])
    mm.free(pages[3])
    mm.free(pages[4])
    assert mm.alloc(2 * PAGE) == pages[3]
    assert mm.alloc(PAGE) == pages[1]


def test_freed_pages_are_reused_first_fit():
    mm = make(4 * PAGE)
    a = mm.alloc(PAGE)
    b = mm.alloc(PAGE)
    mm.free(a)
    assert mm.alloc(PAGE) == a
    assert mm.alloc(PAGE) == b + PAGE


def test_unknown_address_is_ignored():
    mm = make(2 * PAGE)
    p = mm.alloc(PAGE)
    mm.free(p + 1)
    assert mm.fragmentation() == 0.0
    assert mm.alloc(2 * PAGE) is None


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        make().alloc(-1)


@pytest.mark.parametrize("total", [0, -5])
def test_bad_pool_size_rejected(total):
    with pytest.raises(ValueError):
        make(total)


def test_log_records_events():
    log = io.StringIO()
    mm = make(4 * PAGE, log=log)
    p = mm.alloc(100)
    mm.free(p)
    lines = log.getvalue().splitlines()
    assert lines[0] == "ID EVENT DETAILS"
    assert lines[1] == f"1 ALLOC ADDR={p:#x} SIZE=100 PAGES=1"
    assert lines[2] == f"2 FREE  ADDR={p:#x} PAGES=1"


def test_concurrent_use_leaves_pool_consistent():
    mm = make(64 * PAGE, Strategy.BEST_FIT)
    seen = []
    seen_lock = threading.Lock()

    def run():
        held = []
        for n in range(50):
            p = mm.alloc((n % 3 + 1) * 1000)
            if p is not None:
                held.append(p)
            if n % 2 and held:
                mm.free(held.pop(0))
        with seen_lock:
            seen.extend(held)
        for p in held:
            mm.free(p)

    threads = [threading.Thread(target=run) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert mm.fragmentation() == 0.0
    assert mm.alloc(64 * PAGE) == mm.base_address