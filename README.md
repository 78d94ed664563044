# memspool

memspool simulates a page-based memory pool. Allocation requests are rounded
up to whole pages and placed with either a first-fit or a best-fit search over
a bitmap of free pages; fragmentation of the free space can be measured at any
time. The package also has a slab allocator for fixed-size objects, a
benchmark command that writes CSV, and a multithreaded demo command.

No real memory is reserved. Addresses are plain integers standing for
positions inside the simulated pool, so nothing can be read from or written
to them.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## The memory manager

```python
from memspool.memory_manager import MemoryManager, Strategy

manager = MemoryManager(1024 * 1024, Strategy.BEST_FIT)

first = manager.alloc(100)       # an integer address, or None
second = manager.alloc(8192)

manager.free(first)
manager.free(first)              # freeing twice is ignored
manager.free(None)               # so is freeing None

print(manager.fragmentation())
```

`MemoryManager(total_bytes, strategy=Strategy.FIRST_FIT, *, page_size=mmap.PAGESIZE, log=None)`

- The pool holds `total_bytes` rounded up to whole pages (`total_pages`).
  The first page starts at `base_address`, which equals the page size.
  A non-positive `total_bytes` or `page_size` raises `ValueError`.
- `alloc(size)` reserves enough contiguous pages for `size` bytes and returns
  the address of the first one. It returns `None` when `size` is zero or no
  free run is long enough, and raises `ValueError` for a negative size.
  `Strategy.FIRST_FIT` takes the lowest fitting run; `Strategy.BEST_FIT`
  takes the smallest one.
- `free(address)` releases an allocation. `None` and addresses that are not
  currently allocated are ignored.
- `fragmentation()` returns `1 - largest_free_run / total_free_pages`, or
  `0.0` when no page is free.
- If `log` is an open text stream, a header line `ID EVENT DETAILS` is
  written to it, followed by one numbered line per allocation
  (`ALLOC ADDR=... SIZE=... PAGES=...`) and per release
  (`FREE  ADDR=... PAGES=...`).

`AllocInfo` records the `start_page` and `page_count` of an allocation.
All operations are safe to call from several threads.

## The slab allocator

```python
from memspool.slab_allocator import SlabAllocator

slabs = SlabAllocator(64)        # 64-byte objects in 64 KiB slabs
obj = slabs.alloc()
slabs.free(obj)

with slabs:                      # holds the allocator's lock
    a = slabs.alloc()
    b = slabs.alloc()
```

`SlabAllocator(object_size, slab_size=65536, *, max_slabs=None)` hands out
object addresses from its `slabs`, each a `Slab` with a `memory` base address
and a `free_list`. A new slab is added when every object is in use; with
`max_slabs` set, `alloc()` returns `None` once that many slabs exist.
`free(address)` raises `ValueError` for an address outside every slab or not
on an object boundary. A non-positive object size, or a slab smaller than one
object, raises `ValueError`.

The allocator does not lock by itself; wrap calls in `with slabs:` when
several threads share it.

## Commands

### memspool-benchmark

```
memspool-benchmark [--ops N] [--output FILE]
```

Runs the "Variable Size Stress" (1 to 8192 bytes, freeing a random block
every tenth step) and "Small Object Stress" (16 to 515 bytes, freeing a random
block on each step after the halfway point) workloads, each with best fit and
then first fit, against a 16 MiB pool. `--ops` sets the operations per
workload (default 50000); `--output` names the CSV file (default
`benchmark_results.csv`). The columns are:

```
workload,strategy,op_count,total_time_ms,avg_alloc_time_ns,final_fragmentation
```

`run_workload(name, strategy, ops, out)` runs one workload, writes its row to
`out` and returns a `BenchmarkResult`.

### memspool-demo

```
memspool-demo [--threads N] [--ops N] [--log FILE]
```

Starts worker threads (default 4) that share one 4 MiB best-fit pool. Each
performs `--ops` random steps (default 100), either allocating 1 to 2048
bytes or freeing a block it holds, sleeping a millisecond between steps, and
releases everything at the end. `--log` writes the pool's event log to a
file. The demo prints nothing. `worker(manager, ops)` is the function each
thread runs.

## What it does not do

The slab allocator is a separate component: `MemoryManager` always allocates
whole pages, even for small requests, and never uses slabs.