"""Several threads sharing one page pool with random alloc/free traffic."""

from __future__ import annotations

import argparse
import random
import threading
import time
from contextlib import ExitStack
from typing import Optional, Sequence

from memspool.memory_manager import MemoryManager, Strategy

THREADS = 4
OPS = 100
POOL_BYTES = 4 * 1024 * 1024
DELAY = 0.001


def worker(manager: MemoryManager, ops: int = OPS) -> None:
    """Randomly allocate and free blocks, then release everything still held."""
    held: list[int] = []
    for _ in range(ops):
        if not held or random.randrange(2) == 0:
            address = manager.alloc(random.randint(1, 2048))
            if address is not None:
                held.append(address)
        else:
            manager.free(held.pop(random.randrange(len(held))))
        time.sleep(DELAY)
    for address in held:
        manager.free(address)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Exercise the page pool from several threads.")
    parser.add_argument("--threads", type=int, default=THREADS)
    parser.add_argument("--ops", type=int, default=OPS)
    parser.add_argument("--log", help="file to record allocation events in")
    args = parser.parse_args(argv)

    with ExitStack() as stack:
        log = stack.enter_context(open(args.log, "w")) if args.log else None
        manager = MemoryManager(POOL_BYTES, Strategy.BEST_FIT, log=log)
        threads = [threading.Thread(target=worker, args=(manager, args.ops)) for _ in range(args.threads)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())