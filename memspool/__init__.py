"""Simulated page-based memory pool, slab allocator, benchmark and threaded demo."""

__version__ = "0.1.0"
__all__ = ["memory_manager", "slab_allocator", "benchmark", "demo"]