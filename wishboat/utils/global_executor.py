"""Storage and password hashing both run blocking calls on thread pools, here is one to be shared.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

_global_thread_pool_executor: Optional[ThreadPoolExecutor] = None


def get() -> ThreadPoolExecutor:
    """Return the shared thread pool executor, create it if it does not exists."""
    global _global_thread_pool_executor
    if not _global_thread_pool_executor:
        _global_thread_pool_executor = ThreadPoolExecutor(
            None, "wishboat.utils.global_thread_pool_executor"
        )
    return _global_thread_pool_executor


def shutdown() -> None:
    """Shut the shared executor down. A new one is created on the next `get`."""
    global _global_thread_pool_executor
    if _global_thread_pool_executor:
        _global_thread_pool_executor.shutdown(wait=False)
        _global_thread_pool_executor = None
