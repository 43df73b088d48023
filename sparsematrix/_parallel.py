import os
from concurrent.futures import ThreadPoolExecutor

from . import _settings


def _worker_count():
    if _settings.MAX_WORKERS > 0:
        return _settings.MAX_WORKERS
    return min(32, (os.cpu_count() or 1) + 4)


def _run_chunk(func, chunk):
    for item in chunk:
        func(item)


def parallel_for_each(func, items, threshold=None):
    """
    Call ``func`` once per item, fanning the calls out over a thread pool.

    The call returns only after every item has been processed, so the writes
    of one stage are visible to the next. The first exception raised by a
    worker is re-raised here.

    Parameters
    ----------
    func : Callable
        Called as ``func(item)``. Each call gets its own arguments; it must
        not rely on state shared with other calls except through thread-safe
        stores.
    items : Iterable
        The independent units of work.
    threshold : int, optional
        Minimum number of items before a pool is used. Defaults to
        ``SPARSEMATRIX_PARALLEL_THRESHOLD``.
    """
    items = items if isinstance(items, list) else list(items)
    if threshold is None:
        threshold = _settings.PARALLEL_THRESHOLD

    workers = _worker_count()
    if not _settings.PARALLEL or workers < 2 or len(items) < max(threshold, 2):
        _run_chunk(func, items)
        return

    size = -(-len(items) // workers)
    chunks = [items[i : i + size] for i in range(0, len(items), size)]
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_run_chunk, func, chunk) for chunk in chunks]

    for future in futures:
        future.result()
