"""
Execution context for the per-locus test phases

Holds the worker count, the joblib pool and a cancellation flag. The pool
is only alive inside a ``with`` block and is released on every exit path.
"""

import threading
import numpy as np
from typing import Callable, Optional
from joblib import Parallel, delayed

from .errors import ConfigurationError, ComputationCancelled

# Used when a function is called with verbose=None
DEFAULT_VERBOSITY = 2


def resolve_verbosity(verbose: Optional[int]) -> int:
    """Verbosity: 0 silent, 1 begin and end, 2 progress, 3 progress bars and summary, 5 full report"""
    if verbose is None:
        return DEFAULT_VERBOSITY
    return int(verbose)


class ExecutionContext:
    """Worker configuration shared by the call-rate and heterozygosity phases

    Example:
        >>> with ExecutionContext(ncores=4) as ctx:
        ...     results = ctx.map_chunks(independence_tests, tables)
    """

    def __init__(self, ncores: int = 1, backend: str = 'loky', verbose: int = 0):
        if isinstance(ncores, bool) or not isinstance(ncores, (int, np.integer)) or ncores < 1:
            raise ConfigurationError(f"Parameter 'ncores' must be a positive integer, got {ncores!r}")
        self.ncores = int(ncores)
        self.backend = backend
        self.verbose = verbose
        self._cancelled = threading.Event()
        self._parallel: Optional[Parallel] = None
        self._depth = 0

    @property
    def parallel(self) -> bool:
        return self.ncores > 1

    def __enter__(self) -> "ExecutionContext":
        self._depth += 1
        if self.parallel and self._parallel is None:
            self._parallel = Parallel(n_jobs=self.ncores, backend=self.backend)
            self._parallel.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        # Nested blocks share the pool acquired by the outermost one.
        self._depth -= 1
        if self._depth == 0 and self._parallel is not None:
            try:
                self._parallel.__exit__(exc_type, exc, tb)
            finally:
                self._parallel = None
        return False

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def check_cancelled(self) -> None:
        if self.cancelled:
            raise ComputationCancelled("Analysis cancelled")

    def map_chunks(self, func: Callable[[np.ndarray], np.ndarray], items: np.ndarray) -> np.ndarray:
        """Apply ``func`` to contiguous index chunks of ``items`` and concatenate

        Chunks are contiguous slices by locus index, one per worker, and
        results are concatenated in chunk order, so the output row i always
        belongs to input row i.
        """
        self.check_cancelled()
        if not self.parallel or len(items) < 2:
            return func(items)

        chunks = [chunk for chunk in np.array_split(items, self.ncores) if len(chunk) > 0]
        if self._parallel is not None:
            chunk_results = self._parallel(delayed(func)(chunk) for chunk in chunks)
        else:
            # Used outside a ``with`` block: one-shot pool for this call only.
            with Parallel(n_jobs=self.ncores, backend=self.backend) as parallel:
                chunk_results = parallel(delayed(func)(chunk) for chunk in chunks)
        return np.concatenate(chunk_results, axis=0)
