""" Fixed size pool of worker threads

Region kernels are compiled with nogil=True, so threads run them truly in
parallel. With a single worker everything runs in the calling thread.
"""


import logging
from concurrent.futures import ThreadPoolExecutor, wait


logger = logging.getLogger(__name__)


class WorkerPool:
    """ Map a function over partitions

    Example
    -------
    with WorkerPool(4) as pool:
        partial_max = pool.map(lambda p: region_max(g, p), parts)
    """
    def __init__(self, workers=1):
        workers = int(workers)
        if workers < 1:
            raise ValueError("Number of workers must be >= 1")
        self.workers = workers
        self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _get_executor(self):
        if self._executor is None:
            logger.debug(f"Starting pool of {self.workers} threads")
            self._executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="sobel")
        return self._executor

    def map(self, fn, partitions):
        """ Apply fn to each partition and wait for all of them

        Results are returned in the order of partitions. When partitions fail,
        the exception of the first failed partition in partition order is
        re-raised. With several workers this happens only after all of them
        finished, a single worker stops at the first failure.
        """
        partitions = list(partitions)
        if self.workers == 1 or len(partitions) <= 1:
            return [fn(p) for p in partitions]
        futures = [self._get_executor().submit(fn, p) for p in partitions]
        wait(futures)
        return [f.result() for f in futures]

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
