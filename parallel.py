from functools import partial
from multiprocessing import Pool as ProcessPool

from tqdm import tqdm

from utils import available_cores


def call_with_shared_args(func, shared_args, item):
    return func(item, *shared_args)


class Pool:
    """Maps a function over items, in one or many processes.

    Results are always returned in the order of the items.

    Args:
        processes: count of processes to use; 0 to use all available cores
        progress: show progress bar
    """

    def __init__(self, processes=1, progress=False):
        self.processes = processes or available_cores()
        self.progress = progress

    def map(self, func, iterable, shared_args=tuple()):
        items = list(iterable)
        bar = partial(tqdm, total=len(items), disable=not self.progress)

        if self.processes == 1:
            # for profiling and debugging one process works better
            return [func(item, *shared_args) for item in bar(items)]

        task = partial(call_with_shared_args, func, tuple(shared_args))

        with ProcessPool(min(self.processes, len(items) or 1)) as pool:
            return list(bar(pool.imap(task, items)))
