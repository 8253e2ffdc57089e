"""
ThumbnailQueue - FIFO of pending paths plus the single-job admission lock
"""

from collections import deque
from typing import Deque, List, Optional


class ThumbnailQueue:
    """
    Admission-controlled FIFO

    busy acts as a binary semaphore: admit() hands out at most one path
    until release() is called.
    """

    def __init__(self):
        self.pending: Deque[str] = deque()
        self.busy: bool = False

    def __len__(self) -> int:
        return len(self.pending)

    def __contains__(self, path: str) -> bool:
        return path in self.pending

    def push(self, path: str) -> None:
        self.pending.append(path)

    def admit(self) -> Optional[str]:
        """
        Pop the next path and take the lock.

        Returns:
            The admitted path, or None when busy or empty
        """
        if self.busy or not self.pending:
            return None
        self.busy = True
        return self.pending.popleft()

    def release(self) -> None:
        self.busy = False

    def snapshot(self) -> List[str]:
        return list(self.pending)


__all__ = ['ThumbnailQueue']
