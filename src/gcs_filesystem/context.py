"""
Request context carried by a driver into every backend call.

A context bundles a cancellation flag and an optional deadline. Drivers call
``check()`` before talking to the backend and pass ``timeout()`` down to the
client, so a caller can bound or abort the work done on its behalf.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from .constants import DEFAULT_TIMEOUT
from .errors import DeadlineExceeded, OperationCancelled


@dataclass
class RequestContext:
    """
    Cancellation and deadline for a sequence of driver operations.

    Attributes:
        deadline: ``time.monotonic()`` value after which calls fail, or None
        default_timeout: Per-call timeout used when there is no deadline
    """

    deadline: Optional[float] = None
    default_timeout: float = DEFAULT_TIMEOUT
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def background(cls) -> "RequestContext":
        """A context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "RequestContext":
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one."""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def check(self) -> None:
        """
        Fail fast when the context can no longer be used.

        Raises:
            OperationCancelled: If ``cancel()`` was called
            DeadlineExceeded: If the deadline has passed
        """
        if self.cancelled:
            raise OperationCancelled("Operation cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceeded("Context deadline exceeded")

    def timeout(self) -> float:
        """Timeout to hand to the next backend call."""
        remaining = self.remaining()
        if remaining is None:
            return self.default_timeout
        return max(remaining, 0.0)
