# src/sheet_tasks/tasks/task_ids.py

"""
ULID-style task identifiers.

Layout: 48-bit millisecond timestamp + 80 random bits, Crockford base32
(26 chars), prefixed (default "TASK-"). Ids from one generator are strictly
increasing: inside the same millisecond the random part is incremented
instead of redrawn.
"""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable

_CROCKFORD = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"

_RANDOM_BITS = 80
_RANDOM_MAX = (1 << _RANDOM_BITS) - 1
_TIME_MAX = (1 << 48) - 1


def _encode(value: int, length: int) -> str:
    chars = []
    for _ in range(length):
        chars.append(_CROCKFORD[value & 0x1F])
        value >>= 5
    return "".join(reversed(chars))


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


class TaskIdGenerator:
    def __init__(
        self,
        prefix: str = "TASK-",
        *,
        clock_ms: Callable[[], int] = _wall_clock_ms,
        random_bits: Callable[[], int] | None = None,
    ) -> None:
        self.prefix = prefix
        self._clock_ms = clock_ms
        self._random_bits = random_bits or (lambda: int.from_bytes(os.urandom(10), "big"))
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_rand = 0

    def __call__(self) -> str:
        return self.new_id()

    def new_id(self) -> str:
        with self._lock:
            now_ms = self._clock_ms()
            if now_ms <= self._last_ms:
                # Same (or rewound) millisecond: keep ordering by bumping randomness.
                now_ms = self._last_ms
                rand = self._last_rand + 1
                if rand > _RANDOM_MAX:
                    now_ms += 1
                    rand = self._random_bits() & _RANDOM_MAX
            else:
                rand = self._random_bits() & _RANDOM_MAX

            self._last_ms = now_ms
            self._last_rand = rand

        return f"{self.prefix}{_encode(now_ms & _TIME_MAX, 10)}{_encode(rand, 16)}"
