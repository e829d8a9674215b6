"""Latest-value broadcast used for song, playback and engine state streams."""

import asyncio
from typing import AsyncIterator, Generic, Optional, TypeVar

T = TypeVar("T")


class ObservableValue(Generic[T]):
    """Holds the latest value and wakes subscribers when it is replaced.

    Subscribers receive the current value first, then each replacement.
    Slow subscribers skip intermediate values and only see the newest one.
    Setting a value equal to the current one does not wake anyone.
    """

    def __init__(self, initial: Optional[T] = None):
        self._value = initial
        self._version = 0
        self._changed = asyncio.Event()

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def version(self) -> int:
        return self._version

    def set(self, value: Optional[T]) -> None:
        if value == self._value:
            return
        self._value = value
        self._version += 1
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    async def subscribe(self) -> AsyncIterator[Optional[T]]:
        seen = -1
        while True:
            if self._version != seen:
                seen = self._version
                yield self._value
                continue
            await self._changed.wait()
