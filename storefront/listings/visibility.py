from typing import Callable

VisibilityCallback = Callable[[bool], None]


class Subscription:
    def __init__(self, signal: "VisibilitySignal", callback: VisibilityCallback):
        self._signal = signal
        self._callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._signal._remove(self._callback)


class VisibilitySignal:
    """Hidden/visible flag of the hosting page with change notifications."""

    def __init__(self, hidden: bool = False):
        self._hidden = hidden
        self._callbacks: list[VisibilityCallback] = []

    @property
    def hidden(self) -> bool:
        return self._hidden

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: VisibilityCallback) -> Subscription:
        self._callbacks.append(callback)
        return Subscription(self, callback)

    def _remove(self, callback: VisibilityCallback) -> None:
        self._callbacks.remove(callback)

    def set_hidden(self, hidden: bool) -> None:
        if hidden == self._hidden:
            return
        self._hidden = hidden
        for callback in list(self._callbacks):
            callback(hidden)
