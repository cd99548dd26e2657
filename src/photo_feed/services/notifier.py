"""Change notification channel."""

import inspect
import weakref
from collections.abc import Callable

Observer = Callable[[], object]


class ChangeNotifier:
    """Named broadcast event without a payload.

    Observers are called synchronously, in registration order, on the caller's
    thread. Bound methods are held weakly so the notifier never keeps their
    owners alive; plain functions are held as given.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._observers: list[Callable[[], Observer | None]] = []

    def subscribe(self, observer: Observer) -> None:
        """Register an observer; subscribing twice has no effect."""
        if self._find(observer) is not None:
            return
        if inspect.ismethod(observer):
            self._observers.append(weakref.WeakMethod(observer))
        else:
            self._observers.append(lambda: observer)

    def unsubscribe(self, observer: Observer) -> None:
        """Remove an observer if it is registered."""
        index = self._find(observer)
        if index is not None:
            del self._observers[index]

    def publish(self) -> None:
        """Deliver the event to every live observer."""
        live: list[Observer] = []
        for ref in list(self._observers):
            observer = ref()
            if observer is None:
                self._observers.remove(ref)
                continue
            live.append(observer)
        for observer in live:
            observer()

    def __len__(self) -> int:
        return sum(1 for ref in self._observers if ref() is not None)

    def _find(self, observer: Observer) -> int | None:
        for index, ref in enumerate(self._observers):
            current = ref()
            if current is observer or (
                inspect.ismethod(observer) and current == observer
            ):
                return index
        return None
