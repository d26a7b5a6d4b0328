"""Visibility gate - tells timers whether their view is on screen"""
import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

VisibilityListener = Callable[[bool], None]


class VisibilityGate:
    """
    Holds the on-screen state of a timer view and notifies listeners on change.

    Listeners are only called when the value actually flips.
    """

    def __init__(self, visible: bool = True):
        self._visible = visible
        self._listeners: List[VisibilityListener] = []

    @property
    def visible(self) -> bool:
        return self._visible

    def subscribe(self, listener: VisibilityListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_visible(self, visible: bool) -> None:
        if visible == self._visible:
            return
        self._visible = visible
        logger.debug(f"Timer view {'visible' if visible else 'hidden'}")
        for listener in list(self._listeners):
            listener(visible)

    def show(self) -> None:
        self.set_visible(True)

    def hide(self) -> None:
        self.set_visible(False)
