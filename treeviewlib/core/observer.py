"""Observer registry for TreeViewLib.

Consumers learn about changes to the visible sequence through a
publish/subscribe list owned by the TreeStateManager. Two styles are
supported and may be mixed:

- DataSetObserver objects, registered and unregistered explicitly, which
  get on_changed() for structural changes and on_invalidated() when row
  contents must be re-read.
- Plain callbacks, via subscribe(), which return a Subscription handle with
  an explicit lifecycle.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from loguru import logger


class ChangeKind(Enum):
    """Kind of change signalled to observers."""
    STRUCTURE = "structure"      # Visible identities/positions shifted
    INVALIDATED = "invalidated"  # Contents changed, identities and positions stable


@dataclass(frozen=True)
class ChangeEvent:
    """Description of a change to the visible sequence.

    Attributes:
        kind: STRUCTURE or INVALIDATED
        node_id: Node the change was made at (None for tree-wide changes)
        position: Splice point, the index where rows were inserted or
            removed (-1 when not a single splice)
        inserted: Number of rows inserted at position
        removed: Number of rows removed at position
        changed_position: Index of a row that stayed in place but whose
            expand indicator changed, such as the toggled node or a parent
            that gained or lost its children (-1 when none)
    """
    kind: ChangeKind
    node_id: Any = None
    position: int = -1
    inserted: int = 0
    removed: int = 0
    changed_position: int = -1

    @property
    def is_structural(self) -> bool:
        return self.kind is ChangeKind.STRUCTURE


class DataSetObserver(ABC):
    """Receives change notifications from a TreeStateManager."""

    @abstractmethod
    def on_changed(self, event: ChangeEvent) -> None:
        """Called after the visible sequence changed structurally.

        The manager's state is fully updated when this is called, so the
        observer may query it from inside the callback.
        """
        pass

    def on_invalidated(self, event: ChangeEvent) -> None:
        """Called when row contents must be re-read (see refresh())."""
        pass


class _CallbackObserver(DataSetObserver):
    """Routes both signals to a single callback."""

    def __init__(self, callback: Callable[[ChangeEvent], None]):
        self.callback = callback

    def on_changed(self, event: ChangeEvent) -> None:
        self.callback(event)

    def on_invalidated(self, event: ChangeEvent) -> None:
        self.callback(event)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.callback!r})"


class Subscription:
    """Handle for a callback subscription.

    Can be used as a context manager; leaving the block unsubscribes.
    """

    def __init__(self, registry: 'ObserverRegistry', observer: _CallbackObserver):
        self._registry = registry
        self._observer = observer

    @property
    def active(self) -> bool:
        return self._observer in self._registry

    def unsubscribe(self) -> bool:
        """Stop receiving events. Safe to call more than once.

        Returns:
            True if the subscription was active
        """
        return self._registry.unregister(self._observer)

    def __enter__(self) -> 'Subscription':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.unsubscribe()


class ObserverRegistry:
    """Ordered list of observers, notified in registration order."""

    def __init__(self):
        self._observers: List[DataSetObserver] = []

    def register(self, observer: DataSetObserver) -> bool:
        """Add an observer.

        Returns:
            False if the observer was already registered
        """
        if observer is None:
            raise TypeError("observer must not be None")
        if observer in self._observers:
            logger.debug("OBSERVERS: register ignored, already registered observer={!r}", observer)
            return False
        self._observers.append(observer)
        return True

    def unregister(self, observer: DataSetObserver) -> bool:
        """Remove an observer. Unknown observers are ignored.

        Returns:
            True if the observer was registered
        """
        try:
            self._observers.remove(observer)
        except ValueError:
            return False
        return True

    def subscribe(self, callback: Callable[[ChangeEvent], None]) -> Subscription:
        """Register a plain callback for every event.

        Returns:
            Subscription handle used to unsubscribe
        """
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {callback!r}")
        observer = _CallbackObserver(callback)
        self._observers.append(observer)
        return Subscription(self, observer)

    def unsubscribe(self, subscription: Optional[Subscription]) -> bool:
        if subscription is None:
            return False
        return subscription.unsubscribe()

    def notify(self, event: ChangeEvent) -> None:
        """Deliver an event to every observer.

        Iterates over a snapshot, so observers may register or unregister
        from inside their callback. Observers registered during delivery
        wait for the next event; observers unregistered during delivery
        are skipped.

        Every observer gets the event even if an earlier one raises; the
        first exception is re-raised once delivery is complete.
        """
        logger.debug("OBSERVERS: notify kind={} node_id={} position={} inserted={} removed={} "
                     "changed_position={} observers={}",
                     event.kind.value, event.node_id, event.position, event.inserted,
                     event.removed, event.changed_position, len(self._observers))
        first_error: Optional[Exception] = None
        for observer in list(self._observers):
            if observer not in self._observers:
                continue
            try:
                if event.kind is ChangeKind.STRUCTURE:
                    observer.on_changed(event)
                else:
                    observer.on_invalidated(event)
            except Exception as error:
                logger.warning("OBSERVERS: observer {!r} raised {!r}", observer, error)
                if first_error is None:
                    first_error = error
        if first_error is not None:
            raise first_error

    def clear(self) -> None:
        self._observers.clear()

    def __len__(self) -> int:
        return len(self._observers)

    def __contains__(self, observer: object) -> bool:
        return observer in self._observers
