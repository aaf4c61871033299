"""Scroll-position observer driving a feed session."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from src.config.constants import COMPONENT_FEED
from src.feed.models import RenderItem
from src.feed.session import FeedSession


logger = structlog.get_logger()


class FeedEventKind(str, Enum):
    """Events emitted by the controller."""

    ITEM_APPEARED = "item_appeared"
    BATCH_APPENDED = "batch_appended"
    LIKE_TOGGLED = "like_toggled"


@dataclass(frozen=True)
class FeedEvent:
    """Notification delivered to controller listeners.

    Attributes:
        kind: What happened.
        position: Rendered position involved, if any.
        item_id: Item involved, if any.
        count: Number of items appended, for batch events.
        liked: New like state, for like events.
    """

    kind: FeedEventKind
    position: int | None = None
    item_id: str | None = None
    count: int = 0
    liked: bool | None = None


FeedListener = Callable[[FeedEvent], None]


class FeedController:
    """Explicit observer for a rendered feed.

    A UI (or a test) reports visibility and actions by position; the
    controller tracks read items, prefetches through the session and fans
    events out to listeners. A failing listener is logged and skipped.
    """

    def __init__(self, session: FeedSession) -> None:
        """Initialize the controller.

        Args:
            session: Feed session to drive.
        """
        self._session = session
        self._listeners: list[FeedListener] = []
        self._read_ids: set[str] = set()
        self._log = logger.bind(
            component=COMPONENT_FEED,
            subcomponent="controller",
            session_id=session.session_id,
        )

    @property
    def session(self) -> FeedSession:
        """Driven session."""
        return self._session

    @property
    def read_item_ids(self) -> frozenset[str]:
        """Ids of items that have appeared on screen."""
        return frozenset(self._read_ids)

    def add_listener(self, listener: FeedListener) -> None:
        """Register a listener for feed events."""
        self._listeners.append(listener)

    def remove_listener(self, listener: FeedListener) -> None:
        """Unregister a listener; unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start(self) -> list[RenderItem]:
        """Boot the session feed and announce the initial items."""
        appended = self._session.boot()
        if appended:
            self._emit(
                FeedEvent(kind=FeedEventKind.BATCH_APPENDED, count=len(appended))
            )
        return appended

    def item_did_appear(self, index: int) -> list[RenderItem]:
        """Handle an item becoming visible.

        Marks the item read, notifies listeners and prefetches when the
        position is near the end of the feed.

        Args:
            index: Rendered position that became visible.

        Returns:
            Items appended by the prefetch.
        """
        rendered = self._session.rendered_item(index)
        if rendered is None:
            self._log.warning("appear_out_of_range", position=index)
            return []

        self._read_ids.add(rendered.item.id)
        self._emit(
            FeedEvent(
                kind=FeedEventKind.ITEM_APPEARED,
                position=index,
                item_id=rendered.item.id,
            )
        )

        appended = self._session.on_visible_index(index)
        if appended:
            self._emit(
                FeedEvent(
                    kind=FeedEventKind.BATCH_APPENDED,
                    position=index,
                    count=len(appended),
                )
            )
        return appended

    def like(self, index: int) -> bool:
        """Toggle the like on the item at ``index``.

        Returns:
            New like state; False when the position is out of range.
        """
        rendered = self._session.rendered_item(index)
        if rendered is None:
            self._log.warning("like_out_of_range", position=index)
            return False

        liked = self._session.toggle_like(rendered.item.id)
        self._emit(
            FeedEvent(
                kind=FeedEventKind.LIKE_TOGGLED,
                position=index,
                item_id=rendered.item.id,
                liked=liked,
            )
        )
        return liked

    def share(self, index: int) -> str:
        """Share text for the item at ``index``; empty when out of range."""
        rendered = self._session.rendered_item(index)
        if rendered is None:
            self._log.warning("share_out_of_range", position=index)
            return ""
        return self._session.share_text(rendered.item.id)

    def _emit(self, event: FeedEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:  # noqa: BLE001
                self._log.error(
                    "listener_error", event_kind=event.kind.value, error=str(e)
                )
