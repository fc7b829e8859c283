"""Operator notification inbox."""

from __future__ import annotations

from pyfleet.models.notification import Notification


class NotificationInbox:
    """Notifications ordered newest first, with read tracking."""

    def __init__(self) -> None:
        self._items: list[Notification] = []

    def __len__(self) -> int:
        return len(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def add(self, notification: Notification) -> Notification:
        self._items.insert(0, notification)
        return notification

    def remove(self, notification_id: str) -> bool:
        kept = [n for n in self._items if n.id != notification_id]
        removed = len(kept) != len(self._items)
        self._items = kept
        return removed

    def mark_read(self, notification_id: str) -> Notification | None:
        """Mark one notification read; return it, or ``None`` if unknown."""
        for index, notification in enumerate(self._items):
            if notification.id == notification_id:
                marked = notification.model_copy(update={"read": True})
                self._items[index] = marked
                return marked
        return None

    def mark_all_read(self) -> int:
        """Mark everything read; return how many were unread."""
        unread = self.unread_count
        self._items = [n if n.read else n.model_copy(update={"read": True}) for n in self._items]
        return unread

    def clear(self) -> None:
        self._items = []

    def items(self) -> list[Notification]:
        return list(self._items)
