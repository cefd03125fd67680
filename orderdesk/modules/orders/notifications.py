"""
Admin Notifications
===================

Transient, auto-dismissing messages shown in the admin panel.

Each notification is independent: it becomes visible after a short delay,
hides after the display duration and is removed once the fade has finished.
The page polls /api/notifications and drives the transitions from the
timings returned there.
"""

import threading
import time
import uuid
from dataclasses import dataclass

KINDS = ('info', 'success', 'error')


@dataclass(frozen=True)
class Notification:
    id: str
    message: str
    kind: str
    created_at: float
    show_delay: float
    duration: float
    fade: float

    @property
    def visible_at(self):
        return self.created_at + self.show_delay

    @property
    def hide_at(self):
        return self.created_at + self.duration

    @property
    def remove_at(self):
        return self.hide_at + self.fade

    def is_visible(self, now):
        return self.visible_at <= now < self.hide_at

    def is_removed(self, now):
        return now >= self.remove_at

    def to_dict(self, now):
        """Timings are returned relative to now, in milliseconds"""
        return {
            'id': self.id,
            'message': self.message,
            'kind': self.kind,
            'visible': self.is_visible(now),
            'show_in_ms': max(0, int((self.visible_at - now) * 1000)),
            'hide_in_ms': max(0, int((self.hide_at - now) * 1000)),
            'remove_in_ms': max(0, int((self.remove_at - now) * 1000)),
        }


class Notifier:
    """Collects notifications until their display time has run out"""

    def __init__(self, show_delay_ms=100, duration_ms=3000, fade_ms=300, clock=time.monotonic):
        self.show_delay = show_delay_ms / 1000
        self.duration = duration_ms / 1000
        self.fade = fade_ms / 1000
        self._clock = clock
        self._lock = threading.Lock()
        self._items = []

    def notify(self, message, kind='info'):
        if kind not in KINDS:
            kind = 'info'
        notification = Notification(
            id=uuid.uuid4().hex,
            message=message,
            kind=kind,
            created_at=self._clock(),
            show_delay=self.show_delay,
            duration=self.duration,
            fade=self.fade,
        )
        with self._lock:
            self._items.append(notification)
        return notification

    def active(self, now=None):
        """Notifications not yet removed, oldest first. Removed ones are pruned."""
        now = self._clock() if now is None else now
        with self._lock:
            self._items = [n for n in self._items if not n.is_removed(now)]
            return list(self._items)

    def snapshot(self):
        now = self._clock()
        return [n.to_dict(now) for n in self.active(now)]
