# commentlens/services/profile_stream.py
"""
Profile Stream
Live "current profile" snapshot with push notifications to subscribers
"""

import logging
import threading
from typing import Callable, List, Optional

from commentlens.domain.models import UserProfile

logger = logging.getLogger(__name__)

ProfileListener = Callable[[Optional[UserProfile]], None]


class ProfileStream:
    """
    Holds the signed-in user's profile and notifies listeners on change

    New subscribers receive the current value immediately, so a consumer
    never has to poll for the initial state.
    """

    def __init__(self, initial: Optional[UserProfile] = None):
        self._current = initial
        self._listeners: List[ProfileListener] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def current(self) -> Optional[UserProfile]:
        return self._current

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: ProfileListener) -> Callable[[], None]:
        """
        Register a listener

        Returns:
            Callable that removes the listener again
        """
        with self._lock:
            if not self._closed:
                self._listeners.append(listener)
            current = self._current

        listener(current)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, profile: Optional[UserProfile]) -> None:
        """Replace the snapshot and push it to every listener"""
        with self._lock:
            if self._closed:
                logger.debug("Profile stream closed, dropping update")
                return
            self._current = profile
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(profile)
            except Exception as e:
                logger.error(f"❌ Profile listener failed: {e}")

    def close(self) -> None:
        """Drop all listeners; later publishes are ignored"""
        with self._lock:
            self._closed = True
            self._listeners.clear()
        logger.info("🔌 Profile stream closed")
