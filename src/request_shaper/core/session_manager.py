# src/request_shaper/core/session_manager.py
"""
Thread-local requests.Session объекты для APIClient.

Запросы (APIRequest) создаются на каждый вызов, а вот соединения
переиспользуются: каждый поток получает собственную сессию.
"""
import threading
import weakref
from typing import Callable, Set

import requests


class ThreadSafeSessionManager:
    """
    Manages thread-local requests.Session instances.

    Sessions are created lazily on first access per thread and tracked
    through weak references so that ``close_all`` can close sessions
    created by other threads.

    Example:
        >>> manager = ThreadSafeSessionManager(requests.Session)
        >>> session = manager.get_session()
        >>> manager.close_all()
    """

    def __init__(self, session_factory: Callable[[], requests.Session]):
        self._session_factory = session_factory
        self._local = threading.local()
        self._all_sessions: Set[weakref.ref] = set()
        self._sessions_lock = threading.Lock()

    def get_session(self) -> requests.Session:
        """Сессия текущего потока (создаётся при первом обращении)."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._sessions_lock:
                self._all_sessions.add(weakref.ref(session, self._discard_ref))
        return session

    def _discard_ref(self, ref: weakref.ref) -> None:
        with self._sessions_lock:
            self._all_sessions.discard(ref)

    def close_current_session(self) -> None:
        """Закрыть сессию только текущего потока."""
        session = getattr(self._local, 'session', None)
        if session is not None:
            self._local.session = None
            session.close()

    def close_all(self) -> None:
        """
        Закрыть сессии всех потоков.

        Safe to call multiple times.
        """
        self.close_current_session()

        with self._sessions_lock:
            refs = list(self._all_sessions)
            self._all_sessions.clear()

        for ref in refs:
            session = ref()
            if session is not None:
                session.close()

    def get_active_sessions_count(self) -> int:
        """Количество живых (не собранных GC) сессий."""
        with self._sessions_lock:
            return sum(1 for ref in self._all_sessions if ref() is not None)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close_all()
        return False
