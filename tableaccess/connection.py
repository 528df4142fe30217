"""Shared connection pool with an explicit lifecycle."""

import logging
import threading
from contextlib import contextmanager
from enum import Enum

from psycopg2.extras import RealDictCursor
from psycopg2.pool import PoolError, ThreadedConnectionPool

from .errors import AlreadyInitializedError, ConnectionClosedError, NotConfiguredError

logger = logging.getLogger(__name__)


class PoolState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


class _PoolSlot:
    """One open pool plus the bookkeeping for callers currently using it.

    ThreadedConnectionPool raises instead of waiting once maxconn
    connections are out, so ``available`` makes callers queue for one.
    """

    def __init__(self, pool, size, wait_timeout):
        self.pool = pool
        self.available = threading.BoundedSemaphore(size)
        self.wait_timeout = wait_timeout
        self.borrowed = 0
        self.closing = False


class Database:
    """Owns one psycopg2 connection pool.

    Uninitialized -> Ready on initialize(), Ready -> Closed on shutdown().
    A closed Database may be initialized again. Connections borrowed when
    shutdown() is called stay usable; the pool is closed once the last one
    is returned.
    """

    def __init__(self):
        self._slot = None
        self._state = PoolState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def state(self) -> PoolState:
        return self._state

    def initialize(self, config) -> None:
        with self._lock:
            if self._state is PoolState.READY:
                raise AlreadyInitializedError()
            pool = ThreadedConnectionPool(
                config.min_connections, config.max_connections, **config.connect_kwargs()
            )
            self._slot = _PoolSlot(pool, config.max_connections, config.pool_timeout)
            self._state = PoolState.READY
        logger.info(
            "Connection pool ready (min=%d, max=%d)",
            config.min_connections, config.max_connections,
        )

    def shutdown(self) -> None:
        with self._lock:
            if self._state is PoolState.UNINITIALIZED:
                raise NotConfiguredError()
            if self._state is PoolState.CLOSED:
                logger.debug("shutdown() on a closed pool, nothing to do")
                return
            slot, self._slot = self._slot, None
            self._state = PoolState.CLOSED
            slot.closing = True
            in_use = slot.borrowed
        if in_use:
            logger.info("Connection pool closing after %d borrowed connection(s) return", in_use)
        else:
            self._close(slot)

    def _close(self, slot):
        slot.pool.closeall()
        logger.info("Connection pool closed")

    def _check_out(self):
        with self._lock:
            if self._state is PoolState.UNINITIALIZED:
                raise NotConfiguredError()
            if self._state is PoolState.CLOSED:
                raise ConnectionClosedError()
            self._slot.borrowed += 1
            return self._slot

    def _check_in(self, slot):
        with self._lock:
            slot.borrowed -= 1
            last_out = slot.closing and slot.borrowed == 0
        if last_out:
            self._close(slot)

    @contextmanager
    def get_cursor(self):
        """Borrow a pooled connection and yield a dict cursor with auto-commit/rollback.

        Blocks while every pooled connection is in use, for at most the
        configured pool_timeout when one is set.
        """
        slot = self._check_out()
        try:
            if not slot.available.acquire(timeout=slot.wait_timeout):
                raise PoolError(f"no free connection within {slot.wait_timeout}s")
            try:
                conn = slot.pool.getconn()
                try:
                    with conn.cursor(cursor_factory=RealDictCursor) as cur:
                        yield cur
                        conn.commit()
                except Exception:
                    conn.rollback()
                    raise
                finally:
                    slot.pool.putconn(conn)
            finally:
                slot.available.release()
        finally:
            self._check_in(slot)


_default = Database()


def get_database() -> Database:
    """Return the process-wide Database used when none is injected."""
    return _default


def initialize(config) -> None:
    _default.initialize(config)


def shutdown() -> None:
    _default.shutdown()


def get_cursor():
    return _default.get_cursor()
