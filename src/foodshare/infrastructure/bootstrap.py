"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from collections.abc import Callable

from foodshare.application.locks import KeyedLocks
from foodshare.domain.clock import Clock, SystemClock
from foodshare.domain.repository.unit_of_work import UnitOfWork
from foodshare.infrastructure.config import get_settings
from foodshare.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork

# One registry per process: every handler must serialize on the same locks.
_LOCKS = KeyedLocks()
_CLOCK = SystemClock()


def unit_of_work_factory() -> Callable[[], UnitOfWork]:
    data_file = get_settings().data_file
    return lambda: JsonUnitOfWork(data_file)


def locks() -> KeyedLocks:
    return _LOCKS


def clock() -> Clock:
    return _CLOCK
