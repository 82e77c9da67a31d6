"""
Policy guards run ahead of every value-moving token operation.

  - AccessControl   : single-owner capability gate
  - PauseGate       : global halt switch
  - BlacklistGuard  : per-account send/receive denylist
  - ReentrancyGuard : scoped mutex around external value transfers

Guards hold their own state but never touch the ledger; the orchestrator
decides the order in which they run.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Set

from ..logger import get_logger
from .errors import (
    AccountBlacklistedError,
    EnforcedPauseError,
    ReentrancyError,
    UnauthorizedError,
)
from .ledger import is_null_address, require_address

logger = get_logger(__name__)


class AccessControl:
    """Owner is fixed at construction."""

    def __init__(self, owner: str):
        self._owner = require_address(owner, "owner")

    @property
    def owner(self) -> str:
        return self._owner

    def require_owner(self, caller: str) -> None:
        if caller != self._owner:
            raise UnauthorizedError(caller)


class PauseGate:
    def __init__(self, symbol: str = ""):
        self._symbol = symbol
        self._paused = False

    @property
    def paused(self) -> bool:
        return self._paused

    def require_not_paused(self) -> None:
        if self._paused:
            raise EnforcedPauseError(self._symbol)

    def set_paused(self, flag: bool) -> bool:
        """Set the flag; returns True only if the state actually changed."""
        flag = bool(flag)
        if flag == self._paused:
            return False
        self._paused = flag
        return True

    def snapshot(self) -> Dict[str, Any]:
        return {"paused": self._paused}

    def restore(self, snapshot: Dict[str, Any]) -> None:
        self._paused = snapshot["paused"]


class BlacklistGuard:
    """
    Denylist checked on both ends of every balance move.

    The null account stands for the outside of the ledger (mint source,
    burn sink) and is never considered blacklisted.
    """

    def __init__(self):
        self._blacklisted: Set[str] = set()

    def is_blacklisted(self, account: str) -> bool:
        return account in self._blacklisted

    def check(self, account: str) -> None:
        if is_null_address(account):
            return
        if account in self._blacklisted:
            raise AccountBlacklistedError(account)

    def set(self, account: str, flag: bool) -> None:
        require_address(account)
        if flag:
            self._blacklisted.add(account)
        else:
            self._blacklisted.discard(account)

    @property
    def accounts(self) -> Set[str]:
        return set(self._blacklisted)

    def snapshot(self) -> Dict[str, Any]:
        return {"blacklisted": set(self._blacklisted)}

    def restore(self, snapshot: Dict[str, Any]) -> None:
        self._blacklisted = snapshot["blacklisted"]


class ReentrancyGuard:
    """
    Non-blocking mutex: a second entry while held is an error, never a wait.

    Use ``held()`` so the lock is released on every exit path::

        with guard.held("emergency_withdraw"):
            ...
    """

    def __init__(self):
        self._locked = False

    @property
    def locked(self) -> bool:
        return self._locked

    def enter(self, operation: str = "") -> None:
        if self._locked:
            logger.warning(f"Reentrancy blocked: {operation or 'guarded call'}")
            raise ReentrancyError(operation)
        self._locked = True

    def exit(self) -> None:
        self._locked = False

    @contextmanager
    def held(self, operation: str = "") -> Iterator[None]:
        self.enter(operation)
        try:
            yield
        finally:
            self.exit()
