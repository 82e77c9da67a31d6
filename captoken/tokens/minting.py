"""
Issuance controls: supply cap, per-account cooldown, and fee collection.
"""

from typing import Any, Dict, Optional

from .errors import (
    InsufficientFeeError,
    MaxSupplyExceededError,
    MintCooldownActiveError,
)
from .ledger import Ledger, checked_add, require_uint256


class SupplyCapEnforcer:
    """Read-only view over a ledger that refuses mints past ``max_supply``."""

    def __init__(self, ledger: Ledger, max_supply: int):
        self._ledger = ledger
        self._max_supply = require_uint256(max_supply, "max_supply")

    @property
    def max_supply(self) -> int:
        return self._max_supply

    def remaining(self) -> int:
        return self._max_supply - self._ledger.total_supply

    def check_mint(self, amount: int) -> None:
        remaining = self.remaining()
        if amount > remaining:
            raise MaxSupplyExceededError(amount, remaining)


class CooldownTracker:
    """
    Minimum spacing between two fee-mints by the same account.

    Timestamps are integer seconds. An account that never minted has no
    entry and no cooldown.
    """

    def __init__(self, window: int):
        self._window = require_uint256(window, "cooldown window")
        self._last_mint: Dict[str, int] = {}

    @property
    def window(self) -> int:
        return self._window

    def last_mint_time(self, account: str) -> Optional[int]:
        return self._last_mint.get(account)

    def remaining(self, account: str, now: int) -> int:
        last = self._last_mint.get(account)
        if last is None:
            return 0
        return max(0, last + self._window - now)

    def can_mint(self, account: str, now: int) -> bool:
        return self.remaining(account, now) == 0

    def check_and_record(self, account: str, now: int) -> None:
        wait = self.remaining(account, now)
        if wait > 0:
            raise MintCooldownActiveError(wait)
        self._last_mint[account] = now

    def snapshot(self) -> Dict[str, Any]:
        return {"last_mint": dict(self._last_mint)}

    def restore(self, snapshot: Dict[str, Any]) -> None:
        self._last_mint = snapshot["last_mint"]


class FeeCollector:
    """
    Validates attached payments and holds them in the treasury.

    The whole payment is kept, including anything above the fee.
    """

    def __init__(self, fee: int):
        self._fee = require_uint256(fee, "minting fee")
        self._treasury = 0

    @property
    def current_fee(self) -> int:
        return self._fee

    @property
    def treasury(self) -> int:
        return self._treasury

    def check_fee(self, paid: int) -> None:
        if paid < self._fee:
            raise InsufficientFeeError(self._fee, paid)

    def collect(self, paid: int) -> None:
        self._treasury = checked_add(self._treasury, paid)

    def set_fee(self, new_fee: int) -> int:
        """Replace the fee and return the previous one."""
        require_uint256(new_fee, "minting fee")
        old, self._fee = self._fee, new_fee
        return old

    def drain(self) -> int:
        amount, self._treasury = self._treasury, 0
        return amount

    def snapshot(self) -> Dict[str, Any]:
        return {"fee": self._fee, "treasury": self._treasury}

    def restore(self, snapshot: Dict[str, Any]) -> None:
        self._fee = snapshot["fee"]
        self._treasury = snapshot["treasury"]
