"""
Balance / allowance bookkeeping with checked uint256 arithmetic.

The ledger knows nothing about pausing, blacklists or fees; it only keeps
``total_supply == sum(balances)`` true and refuses to wrap on overflow or
underflow.
"""

from typing import Any, Dict, Tuple

from ..constants import UINT256_MAX, ZERO_ADDRESS
from .errors import (
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InvalidAddressError,
    InvalidAmountError,
    UintOverflowError,
    UintUnderflowError,
)


# ══════════════════════════════════════════════════════════════════════
#  CHECKED ARITHMETIC
# ══════════════════════════════════════════════════════════════════════

def require_uint256(value: Any, name: str = "amount") -> int:
    """Return *value* if it is an int in [0, UINT256_MAX], else raise InvalidAmountError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(value, f"{name} must be an integer")
    if value < 0 or value > UINT256_MAX:
        raise InvalidAmountError(value, f"{name} out of uint256 range")
    return value


def checked_add(a: int, b: int) -> int:
    result = a + b
    if result > UINT256_MAX:
        raise UintOverflowError(f"{a} + {b} overflows uint256")
    return result


def checked_sub(a: int, b: int) -> int:
    if b > a:
        raise UintUnderflowError(f"{a} - {b} underflows uint256")
    return a - b


def is_null_address(address: Any) -> bool:
    return address == ZERO_ADDRESS


def require_address(address: Any, role: str = "account") -> str:
    """Reject the null account and anything that is not a non-empty string."""
    if not isinstance(address, str) or not address or is_null_address(address):
        raise InvalidAddressError(address, role)
    return address


# ══════════════════════════════════════════════════════════════════════
#  LEDGER
# ══════════════════════════════════════════════════════════════════════

class Ledger:
    """
    Fungible balances, allowances and the total-supply counter.

    Mutators:
        credit(account, amount)       mint side: balance and supply grow
        debit(account, amount)        burn side: balance and supply shrink
        transfer(sender, recipient, amount)
        approve(owner, spender, amount)
        spend_allowance(owner, spender, amount)
    """

    def __init__(self):
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}  # (owner, spender)
        self._total_supply = 0

    # ── Read-only views ───────────────────────────────────────────────

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def holders(self) -> int:
        return len([b for b in self._balances.values() if b > 0])

    def sum_of_balances(self) -> int:
        return sum(self._balances.values())

    # ── Supply-changing mutations ─────────────────────────────────────

    def credit(self, account: str, amount: int) -> None:
        require_address(account, "receiver")
        require_uint256(amount)
        new_supply = checked_add(self._total_supply, amount)
        new_balance = checked_add(self.balance_of(account), amount)
        self._total_supply = new_supply
        self._balances[account] = new_balance

    def debit(self, account: str, amount: int) -> None:
        require_address(account, "sender")
        require_uint256(amount)
        bal = self.balance_of(account)
        if amount > bal:
            raise InsufficientBalanceError(amount, bal)
        self._balances[account] = bal - amount
        self._total_supply = checked_sub(self._total_supply, amount)

    # ── Supply-preserving mutations ───────────────────────────────────

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        require_address(sender, "sender")
        require_address(recipient, "receiver")
        require_uint256(amount)

        bal = self.balance_of(sender)
        if amount > bal:
            raise InsufficientBalanceError(amount, bal)

        # Self-transfer is a balance no-op
        if sender == recipient:
            return

        new_recipient_balance = checked_add(self.balance_of(recipient), amount)
        self._balances[sender] = bal - amount
        self._balances[recipient] = new_recipient_balance

    def approve(self, owner: str, spender: str, amount: int) -> None:
        require_address(owner, "approver")
        require_address(spender, "spender")
        require_uint256(amount)
        self._allowances[(owner, spender)] = amount

    def spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        """Consume *amount* of spender's allowance; UINT256_MAX means unlimited."""
        require_uint256(amount)
        allow = self.allowance(owner, spender)
        if allow == UINT256_MAX:
            return
        if amount > allow:
            raise InsufficientAllowanceError(amount, allow)
        self._allowances[(owner, spender)] = allow - amount

    # ── Snapshot / restore (for rollback) ─────────────────────────────

    def snapshot(self) -> Dict[str, Any]:
        return {
            "balances": dict(self._balances),
            "allowances": dict(self._allowances),
            "total_supply": self._total_supply,
        }

    def restore(self, snapshot: Dict[str, Any]) -> None:
        self._balances = snapshot["balances"]
        self._allowances = snapshot["allowances"]
        self._total_supply = snapshot["total_supply"]

    def __repr__(self) -> str:
        return f"<Ledger supply={self._total_supply} holders={self.holders()}>"
