"""
Token error taxonomy.

Four families, each answering "what must the caller change before retrying":
  - ValidationError  : bad input (null address, zero / out-of-range amount)
  - StateGuardError  : policy rejection (paused, blacklisted, reentrant, unauthorized)
  - CapacityError    : quantity too large; carries requested vs. available
  - TimingError      : cooldown still running; carries the remaining wait
"""

from ..exceptions import CapTokenException


class TokenError(CapTokenException):
    """Base exception for token operations."""


# ── Validation ────────────────────────────────────────────────────────

class ValidationError(TokenError):
    """Caller-supplied input is malformed."""


class InvalidAddressError(ValidationError):
    """Raised when an operation targets the null account (or a non-string key)."""

    def __init__(self, address, role: str = "account"):
        self.address = address
        self.role = role
        super().__init__(f"Invalid {role} address: {address!r}")


class InvalidAmountError(ValidationError):
    """Raised for zero amounts where forbidden, or values outside uint256."""

    def __init__(self, amount, reason: str = "invalid amount"):
        self.amount = amount
        self.reason = reason
        super().__init__(f"{reason}: {amount!r}")


# ── State guards ──────────────────────────────────────────────────────

class StateGuardError(TokenError):
    """Operation rejected by a policy switch."""


class EnforcedPauseError(StateGuardError):
    """Raised when a value-moving operation is attempted while paused."""

    def __init__(self, symbol: str = ""):
        self.symbol = symbol
        super().__init__(f"Token {symbol} is paused" if symbol else "Token is paused")


class AccountBlacklistedError(StateGuardError):
    def __init__(self, account: str):
        self.account = account
        super().__init__(f"Account {account} is blacklisted")


class ReentrancyError(StateGuardError):
    """Raised when a guarded operation is entered while another is in progress."""

    def __init__(self, operation: str = ""):
        self.operation = operation
        msg = "Reentrant call"
        if operation:
            msg += f" into {operation}"
        super().__init__(msg)


class UnauthorizedError(StateGuardError):
    def __init__(self, account: str):
        self.account = account
        super().__init__(f"Account {account} is not the owner")


# ── Capacity ──────────────────────────────────────────────────────────

class CapacityError(TokenError):
    """
    A requested quantity exceeds what is available.

    Attributes:
        requested: The amount the caller asked for
        available: The amount that would have been accepted
    """

    label = "capacity exceeded"

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"{self.label}: requested {requested}, available {available}")


class MaxSupplyExceededError(CapacityError):
    label = "Max supply exceeded"

    @property
    def remaining(self) -> int:
        return self.available


class InsufficientFeeError(CapacityError):
    label = "Insufficient fee"

    @property
    def required(self) -> int:
        return self.requested

    @property
    def provided(self) -> int:
        return self.available


class InsufficientBalanceError(CapacityError):
    label = "Insufficient balance"


class InsufficientAllowanceError(CapacityError):
    label = "Insufficient allowance"


# ── Timing ────────────────────────────────────────────────────────────

class TimingError(TokenError):
    """Operation is valid later, not now."""


class MintCooldownActiveError(TimingError):
    def __init__(self, time_remaining: int):
        self.time_remaining = time_remaining
        super().__init__(f"Mint cooldown active: {time_remaining}s remaining")


# ── Arithmetic ────────────────────────────────────────────────────────

class UintOverflowError(TokenError):
    """Result would exceed UINT256_MAX."""


class UintUnderflowError(TokenError):
    """Result would drop below zero."""


# ── External value transfer ───────────────────────────────────────────

class ValueTransferFailedError(TokenError):
    def __init__(self, recipient: str, amount: int):
        self.recipient = recipient
        self.amount = amount
        super().__init__(f"Native transfer of {amount} to {recipient} failed")
