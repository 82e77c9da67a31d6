"""
Capped token core

Provides:
  - GuardedToken     : capped, fee-mintable token with pause / blacklist / cooldown
  - Ledger           : balance, allowance and total-supply bookkeeping
  - Guards           : AccessControl, PauseGate, BlacklistGuard, ReentrancyGuard
  - Minting controls : SupplyCapEnforcer, CooldownTracker, FeeCollector
"""

from .token import GuardedToken
from .ledger import Ledger, checked_add, checked_sub, require_uint256
from .guards import AccessControl, BlacklistGuard, PauseGate, ReentrancyGuard
from .minting import CooldownTracker, FeeCollector, SupplyCapEnforcer
from .events import (
    ApprovalEvent,
    BlacklistUpdatedEvent,
    BurnedEvent,
    EmergencyWithdrawEvent,
    FeeUpdatedEvent,
    MintedEvent,
    PausedEvent,
    TokenEvent,
    TransferEvent,
    UnpausedEvent,
)
from .errors import (
    AccountBlacklistedError,
    CapacityError,
    EnforcedPauseError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InsufficientFeeError,
    InvalidAddressError,
    InvalidAmountError,
    MaxSupplyExceededError,
    MintCooldownActiveError,
    ReentrancyError,
    StateGuardError,
    TimingError,
    TokenError,
    UintOverflowError,
    UintUnderflowError,
    UnauthorizedError,
    ValidationError,
    ValueTransferFailedError,
)
from .units import format_ether, format_units, parse_ether, parse_units

__all__ = [
    # Orchestrator
    "GuardedToken",
    # Components
    "Ledger",
    "AccessControl",
    "BlacklistGuard",
    "PauseGate",
    "ReentrancyGuard",
    "CooldownTracker",
    "FeeCollector",
    "SupplyCapEnforcer",
    "checked_add",
    "checked_sub",
    "require_uint256",
    # Events
    "TokenEvent",
    "TransferEvent",
    "ApprovalEvent",
    "MintedEvent",
    "BurnedEvent",
    "PausedEvent",
    "UnpausedEvent",
    "BlacklistUpdatedEvent",
    "FeeUpdatedEvent",
    "EmergencyWithdrawEvent",
    # Errors
    "TokenError",
    "ValidationError",
    "InvalidAddressError",
    "InvalidAmountError",
    "StateGuardError",
    "EnforcedPauseError",
    "AccountBlacklistedError",
    "ReentrancyError",
    "UnauthorizedError",
    "CapacityError",
    "MaxSupplyExceededError",
    "InsufficientFeeError",
    "InsufficientBalanceError",
    "InsufficientAllowanceError",
    "TimingError",
    "MintCooldownActiveError",
    "UintOverflowError",
    "UintUnderflowError",
    "ValueTransferFailedError",
    # Units
    "parse_units",
    "format_units",
    "parse_ether",
    "format_ether",
]
