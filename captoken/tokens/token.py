"""
Guarded capped token: public entry points.

Implements a fungible token with:
  - ERC-20 style interface (transfer, approve, transferFrom, balanceOf)
  - Hard supply cap shared by owner mints and public fee-mints
  - Fee-gated public minting with a per-account cooldown
  - Owner-controlled pause switch and blacklist
  - Reentrancy-guarded emergency withdrawal of collected fees

Every state-changing call is atomic: guards run first, in a fixed order,
then the ledger is mutated and events are appended. If anything raises, all
state touched by the call (ledger, treasury, cooldowns, flags, event log) is
restored before the exception propagates.
"""

import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..constants import (
    DEFAULT_DECIMALS,
    DEFAULT_MINTING_FEE,
    MAX_DECIMALS,
    MAX_SUPPLY,
    MINT_COOLDOWN,
    ZERO_ADDRESS,
)
from ..logger import get_logger
from .errors import (
    InvalidAmountError,
    TokenError,
    ValueTransferFailedError,
)
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
from .guards import AccessControl, BlacklistGuard, PauseGate, ReentrancyGuard
from .ledger import Ledger, require_address, require_uint256
from .minting import CooldownTracker, FeeCollector, SupplyCapEnforcer

logger = get_logger(__name__)


def _system_clock() -> int:
    return int(time.time())


def _require_positive(amount: Any, what: str) -> int:
    require_uint256(amount)
    if amount == 0:
        raise InvalidAmountError(amount, f"{what} amount must be positive")
    return amount


class GuardedToken:
    """
    Capped, fee-mintable fungible token.

    Value-moving operations:
        - mint_with_fee(caller, to, amount, paid)   public, pays the fee
        - mint(caller, to, amount)                  owner only
        - burn(caller, amount)
        - transfer(caller, to, amount)
        - transfer_from(caller, sender, to, amount)

    Native value:
        - receive(caller, amount)                   deposit into the treasury

    Administrative operations (owner only):
        - pause / unpause
        - set_blacklist(caller, account, flag)
        - set_minting_fee(caller, new_fee)
        - emergency_withdraw(caller)

    ``caller`` is the identity issuing the call and ``paid`` the native
    value attached to it. Time-dependent calls accept ``now`` (integer
    seconds); when omitted the injected clock is read.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        initial_supply: int,
        owner: str,
        *,
        decimals: int = DEFAULT_DECIMALS,
        max_supply: int = MAX_SUPPLY,
        minting_fee: int = DEFAULT_MINTING_FEE,
        mint_cooldown: int = MINT_COOLDOWN,
        clock: Optional[Callable[[], int]] = None,
        transfer_value_fn: Optional[Callable[[str, int], bool]] = None,
    ):
        """
        Args:
            name: Human-readable token name
            symbol: Short ticker (e.g. "MTK")
            initial_supply: Base units credited to *owner* at construction
            owner: Administrator identity, fixed for the token's lifetime
            decimals: Fractional digits (display only)
            max_supply: Hard cap on total supply
            minting_fee: Initial fee for mint_with_fee, in native base units
            mint_cooldown: Seconds between two fee-mints by the same caller
            clock: () -> int seconds; defaults to wall-clock time
            transfer_value_fn: (recipient, amount) -> bool, pays native value
                out of the treasury; when omitted payouts always succeed
        """
        if not name:
            raise TokenError("Token name cannot be empty")
        if not symbol:
            raise TokenError("Token symbol cannot be empty")
        if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= MAX_DECIMALS:
            raise TokenError(f"Decimals must be 0-{MAX_DECIMALS}, got {decimals}")
        require_uint256(initial_supply, "initial supply")
        require_uint256(max_supply, "max supply")
        if initial_supply > max_supply:
            raise TokenError(
                f"Initial supply exceeds max supply: {initial_supply} > {max_supply}"
            )

        self.name = name
        self.symbol = symbol
        self.decimals = decimals

        self._access = AccessControl(owner)
        self._ledger = Ledger()
        self._supply_cap = SupplyCapEnforcer(self._ledger, max_supply)
        self._pause = PauseGate(symbol)
        self._blacklist = BlacklistGuard()
        self._cooldown = CooldownTracker(mint_cooldown)
        self._fees = FeeCollector(minting_fee)
        self._reentrancy = ReentrancyGuard()

        self._clock = clock or _system_clock
        self._transfer_value_fn = transfer_value_fn

        # Event log
        self._events: List[TokenEvent] = []

        self._created_at = self._now(None)
        if initial_supply > 0:
            self._ledger.credit(owner, initial_supply)
            self._emit(
                TransferEvent, self._created_at,
                sender=ZERO_ADDRESS, recipient=owner, amount=initial_supply,
            )

        logger.info(
            f"Token deployed: {symbol} ({name}), supply={initial_supply}, "
            f"cap={max_supply}, owner={owner}"
        )

    @classmethod
    def from_config(cls, config, **kwargs) -> "GuardedToken":
        """Build a token from a ``captoken.config.TokenConfig``."""
        config.validate()
        return cls(
            name=config.name,
            symbol=config.symbol,
            initial_supply=config.initial_supply,
            owner=config.owner,
            decimals=config.decimals,
            max_supply=config.max_supply,
            minting_fee=config.minting_fee,
            mint_cooldown=config.mint_cooldown,
            **kwargs,
        )

    # ── Read-only views ───────────────────────────────────────────────

    @property
    def owner(self) -> str:
        return self._access.owner

    @property
    def total_supply(self) -> int:
        return self._ledger.total_supply

    @property
    def max_supply(self) -> int:
        return self._supply_cap.max_supply

    @property
    def mint_cooldown(self) -> int:
        return self._cooldown.window

    def balance_of(self, account: str) -> int:
        return self._ledger.balance_of(account)

    def allowance(self, owner: str, spender: str) -> int:
        return self._ledger.allowance(owner, spender)

    def remaining_supply(self) -> int:
        return self._supply_cap.remaining()

    def cooldown_remaining(self, account: str, now: Optional[int] = None) -> int:
        return self._cooldown.remaining(account, self._now(now))

    def can_mint(self, account: str, now: Optional[int] = None) -> bool:
        return self._cooldown.can_mint(account, self._now(now))

    def last_mint_time(self, account: str) -> Optional[int]:
        return self._cooldown.last_mint_time(account)

    def is_blacklisted(self, account: str) -> bool:
        return self._blacklist.is_blacklisted(account)

    def is_paused(self) -> bool:
        return self._pause.paused

    def current_fee(self) -> int:
        return self._fees.current_fee

    @property
    def minting_fee(self) -> int:
        return self._fees.current_fee

    @property
    def treasury_balance(self) -> int:
        return self._fees.treasury

    @property
    def events(self) -> List[TokenEvent]:
        return list(self._events)

    def invariants_hold(self) -> bool:
        """Supply equals the sum of balances and stays under the cap."""
        supply = self._ledger.total_supply
        return supply == self._ledger.sum_of_balances() and supply <= self.max_supply

    # ── Internals ─────────────────────────────────────────────────────

    def _now(self, now: Optional[int]) -> int:
        return int(self._clock()) if now is None else now

    def _emit(self, event_cls, timestamp: int, **fields) -> TokenEvent:
        event = event_cls(
            token_symbol=self.symbol,
            log_index=len(self._events),
            timestamp=timestamp,
            **fields,
        )
        self._events.append(event)
        return event

    def _take_snapshot(self) -> Dict[str, Any]:
        """Capture every piece of mutable state a call may touch."""
        return {
            "ledger": self._ledger.snapshot(),
            "pause": self._pause.snapshot(),
            "blacklist": self._blacklist.snapshot(),
            "cooldown": self._cooldown.snapshot(),
            "fees": self._fees.snapshot(),
            "event_count": len(self._events),
        }

    def _restore_snapshot(self, snapshot: Dict[str, Any]) -> None:
        self._ledger.restore(snapshot["ledger"])
        self._pause.restore(snapshot["pause"])
        self._blacklist.restore(snapshot["blacklist"])
        self._cooldown.restore(snapshot["cooldown"])
        self._fees.restore(snapshot["fees"])
        del self._events[snapshot["event_count"]:]

    @contextmanager
    def _atomic(self, operation: str) -> Iterator[None]:
        snapshot = self._take_snapshot()
        try:
            yield
        except Exception as e:
            self._restore_snapshot(snapshot)
            logger.debug(f"{operation} reverted on {self.symbol}: {e}")
            raise

    def _send_value(self, recipient: str, amount: int) -> bool:
        if self._transfer_value_fn is None:
            return True
        return bool(self._transfer_value_fn(recipient, amount))

    # ── Minting ───────────────────────────────────────────────────────

    def mint_with_fee(
        self,
        caller: str,
        to: str,
        amount: int,
        paid: int,
        now: Optional[int] = None,
    ) -> MintedEvent:
        """
        Public mint paid for with native value.

        The full payment is retained in the treasury, including any excess
        over the fee. The cooldown applies to *caller*, not to *to*.
        """
        with self._reentrancy.held("mint_with_fee"), self._atomic("mint_with_fee"):
            self._pause.require_not_paused()
            require_address(to, "receiver")
            _require_positive(amount, "Mint")
            require_uint256(paid, "paid")
            self._blacklist.check(to)
            self._fees.check_fee(paid)
            self._supply_cap.check_mint(amount)

            ts = self._now(now)
            self._cooldown.check_and_record(caller, ts)

            self._ledger.credit(to, amount)
            self._fees.collect(paid)

            self._emit(TransferEvent, ts, sender=ZERO_ADDRESS, recipient=to, amount=amount)
            event = self._emit(MintedEvent, ts, recipient=to, amount=amount, fee=paid)

        logger.info(f"Minted: {amount} {self.symbol} → {to} (fee {paid}, by {caller})")
        return event

    def mint(
        self,
        caller: str,
        to: str,
        amount: int,
        now: Optional[int] = None,
    ) -> MintedEvent:
        """Owner mint. Free, no cooldown, still capped and pause-gated."""
        with self._atomic("mint"):
            self._access.require_owner(caller)
            self._pause.require_not_paused()
            require_address(to, "receiver")
            _require_positive(amount, "Mint")
            self._blacklist.check(to)
            self._supply_cap.check_mint(amount)

            ts = self._now(now)
            self._ledger.credit(to, amount)

            self._emit(TransferEvent, ts, sender=ZERO_ADDRESS, recipient=to, amount=amount)
            event = self._emit(MintedEvent, ts, recipient=to, amount=amount, fee=0)

        logger.info(f"Owner minted: {amount} {self.symbol} → {to}")
        return event

    def burn(self, caller: str, amount: int, now: Optional[int] = None) -> BurnedEvent:
        with self._atomic("burn"):
            self._pause.require_not_paused()
            self._blacklist.check(caller)
            _require_positive(amount, "Burn")

            ts = self._now(now)
            self._ledger.debit(caller, amount)

            self._emit(TransferEvent, ts, sender=caller, recipient=ZERO_ADDRESS, amount=amount)
            event = self._emit(BurnedEvent, ts, sender=caller, amount=amount)

        logger.info(f"Burned: {caller} burned {amount} {self.symbol}")
        return event

    # ── Transfers ─────────────────────────────────────────────────────

    def transfer(
        self,
        caller: str,
        to: str,
        amount: int,
        now: Optional[int] = None,
    ) -> TransferEvent:
        with self._atomic("transfer"):
            self._pause.require_not_paused()
            self._blacklist.check(caller)
            self._blacklist.check(to)

            self._ledger.transfer(caller, to, amount)
            event = self._emit(
                TransferEvent, self._now(now),
                sender=caller, recipient=to, amount=amount,
            )

        logger.debug(f"Transfer: {caller} → {to} {amount} {self.symbol}")
        return event

    def transfer_from(
        self,
        caller: str,
        sender: str,
        to: str,
        amount: int,
        now: Optional[int] = None,
    ) -> TransferEvent:
        """Move *sender*'s tokens using the allowance granted to *caller*."""
        with self._atomic("transfer_from"):
            self._pause.require_not_paused()
            self._blacklist.check(sender)
            self._blacklist.check(to)

            self._ledger.spend_allowance(sender, caller, amount)
            self._ledger.transfer(sender, to, amount)
            event = self._emit(
                TransferEvent, self._now(now),
                sender=sender, recipient=to, amount=amount,
            )

        logger.debug(
            f"transferFrom: spender={caller} {sender} → {to} {amount} {self.symbol}"
        )
        return event

    def approve(
        self,
        caller: str,
        spender: str,
        amount: int,
        now: Optional[int] = None,
    ) -> ApprovalEvent:
        """Set *spender*'s allowance over *caller*'s balance. UINT256_MAX is unlimited."""
        with self._atomic("approve"):
            self._ledger.approve(caller, spender, amount)
            event = self._emit(
                ApprovalEvent, self._now(now),
                owner=caller, spender=spender, amount=amount,
            )

        logger.debug(f"Approve: {caller} → {spender} allowance={amount} {self.symbol}")
        return event

    # ── Administration ────────────────────────────────────────────────

    def pause(self, caller: str, now: Optional[int] = None) -> bool:
        """Halt value movement. Returns False if the token was already paused."""
        with self._atomic("pause"):
            self._access.require_owner(caller)
            changed = self._pause.set_paused(True)
            if changed:
                self._emit(PausedEvent, self._now(now), account=caller)

        if changed:
            logger.warning(f"Token {self.symbol} PAUSED by {caller}")
        else:
            logger.warning(f"Token {self.symbol} already paused, nothing to do")
        return changed

    def unpause(self, caller: str, now: Optional[int] = None) -> bool:
        """Resume value movement. Returns False if the token was not paused."""
        with self._atomic("unpause"):
            self._access.require_owner(caller)
            changed = self._pause.set_paused(False)
            if changed:
                self._emit(UnpausedEvent, self._now(now), account=caller)

        if changed:
            logger.info(f"Token {self.symbol} unpaused by {caller}")
        else:
            logger.warning(f"Token {self.symbol} is not paused, nothing to do")
        return changed

    def set_blacklist(
        self,
        caller: str,
        account: str,
        flag: bool,
        now: Optional[int] = None,
    ) -> BlacklistUpdatedEvent:
        with self._atomic("set_blacklist"):
            self._access.require_owner(caller)
            self._blacklist.set(account, flag)
            event = self._emit(
                BlacklistUpdatedEvent, self._now(now), account=account, flag=bool(flag),
            )

        if flag:
            logger.warning(f"Account {account} BLACKLISTED on {self.symbol}")
        else:
            logger.info(f"Account {account} removed from {self.symbol} blacklist")
        return event

    def set_minting_fee(
        self,
        caller: str,
        new_fee: int,
        now: Optional[int] = None,
    ) -> FeeUpdatedEvent:
        with self._atomic("set_minting_fee"):
            self._access.require_owner(caller)
            old_fee = self._fees.set_fee(new_fee)
            event = self._emit(
                FeeUpdatedEvent, self._now(now), old_fee=old_fee, new_fee=new_fee,
            )

        logger.info(f"Minting fee for {self.symbol}: {old_fee} → {new_fee}")
        return event

    def receive(self, caller: str, amount: int, now: Optional[int] = None) -> int:
        """
        Accept a plain native payment into the treasury.

        Not pause-gated and emits no event. Returns the new treasury balance.
        """
        with self._atomic("receive"):
            require_uint256(amount)
            self._fees.collect(amount)

        logger.info(f"Received {amount} native from {caller} into {self.symbol} treasury")
        return self._fees.treasury

    def emergency_withdraw(
        self,
        caller: str,
        now: Optional[int] = None,
    ) -> EmergencyWithdrawEvent:
        """
        Pay the whole treasury to the owner.

        The treasury is zeroed before the external transfer runs; if the
        transfer reports failure or raises, the call is rolled back and the
        treasury is intact.
        """
        self._access.require_owner(caller)
        with self._reentrancy.held("emergency_withdraw"), self._atomic("emergency_withdraw"):
            if self._fees.treasury == 0:
                raise InvalidAmountError(0, "Treasury is empty")

            recipient = self._access.owner
            amount = self._fees.drain()
            if not self._send_value(recipient, amount):
                raise ValueTransferFailedError(recipient, amount)

            event = self._emit(
                EmergencyWithdrawEvent, self._now(now), recipient=recipient, amount=amount,
            )

        logger.warning(f"Treasury WITHDRAWN: {amount} from {self.symbol} → {recipient}")
        return event

    # ── Serialization ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "owner": self.owner,
            "totalSupply": str(self.total_supply),
            "maxSupply": str(self.max_supply),
            "remainingSupply": str(self.remaining_supply()),
            "mintingFee": str(self.minting_fee),
            "mintCooldown": self.mint_cooldown,
            "treasury": str(self.treasury_balance),
            "paused": self.is_paused(),
            "blacklisted": sorted(self._blacklist.accounts),
            "holders": self._ledger.holders(),
            "createdAt": self._created_at,
        }

    def __repr__(self) -> str:
        return f"<GuardedToken {self.symbol} supply={self.total_supply}/{self.max_supply}>"
