"""
Event records appended to a token's log.

One record per committed sub-effect, in commit order. ``log_index`` is the
record's position in the token's log and ``timestamp`` the time of the call
that produced it.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class TokenEvent:
    token_symbol: str
    log_index: int
    timestamp: int

    name = "Event"

    def _payload(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "event": self.name,
            "token": self.token_symbol,
            "logIndex": self.log_index,
            "timestamp": self.timestamp,
        }
        data.update(self._payload())
        return data


@dataclass(frozen=True)
class TransferEvent(TokenEvent):
    """Emitted on every balance move, including mint (from null) and burn (to null)."""
    sender: str = ""
    recipient: str = ""
    amount: int = 0

    name = "Transfer"

    def _payload(self) -> Dict[str, Any]:
        return {"from": self.sender, "to": self.recipient, "amount": str(self.amount)}


@dataclass(frozen=True)
class ApprovalEvent(TokenEvent):
    owner: str = ""
    spender: str = ""
    amount: int = 0

    name = "Approval"

    def _payload(self) -> Dict[str, Any]:
        return {"owner": self.owner, "spender": self.spender, "amount": str(self.amount)}


@dataclass(frozen=True)
class MintedEvent(TokenEvent):
    """``fee`` is the full attached payment; 0 for owner mints."""
    recipient: str = ""
    amount: int = 0
    fee: int = 0

    name = "Minted"

    def _payload(self) -> Dict[str, Any]:
        return {"to": self.recipient, "amount": str(self.amount), "fee": str(self.fee)}


@dataclass(frozen=True)
class BurnedEvent(TokenEvent):
    sender: str = ""
    amount: int = 0

    name = "Burned"

    def _payload(self) -> Dict[str, Any]:
        return {"from": self.sender, "amount": str(self.amount)}


@dataclass(frozen=True)
class PausedEvent(TokenEvent):
    account: str = ""

    name = "Paused"

    def _payload(self) -> Dict[str, Any]:
        return {"account": self.account}


@dataclass(frozen=True)
class UnpausedEvent(TokenEvent):
    account: str = ""

    name = "Unpaused"

    def _payload(self) -> Dict[str, Any]:
        return {"account": self.account}


@dataclass(frozen=True)
class BlacklistUpdatedEvent(TokenEvent):
    account: str = ""
    flag: bool = False

    name = "BlacklistUpdated"

    def _payload(self) -> Dict[str, Any]:
        return {"account": self.account, "flag": self.flag}


@dataclass(frozen=True)
class FeeUpdatedEvent(TokenEvent):
    old_fee: int = 0
    new_fee: int = 0

    name = "FeeUpdated"

    def _payload(self) -> Dict[str, Any]:
        return {"oldFee": str(self.old_fee), "newFee": str(self.new_fee)}


@dataclass(frozen=True)
class EmergencyWithdrawEvent(TokenEvent):
    recipient: str = ""
    amount: int = 0

    name = "EmergencyWithdraw"

    def _payload(self) -> Dict[str, Any]:
        return {"to": self.recipient, "amount": str(self.amount)}
