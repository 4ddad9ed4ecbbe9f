# darkfixtures/models.py
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .crypto import keccak256

UINT64_MAX = 2**64 - 1

OrderId = bytes
ComputationId = bytes

EMPTY_EPOCH_HASH = bytes(32)


@dataclass(slots=True, frozen=True)
class CoExp:
    """
    Fixed-point number co * 10^-exp.
    co, exp: unsigned 64-bit integers
    """
    co: int
    exp: int

    def __post_init__(self) -> None:
        for name in ("co", "exp"):
            v = getattr(self, name)
            if not 0 <= v <= UINT64_MAX:
                raise ValueError(f"{name} must fit in an unsigned 64-bit integer")

    def bounded_by(self, other: "CoExp") -> bool:
        """Componentwise co <= other.co and exp <= other.exp."""
        return self.co <= other.co and self.exp <= other.exp


class OrderType(Enum):
    MIDPOINT = 0
    LIMIT = 1


class Parity(Enum):
    BUY = 0
    SELL = 1

    def opposite(self) -> "Parity":
        return Parity.SELL if self is Parity.BUY else Parity.BUY


class Settlement(Enum):
    NIL = 0
    RENEX = 1
    RENEX_ATOMIC = 2


class Token(Enum):
    BTC = 0
    ETH = 1
    DGX = 0x100
    REN = 0x10000


def _pair(priority: Token, non_priority: Token) -> int:
    return (priority.value << 32) | non_priority.value


class Tokens(Enum):
    BTCETH = _pair(Token.ETH, Token.BTC)
    ETHDGX = _pair(Token.ETH, Token.DGX)
    ETHREN = _pair(Token.ETH, Token.REN)
    DGXREN = _pair(Token.DGX, Token.REN)

    @property
    def priority_token(self) -> Token:
        return Token(self.value >> 32)

    @property
    def non_priority_token(self) -> Token:
        return Token(self.value & 0xFFFFFFFF)


# Tradable pairs sampled by the order factory. Add new pairs here.
TOKEN_PAIRS = (
    Tokens.BTCETH,
    Tokens.ETHDGX,
    Tokens.ETHREN,
    Tokens.DGXREN,
)

_ORDER_LAYOUT = struct.Struct(">bbQqQQQQQQQQ")


@dataclass(slots=True, frozen=True)
class Order:
    """
    Trade intent submitted to the dark pool.
    - expiry: timezone-aware datetime
    - minimum_volume: smallest fill the trader accepts
    - nonce: unsigned 64-bit
    - id: keccak256 of to_bytes(), derived on construction
    """
    order_type: OrderType
    parity: Parity
    settlement: Settlement
    expiry: datetime
    tokens: Tokens
    price: CoExp
    volume: CoExp
    minimum_volume: CoExp
    nonce: int
    id: OrderId = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.expiry.tzinfo is None:
            raise ValueError("expiry must be timezone-aware")
        if not 0 <= self.nonce <= UINT64_MAX:
            raise ValueError("nonce must fit in an unsigned 64-bit integer")
        object.__setattr__(self, "id", keccak256(self.to_bytes()))

    def to_bytes(self) -> bytes:
        return _ORDER_LAYOUT.pack(
            self.order_type.value,
            self.parity.value,
            self.settlement.value,
            int(self.expiry.timestamp()),
            self.tokens.value,
            self.price.co,
            self.price.exp,
            self.volume.co,
            self.volume.exp,
            self.minimum_volume.co,
            self.minimum_volume.exp,
            self.nonce,
        )


class ComputationState(Enum):
    NIL = 0
    MATCHED = 1
    MISMATCHED = 2
    ACCEPTED = 3
    REJECTED = 4
    SETTLED = 5


def new_computation_id(buy: OrderId, sell: OrderId) -> ComputationId:
    return keccak256(buy, sell)


@dataclass(slots=True)
class Computation:
    """
    Candidate match between a buy and a sell order.
    buy, sell: order ids
    id: keccak256(buy || sell), derived on construction
    epoch: epoch hash the computation belongs to
    """
    buy: OrderId
    sell: OrderId
    state: ComputationState = ComputationState.NIL
    epoch: bytes = EMPTY_EPOCH_HASH
    priority: int = 0
    match: bool = False
    id: ComputationId = field(init=False)

    def __post_init__(self) -> None:
        if len(self.buy) != 32 or len(self.sell) != 32:
            raise ValueError("order ids must be 32 bytes")
        if len(self.epoch) != 32:
            raise ValueError("epoch hash must be 32 bytes")
        self.id = new_computation_id(self.buy, self.sell)
