# darkfixtures/core.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

import numpy as np

from .crypto import keccak256, random_keystore
from .errors import ConfigGenerationError, InvalidBound, KeystoreError, MultiAddressError
from .models import (
    TOKEN_PAIRS,
    CoExp,
    Computation,
    Order,
    OrderType,
    Parity,
    Settlement,
    Tokens,
)
from .network import (
    DEFAULT_BASE_PORT,
    DEFAULT_ETHEREUM_URI,
    DEFAULT_HOST,
    Config,
    EthereumConfig,
    EthereumNetwork,
    FilePluginOptions,
    LoggerOptions,
    PluginOptions,
)
from .rng import random_state

logger = logging.getLogger(__name__)

CO_MAX = 1999
EXP_MAX = 24

ORDER_TTL = timedelta(hours=1)
MATCH_TTL = timedelta(hours=24)


def _now(now: Optional[datetime]) -> datetime:
    return datetime.now(timezone.utc) if now is None else now


def _uint64(rs: np.random.RandomState) -> int:
    return int.from_bytes(rs.bytes(8), "big")


# --- fixed-point sampler ---

def random_co_exp(rs: Optional[np.random.RandomState] = None) -> CoExp:
    rs = random_state(rs)
    co = int(rs.randint(1, CO_MAX + 1))
    exp = int(rs.randint(0, EXP_MAX + 1))
    return CoExp(co=co, exp=exp)


def less_random_co_exp(bound: CoExp, rs: Optional[np.random.RandomState] = None) -> CoExp:
    """Draw a CoExp componentwise bounded by `bound` (co in [1, bound.co], exp in [0, bound.exp])."""
    if bound.co < 1:
        raise InvalidBound(f"cannot draw below {bound}: coefficient must be >= 1")
    rs = random_state(rs)
    co = int(rs.randint(1, bound.co + 1, dtype=np.uint64))
    exp = int(rs.randint(0, bound.exp + 1, dtype=np.uint64))
    return CoExp(co=co, exp=exp)


# --- order factory ---

def random_parity(rs: Optional[np.random.RandomState] = None) -> Parity:
    return Parity.BUY if random_state(rs).rand() < 0.5 else Parity.SELL


def random_tokens(rs: Optional[np.random.RandomState] = None) -> Tokens:
    return TOKEN_PAIRS[random_state(rs).randint(0, len(TOKEN_PAIRS))]


def _order(parity: Parity, rs: np.random.RandomState, now: datetime) -> Order:
    tokens = random_tokens(rs)
    volume = random_co_exp(rs)
    price = random_co_exp(rs)
    minimum_volume = less_random_co_exp(volume, rs)
    return Order(
        order_type=OrderType.LIMIT,
        parity=parity,
        settlement=Settlement.RENEX,
        expiry=now + ORDER_TTL,
        tokens=tokens,
        price=price,
        volume=volume,
        minimum_volume=minimum_volume,
        nonce=_uint64(rs),
    )


def random_order(rs: Optional[np.random.RandomState] = None, now: Optional[datetime] = None) -> Order:
    rs = random_state(rs)
    return _order(random_parity(rs), rs, _now(now))


def random_buy_order(rs: Optional[np.random.RandomState] = None, now: Optional[datetime] = None) -> Order:
    return _order(Parity.BUY, random_state(rs), _now(now))


def random_sell_order(rs: Optional[np.random.RandomState] = None, now: Optional[datetime] = None) -> Order:
    return _order(Parity.SELL, random_state(rs), _now(now))


def random_order_match(
    rs: Optional[np.random.RandomState] = None, now: Optional[datetime] = None
) -> Tuple[Order, Order]:
    """
    Buy and sell orders that agree on expiry, tokens, price, volume,
    minimum volume and nonce, so settlement treats them as a crossing pair.
    """
    rs = random_state(rs)
    tokens = random_tokens(rs)
    volume = random_co_exp(rs)
    price = random_co_exp(rs)
    minimum_volume = less_random_co_exp(volume, rs)
    common = dict(
        order_type=OrderType.LIMIT,
        settlement=Settlement.RENEX,
        expiry=_now(now) + MATCH_TTL,
        tokens=tokens,
        price=price,
        volume=volume,
        minimum_volume=minimum_volume,
        nonce=_uint64(rs),
    )
    return Order(parity=Parity.BUY, **common), Order(parity=Parity.SELL, **common)


# --- network/config factory ---

def random_configs(
    n: int,
    b: int,
    rs: Optional[np.random.RandomState] = None,
    host: str = DEFAULT_HOST,
    base_port: int = DEFAULT_BASE_PORT,
    ethereum_uri: str = DEFAULT_ETHEREUM_URI,
) -> List[Config]:
    """
    Build n node configs and wire every node to the first b nodes (itself excluded)
    as bootstrap peers.

    Raises ConfigGenerationError carrying the configs built so far when key
    material or a peer multi-address cannot be produced.
    """
    if n < 0 or b < 0:
        raise ValueError("n and b must be non-negative")
    rs = random_state(rs)
    configs: List[Config] = []

    for i in range(n):
        try:
            keystore = random_keystore(rs)
        except KeystoreError as err:
            logger.error("keystore generation failed for node %d of %d", i, n)
            raise ConfigGenerationError(f"cannot generate keystore for node {i}", configs) from err
        address = keystore.address()
        configs.append(
            Config(
                keystore=keystore,
                host=host,
                port=base_port + i,
                address=address,
                logs=LoggerOptions(plugins=[PluginOptions(file=FilePluginOptions(path=f"{address}.out"))]),
                ethereum=EthereumConfig(network=EthereumNetwork.LOCAL, uri=ethereum_uri),
            )
        )

    for i in range(n):
        for j in range(min(b, n)):
            if i == j:
                continue
            try:
                peer = configs[j].multi_address()
            except MultiAddressError as err:
                logger.error("cannot wire node %d to bootstrap node %d: %s", i, j, err)
                raise ConfigGenerationError(f"cannot build multi-address of node {j}", configs) from err
            configs[i].bootstrap_multi_addresses.append(peer)

    logger.debug("generated %d configs with %d bootstrap nodes", n, min(b, n))
    return configs


# --- identity/computation factory ---

def random_32_bytes(rs: Optional[np.random.RandomState] = None) -> bytes:
    seed = _uint64(random_state(rs)) >> 1
    return keccak256(str(seed).encode("ascii"))


def random_network_id(rs: Optional[np.random.RandomState] = None) -> bytes:
    return random_32_bytes(rs)


def random_computation(
    rs: Optional[np.random.RandomState] = None, now: Optional[datetime] = None
) -> Computation:
    rs = random_state(rs)
    now = _now(now)
    buy = random_buy_order(rs, now)
    sell = random_sell_order(rs, now)
    return Computation(buy=buy.id, sell=sell.id)
