# tests/test_models.py
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from darkfixtures.crypto import Keystore, keccak256
from darkfixtures.errors import KeystoreError, MultiAddressError
from darkfixtures.models import CoExp, Order, OrderType, Parity, Settlement, Token, Tokens
from darkfixtures.network import MultiAddress

ADDR = "0x" + "ab" * 20


def test_keccak256_known_vector():
    assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    assert keccak256(b"ab", b"c") == keccak256(b"abc")


def test_coexp_range_checked():
    with pytest.raises(ValueError):
        CoExp(co=-1, exp=0)
    with pytest.raises(ValueError):
        CoExp(co=1, exp=2**64)
    assert CoExp(co=0, exp=0).co == 0


def test_coexp_bounded_by_is_componentwise():
    assert CoExp(3, 2).bounded_by(CoExp(3, 2))
    assert not CoExp(4, 1).bounded_by(CoExp(3, 2))
    assert not CoExp(1, 3).bounded_by(CoExp(3, 2))


def test_tokens_pair_components():
    assert Tokens.BTCETH.priority_token is Token.ETH
    assert Tokens.BTCETH.non_priority_token is Token.BTC
    assert Tokens.DGXREN.priority_token is Token.DGX
    assert Tokens.DGXREN.non_priority_token is Token.REN


def test_parity_opposite():
    assert Parity.BUY.opposite() is Parity.SELL
    assert Parity.SELL.opposite() is Parity.BUY


def test_order_requires_aware_expiry():
    with pytest.raises(ValueError):
        Order(
            order_type=OrderType.LIMIT,
            parity=Parity.BUY,
            settlement=Settlement.RENEX,
            expiry=datetime(2018, 1, 1),
            tokens=Tokens.ETHREN,
            price=CoExp(1, 1),
            volume=CoExp(1, 1),
            minimum_volume=CoExp(1, 1),
            nonce=0,
        )


def test_order_id_changes_with_nonce():
    kw = dict(
        order_type=OrderType.LIMIT,
        parity=Parity.SELL,
        settlement=Settlement.RENEX,
        expiry=datetime(2018, 1, 1, tzinfo=timezone.utc),
        tokens=Tokens.ETHDGX,
        price=CoExp(200, 3),
        volume=CoExp(50, 1),
        minimum_volume=CoExp(10, 1),
    )
    assert Order(nonce=1, **kw).id != Order(nonce=2, **kw).id
    assert len(Order(nonce=2**64 - 1, **kw).to_bytes()) == 82


def test_multi_address_parse_and_render():
    text = f"/ip4/127.0.0.1/tcp/18514/republic/{ADDR}"
    m = MultiAddress.parse(text)
    assert (m.host, m.port, m.address) == ("127.0.0.1", 18514, ADDR)
    assert str(m) == text
    assert MultiAddress.parse(str(m)) == m


@pytest.mark.parametrize(
    "text",
    [
        "",
        f"/ip4/localhost/tcp/18514/republic/{ADDR}",
        f"/ip4/256.0.0.1/tcp/18514/republic/{ADDR}",
        f"/ip4/0.0.0.0/tcp/70000/republic/{ADDR}",
        "/ip4/0.0.0.0/tcp/18514/republic/0x1234",
        f"/ip6/::1/tcp/18514/republic/{ADDR}",
    ],
)
def test_multi_address_rejects_malformed(text):
    with pytest.raises(MultiAddressError):
        MultiAddress.parse(text)


def test_keystore_rejects_invalid_secret():
    with pytest.raises(KeystoreError):
        Keystore(secret=b"\x01" * 31)
    with pytest.raises(KeystoreError):
        Keystore(secret=b"\xff" * 32)


def test_keystore_address_format():
    ks = Keystore(secret=b"\x01" * 32)
    addr = ks.address()
    assert addr.startswith("0x") and len(addr) == 42
    MultiAddress.parse(f"/ip4/0.0.0.0/tcp/1/republic/{addr}")
