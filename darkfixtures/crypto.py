# darkfixtures/crypto.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from Crypto.Hash import keccak
from eth_keys import keys
from eth_keys.exceptions import ValidationError

from .errors import KeystoreError
from .rng import random_state


def keccak256(*chunks: bytes) -> bytes:
    """Keccak-256 digest (32 bytes) over the concatenation of chunks."""
    h = keccak.new(digest_bits=256)
    for chunk in chunks:
        h.update(chunk)
    return h.digest()


@dataclass(slots=True, frozen=True)
class Keystore:
    """
    Key material for a simulated node.
    secret: 32-byte secp256k1 private key
    """
    secret: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.secret) != 32:
            raise KeystoreError("keystore secret must be 32 bytes")
        try:
            keys.PrivateKey(self.secret)
        except ValidationError as err:
            raise KeystoreError(f"invalid secp256k1 private key: {err}") from err

    @property
    def private_key(self) -> keys.PrivateKey:
        return keys.PrivateKey(self.secret)

    def address(self) -> str:
        return self.private_key.public_key.to_checksum_address()


def random_keystore(rs: Optional[np.random.RandomState] = None) -> Keystore:
    return Keystore(secret=random_state(rs).bytes(32))
