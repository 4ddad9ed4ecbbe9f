# darkfixtures/errors.py
from __future__ import annotations

from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .network import Config


class FixtureError(Exception):
    """Base class for fixture generation failures."""


class InvalidBound(FixtureError, ValueError):
    """A CoExp bound leaves nothing to draw from (co < 1)."""


class KeystoreError(FixtureError):
    """Key material could not be generated."""


class MultiAddressError(FixtureError, ValueError):
    """A multi-address string is malformed."""


class ConfigGenerationError(FixtureError):
    """
    A batch of node configs failed part way through.
    configs: the configs built before the failure (phase 2 wiring may be incomplete)
    """

    def __init__(self, message: str, configs: List["Config"]) -> None:
        super().__init__(message)
        self.configs = configs
