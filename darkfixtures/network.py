# darkfixtures/network.py
from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .crypto import Keystore
from .errors import MultiAddressError

DEFAULT_HOST = "0.0.0.0"
DEFAULT_BASE_PORT = 18514
DEFAULT_ETHEREUM_URI = "http://localhost:8545"

_MULTI_ADDRESS = re.compile(r"^/ip4/([^/]+)/tcp/(\d+)/republic/(0x[0-9a-fA-F]{40})$")


@dataclass(slots=True, frozen=True)
class MultiAddress:
    """Peer address in the form /ip4/<host>/tcp/<port>/republic/<address>."""
    host: str
    port: int
    address: str

    @classmethod
    def parse(cls, text: str) -> "MultiAddress":
        m = _MULTI_ADDRESS.match(text)
        if m is None:
            raise MultiAddressError(f"malformed multi-address: {text!r}")
        host, port, address = m.group(1), int(m.group(2)), m.group(3)
        try:
            ipaddress.IPv4Address(host)
        except ValueError as err:
            raise MultiAddressError(f"invalid ip4 host {host!r}") from err
        if port > 65535:
            raise MultiAddressError(f"tcp port out of range: {port}")
        return cls(host=host, port=port, address=address)

    def __str__(self) -> str:
        return f"/ip4/{self.host}/tcp/{self.port}/republic/{self.address}"


@dataclass(slots=True)
class FilePluginOptions:
    path: str


@dataclass(slots=True)
class StdoutPluginOptions:
    pass


@dataclass(slots=True)
class PluginOptions:
    file: Optional[FilePluginOptions] = None
    stdout: Optional[StdoutPluginOptions] = None


@dataclass(slots=True)
class LoggerOptions:
    plugins: List[PluginOptions] = field(default_factory=list)


class EthereumNetwork(Enum):
    LOCAL = "ganache"
    ROPSTEN = "ropsten"
    KOVAN = "kovan"
    MAINNET = "mainnet"


@dataclass(slots=True)
class EthereumConfig:
    network: EthereumNetwork = EthereumNetwork.LOCAL
    uri: str = DEFAULT_ETHEREUM_URI


@dataclass(slots=True)
class Config:
    """
    Local configuration of one node in a test cluster.
    bootstrap_multi_addresses: peers dialled on start-up, never the node itself
    """
    keystore: Keystore
    host: str
    port: int
    address: str
    bootstrap_multi_addresses: List[MultiAddress] = field(default_factory=list)
    logs: LoggerOptions = field(default_factory=LoggerOptions)
    ethereum: EthereumConfig = field(default_factory=EthereumConfig)

    def multi_address(self) -> MultiAddress:
        return MultiAddress.parse(f"/ip4/{self.host}/tcp/{self.port}/republic/{self.address}")
