#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Bitcoin addresses of derived keys.

A single dispatcher over the supported address types:

* "legacy": p2pkh base58 address
  (hash160 of the SEC key as given, compressed or not)
* "segwit": native SegWit v0 p2wpkh bech32 address
  (hash160 of the compressed SEC key)

Encoding, checksums, and network prefixes are btclib's.
"""

from typing import Callable, Dict, NamedTuple, Tuple

from btclib import b32, b58
from btclib.alias import String

from chainsig.derivation_path import Path
from chainsig.exceptions import (
    ChainSigValueError,
    UnsupportedAddressTypeError,
    UnsupportedNetworkError,
)
from chainsig.kdf import derive_child_pub_key_compressed
from chainsig.root_key import (
    PubKey,
    compressed_from_root_key,
    point_from_pub_key,
    sec_from_pub_key,
)

NETWORKS = ("mainnet", "testnet")


def get_network(network: str) -> str:
    "Return the normalized network name, if supported."

    name = network.strip().lower() if isinstance(network, str) else network
    if name not in NETWORKS:
        raise UnsupportedNetworkError(f"unsupported network: {network}")
    return name


def p2pkh(pub_key: PubKey, network: str = "mainnet") -> str:
    "Return the p2pkh address of the SEC key as given (Points are compressed)."

    return b58.p2pkh(sec_from_pub_key(pub_key), network=get_network(network))


def p2wpkh(pub_key: PubKey, network: str = "mainnet") -> str:
    "Return the p2wpkh address of the compressed SEC key."

    return b32.p2wpkh(point_from_pub_key(pub_key), network=get_network(network))


_ADDRESS_FROM_PUB_KEY: Dict[str, Callable[[PubKey, str], str]] = {
    "legacy": p2pkh,
    "segwit": p2wpkh,
}

ADDRESS_TYPES = tuple(_ADDRESS_FROM_PUB_KEY)


class BtcAddress(NamedTuple):
    address: str
    # hex compressed SEC child public key
    pub_key: str


def btc_address_from_pub_key(
    pub_key: PubKey, network: str = "testnet", address_type: str = "segwit"
) -> str:
    "Return the Bitcoin address of a public key."

    try:
        address_from_pub_key = _ADDRESS_FROM_PUB_KEY[address_type]
    except (KeyError, TypeError) as e:
        raise UnsupportedAddressTypeError(
            f"unsupported address type: {address_type}"
        ) from e
    return address_from_pub_key(pub_key, network)


def btc_address_from_root_key(
    root_key: String,
    signer_id: str,
    path: Path = "",
    network: str = "testnet",
    address_type: str = "segwit",
) -> BtcAddress:
    "Return the Bitcoin address and compressed child key of (signer_id, path)."

    parent = compressed_from_root_key(root_key)
    child = derive_child_pub_key_compressed(parent, signer_id, path)
    address = btc_address_from_pub_key(child, network, address_type)
    return BtcAddress(address, child.hex())


def decode_btc_address(address: String) -> Tuple[str, bytes, str]:
    """Return address type, hash160 payload, and network of an address.

    Both checksum and network prefix are validated.
    """
    if b32.has_segwit_prefix(address):
        wit_ver, wit_prg, network = b32.witness_from_address(address)
        if wit_ver != 0 or len(wit_prg) != 20:
            err_msg = f"not a p2wpkh address: v{wit_ver} {len(wit_prg)} bytes program"
            raise ChainSigValueError(err_msg)
        return "segwit", wit_prg, get_network(network)
    script_type, h160, network = b58.h160_from_address(address)
    if script_type != "p2pkh":
        raise ChainSigValueError(f"not a p2pkh address: {script_type}")
    return "legacy", h160, get_network(network)
