#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""EVM addresses.

The address of a public key is the last 20 bytes of the keccak256 hash
of the 64-byte X || Y uncompressed encoding (without the 0x04 prefix),
written as 0x followed by 40 lowercase hex digits.
"""

import re

from btclib.alias import String
from eth_utils import to_checksum_address

from chainsig.derivation_path import Path
from chainsig.hashes import keccak256
from chainsig.kdf import derive_child_pub_key
from chainsig.root_key import PubKey, decode_root_key, decompress

_EVM_ADDRESS = re.compile(r"0x[0-9a-fA-F]{40}")


def address_from_pub_key(pub_key: PubKey) -> str:
    "Return the lowercase EVM address of a public key."

    uncompressed = decompress(pub_key)
    return "0x" + keccak256(uncompressed[1:])[-20:].hex()


def is_evm_address(addr: str) -> bool:
    "Return True if addr is 0x followed by 40 hex digits, whatever the case."

    return isinstance(addr, str) and _EVM_ADDRESS.fullmatch(addr) is not None


def checksum_address(addr: str) -> str:
    "Return the EIP-55 mixed-case checksum form of an EVM address."

    return to_checksum_address(addr)


def evm_address_from_root_key(
    root_key: String, signer_id: str, path: Path = ""
) -> str:
    "Return the EVM address of the (signer_id, path) child of the root key."

    child = derive_child_pub_key(decode_root_key(root_key), signer_id, path)
    return address_from_pub_key(child)
