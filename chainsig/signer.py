#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Signer capability: {sign, verify} over derived keys.

A Signer exposes the root public key of a signing service and
produces MPC-shaped signatures for (path, 32-byte hash) requests;
verification is shared by all signers,
as it only needs the root public key.

LocalSigner holds a root private key in memory and
is meant for development and tests only.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from btclib.alias import Octets, Point
from btclib.ecc import dsa
from btclib.exceptions import BTClibRuntimeError, BTClibValueError
from btclib.to_prv_key import PrvKey
from dataclasses_json import DataClassJsonMixin

from chainsig.address import BtcAddress, btc_address_from_root_key, get_network
from chainsig.derivation_path import Path, canonical_path
from chainsig.evm import evm_address_from_root_key
from chainsig.exceptions import ChainSigRuntimeError, ChainSigValueError
from chainsig.kdf import derive_child_prv_key
from chainsig.root_key import encode_root_key
from chainsig.signature import (
    AffinePoint,
    AnySignature,
    MPCSignature,
    SerializedScalar,
    msg_hash_from_octets,
    verify,
)


@dataclass
class SignRequest(DataClassJsonMixin):
    "Arguments of the signer contract 'sign' call."

    payload: List[int]
    path: str
    key_version: int = 0

    @classmethod
    def from_hash(
        cls, msg_hash: Octets, path: Path = "", key_version: int = 0
    ) -> "SignRequest":
        msg_hash = msg_hash_from_octets(msg_hash)
        return cls(list(msg_hash), canonical_path(path), key_version)

    @property
    def msg_hash(self) -> bytes:
        if len(self.payload) != 32:
            raise ChainSigValueError(
                f"invalid payload size: {len(self.payload)} bytes instead of 32"
            )
        return bytes(self.payload)


def _recovery_id(msg_hash: bytes, Q: Point, sig: dsa.Sig) -> int:
    # y-parity of R, as the MPC network reports it
    for key_id in (0, 1):
        try:
            if dsa.recover_pub_key_(key_id, msg_hash, sig, lower_s=False) == Q:
                return key_id
        except (BTClibValueError, BTClibRuntimeError):
            continue
    raise ChainSigRuntimeError("signature does not recover the public key")


class Signer(ABC):
    def __init__(self, network: str = "testnet") -> None:
        self.network = get_network(network)

    @property
    @abstractmethod
    def root_key(self) -> str:
        "Network-native root public key."

    @abstractmethod
    def sign(self, msg_hash: Octets, signer_id: str, path: Path = "") -> MPCSignature:
        "Sign a 32-byte hash with the (signer_id, path) child key."

    def request(self, msg_hash: Octets, path: Path = "") -> SignRequest:
        return SignRequest.from_hash(msg_hash, path)

    def evm_address(self, signer_id: str, path: Path = "") -> str:
        return evm_address_from_root_key(self.root_key, signer_id, path)

    def btc_address(
        self, signer_id: str, path: Path = "", address_type: str = "segwit"
    ) -> BtcAddress:
        return btc_address_from_root_key(
            self.root_key, signer_id, path, self.network, address_type
        )

    def verify(
        self, msg_hash: Octets, signature: AnySignature, signer_id: str, path: Path = ""
    ) -> bool:
        "Return True if signature is valid for the (signer_id, path) child key."
        return verify(msg_hash, signature, self.evm_address(signer_id, path))


class LocalSigner(Signer):
    "In-memory signer holding the root private key."

    def __init__(
        self, root_prv_key: Optional[PrvKey] = None, network: str = "testnet"
    ) -> None:
        super().__init__(network)
        # a fresh random key when root_prv_key is None
        q, Q = dsa.gen_keys(root_prv_key)
        self._q = q
        self._root_key = encode_root_key(Q)

    @property
    def root_key(self) -> str:
        return self._root_key

    def sign(self, msg_hash: Octets, signer_id: str, path: Path = "") -> MPCSignature:
        request = self.request(msg_hash, path)
        q, Q = dsa.gen_keys(derive_child_prv_key(self._q, signer_id, request.path))
        sig = dsa.sign_(request.msg_hash, q)
        recovery_id = _recovery_id(request.msg_hash, Q, sig)
        big_r = ("03" if recovery_id else "02") + sig.r.to_bytes(32, "big").hex()
        return MPCSignature(
            AffinePoint(big_r.upper()),
            SerializedScalar(sig.s.to_bytes(32, "big").hex().upper()),
            recovery_id,
        )
