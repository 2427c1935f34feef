#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Epsilon key derivation.

Given the MPC root public key P, the child public key of
(signer_id, path) is

    P' = P + epsilon * G

with

    epsilon = SHA3-256(prefix || signer_id || "," || canonical_path) mod n

and prefix = "near-mpc-recovery v0.1.0 epsilon derivation:".

The derivation is non-hardened: anyone knowing P can compute P',
while only the holders of the root private key q can sign for
q' = q + epsilon.
Child keys of different (signer_id, path) pairs are unlinkable
without knowledge of the derivation inputs.
"""

from btclib.alias import Point
from btclib.ec import bytes_from_point, mult, secp256k1
from btclib.to_prv_key import PrvKey, int_from_prv_key

from chainsig.derivation_path import Path, canonical_path
from chainsig.exceptions import DegenerateDerivationError, InvalidScalarError
from chainsig.hashes import sha3_256
from chainsig.root_key import PubKey, point_from_pub_key

EPSILON_DERIVATION_PREFIX = "near-mpc-recovery v0.1.0 epsilon derivation:"


def derive_epsilon(signer_id: str, path: Path = "") -> int:
    "Return the epsilon tweak scalar for (signer_id, path)."

    preimage = EPSILON_DERIVATION_PREFIX + signer_id + "," + canonical_path(path)
    digest = sha3_256(preimage.encode("utf-8"))
    epsilon = int.from_bytes(digest, byteorder="big", signed=False) % secp256k1.n
    if epsilon == 0:  # pragma: no cover
        raise InvalidScalarError("zero epsilon")
    return epsilon


def derive_child_point(parent: PubKey, signer_id: str, path: Path = "") -> Point:
    """Return the child public key Point: parent + epsilon * G.

    The parent must be a valid public key:
    the infinity point and off-curve coordinates raise InvalidPointError.
    """

    parent = point_from_pub_key(parent)
    epsilon = derive_epsilon(signer_id, path)
    child = secp256k1.add(parent, mult(epsilon))
    if child[1] == 0:
        raise DegenerateDerivationError("child public key is the infinity point")
    return child


def derive_child_pub_key(
    parent_uncompressed: PubKey, signer_id: str, path: Path = ""
) -> bytes:
    "Return the 65-byte uncompressed SEC child public key."

    child = derive_child_point(parent_uncompressed, signer_id, path)
    return bytes_from_point(child, secp256k1, compressed=False)


def derive_child_pub_key_compressed(
    parent_compressed: PubKey, signer_id: str, path: Path = ""
) -> bytes:
    "Return the 33-byte compressed SEC child public key."

    child = derive_child_point(parent_compressed, signer_id, path)
    return bytes_from_point(child, secp256k1, compressed=True)


def derive_child_prv_key(parent_prv_key: PrvKey, signer_id: str, path: Path = "") -> int:
    "Return the child private key: parent_prv_key + epsilon mod n."

    q = int_from_prv_key(parent_prv_key, secp256k1)
    child = (q + derive_epsilon(signer_id, path)) % secp256k1.n
    if child == 0:
        raise DegenerateDerivationError("child private key is zero")
    return child
