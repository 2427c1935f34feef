#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `chainsig.kdf` module."

import hashlib
import secrets

import pytest
from btclib.alias import INF
from btclib.ec import bytes_from_point, mult, secp256k1
from coincurve import PrivateKey, PublicKey

from chainsig.derivation_path import SLIP44_ETHEREUM, DerivationPath
from chainsig.exceptions import DegenerateDerivationError, InvalidPointError
from chainsig.kdf import (
    EPSILON_DERIVATION_PREFIX,
    derive_child_point,
    derive_child_prv_key,
    derive_child_pub_key,
    derive_child_pub_key_compressed,
    derive_epsilon,
)

SIGNER_ID = "alice.testnet"
PATH = DerivationPath(SLIP44_ETHEREUM, "m/44'/60'/0'/0/0")


def test_epsilon() -> None:
    assert EPSILON_DERIVATION_PREFIX == "near-mpc-recovery v0.1.0 epsilon derivation:"

    canonical = '{"chain":60,"domain":"m/44\'/60\'/0\'/0/0"}'
    preimage = EPSILON_DERIVATION_PREFIX + SIGNER_ID + "," + canonical
    digest = hashlib.sha3_256(preimage.encode()).digest()
    epsilon = int.from_bytes(digest, "big") % secp256k1.n
    assert derive_epsilon(SIGNER_ID, PATH) == epsilon
    assert epsilon == 0x1C99E0524815707968F89C3986FCFD304EC93D039B35378536158222A7C091FE
    assert derive_epsilon(SIGNER_ID, canonical) == epsilon
    assert derive_epsilon(SIGNER_ID, {"domain": PATH.domain, "chain": 60}) == epsilon

    # empty path by default
    preimage = EPSILON_DERIVATION_PREFIX + SIGNER_ID + ","
    digest = hashlib.sha3_256(preimage.encode()).digest()
    assert derive_epsilon(SIGNER_ID) == int.from_bytes(digest, "big") % secp256k1.n

    # non-ascii signer ids are utf-8 encoded
    preimage = EPSILON_DERIVATION_PREFIX + "ünicode.near,x"
    digest = hashlib.sha3_256(preimage.encode("utf-8")).digest()
    assert derive_epsilon("ünicode.near", "x") == int.from_bytes(digest, "big") % secp256k1.n


def test_determinism_and_unlinkability() -> None:
    root = mult(1 + secrets.randbelow(secp256k1.n - 1))
    child = derive_child_point(root, SIGNER_ID, PATH)
    assert derive_child_point(root, SIGNER_ID, PATH) == child

    others = {
        derive_child_point(root, "bob.testnet", PATH),
        derive_child_point(root, SIGNER_ID, DerivationPath(SLIP44_ETHEREUM, "m/44'/60'/0'/0/1")),
        derive_child_point(root, SIGNER_ID, DerivationPath(0, PATH.domain)),
        derive_child_point(root, SIGNER_ID, ""),
        root,
    }
    assert child not in others
    assert len(others) == 5


def test_child_pub_key_against_libsecp256k1() -> None:
    for _ in range(4):
        q = 1 + secrets.randbelow(secp256k1.n - 1)
        parent = PrivateKey(q.to_bytes(32, "big")).public_key
        path = DerivationPath(SLIP44_ETHEREUM, f"m/44'/60'/0'/0/{secrets.randbelow(100)}")
        epsilon = derive_epsilon(SIGNER_ID, path)
        expected = parent.add(epsilon.to_bytes(32, "big"))

        uncompressed = derive_child_pub_key(parent.format(compressed=False), SIGNER_ID, path)
        assert uncompressed == expected.format(compressed=False)
        compressed = derive_child_pub_key_compressed(parent.format(), SIGNER_ID, path)
        assert compressed == expected.format()

        # hex-string input, cross formats
        assert derive_child_pub_key(parent.format().hex(), SIGNER_ID, path) == uncompressed
        assert PublicKey(compressed).format(compressed=False) == uncompressed

        # the private counterpart
        child_q = derive_child_prv_key(q, SIGNER_ID, path)
        assert bytes_from_point(mult(child_q), compressed=False) == uncompressed


def test_degenerate_derivation() -> None:
    ec = secp256k1
    epsilon = derive_epsilon(SIGNER_ID, PATH)

    parent = ec.negate(mult(epsilon))
    with pytest.raises(DegenerateDerivationError, match="infinity point"):
        derive_child_point(parent, SIGNER_ID, PATH)
    with pytest.raises(DegenerateDerivationError, match="infinity point"):
        derive_child_pub_key(parent, SIGNER_ID, PATH)

    with pytest.raises(DegenerateDerivationError, match="child private key is zero"):
        derive_child_prv_key(ec.n - epsilon, SIGNER_ID, PATH)


def test_invalid_parent() -> None:
    G = secp256k1.G
    for parent in (INF, (1, 2), (G[0], G[1] + 1)):
        with pytest.raises(InvalidPointError, match="not a valid public key: "):
            derive_child_point(parent, SIGNER_ID, PATH)
    with pytest.raises(InvalidPointError, match="not a valid public key: "):
        derive_child_pub_key(INF, SIGNER_ID, PATH)
    with pytest.raises(InvalidPointError, match="not a valid public key: "):
        derive_child_pub_key_compressed((1, 2), SIGNER_ID, PATH)

    # SEC encodings are accepted as parent too
    child = derive_child_point(G, SIGNER_ID, PATH)
    assert derive_child_point(bytes_from_point(G), SIGNER_ID, PATH) == child
