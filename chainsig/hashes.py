#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Hash functions not provided by btclib.

The FIPS-202 SHA3-256 used by the epsilon derivation
and the (pre-standard) Keccak-256 used by EVM chains;
Bitcoin hashes come from btclib.hashes.
"""

import hashlib

from btclib.alias import Octets
from btclib.utils import bytes_from_octets
from eth_utils.crypto import keccak


def sha3_256(octets: Octets) -> bytes:
    """Return the FIPS-202 SHA3-256(*) of the input octet sequence."""
    octets = bytes_from_octets(octets)
    return hashlib.sha3_256(octets).digest()


def keccak256(octets: Octets) -> bytes:
    """Return the Keccak-256(*) of the input octet sequence.

    This is the original Keccak submission padding,
    as used by Ethereum: it differs from FIPS-202 SHA3-256.
    """
    octets = bytes_from_octets(octets)
    return bytes(keccak(octets))
