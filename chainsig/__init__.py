#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"__init__ module for the chainsig package."

name = "chainsig"
__version__ = "2026.10.0"
__author__ = "The chainsig developers"
__author_email__ = "devs@chainsig.dev"
__copyright__ = "Copyright (C) 2024-2026 The chainsig developers"
__license__ = "MIT License"
