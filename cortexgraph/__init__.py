#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
cortexgraph v0.1.0

Package initialization and version metadata.

Reader for Cortex coloured de Bruijn graph binaries (.ctx): header and
record decoding, 2-bit packed k-mers, and edge-based neighbour derivation.

Author: cortexgraph Development Team
License: MIT - See LICENSE
"""

from .version import __version__

__all__ = ["__version__"]

# cortexgraph v0.1.0
# Any usage is subject to this software's license.
