#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
cortexgraph v0.1.0

Version information.

Author: cortexgraph Development Team
License: MIT - See LICENSE
"""

__version__ = "0.1.0"

# cortexgraph v0.1.0
# Any usage is subject to this software's license.
