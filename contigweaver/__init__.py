#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Package initialization and version metadata.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

from .version import __version__

__all__ = ["__version__"]

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
