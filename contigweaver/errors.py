"""
ContigWeaver v0.1.0

Base exception shared by every ContigWeaver subpackage.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""


class ContigWeaverError(Exception):
    """Base class for all ContigWeaver errors."""
    pass

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
