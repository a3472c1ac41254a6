"""Version information for pocketnotes.

Single source of truth for version number.
Follows PEP 440 and semantic versioning principles.
"""

__version__ = "0.3.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))

# Version history:
# 0.3.0 - Hybrid ranking fusion, semantic suggestions, link classification
# 0.2.0 - Provider fallback chain, embedding rate limiting
# 0.1.0 - Initial release (pattern + LLM category scoring)
