"""
Portfolio Content Sync

Keeps a static portfolio site's project and article sections in step with
GitHub and Medium. Provides fetching, ranking, caching and a small API.
"""

__version__ = "1.0.0"
