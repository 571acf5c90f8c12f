"""
Top-level package for the User Groups API.

All functionality lives in submodules under ``app``.
"""

__all__ = []
