# jobboard/auth/__init__.py
"""
Identity modules for the job board.

This package contains:
- identity.py: Identity-provider assertion model (provider agnostic, pre-verified upstream)
"""
from jobboard.auth.identity import IdentityAssertion

__all__ = ["IdentityAssertion"]
