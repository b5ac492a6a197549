"""Authenticated-caller types and request correlation.

Credential verification belongs to the authentication collaborator;
this package only defines what it hands over.
"""

from jobguard.core.auth.middleware import RequestIdMiddleware
from jobguard.core.auth.schemas import Actor


__all__ = [
    "Actor",
    "RequestIdMiddleware",
]
