"""Exceptions the HTTP layer maps to 401 and 403 responses."""

from protean.exceptions import ProteanException


class NotAuthenticated(ProteanException):
    """Credentials are missing, wrong, expired or belong to a disabled account."""


class PermissionDenied(ProteanException):
    """The caller is authenticated but may not act on this resource."""
