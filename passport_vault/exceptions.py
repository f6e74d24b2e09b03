"""
Exception hierarchy for passport_vault.

Errors raised at internal boundaries (stores, routers, input parsing).
The session gate components recover from these where they occur; none of
them is expected to reach the UI.
"""


class PassportVaultError(Exception):
    """Base exception for all passport_vault errors."""
    pass


class NavigationError(PassportVaultError):
    """A navigation intent could not be executed (unknown destination, no router)."""
    pass


class CredentialStoreError(PassportVaultError):
    """The PIN credential store could not be read or written."""
    pass


class PinFormatError(PassportVaultError, ValueError):
    """A PIN was not made of exactly the expected number of decimal digits."""
    pass
