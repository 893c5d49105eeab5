"""Exception hierarchy for the catalog store."""


class CatalogStoreError(Exception):
    """Base exception for all catalog store errors."""


class StoreNotOpen(CatalogStoreError):
    """Raised when a record operation is attempted on a closed store."""


class InvalidArgument(CatalogStoreError, ValueError):
    """Raised for a missing argument or a key field that exceeds its bound."""


class KeyNotFound(CatalogStoreError, KeyError):
    """Raised when a lookup or delete finds no matching key."""


class EngineFailure(CatalogStoreError):
    """Raised when the backing dbm engine reports an error.

    The engine's own exception is chained as ``__cause__``.
    """
