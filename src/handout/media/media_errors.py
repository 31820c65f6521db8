"""Errors raised by the asset store and its collaborators."""


class StorageError(Exception):
    """Raised when a filesystem operation on the asset store fails."""


class AssetNotFoundError(StorageError):
    """Raised when an asset does not exist (never stored or already evicted)."""


class InvalidAssetNameError(AssetNotFoundError):
    """Raised when a requested name cannot denote an asset in the flat store."""
