from __future__ import annotations


class XlsBrowserError(Exception):
    """Base exception for all xls_browser errors"""
    pass


class ConfigError(XlsBrowserError):
    """Invalid or inconsistent global.json or environment overrides"""
    pass


class DatasetSchemaError(XlsBrowserError):
    """
    Payload doesn't match what Dataset expects
    duplicate headers, rows that are not mappings, etc
    """
    pass


class NotFound(XlsBrowserError):
    """The store reports no dataset with the requested id"""

    def __init__(self, dataset_id: str, message: str | None = None):
        self.dataset_id = dataset_id
        super().__init__(message or f"Dataset '{dataset_id}' not found")


class TransientFetchError(XlsBrowserError):
    """Recoverable I/O failure talking to the store (network hiccup, 5xx, timeout)"""

    def __init__(self, dataset_id: str | None, message: str):
        self.dataset_id = dataset_id
        super().__init__(message)


class Forbidden(XlsBrowserError):
    """Operation attempted without the required role"""
    pass


class InsufficientSelection(XlsBrowserError):
    """Export requested with fewer datasets than a comparison needs"""

    def __init__(self, selected: int, required: int = 2):
        self.selected = selected
        self.required = required
        super().__init__(
            f"At least {required} datasets must be selected to export a comparison (got {selected})"
        )


class SnapshotError(XlsBrowserError):
    """The snapshot collaborator failed to rasterise a surface"""

    def __init__(self, surface_id: str, message: str):
        self.surface_id = surface_id
        super().__init__(message)


class UnsupportedFileType(XlsBrowserError):
    """Upload blob is not one of the accepted tabular formats"""
    pass


class StoreRejected(XlsBrowserError):
    """The store refused the request (bad upload, payload too large, validation failure)"""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)
