"""Error types: local validation failures and store/network failures."""


class SpotValidationError(ValueError):
    """A local validation failure, detected before any store call.

    ``field`` names the form field or action that failed (``location``,
    ``name``, ``spot``, ``rating``, ``comment``, ``session``).
    """

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class StoreError(Exception):
    """A failure reported by the remote store or object storage.

    The underlying message is kept verbatim in ``str(exc)``.
    """
