"""Errors raised by the coupon lookup core."""


class DecodeFault(ValueError):
    """Raised when an upstream payload cannot be read as key/value data.

    Missing or malformed coupon data is never a fault; it decodes to an
    empty coupon list.
    """

    def __init__(self, message: str, payload_type: str | None = None) -> None:
        super().__init__(message)
        self.payload_type = payload_type


class InvalidStoreIdError(ValueError):
    """Raised when a store ID is missing or not 1-10 digits."""

    def __init__(self, store_id: object) -> None:
        super().__init__(f"Invalid store ID: {store_id!r}")
        self.store_id = store_id
