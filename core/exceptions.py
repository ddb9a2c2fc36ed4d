"""
Core domain exceptions.

These exceptions are transport-agnostic and should be caught by the server
layer to convert into appropriate HTTP responses.
"""


class CoreError(Exception):
    """Base exception for all core errors."""

    pass


class DeliveryError(CoreError):
    """Raised when a frame cannot be written to a stream connection."""

    def __init__(self, connection_id: str, reason: str):
        self.connection_id = connection_id
        self.reason = reason
        super().__init__(f"Delivery to {connection_id} failed: {reason}")


class ConnectionNotFoundError(CoreError):
    """Raised when a stream connection is not registered."""

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__(f"Connection not found: {connection_id}")
