"""Store service errors. Each maps to an ``{"error": ...}`` JSON response."""

from libs.common.error_handler import ServiceError


class StoreServiceError(ServiceError):
    """Base class for store errors."""


class InvalidOrderPayload(StoreServiceError):
    status_code = 400
    default_message = "Invalid order payload"


class MissingOrderFields(StoreServiceError):
    status_code = 400
    default_message = "Missing required fields"


class OrderCreationFailed(StoreServiceError):
    status_code = 500
    default_message = "Failed to create order"


class OrderItemsCreationFailed(StoreServiceError):
    status_code = 500
    default_message = "Failed to create order items"
