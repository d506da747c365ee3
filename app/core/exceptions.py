class StorefrontError(Exception):
    """Base class for errors raised by the storefront services."""


class CheckoutStateError(StorefrontError):
    """An operation was attempted from a checkout step that does not allow it."""


class PaymentGatewayError(StorefrontError):
    """The payment gateway could not be reached or rejected the request."""


class QRCodeError(StorefrontError):
    """A scannable payment code could not be produced."""


class OrderRequestError(StorefrontError):
    """An order API request is missing data or refers to nothing."""


class WebhookSignatureError(StorefrontError):
    """A webhook payload did not carry a valid signature."""
