class PaymentGatewayError(Exception):
    """Raised when the payment gateway cannot create or verify a payment."""

    pass
