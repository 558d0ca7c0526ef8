"""
Errors raised by the promotion payment flows.

Each error knows its HTTP status; the app-level handler renders all of
them as ``{"status": false, "message": ...}``.
"""


class PaymentFlowError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------- 400: bad input ----------

class ValidationError(PaymentFlowError):
    status_code = 400


class MissingFields(ValidationError):
    def __init__(self, fields=None):
        self.fields = list(fields or [])
        super().__init__("Missing required fields")


class MissingReference(ValidationError):
    def __init__(self):
        super().__init__("Missing payment reference")


class MissingMetadata(ValidationError):
    def __init__(self):
        super().__init__("Payment metadata is missing")


class InvalidField(ValidationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid or missing {name} in payment metadata")


# ---------- 404 ----------

class NotFoundError(PaymentFlowError):
    status_code = 404


class BookNotFound(NotFoundError):
    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__(f"Book with ID {book_id} not found in database")


# ---------- 400: gateway said no ----------

class UpstreamError(PaymentFlowError):
    status_code = 400


class GatewayInitFailed(UpstreamError):
    def __init__(self, message: str = None):
        super().__init__(message or "Failed to initialize transaction")


class GatewayVerifyFailed(UpstreamError):
    def __init__(self):
        super().__init__("Payment verification failed")


class PaymentNotSuccessful(UpstreamError):
    def __init__(self, gateway_status=None):
        self.gateway_status = gateway_status
        super().__init__("Payment verification failed")


# ---------- 500 ----------

class InternalError(PaymentFlowError):
    status_code = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
