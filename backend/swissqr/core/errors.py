"""
Classified errors raised while building a Swiss QR-Bill payload.

Every error is terminal for the current render request: they stem from
configuration or data defects, so nothing here is retried. Routes turn them
into HTTP responses using ``status_code`` and ``detail``.
"""

from fastapi import status


class QrBillError(Exception):
    status_code: int = 422

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidIban(QrBillError):
    pass


class MissingCreditorConfig(QrBillError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class ReferenceGenerationFailure(QrBillError):
    pass


class FieldTruncationViolatesRequired(QrBillError):
    pass


class PayloadStructureInvalid(QrBillError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
