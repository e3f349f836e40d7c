"""
Domain errors for the store bounded context.
"""


class StoreError(Exception):
    """Base class for store errors."""


class InvalidCouponRequest(StoreError):
    """The validation request itself is malformed (empty code, bad amount...)."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class MalformedCouponRecord(StoreError):
    """A stored coupon cannot be turned into a valid domain snapshot."""

    def __init__(self, code: str, problem: str):
        self.code = code
        self.problem = problem
        super().__init__(f"Coupon {code} is malformed: {problem}")
