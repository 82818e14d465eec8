"""Errors raised by the coupon issuance and verification services."""


class CouponValidationError(ValueError):
    """Missing or malformed form input. Nothing was written."""


class InvalidBranchPasswordError(ValueError):
    def __init__(self) -> None:
        super().__init__("Invalid branch password")


class CouponNotFoundError(ValueError):
    def __init__(self, code: str):
        super().__init__(f"Coupon '{code}' not found")
        self.code = code


class CouponAlreadyProcessedError(ValueError):
    """The coupon is no longer ISSUED, or a concurrent request got there first."""

    def __init__(self, code: str, status: str | None = None):
        message = "Coupon already processed"
        if status:
            message = f"{message} (status: {status})"
        super().__init__(message)
        self.code = code
        self.status = status


class VerificationLockedError(ValueError):
    def __init__(self, remaining_seconds: int):
        super().__init__(
            f"Too many failed attempts, try again in {remaining_seconds}s"
        )
        self.remaining_seconds = remaining_seconds
