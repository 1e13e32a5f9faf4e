from fastapi import HTTPException, status


class StorefrontError(HTTPException):
    """Base for failures reported to the caller as {"message", "alert", "error"}."""

    code: str = "Error"
    status_code_default: int = status.HTTP_400_BAD_REQUEST
    message: str = "Request failed"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=message or self.message,
        )


class ConflictError(StorefrontError):
    code = "Conflict"
    message = "Email already registered!"


class InvalidCodeError(StorefrontError):
    code = "InvalidCode"
    message = "Invalid OTP or email!"


class ExpiredError(StorefrontError):
    code = "Expired"
    message = "OTP has expired. Please request a new one."


class NotFoundError(StorefrontError):
    code = "NotFound"
    status_code_default = status.HTTP_404_NOT_FOUND
    message = "Email is not available, please sign up"


class UnverifiedError(StorefrontError):
    code = "Unverified"
    status_code_default = status.HTTP_403_FORBIDDEN
    message = "Account not verified. Please verify your email."


class InvalidCredentialError(StorefrontError):
    code = "InvalidCredential"
    message = "Invalid password"


class DeliveryError(StorefrontError):
    code = "DeliveryError"
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to send email. Please try again."


class ValidationError(StorefrontError):
    code = "ValidationError"
    message = "Missing or invalid fields"


class InvalidOrExpiredTokenError(StorefrontError):
    code = "InvalidOrExpiredToken"
    message = "Password reset token is invalid or has expired."
