from typing import Optional, Any


class FinSplitError(Exception):
    """
    Base exception for FinSplit application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ResourceNotFoundError(FinSplitError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)


class AuthenticationError(FinSplitError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)


class ValidationError(FinSplitError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)


class ConflictError(FinSplitError):
    """
    Raised when a unique value (email, phone) is already taken.
    """
    def __init__(self, message: str = "Resource already exists", details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=409, details=details)


class ExternalServiceError(FinSplitError):
    """
    Raised when an external service (e.g., Twilio) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)


# ============================================================
# ONBOARDING TOKEN ERRORS
# ============================================================
# The three token errors below never leave the validator: they are
# collapsed into InvalidSessionError so callers cannot tell forgery
# from expiry.

class OnboardingTokenError(FinSplitError):
    """Base class for token decode failures."""
    def __init__(self, message: str = "Onboarding token rejected", code: str = "TOKEN_REJECTED"):
        super().__init__(message, code=code, status_code=400)


class MalformedTokenError(OnboardingTokenError):
    """Structurally not a token, or a payload that does not describe a session."""
    def __init__(self, message: str = "Malformed onboarding token"):
        super().__init__(message, code="TOKEN_MALFORMED")


class SignatureInvalidError(OnboardingTokenError):
    """Signature mismatch: tampered token or wrong key."""
    def __init__(self, message: str = "Onboarding token signature mismatch"):
        super().__init__(message, code="TOKEN_SIGNATURE_INVALID")


class TokenExpiredError(OnboardingTokenError):
    """Envelope window or embedded deadline has passed."""
    def __init__(self, message: str = "Onboarding token expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class InvalidSessionError(FinSplitError):
    """
    The single user-visible outcome for any token that fails validation.
    """
    def __init__(self, message: str = "Invalid or expired onboarding session"):
        super().__init__(message, code="INVALID_SESSION", status_code=400)


class PreconditionFailedError(FinSplitError):
    """
    Raised by onboarding handlers when the session is not at the step they require.
    """
    def __init__(self, message: str, required_step: str, current_step: Optional[str] = None):
        super().__init__(
            message,
            code="PRECONDITION_FAILED",
            status_code=409,
            details={"required_step": required_step, "current_step": current_step}
        )
        self.required_step = required_step
        self.current_step = current_step


class InvalidTransitionError(FinSplitError):
    """
    Raised when a requested session update breaks a monotonicity rule.
    """
    def __init__(self, message: str, code: str = "INVALID_TRANSITION", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=409, details=details)


class StepRegressionError(InvalidTransitionError):
    """Requested step is not strictly later than the current one."""
    def __init__(self, current_step: str, requested_step: str):
        super().__init__(
            f"Cannot move onboarding from '{current_step}' to '{requested_step}'",
            code="STEP_REGRESSION",
            details={"current_step": current_step, "requested_step": requested_step}
        )


class IdentityRebindError(InvalidTransitionError):
    """Session is already bound to a different application identity."""
    def __init__(self):
        super().__init__(
            "Onboarding session is already bound to another account",
            code="IDENTITY_REBIND"
        )


class TokenNotFoundError(FinSplitError):
    """
    Raised when no token fragment can be found in a free-text message.
    """
    def __init__(self, message: str = "No onboarding token found in message"):
        super().__init__(message, code="TOKEN_NOT_FOUND", status_code=404)
