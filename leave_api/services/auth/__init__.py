"""
Authentication service layer.

- Login, token verification and caller profile
- Account registration (admin signup, student self-registration, Google)
- Password reset one-time codes
- Google OAuth client
"""

from leave_api.services.auth.auth_service import AuthService
from leave_api.services.auth.oauth import GoogleOAuthClient, GoogleProfile, OAuthError
from leave_api.services.auth.otp_service import OTPService, generate_code
from leave_api.services.auth.registration_service import RegistrationService, default_avatar

__all__ = [
    "AuthService",
    "GoogleOAuthClient",
    "GoogleProfile",
    "OAuthError",
    "OTPService",
    "generate_code",
    "RegistrationService",
    "default_avatar",
]
