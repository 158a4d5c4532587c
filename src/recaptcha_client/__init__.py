"""Client for the reCAPTCHA verification and MailHide services."""
from recaptcha_client.config import ServiceConfig
from recaptcha_client.errors import (
    ConfigurationError,
    InvalidEmailError,
    InvalidKeyError,
    MissingRemoteIpError,
    PaddingError,
    ProtocolError,
    RecaptchaError,
    TransportError,
)
from recaptcha_client.mailhide import MailHide, build_html, build_url, partition_email
from recaptcha_client.models import VerificationOutcome
from recaptcha_client.verify import Verifier
from recaptcha_client.widget import build_widget_markup

__all__ = [
    "ServiceConfig",
    "MailHide",
    "Verifier",
    "VerificationOutcome",
    "build_url",
    "build_html",
    "build_widget_markup",
    "partition_email",
    "RecaptchaError",
    "ConfigurationError",
    "InvalidKeyError",
    "InvalidEmailError",
    "PaddingError",
    "MissingRemoteIpError",
    "ProtocolError",
    "TransportError",
]
