class RecaptchaError(Exception):
    """Base class for every error raised by recaptcha_client."""


class ConfigurationError(RecaptchaError, ValueError):
    pass


class InvalidKeyError(ConfigurationError):
    """The private key is not hex or has the wrong length for AES-128."""


class InvalidEmailError(RecaptchaError, ValueError):
    pass


class PaddingError(RecaptchaError, ValueError):
    pass


class MissingRemoteIpError(RecaptchaError, ValueError):
    pass


class ProtocolError(RecaptchaError):
    """The verification service answered with something we can't parse."""


class TransportError(RecaptchaError):
    """The HTTP request to the verification service failed."""
