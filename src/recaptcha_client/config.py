import os
from dataclasses import dataclass
from typing import Mapping, Optional

from recaptcha_client.errors import ConfigurationError

API_SERVER = "www.google.com/recaptcha/api"
MAILHIDE_SERVER = "www.google.com/recaptcha/mailhide"

ENV_PUBLIC_KEY = "RECAPTCHA_PUBLIC_KEY"
ENV_PRIVATE_KEY = "RECAPTCHA_PRIVATE_KEY"
ENV_USE_SSL = "RECAPTCHA_USE_SSL"

_TRUTHY = {"1", "true", "yes", "on"}


def service_url(server: str, path: str, use_ssl: bool = False) -> str:
    """Join a scheme-less server base and a path into an absolute URL."""
    scheme = "https" if use_ssl else "http"
    return f"{scheme}://{server}/{path.lstrip('/')}"


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Credentials and endpoints shared by the verification and MailHide features."""

    public_key: str
    private_key: str
    use_ssl: bool = False
    api_server: str = API_SERVER
    mailhide_server: str = MAILHIDE_SERVER
    timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.public_key or not self.private_key:
            raise ConfigurationError("Invalid private / public key.")

    def __repr__(self) -> str:
        return (
            f"ServiceConfig(public_key={self.public_key!r}, private_key='***', "
            f"use_ssl={self.use_ssl!r}, api_server={self.api_server!r}, "
            f"mailhide_server={self.mailhide_server!r}, timeout={self.timeout!r})"
        )

    def api_url(self, path: str) -> str:
        return service_url(self.api_server, path, self.use_ssl)

    def mailhide_url(self, path: str) -> str:
        return service_url(self.mailhide_server, path, self.use_ssl)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServiceConfig":
        """Build a config from RECAPTCHA_* environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            public_key=env.get(ENV_PUBLIC_KEY, ""),
            private_key=env.get(ENV_PRIVATE_KEY, ""),
            use_ssl=env.get(ENV_USE_SSL, "").strip().lower() in _TRUTHY,
        )
