"""MailHide: hide an email address behind a reCAPTCHA-protected link.

The address is PKCS#7 padded, encrypted with AES-128-CBC under the site's
private key (zero IV) and embedded as URL-safe base64 in a link to the
MailHide service, which is the only party able to decode it. The visitor
sees an abridged form such as ``john...@example.com``.

Note that MailHide keys are separate from the verification API keys.
"""
import html
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

import structlog

from recaptcha_client import crypto
from recaptcha_client.config import MAILHIDE_SERVER, ServiceConfig, service_url
from recaptcha_client.errors import ConfigurationError, InvalidEmailError
from recaptcha_client.utils import decode_url_safe, encode_url_safe


log = structlog.get_logger()

REVEAL_TITLE = "Reveal this e-mail address"
POPUP_FEATURES = (
    "toolbar=0,scrollbars=0,location=0,statusbar=0,menubar=0,resizable=0,"
    "width=500,height=300"
)


@dataclass(frozen=True, slots=True)
class EmailParts:
    """The abridged local part shown to visitors and the domain."""

    visible: str
    hidden: str


def partition_email(email: str) -> EmailParts:
    """Split an address at the first '@' and abridge the local part.

    johnsmith@example.com -> EmailParts(visible="john", hidden="example.com")
    """
    local, sep, domain = email.partition("@")
    if not sep:
        raise InvalidEmailError(f"Not an email address (missing '@'): {email!r}")

    if len(local) <= 4:
        visible = local[:1]
    elif len(local) <= 6:
        visible = local[:3]
    else:
        visible = local[:4]
    return EmailParts(visible=visible, hidden=domain)


def encrypt_email(email: str, key: bytes) -> str:
    """Pad, encrypt and URL-safe encode an address for the `c` parameter."""
    ciphertext = crypto.encrypt(crypto.pad(email.encode("utf-8")), key)
    return encode_url_safe(ciphertext)


def _compose_url(endpoint: str, public_key: str, payload: str) -> str:
    return f"{endpoint}?k={public_key}&c={payload}"


def _render_html(parts: EmailParts, url: str) -> str:
    url = html.escape(url)
    return (
        f'{html.escape(parts.visible)}<a href="{url}" '
        f"onclick=\"window.open('{url}', '', '{POPUP_FEATURES}'); return false;\" "
        f'title="{REVEAL_TITLE}">...</a>@{html.escape(parts.hidden)}'
    )


def build_url(
    email: str,
    public_key: str,
    private_key: str,
    *,
    use_ssl: bool = False,
    server: str = MAILHIDE_SERVER,
) -> str:
    """Build the MailHide URL for `email`.

    Identical inputs always give the identical URL. Raises ConfigurationError
    for an empty `public_key` and InvalidKeyError when `private_key` is not
    32 hex characters.
    """
    if not public_key:
        raise ConfigurationError("Invalid private / public key.")
    key = crypto.derive_key(private_key)
    endpoint = service_url(server, "d", use_ssl)
    return _compose_url(endpoint, public_key, encrypt_email(email, key))


def build_html(
    email: str,
    public_key: str,
    private_key: str,
    *,
    use_ssl: bool = False,
    server: str = MAILHIDE_SERVER,
) -> str:
    """Build the abridged-address markup linking to the MailHide popup."""
    parts = partition_email(email)
    url = build_url(email, public_key, private_key, use_ssl=use_ssl, server=server)
    return _render_html(parts, url)


def reveal(url_or_payload: str, private_key: str) -> str:
    """Decrypt the `c` payload of a MailHide URL back into the address.

    Only useful to check that a generated link decodes; the service itself
    never needs this.
    """
    payload = url_or_payload
    if "?" in url_or_payload:
        query = parse_qs(urlsplit(url_or_payload).query)
        if "c" not in query:
            raise ValueError("MailHide URL has no c= parameter")
        payload = query["c"][0]
    key = crypto.derive_key(private_key)
    padded = crypto.decrypt(decode_url_safe(payload), key)
    return crypto.unpad(padded).decode("utf-8")


class MailHide:
    """MailHide feature bound to one ServiceConfig.

    The AES key is derived once here, so a bad private key fails at
    construction rather than on first use.
    """

    def __init__(self, config: ServiceConfig):
        self.config = config
        self._key = crypto.derive_key(config.private_key)

    def url(self, email: str) -> str:
        payload = encrypt_email(email, self._key)
        log.debug("mailhide url built", payload_len=len(payload), use_ssl=self.config.use_ssl)
        return _compose_url(self.config.mailhide_url("d"), self.config.public_key, payload)

    def html(self, email: str) -> str:
        parts = partition_email(email)
        return _render_html(parts, self.url(email))
