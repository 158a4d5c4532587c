import json
from typing import Any, Mapping, Optional
from urllib.parse import quote_plus

from recaptcha_client.config import API_SERVER, service_url

CHALLENGE_FIELD = "recaptcha_challenge_field"
RESPONSE_FIELD = "recaptcha_response_field"


def _endpoint(api_server: str, path: str, public_key: str, error: Optional[str], use_ssl: bool) -> str:
    url = f"{service_url(api_server, path, use_ssl)}?k={public_key}"
    if error:
        url += f"&error={quote_plus(error)}"
    return url


def build_widget_markup(
    public_key: str,
    error: Optional[str] = None,
    use_ssl: bool = False,
    options: Optional[Mapping[str, Any]] = None,
    *,
    api_server: str = API_SERVER,
) -> str:
    """Return the challenge HTML (script and noscript versions) to embed in a form.

    `error` is the code returned by a failed verification and makes the
    widget show the matching message. `options` becomes the RecaptchaOptions
    object read by the challenge script.
    """
    out = ""
    if options:
        out += (
            '<script type="text/javascript">'
            f"var RecaptchaOptions = {json.dumps(dict(options))};</script>"
        )

    out += (
        '<script type="text/javascript" '
        f'src="{_endpoint(api_server, "challenge", public_key, error, use_ssl)}"></script>'
    )

    out += (
        "<noscript>"
        f'<iframe src="{_endpoint(api_server, "noscript", public_key, error, use_ssl)}" '
        'height="300" width="500" frameborder="0"></iframe><br/>'
        f'<textarea name="{CHALLENGE_FIELD}" rows="3" cols="40"></textarea>'
        f'<input type="hidden" name="{RESPONSE_FIELD}" value="manual_challenge">'
        "</noscript>"
    )
    return out
