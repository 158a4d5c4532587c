from typing import Mapping, Optional

import structlog

from recaptcha_client.config import ServiceConfig
from recaptcha_client.errors import MissingRemoteIpError, ProtocolError
from recaptcha_client.models import VerificationOutcome, VerifyRequest
from recaptcha_client.transport import RequestsTransport, Transport


log = structlog.get_logger()

INCORRECT_SOLUTION = "incorrect-captcha-sol"


def parse_response(body: str) -> VerificationOutcome:
    """Parse the two-line answer of the verify endpoint.

    A first line of exactly "true" is success. Anything else is a failure
    whose error code is the second line; a failure without one is malformed.
    """
    if not body or not body.strip():
        raise ProtocolError("Invalid API Response: empty body")

    lines = body.split("\n", 1)
    verdict = lines[0].strip()
    if verdict == "true":
        return VerificationOutcome(success=True)

    rest = lines[1].strip() if len(lines) > 1 else ""
    error_code = rest.splitlines()[0].strip() if rest else ""
    if not error_code:
        raise ProtocolError(f"Invalid API Response: {body[:100]!r}")
    return VerificationOutcome(success=False, error_code=error_code)


class Verifier:
    """Checks a user's challenge answer against the verification service.

    Owns its transport and closes it on close() or when used as a context
    manager.
    """

    def __init__(self, config: ServiceConfig, transport: Optional[Transport] = None):
        self.config = config
        self._transport = transport if transport is not None else RequestsTransport(timeout=config.timeout)

    def __enter__(self) -> "Verifier":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    def verify(
        self,
        remote_ip: str,
        challenge: str,
        response: str,
        extra_fields: Optional[Mapping[str, str]] = None,
    ) -> VerificationOutcome:
        """POST the user's answer and return the service's verdict.

        An empty challenge or response is answered locally with a negative
        outcome and never reaches the network.
        """
        if not remote_ip:
            raise MissingRemoteIpError("For security reasons, you must pass the remote IP to reCAPTCHA")

        if not challenge or not response:
            log.info("discarding empty submission", remote_ip=remote_ip)
            return VerificationOutcome(success=False, error_code=INCORRECT_SOLUTION)

        fields = VerifyRequest(
            privatekey=self.config.private_key,
            remoteip=remote_ip,
            challenge=challenge,
            response=response,
        ).model_dump()
        fields.update(extra_fields or {})

        body = self._transport.post(self.config.api_url("verify"), fields)
        outcome = parse_response(body)
        log.info("verified", remote_ip=remote_ip, success=outcome.success, error_code=outcome.error_code)
        return outcome
