from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


class VerifyRequest(BaseModel):
    """Form fields POSTed to the verify endpoint."""

    privatekey: str
    remoteip: str
    challenge: str
    response: str


class VerificationOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    error_code: Optional[str] = None

    @model_validator(mode="after")
    def _error_code_only_on_failure(self) -> "VerificationOutcome":
        if self.success and self.error_code is not None:
            raise ValueError("error_code must be empty on success")
        return self

    def __bool__(self) -> bool:
        return self.success
