from dataclasses import dataclass
from typing import Any


class StockReconError(Exception):
    status_code: int = 500
    code: str = "internal_error"


class ConfigurationError(StockReconError):
    status_code = 400
    code = "configuration_error"


class CredentialError(StockReconError):
    status_code = 502
    code = "credential_error"


class UpstreamError(StockReconError):
    status_code = 502
    code = "upstream_error"


class BranchNotFoundError(StockReconError):
    status_code = 404
    code = "branch_not_found"


class InvalidRequestError(StockReconError):
    status_code = 400
    code = "invalid_request"


@dataclass
class ApiError:
    code: str
    message: str
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            payload["details"] = self.details
        return payload

    @classmethod
    def from_exception(cls, exc: StockReconError) -> "ApiError":
        return cls(code=exc.code, message=str(exc))

