from __future__ import annotations

from typing import Any, TYPE_CHECKING
from enum import Enum

if TYPE_CHECKING:
    from deploy_interactions.models import DeployTarget


__all__ = (
    'FATAL_STATUS_CODES',
    'BadRequest',
    'BaseDeployException',
    'CommandLoadError',
    'ConfigError',
    'DeployException',
    'ErrorSeverity',
    'Forbidden',
    'HTTPException',
    'NotFound',
    'RateLimited',
    'ServerError',
    'Unauthorized',
    'classify_error',
    'exception_for_status',
)


# ? any of these mean every following call to the same destination will fail too
FATAL_STATUS_CODES = frozenset({401, 403, 404})


class BaseDeployException(Exception):
    ...


class DeployException(BaseDeployException):
    ...


class ConfigError(DeployException):
    ...


class CommandLoadError(DeployException):
    ...


class HTTPException(BaseDeployException):
    status_code: int = 0

    def __init__(
        self,
        detail: Any | None = None,  # noqa: ANN401
        status_code: int | None = None
    ) -> None:
        self.detail = detail

        if status_code is not None:
            self.status_code = status_code

        super().__init__(detail)

    @property
    def message(self) -> str:
        if isinstance(self.detail, dict) and 'message' in self.detail:
            return str(self.detail['message'])

        if self.detail:
            return str(self.detail)

        return f'HTTP error {self.status_code}'

    def __str__(self) -> str:
        return (
            f'{self.message} ({self.status_code})'
            if self.status_code else
            self.message
        )


class BadRequest(HTTPException):
    status_code: int = 400


class Unauthorized(HTTPException):
    status_code: int = 401


class Forbidden(HTTPException):
    status_code: int = 403


class NotFound(HTTPException):
    status_code: int = 404


class RateLimited(HTTPException):
    status_code: int = 429


class ServerError(HTTPException):
    status_code: int = 500


def exception_for_status(
    status: int,
    detail: Any | None = None  # noqa: ANN401
) -> HTTPException:
    match status:
        case 400:
            return BadRequest(detail)
        case 401:
            return Unauthorized(detail)
        case 403:
            return Forbidden(detail)
        case 404:
            return NotFound(detail)
        case 429:
            return RateLimited(detail)
        case _ if status >= 500:
            return ServerError(detail, status)
        case _:
            return HTTPException(detail, status)


class ErrorSeverity(Enum):
    LOCAL = 0
    """Only the failing command is affected"""
    TARGET_FATAL = 1
    """The rest of the destination is abandoned, other destinations continue"""
    RUN_FATAL = 2
    """The whole deploy is halted"""


def classify_error(
    error: HTTPException,
    target: DeployTarget
) -> ErrorSeverity:
    if error.status_code not in FATAL_STATUS_CODES:
        return ErrorSeverity.LOCAL

    # ? a 403 / 404 on a guild is usually that guild's problem, not the token's
    if (
        error.status_code == 401 or
        target.is_global or
        target.dev
    ):
        return ErrorSeverity.RUN_FATAL

    return ErrorSeverity.TARGET_FATAL
