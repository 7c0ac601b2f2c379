from deploy_interactions.errors import (
    BadRequest,
    ErrorSeverity,
    Forbidden,
    HTTPException,
    NotFound,
    RateLimited,
    ServerError,
    Unauthorized,
    classify_error,
    exception_for_status
)
from deploy_interactions.models import GLOBAL, DeployTarget


GUILD = DeployTarget('111111111111111111')
DEV = DeployTarget('111111111111111111', dev=True)


def test_exception_for_status() -> None:
    assert isinstance(exception_for_status(400), BadRequest)
    assert isinstance(exception_for_status(401), Unauthorized)
    assert isinstance(exception_for_status(403), Forbidden)
    assert isinstance(exception_for_status(404), NotFound)
    assert isinstance(exception_for_status(429), RateLimited)

    server_error = exception_for_status(503)
    assert isinstance(server_error, ServerError)
    assert server_error.status_code == 503

    other = exception_for_status(418)
    assert type(other) is HTTPException
    assert other.status_code == 418


def test_http_exception_message() -> None:
    error = Forbidden({'message': 'Missing Access', 'code': 50001})

    assert error.message == 'Missing Access'
    assert str(error) == 'Missing Access (403)'
    assert str(HTTPException('connection reset')) == 'connection reset'
    assert NotFound().message == 'HTTP error 404'


def test_non_fatal_statuses_are_local() -> None:
    for error in (BadRequest(), RateLimited(), ServerError(), HTTPException('timeout')):
        for target in (GLOBAL, GUILD, DEV):
            assert classify_error(error, target) == ErrorSeverity.LOCAL


def test_unauthorized_is_always_run_fatal() -> None:
    for target in (GLOBAL, GUILD, DEV):
        assert classify_error(Unauthorized(), target) == ErrorSeverity.RUN_FATAL


def test_forbidden_and_not_found() -> None:
    for error in (Forbidden(), NotFound()):
        assert classify_error(error, GLOBAL) == ErrorSeverity.RUN_FATAL
        assert classify_error(error, DEV) == ErrorSeverity.RUN_FATAL
        assert classify_error(error, GUILD) == ErrorSeverity.TARGET_FATAL
