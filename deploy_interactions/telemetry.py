from __future__ import annotations

from os import environ

import logfire

from .version import VERSION


__all__ = ('configure_logging',)


def configure_logging(
    debug: bool = False,
    token: str | None = None
) -> None:
    token = token or environ.get('LOGFIRE_TOKEN')

    logfire.configure(
        service_name='deploy-interactions',
        service_version=VERSION,
        token=token,
        send_to_logfire='if-token-present',
        environment='development' if debug else 'production',
        console=logfire.ConsoleOptions(
            min_log_level='debug' if debug else 'warn',
            verbose=debug
        )
    )

    if token:
        logfire.instrument_aiohttp_client()
