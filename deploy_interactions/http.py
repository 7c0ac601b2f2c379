from __future__ import annotations

from typing import Any, Self, TYPE_CHECKING
from base64 import b64decode
from re import match, IGNORECASE
from urllib.parse import quote
from sys import version_info
from asyncio import sleep
from contextlib import suppress
from binascii import Error as BinasciiError

from orjson import JSONDecodeError, loads, dumps
from pydantic import ValidationError
from aiohttp import (
    __version__ as aiohttp_version,
    ClientSession,
    ClientTimeout,
    ClientError
)
import logfire

from .errors import ConfigError, HTTPException, RateLimited, exception_for_status
from .models import RemoteApplicationCommand
from .version import VERSION

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from .models import ApplicationCommand
    from .types import Snowflake


__all__ = (
    'BASE_URL',
    'DiscordClient',
    'Route',
    'get_bot_id_from_token',
)


BASE_URL = 'https://discord.com/api/v10'
USER_AGENT = ' '.join([
    f'DiscordBot (https://github.com/ckohen/deploy-interactions, {VERSION})',
    f'Python/{'.'.join([str(i) for i in version_info[:3]])}',
    f'aiohttp/{aiohttp_version}'
])
MAX_TRIES = 5


def get_bot_id_from_token(token: str) -> str:
    m = match(
        r'^(mfa\.[a-z0-9_-]{20,})|(([a-z0-9_-]{23,28})\.[a-z0-9_-]{6,7}\.(?:[a-z0-9_-]{27}|[a-z0-9_-]{38}))$',
        token,
        IGNORECASE
    )

    if m is None or m.group(3) is None:
        raise ConfigError('invalid token format, unable to read the application id from it')

    try:
        return b64decode(f'{m.group(3)}==').decode()
    except (BinasciiError, UnicodeDecodeError) as e:
        raise ConfigError('invalid token format, unable to read the application id from it') from e


class Route:
    def __init__(
        self,
        method: str,
        path: str,
        **params  # noqa: ANN003
    ) -> None:
        self.method = method

        self.path = path.format(**{
            k: quote(v) if isinstance(v, str) else v
            for k, v in params.items()
        }) if params else path

    def __repr__(self) -> str:
        return f'{self.method} {self.path}'


def _commands_route(
    method: str,
    application_id: str,
    guild_id: Snowflake | None
) -> Route:
    if guild_id is None:
        return Route(
            method,
            '/applications/{application_id}/commands',
            application_id=application_id
        )

    return Route(
        method,
        '/applications/{application_id}/guilds/{guild_id}/commands',
        application_id=application_id,
        guild_id=guild_id
    )


class DiscordClient:
    """Application command endpoints over aiohttp, implements `CommandClient`"""

    def __init__(
        self,
        token: str,
        application_id: Snowflake | None = None,
        base_url: str = BASE_URL,
        timeout: float = 30.0
    ) -> None:
        self.token = token
        self.application_id = application_id or get_bot_id_from_token(token)
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._session: ClientSession | None = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            self._session = ClientSession(
                timeout=ClientTimeout(total=self.timeout)
            )

        return self._session

    async def request(
        self,
        route: Route,
        json: dict[str, Any] | list[Any] | None = None
    ) -> Any:  # noqa: ANN401
        headers = {
            'User-Agent': USER_AGENT,
            'Authorization': f'Bot {self.token}'
        }

        data = None

        if json is not None:
            headers['Content-Type'] = 'application/json'
            data = dumps(json)

        resp_data: Any = None

        for _ in range(MAX_TRIES):
            try:
                async with self.session.request(
                    route.method,
                    f'{self.base_url}{route.path}',
                    headers=headers,
                    data=data
                ) as response:
                    resp_data = await response.text()

                    if response.headers.get('Content-Type', '').startswith('application/json'):
                        # ? unparseable bodies stay text, the response parsers reject them
                        with suppress(JSONDecodeError):
                            resp_data = loads(resp_data)

                    logfire.debug(
                        '{route} responded {status}',
                        route=repr(route),
                        status=response.status
                    )

                    if 300 > response.status >= 200:
                        return resp_data

                    # ? waiting out a rate limit is pacing, every other failure is raised once
                    if response.status == 429 and isinstance(resp_data, dict):
                        retry_after = float(resp_data.get('retry_after', 1))
                        logfire.warn(
                            'rate limited on {route}, retrying in {retry_after}s',
                            route=repr(route),
                            retry_after=retry_after
                        )
                        await sleep(retry_after)
                        continue

                    raise exception_for_status(response.status, resp_data)
            except (ClientError, TimeoutError) as e:
                raise HTTPException(
                    f'{route!r} failed: {e.__class__.__name__} {e}'.strip()
                ) from e

        raise RateLimited(resp_data)

    @staticmethod
    def _parse_commands(
        route: Route,
        data: Any  # noqa: ANN401
    ) -> list[RemoteApplicationCommand]:
        if not isinstance(data, list):
            raise HTTPException(f'{route!r} returned {type(data).__name__}, expected a list of commands')

        return [
            DiscordClient._parse_command(route, command)
            for command in data
        ]

    @staticmethod
    def _parse_command(
        route: Route,
        data: Any  # noqa: ANN401
    ) -> RemoteApplicationCommand:
        # ? a response that fails to parse is that call's failure, status 0 keeps it local
        try:
            return RemoteApplicationCommand.model_validate(data)
        except ValidationError as e:
            logfire.warn(
                'unable to parse command from {route}: {error}',
                route=repr(route),
                error=str(e)
            )
            raise HTTPException(
                f'{route!r} returned an unreadable command: {e.error_count()} validation errors'
            ) from e

    async def list_commands(
        self,
        guild_id: Snowflake | None = None
    ) -> list[RemoteApplicationCommand]:
        route = _commands_route('GET', self.application_id, guild_id)

        return self._parse_commands(route, await self.request(route))

    async def create_command(
        self,
        command: ApplicationCommand,
        guild_id: Snowflake | None = None
    ) -> RemoteApplicationCommand:
        route = _commands_route('POST', self.application_id, guild_id)

        return self._parse_command(
            route,
            await self.request(route, json=command.as_payload())
        )

    async def overwrite_commands(
        self,
        commands: Sequence[ApplicationCommand],
        guild_id: Snowflake | None = None
    ) -> list[RemoteApplicationCommand]:
        route = _commands_route('PUT', self.application_id, guild_id)

        return self._parse_commands(
            route,
            await self.request(
                route,
                json=[
                    command.as_payload()
                    for command in commands
                ]
            )
        )
