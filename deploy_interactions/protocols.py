from __future__ import annotations

from typing import Protocol, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import ApplicationCommand, RemoteApplicationCommand
    from .types import Snowflake


__all__ = ('CommandClient',)


@runtime_checkable
class CommandClient(Protocol):
    """The three application command endpoints a deploy needs.

    Every method targets the global commands when `guild_id` is `None`,
    and raises `HTTPException` carrying the response status on failure.
    """

    async def list_commands(
        self,
        guild_id: Snowflake | None = None
    ) -> list[RemoteApplicationCommand]:
        ...

    async def create_command(
        self,
        command: ApplicationCommand,
        guild_id: Snowflake | None = None
    ) -> RemoteApplicationCommand:
        ...

    async def overwrite_commands(
        self,
        commands: Sequence[ApplicationCommand],
        guild_id: Snowflake | None = None
    ) -> list[RemoteApplicationCommand]:
        ...
