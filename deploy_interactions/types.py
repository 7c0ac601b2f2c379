from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic_core import CoreSchema, core_schema

if TYPE_CHECKING:
    from pydantic.json_schema import JsonSchemaValue
    from pydantic import GetJsonSchemaHandler


__all__ = ('Snowflake',)


class Snowflake(str):
    """Discord id, kept opaque; the API sends them as strings but ints are accepted."""

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        _source_type: type[Snowflake] | None,
        _handler: GetJsonSchemaHandler,
    ) -> CoreSchema:
        return core_schema.no_info_after_validator_function(
            str,
            core_schema.union_schema([
                core_schema.str_schema(pattern=r'^\d{1,20}$'),
                core_schema.int_schema(ge=0)
            ])
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls,
        _core_schema: CoreSchema,
        _handler: GetJsonSchemaHandler,
    ) -> JsonSchemaValue:
        return {'type': 'string', 'format': 'snowflake'}
