from __future__ import annotations

from typing import Any, Literal, TypeGuard, TYPE_CHECKING

from pydantic_core import CoreSchema, core_schema

if TYPE_CHECKING:
    from pydantic import GetJsonSchemaHandler, GetCoreSchemaHandler
    from pydantic.json_schema import JsonSchemaValue


__all__ = (
    'MISSING',
    'Nullable',
    'Optional',
    '_MissingType',
    'is_not_missing',
    'or_default',
)


class _MissingType:
    """Marks a payload field that was never sent, as opposed to an explicit `null`"""

    def __bool__(self) -> Literal[False]:
        return False

    def __repr__(self) -> str:
        return 'MISSING'

    def __copy__(self) -> _MissingType:
        return self

    def __deepcopy__(
        self,
        _: Any  # noqa: ANN401
    ) -> _MissingType:
        return self

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        _source_type: Any,  # noqa: ANN401
        _handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.json_or_python_schema(
            json_schema=core_schema.none_schema(),
            python_schema=core_schema.is_instance_schema(cls),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls,
        _core_schema: CoreSchema,
        _handler: GetJsonSchemaHandler,
    ) -> JsonSchemaValue:
        return {'type': 'null'}


def is_not_missing[T](value: T | _MissingType) -> TypeGuard[T]:
    return not isinstance(value, _MissingType)


def or_default[T, D](value: T | _MissingType | None, default: D) -> T | D:
    """Resolve a value the API would fill in itself when absent or `null`."""
    if value is None or isinstance(value, _MissingType):
        return default

    return value


MISSING = _MissingType()

type Optional[T] = T | _MissingType
type Nullable[T] = T | None
