from __future__ import annotations

from typing import Any
from enum import Enum

from pydantic import BaseModel, ConfigDict

from deploy_interactions.missing import MISSING, _MissingType, is_not_missing


__all__ = (
    'RawBaseModel',
    'filter_missing',
)


class RawBaseModel(BaseModel):
    # ? unknown api fields are kept so payloads round trip untouched
    model_config = ConfigDict(
        extra='allow',
        frozen=True
    )

    def as_payload(self) -> dict:
        return filter_missing(self.model_dump())


def _serialize(value: Any) -> Any:  # noqa: ANN401
    match value:
        case dict():
            return filter_missing(value)
        case list() | tuple() | set():
            return [
                _serialize(i)
                for i in value
                if is_not_missing(i)]
        case Enum():
            return value.value
        case _MissingType():
            return MISSING

    return value


def filter_missing(data: dict) -> dict:
    filtered = {}

    for k, v in data.items():
        if is_not_missing(value := _serialize(v)):
            filtered[k] = value

    return filtered
