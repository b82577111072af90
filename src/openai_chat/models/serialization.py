"""Conditional serialization for models wrapping optional sub-structures."""

from typing import Any, ClassVar, Dict, Tuple

from pydantic import BaseModel, SerializationInfo, SerializerFunctionWrapHandler, model_serializer


def is_empty_value(value: Any) -> bool:
    """Return True when ``value`` is unset or equals its zero value."""
    if value is None:
        return True
    is_empty = getattr(value, "is_empty", None)
    if callable(is_empty):
        return is_empty()
    return isinstance(value, (str, list, dict)) and not value


class OmitEmptyModel(BaseModel):
    """Base model that drops the keys named in ``omit_when_empty`` from its
    wire form whenever the corresponding value is empty.

    Sub-structures decide emptiness through an ``is_empty()`` method; strings
    and containers are empty when they have no items.
    """

    omit_when_empty: ClassVar[Tuple[str, ...]] = ()

    @model_serializer(mode="wrap")
    def serialize_without_empty(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> Dict[str, Any]:
        data = handler(self)
        for name in self.omit_when_empty:
            if is_empty_value(getattr(self, name)):
                key = name
                if info.by_alias:
                    key = type(self).model_fields[name].alias or name
                data.pop(key, None)
        return data
