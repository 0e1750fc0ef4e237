"""Codec -- conversion between document payloads and store attribute maps.

The store keeps every item as a map of typed attribute values
(``{"S": "..."}``, ``{"N": "1"}``, ``{"M": {...}}``, ...). AttributeValueCodec
delegates the type tagging to boto3's DynamoDB serializers and handles the
two places where plain JSON-shaped payloads disagree with them: floats must
travel as Decimal, and numbers come back as Decimal.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer

from bundle_kernel.exceptions import CodecError


@runtime_checkable
class DocumentCodec(Protocol):
    """Protocol for (un)marshalling a document item.

    Implementations: AttributeValueCodec (store attribute-value format).
    """

    def encode(self, item: Mapping[str, Any]) -> dict[str, Any]:
        """Plain item -> store representation."""
        ...

    def decode(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        """Store representation -> plain item."""
        ...


def _to_store_value(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, Mapping):
        return {k: _to_store_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_store_value(v) for v in value]
    return value


def _from_store_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, Binary):
        return value.value
    if isinstance(value, dict):
        return {k: _from_store_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_store_value(v) for v in value]
    if isinstance(value, set):
        return sorted(_from_store_value(v) for v in value)
    return value


class AttributeValueCodec:
    """DocumentCodec backed by ``boto3.dynamodb.types``."""

    def __init__(self) -> None:
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def encode(self, item: Mapping[str, Any]) -> dict[str, Any]:
        try:
            return {
                key: self._serializer.serialize(_to_store_value(value))
                for key, value in item.items()
            }
        except (TypeError, ValueError, ArithmeticError) as exc:
            raise CodecError("encode", str(exc)) from exc

    def decode(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        try:
            return {
                key: _from_store_value(self._deserializer.deserialize(value))
                for key, value in raw.items()
            }
        except (TypeError, ValueError, KeyError) as exc:
            raise CodecError("decode", str(exc)) from exc
