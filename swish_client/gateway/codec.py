"""Serialization of outbound request models to gateway JSON."""

from dataclasses import dataclass, field
from typing import Any, Dict

from pydantic import BaseModel

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class EncodedRequest:
    body: bytes
    headers: Dict[str, str] = field(default_factory=lambda: {"Content-Type": JSON_CONTENT_TYPE})


def serialize(model: BaseModel) -> Dict[str, Any]:
    """Wire representation of a request: camelCase field names, unset optionals omitted."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def encode_request(model: BaseModel) -> EncodedRequest:
    body = model.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
    return EncodedRequest(body=body)
