from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire models use camelCase (what the SPA sends and expects); python side stays snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ImageIn(CamelModel):
    url: str
    caption: Optional[str] = None
    is_primary: bool = False


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, list):
        return [_dump(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    return value


def envelope(data: Any = None, message: Optional[str] = None, pagination: Optional[Pagination] = None, **extra: Any) -> dict:
    """Uniform response body: {success, data?, message?, pagination?}."""
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = _dump(data)
    if pagination is not None:
        body["pagination"] = _dump(pagination)
    body.update({k: _dump(v) for k, v in extra.items()})
    return body


def error_body(message: str, errors: Optional[list] = None) -> dict:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body
