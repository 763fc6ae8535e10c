# bookstore/api/v1/negotiation.py
"""
Content negotiation for the REST API.

Clients may send and receive either JSON or XML (`application/xml` or
`text/xml`). Handlers receive the negotiated MediaFormat as an explicit
argument and pass it to `render`; request bodies are decoded with
`decode_body` according to their Content-Type.
"""
import logging
from enum import Enum
from typing import Any, Optional, TypeVar
from xml.parsers.expat import ExpatError

import mimeparse
import xmltodict
from fastapi import HTTPException, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger("uvicorn.error")

M = TypeVar("M", bound=BaseModel)


class MediaFormat(str, Enum):
    JSON = "application/json"
    XML = "application/xml"
    TEXT_XML = "text/xml"

    @property
    def is_xml(self) -> bool:
        return self is not MediaFormat.JSON


# Ties go to the last entry, so JSON wins for wildcards
_OFFERED = [MediaFormat.TEXT_XML.value, MediaFormat.XML.value, MediaFormat.JSON.value]


def accepted_format(accept: Optional[str]) -> Optional[MediaFormat]:
    """
    Pick the response format for an Accept header.

    No header (or `*/*`) means JSON. Returns None when nothing the API can
    produce is acceptable or the header cannot be parsed.
    """
    if not accept or not accept.strip():
        return MediaFormat.JSON
    try:
        best = mimeparse.best_match(_OFFERED, accept)
    except ValueError:
        return None
    return MediaFormat(best) if best else None


def content_format(content_type: Optional[str]) -> Optional[MediaFormat]:
    """Format of a request body; a missing Content-Type is read as JSON."""
    if not content_type or not content_type.strip():
        return MediaFormat.JSON
    media = content_type.split(";", 1)[0].strip().lower()
    try:
        return MediaFormat(media)
    except ValueError:
        return None


def _xml_fields(raw: bytes) -> dict[str, Any]:
    """
    Decode `<root><field>value</field>...</root>` into a flat dict.

    The root element name is ignored, attributes are dropped and empty
    elements become empty strings.
    """
    document = xmltodict.parse(raw)
    if not document:
        return {}
    root = next(iter(document.values()))
    if root is None:
        return {}
    if not isinstance(root, dict):
        raise ValueError("XML root element must contain fields")
    return {
        key: ("" if value is None else value)
        for key, value in root.items()
        if not key.startswith(("@", "#"))
    }


async def decode_body(request: Request, model: type[M]) -> M:
    """
    Decode the request body into `model` according to its Content-Type.

    Raises:
        HTTPException (415): Unsupported Content-Type
        HTTPException (400): Body is not valid JSON/XML or does not fit the model
    """
    fmt = content_format(request.headers.get("content-type"))
    if fmt is None:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail="Content Type unknown")

    raw = await request.body()
    try:
        if fmt.is_xml:
            return model.model_validate(_xml_fields(raw) if raw.strip() else {})
        return model.model_validate_json(raw or b"{}")
    except (PydanticValidationError, ExpatError, ValueError) as e:
        logger.info("[decode_body] %s body rejected: %s", fmt.value, e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed request body")


def _xml_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, dict):
        return {k: _xml_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_xml_value(v) for v in value]
    return str(value)


def render(
    content: Any,
    fmt: MediaFormat,
    status_code: int = status.HTTP_200_OK,
    root: str = "result",
    item: str = "item",
) -> Response:
    """
    Serialize `content` (pydantic models, dicts or lists of them) as JSON or XML.

    In XML a single object becomes `<root>...</root>` and a list becomes
    `<root><item>...</item>...</root>`. A 204 always has an empty body.
    """
    if status_code == status.HTTP_204_NO_CONTENT:
        return Response(status_code=status_code)

    data = jsonable_encoder(content)
    if not fmt.is_xml:
        return JSONResponse(content=data, status_code=status_code)

    if isinstance(data, list):
        document = {root: {item: _xml_value(data)}}
    else:
        document = {root: _xml_value(data)}
    return Response(
        content=xmltodict.unparse(document),
        status_code=status_code,
        media_type=fmt.value,
    )
