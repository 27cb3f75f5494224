"""
Validation of untrusted render request payloads.

`validate_pdf_request` and `validate_image_request` turn a decoded JSON body
into a frozen `PdfRequest`/`ImageRequest` or raise the first violated rule:

1. body is not an object             -> InvalidRequestBodyError
2. `url` is not an absolute URL       -> InvalidUrlError
3. `html` is empty or not a string    -> InvalidHtmlError
4. neither `url` nor `html` given     -> MissingTargetError
5. export options fail the schema     -> InvalidOptionError

Out-of-range numbers are rejected, never clamped. Both functions are pure.
"""
from typing import Any, Type, TypeVar

from pydantic import AnyUrl, TypeAdapter, ValidationError

from render_service.core.exceptions import (
    InvalidHtmlError,
    InvalidOptionError,
    InvalidRequestBodyError,
    InvalidUrlError,
    MissingTargetError,
)
from render_service.core.schemas import ImageRequest, PdfRequest, RenderRequest

RequestT = TypeVar("RequestT", bound=RenderRequest)

# Any absolute URL: http(s) needs a host, data:/file:/about: URLs are allowed.
_url_adapter = TypeAdapter(AnyUrl)


def check_url(payload: dict) -> None:
    url = payload.get("url")
    if url is None:
        return
    if not isinstance(url, str):
        raise InvalidUrlError()
    try:
        _url_adapter.validate_python(url)
    except ValidationError:
        raise InvalidUrlError()


def check_html(payload: dict) -> None:
    html = payload.get("html")
    if html is None:
        return
    if not isinstance(html, str) or not html:
        raise InvalidHtmlError()


def check_target(payload: dict) -> None:
    if not payload.get("url") and not payload.get("html"):
        raise MissingTargetError()


TARGET_RULES = (check_url, check_html, check_target)


def _first_schema_error(exc: ValidationError) -> InvalidOptionError:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return InvalidOptionError(field, first.get("msg", "Invalid value"))


def validate_request(payload: Any, request_cls: Type[RequestT]) -> RequestT:
    """
    Validate *payload* against the target rules and the schema of *request_cls*.

    Args:
        payload (Any): Decoded JSON body.
        request_cls (Type[RenderRequest]): `PdfRequest` or `ImageRequest`.

    Returns:
        RenderRequest: A fully defaulted, frozen request.

    Raises:
        RequestValidationError: The first rule the payload violates.
    """
    if not isinstance(payload, dict):
        raise InvalidRequestBodyError("Request body must be a JSON object")

    for rule in TARGET_RULES:
        rule(payload)

    try:
        return request_cls.model_validate(payload)
    except ValidationError as exc:
        raise _first_schema_error(exc) from exc


def validate_pdf_request(payload: Any) -> PdfRequest:
    return validate_request(payload, PdfRequest)


def validate_image_request(payload: Any) -> ImageRequest:
    return validate_request(payload, ImageRequest)
