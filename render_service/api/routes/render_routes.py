"""
API routes for rendering operations.

Both endpoints accept a JSON body with `url` or `html` plus an optional
`export` object and answer with raw bytes. Validation and rendering failures
are raised as `RenderServiceError` subclasses and turned into
`400 {"error": ...}` by the application's exception handler.
"""
from fastapi import APIRouter, Depends, Response

from render_service.api.dependencies import get_page_renderer, image_request_body, pdf_request_body
from render_service.components.renderer.page_renderer import PageRenderer
from render_service.core.logger import get_logger
from render_service.core.schemas import ImageRequest, PdfRequest

logger = get_logger(__name__)

router = APIRouter()

ERROR_RESPONSE = {400: {"description": "Validation or rendering failure: `{\"error\": message}`"}}


@router.post(
    "/pdf",
    response_class=Response,
    summary="Render a URL or HTML document to PDF",
    responses={200: {"content": {"application/pdf": {}}}, **ERROR_RESPONSE},
)
async def render_pdf_endpoint(
    render_request: PdfRequest = Depends(pdf_request_body),
    renderer: PageRenderer = Depends(get_page_renderer),
) -> Response:
    pdf_bytes = await renderer.render_pdf(render_request)
    return Response(content=pdf_bytes, media_type="application/pdf")


@router.post(
    "/image",
    response_class=Response,
    summary="Render a URL or HTML document to an image",
    responses={200: {"content": {"image/png": {}, "image/jpeg": {}, "image/webp": {}}}, **ERROR_RESPONSE},
)
async def render_image_endpoint(
    render_request: ImageRequest = Depends(image_request_body),
    renderer: PageRenderer = Depends(get_page_renderer),
) -> Response:
    """
    Screenshot the page and return it as `image/<type>`.

    Images larger than `export.maxFileSize` are recompressed, first at lower
    quality and then at smaller dimensions. If no candidate fits, the original
    capture is returned, so callers with a hard limit should check the size.
    """
    image_bytes = await renderer.render_image(render_request)
    export = render_request.export
    if export.encoding == "binary" and len(image_bytes) > export.max_file_size:
        logger.warning(
            f"Image response exceeds requested budget: {len(image_bytes)} > {export.max_file_size} bytes."
        )
    return Response(content=image_bytes, media_type=render_request.media_type)
