"""
Pydantic schemas for render requests.

`PdfRequest` and `ImageRequest` share `ExportOptions`; each variant adds its own
options (`margin`/`printBackground` for PDFs, `maxFileSize` for images).
JSON keys are camelCase (``fullPage``, ``type``...) and map to snake_case
attributes. Instances are frozen once validated.

Construct these through `render_service.core.validation`, which applies the
target rules (url/html) before the schema runs.
"""
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictBool, StrictStr
from pydantic_core import PydanticCustomError

ImageFormat = Literal["jpeg", "png", "webp"]
Encoding = Literal["base64", "binary"]

DEFAULT_VIEWPORT_WIDTH = 1280
DEFAULT_VIEWPORT_HEIGHT = 720
DEFAULT_MAX_FILE_SIZE = 4 * 1024 * 1024  # 4 MiB


def _reject_non_numeric(value: Any) -> Any:
    # JSON numbers such as 80.0 are accepted when whole; strings and booleans are not.
    if isinstance(value, (str, bool)):
        raise PydanticCustomError("int_type", "Input should be a valid integer")
    return value


WholeNumber = Annotated[int, BeforeValidator(_reject_non_numeric)]


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Clip(_FrozenModel):
    """Region of the page to capture, in CSS pixels."""
    x: float = Field(strict=True)
    y: float = Field(strict=True)
    width: float = Field(strict=True)
    height: float = Field(strict=True)


class Viewport(_FrozenModel):
    width: WholeNumber = Field(DEFAULT_VIEWPORT_WIDTH, gt=0)
    height: WholeNumber = Field(DEFAULT_VIEWPORT_HEIGHT, gt=0)


class Margin(_FrozenModel):
    """PDF page margins as CSS lengths (e.g. "10mm", "0.5in")."""
    top: StrictStr = "0"
    right: StrictStr = "0"
    bottom: StrictStr = "0"
    left: StrictStr = "0"


class ExportOptions(_FrozenModel):
    """Options common to PDF and image exports."""
    scale: float = Field(1.0, ge=0.1, le=2, strict=True)
    format: ImageFormat = Field("png", alias="type")
    quality: WholeNumber = Field(100, ge=0, le=100)
    full_page: StrictBool = Field(True, alias="fullPage")
    clip: Optional[Clip] = None
    omit_background: StrictBool = Field(False, alias="omitBackground")
    encoding: Encoding = "binary"
    viewport: Optional[Viewport] = None


class PdfExportOptions(ExportOptions):
    margin: Margin = Field(default_factory=Margin)
    print_background: StrictBool = Field(False, alias="printBackground")


class ImageExportOptions(ExportOptions):
    max_file_size: WholeNumber = Field(DEFAULT_MAX_FILE_SIZE, gt=0, alias="maxFileSize")


class RenderRequest(_FrozenModel):
    """
    A render target plus export options.

    At least one of `url`/`html` is set once validated; when both are,
    `url` wins at capture time.
    """
    url: Optional[str] = None
    html: Optional[str] = None

    @property
    def target(self) -> str:
        return self.url or self.html or ""


class PdfRequest(RenderRequest):
    export: PdfExportOptions = Field(default_factory=PdfExportOptions)


class ImageRequest(RenderRequest):
    export: ImageExportOptions = Field(default_factory=ImageExportOptions)

    @property
    def media_type(self) -> str:
        return f"image/{self.export.format}"


AnyRenderRequest = Union[PdfRequest, ImageRequest]
