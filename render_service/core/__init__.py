from .config import get_config, config_manager, ConfigurationManager, ConfigError, ConfigFileNotFoundError, InvalidYamlError
from .exceptions import (
    RenderServiceError,
    ConfigurationError,
    RequestValidationError,
    InvalidRequestBodyError,
    MissingTargetError,
    InvalidUrlError,
    InvalidHtmlError,
    InvalidOptionError,
    ComponentError,
    RendererError,
    BrowserNotLaunchedError,
    ImageCodecError,
)
from .logger import setup_logging, get_logger
from .schemas import ExportOptions, PdfExportOptions, ImageExportOptions, PdfRequest, ImageRequest
from .validation import validate_pdf_request, validate_image_request

__all__ = [
    # Config
    "get_config",
    "config_manager",
    "ConfigurationManager",
    "ConfigError",
    "ConfigFileNotFoundError",
    "InvalidYamlError",
    # Logger
    "setup_logging",
    "get_logger",
    # Exceptions
    "RenderServiceError",
    "ConfigurationError",
    "RequestValidationError",
    "InvalidRequestBodyError",
    "MissingTargetError",
    "InvalidUrlError",
    "InvalidHtmlError",
    "InvalidOptionError",
    "ComponentError",
    "RendererError",
    "BrowserNotLaunchedError",
    "ImageCodecError",
    # Schemas and validation
    "ExportOptions",
    "PdfExportOptions",
    "ImageExportOptions",
    "PdfRequest",
    "ImageRequest",
    "validate_pdf_request",
    "validate_image_request",
]
