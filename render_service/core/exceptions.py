"""
Custom exception classes for the Render Service.
"""


class RenderServiceError(Exception):
    """
    Base class for all custom exceptions in the Render Service.

    The HTTP layer turns any `RenderServiceError` into a `400 {"error": message}`
    response, so `message` is what the caller sees.

    Attributes:
        message (str): A human-readable description of the error.
    """
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"


# --- Configuration Related Exceptions ---
class ConfigurationError(RenderServiceError):
    """Raised when configuration values are present but unusable (e.g., unknown browser type)."""


# --- Request Validation Exceptions ---
class RequestValidationError(RenderServiceError):
    """
    Base class for render request validation failures.
    Raised before any browser resource is touched.
    """


class InvalidRequestBodyError(RequestValidationError):
    """Raised when the request body is not a JSON object."""


class MissingTargetError(RequestValidationError):
    """Raised when a request carries neither `url` nor `html`."""
    def __init__(self, message: str = "Either url or html must be provided"):
        super().__init__(message)


class InvalidUrlError(RequestValidationError):
    """Raised when `url` is present but is not a well-formed absolute URL."""
    def __init__(self, message: str = "Invalid URL"):
        super().__init__(message)


class InvalidHtmlError(RequestValidationError):
    """Raised when `html` is present but empty or not a string."""
    def __init__(self, message: str = "HTML content is required"):
        super().__init__(message)


class InvalidOptionError(RequestValidationError):
    """
    Raised when an export option is out of range, of the wrong type, or not recognised.

    Attributes:
        field (str): Dotted path of the offending field (e.g. "export.quality").
    """
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)


# --- Component Related Exceptions ---
class ComponentError(RenderServiceError):
    """
    A general base class for errors originating from within a specific component
    (e.g., Renderer, ImageCodec).

    Attributes:
        component_name (str): Name of the component where the error originated.
    """
    def __init__(self, component_name: str, message: str):
        full_message = f"Error in component '{component_name}': {message}"
        super().__init__(full_message)
        self.component_name = component_name


class RendererError(ComponentError):
    """Raised for browser-side failures: launch, navigation timeout, capture, disconnection."""
    def __init__(self, message: str):
        super().__init__(component_name="Renderer", message=message)


class BrowserNotLaunchedError(RendererError):
    """Raised when the shared browser session is accessed before `ensure_launched()`."""
    def __init__(self, message: str = "Browser not launched"):
        super().__init__(message)


class ImageCodecError(ComponentError):
    """Raised when image bytes cannot be decoded or re-encoded."""
    def __init__(self, message: str):
        super().__init__(component_name="ImageCodec", message=message)
