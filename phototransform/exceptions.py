"""
Exception classes for the photo transform core.
Every operation raises one of these to its immediate caller; nothing is retried.
"""
from typing import Any, Optional, Union


class ImageProcessingError(Exception):
    """Base exception for all transform-related errors"""
    def __init__(self, message: str, *args: Any):
        super().__init__(message, *args)
        self.message = message


class ConfigurationError(ImageProcessingError):
    """Exception raised for invalid environment configuration"""
    pass


class TransformFailedError(ImageProcessingError):
    """Exception raised when the backend cannot build or apply an affine, crop or render step"""
    def __init__(self, operation: str, reason: Optional[Union[str, Exception]] = None):
        message = f"Transform operation '{operation}' failed"
        if reason:
            message += f": {str(reason)}"
        super().__init__(message)
        self.operation = operation
        self.original_error = reason if isinstance(reason, Exception) else None


class FilterConstructionError(ImageProcessingError):
    """Exception raised when filter parameters cannot be turned into a filter"""
    def __init__(self, filter_name: str, reason: Optional[Union[str, Exception]] = None):
        message = f"Unable to create {filter_name} filter"
        if reason:
            message += f": {str(reason)}"
        super().__init__(message)
        self.filter_name = filter_name
        self.original_error = reason if isinstance(reason, Exception) else None


class InvalidOrientationError(ImageProcessingError):
    """Exception raised for orientation tags outside the recognised set"""
    def __init__(self, value: Any):
        super().__init__(f"Unsupported orientation value: {value!r}")
        self.value = value


class DecodeError(ImageProcessingError):
    """Exception raised when caller-supplied image data cannot be interpreted"""
    def __init__(self, reason: Optional[Union[str, Exception]] = None):
        message = "Unable to decode image data"
        if reason:
            message += f": {str(reason)}"
        super().__init__(message)
        self.original_error = reason if isinstance(reason, Exception) else None
