from __future__ import annotations


class ConversionError(RuntimeError):
    code = "CONVERSION_FAILED"

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class NotFoundError(ConversionError):
    def __init__(self, message: str) -> None:
        super().__init__("NOT_FOUND", message)


class ExtractionError(ConversionError):
    def __init__(self, message: str) -> None:
        super().__init__("EXTRACTION_FAILED", message)


class TransformationError(ConversionError):
    def __init__(self, message: str) -> None:
        super().__init__("TRANSFORMATION_FAILED", message)


class WriteError(ConversionError):
    def __init__(self, message: str) -> None:
        super().__init__("WRITE_FAILED", message)


class SourceDirectoryError(ConversionError):
    """Raised before a batch starts when the source directory is unusable."""

    def __init__(self, message: str) -> None:
        super().__init__("SOURCE_DIR_MISSING", message)


__all__ = [
    "ConversionError",
    "ExtractionError",
    "NotFoundError",
    "SourceDirectoryError",
    "TransformationError",
    "WriteError",
]
