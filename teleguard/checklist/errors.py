class InspectionError(Exception):
    """Base class for errors surfaced to the user."""


class ValidationError(InspectionError, ValueError):
    pass


class GenerationError(InspectionError):
    pass


class ExportError(InspectionError):
    pass


class ImageDecodeError(InspectionError):
    pass
