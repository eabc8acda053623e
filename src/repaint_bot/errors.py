"""Failure taxonomy for the repaint pipeline."""


class RepaintError(Exception):
    """Base class for failures surfaced to the user as an apology."""


class CollaboratorUnavailable(RepaintError):
    """A captioning, transcription or chat collaborator returned nothing usable."""


class MetaExtractError(RepaintError):
    """Feature meta could not be extracted from a caption."""


class MetaTransformError(RepaintError):
    """Feature meta could not be restyled."""


class RenderServiceError(RepaintError):
    """The renderer rejected the request or returned an empty image."""
