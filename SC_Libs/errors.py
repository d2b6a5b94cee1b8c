"""
Exception hierarchy for Scene Canvas.

Every error raised by the library derives from SceneCanvasError and is
recoverable. The three families mirror how the session reacts to them:

- InputShapeError: bad user input (empty mask, point outside the image).
  Handled locally, nothing is mutated.
- PipelineError: a pixel buffer could not be read or produced. Aborts the
  single commit in progress.
- ExternalServiceError: a compositing, inpainting or background removal call
  failed. Retryable; history and placement are left untouched.

SessionStateError covers commands issued in the wrong state (busy session,
second placement proposal).
"""


class SceneCanvasError(Exception):
    """Base class for all Scene Canvas errors."""


class InputShapeError(SceneCanvasError, ValueError):
    """User input has the wrong shape for the requested operation."""


class EmptyMaskError(InputShapeError):
    """A stroke mask was encoded without any painted pixel."""


class PointOutsideImageError(InputShapeError):
    """A pointer position fell outside the letterboxed image content."""


class UnsupportedImageError(InputShapeError):
    """An uploaded file is not one of the accepted image formats."""


class NoEditsError(InputShapeError):
    """Edits were committed while every field is at its reset value."""


class MissingAssetError(InputShapeError):
    """A product or scene required by the operation has not been loaded."""


class PipelineError(SceneCanvasError):
    """A pixel buffer could not be decoded, validated or transformed."""


class ExternalServiceError(SceneCanvasError):
    """A call to the external image service failed."""

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


class SessionStateError(SceneCanvasError):
    """A command was issued while the session was in an incompatible state."""


class SessionBusyError(SessionStateError):
    """A destructive command arrived while an external call is outstanding."""


class ProposalActiveError(SessionStateError):
    """A new placement was started while another proposal is still active."""


class NoProposalError(SessionStateError):
    """A placement command arrived with no active proposal."""
