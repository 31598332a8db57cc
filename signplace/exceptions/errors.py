"""Signature placement exceptions."""
from __future__ import annotations


class SignPlaceError(Exception):
    """Base exception for the signature placement feature."""


# ---------------------------------------------------------------- geometry
class GeometryError(SignPlaceError):
    """Raised when an overlay operation is not allowed."""


class InvalidPageError(GeometryError):
    """Raised when an overlay references a page outside the document."""


class OverlayNotFoundError(GeometryError, IndexError):
    """Raised when an overlay index or id does not resolve."""


class StoreFrozenError(GeometryError):
    """Raised when geometry is mutated while the commit pass is running."""


# ---------------------------------------------------------------- document
class DocumentError(SignPlaceError):
    """Raised for problems with the source document."""


class InvalidDocumentError(DocumentError):
    """Raised when a file cannot be accepted as a PDF document."""


class PageNotFoundError(DocumentError, IndexError):
    """Raised when a page index does not resolve in the document."""


# ---------------------------------------------------------------- embedding
class EmbedError(SignPlaceError):
    """Raised when a single overlay cannot be written to the output."""


class ImageDecodeError(EmbedError):
    """Raised when signature image data cannot be decoded."""


# ---------------------------------------------------------------- form
class FormError(SignPlaceError):
    """Raised for form field values that cannot be set."""


class FieldNotFoundError(FormError, KeyError):
    """Raised when a form field name does not resolve."""


class FormValidationError(FormError):
    """Raised when the form is saved with invalid values. ``errors`` maps field name to message."""

    def __init__(self, errors):
        self.errors = dict(errors)
        count = len(self.errors)
        super().__init__(f"Please fix {count} form error{'s' if count > 1 else ''} before saving.")
