from .errors import (  # noqa: F401
    SignPlaceError,
    GeometryError,
    InvalidPageError,
    OverlayNotFoundError,
    StoreFrozenError,
    DocumentError,
    InvalidDocumentError,
    PageNotFoundError,
    EmbedError,
    ImageDecodeError,
    FormError,
    FieldNotFoundError,
    FormValidationError,
)
