# storefront/domain/errors.py


class StorefrontError(Exception):
    """Base for errors the API turns into a client-facing status code."""

    status_code = 500


class ValidationError(StorefrontError):
    """Missing or invalid input."""

    status_code = 400


class ConflictError(StorefrontError):
    """Duplicate product number, category name or slug, or a blocked delete."""

    status_code = 400


class NotFoundError(StorefrontError):
    status_code = 404


class ExpiredError(StorefrontError):
    """Saved cart exists but is past its expiry date."""

    status_code = 410
