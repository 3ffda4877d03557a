"""
Custom exception hierarchy for the Storefront Catalog backend.

All application errors inherit from StorefrontError so route handlers and the
global exception handler can catch and render them uniformly.

Exception Hierarchy:
    StorefrontError (base)
    ├── ValidationError
    │   └── CategoryPathError
    │       ├── EmptyPathError
    │       ├── UnsupportedDepthError
    │       ├── InvalidLevelError
    │       └── MissingSlugError
    ├── ResourceNotFoundError
    │   └── CategoryNotFoundError
    └── ExternalServiceError
        └── CatalogServiceError

Usage:
    from exceptions import UnsupportedDepthError, StorefrontError

    try:
        facet = get_category_facet_field(node.path)
    except UnsupportedDepthError as e:
        logger.error(f"Bad category path: {e}")
    except StorefrontError as e:
        logger.error(f"Application error: {e}")
"""

from typing import Optional, Dict, Any


class StorefrontError(Exception):
    """
    Base exception for all Storefront Catalog errors.

    Attributes:
        message: Human-readable error message
        detail: Optional dict with additional error context
        status_code: Suggested HTTP status code (for API errors)
    """

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for JSON serialization."""
        result = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(StorefrontError):
    """
    Raised when input validation fails.

    Examples:
        raise ValidationError("Query parameter 'path' is required")
    """

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
    ):
        super().__init__(message, detail=detail, status_code=status_code)


class CategoryPathError(ValidationError):
    """
    Base for structural violations in category data (breadcrumb paths, slugs).

    These indicate a data-integrity problem upstream rather than a bad user
    request, so callers at the UI boundary usually render a generic fallback.
    """

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message, detail=detail, status_code=422)


class EmptyPathError(CategoryPathError):
    """
    Raised when a breadcrumb path is empty or whitespace only.

    Examples:
        raise EmptyPathError("Category path cannot be empty")
    """


class UnsupportedDepthError(CategoryPathError):
    """
    Raised when a breadcrumb path has a segment count the search facets do
    not support (anything outside 1-3).

    Examples:
        raise UnsupportedDepthError(4)
    """

    def __init__(self, level_count: int, *, detail: Optional[Dict[str, Any]] = None):
        self.level_count = level_count
        detail = dict(detail or {})
        detail["level_count"] = level_count

        super().__init__(
            f"Unsupported category depth: {level_count} levels. Supported: 1-3 levels.",
            detail=detail,
        )


class InvalidLevelError(CategoryPathError):
    """
    Raised when a category level derived from a path falls outside 1-3.

    Examples:
        raise InvalidLevelError(0)
    """

    def __init__(self, level_count: int, *, detail: Optional[Dict[str, Any]] = None):
        self.level_count = level_count
        detail = dict(detail or {})
        detail["level_count"] = level_count

        super().__init__(
            f"Invalid category level: {level_count}. Must be 1-3.",
            detail=detail,
        )


class MissingSlugError(CategoryPathError):
    """
    Raised when a URL is requested for a category without a slug.

    Examples:
        raise MissingSlugError("Category must have a slug to build URL", detail={"id": "12"})
    """


class ResourceNotFoundError(StorefrontError):
    """
    Raised when a requested resource doesn't exist.

    Examples:
        raise ResourceNotFoundError("Product not found", detail={"product_id": "p-1"})
    """

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message, detail=detail, status_code=404)


class CategoryNotFoundError(ResourceNotFoundError):
    """
    Raised at the HTTP boundary when a slug does not resolve to a category.

    The lookup functions themselves return None for unknown slugs; routes
    convert that into this error so it renders as a 404.
    """

    def __init__(self, slug: str, *, detail: Optional[Dict[str, Any]] = None):
        self.slug = slug
        detail = dict(detail or {})
        detail["slug"] = slug

        super().__init__(f"Category not found: {slug}", detail=detail)


class ExternalServiceError(StorefrontError):
    """
    Base exception for external service failures.
    """

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        service_name: Optional[str] = None,
    ):
        if service_name:
            detail = dict(detail or {})
            detail["service"] = service_name

        super().__init__(message, detail=detail, status_code=502)


class CatalogServiceError(ExternalServiceError):
    """
    Raised when the remote catalog service cannot supply a category tree.

    Examples:
        raise CatalogServiceError("Catalog service timeout")
        raise CatalogServiceError("Backend service error: shard offline", detail={"code": 3})
    """

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message, detail=detail, service_name="catalog")
