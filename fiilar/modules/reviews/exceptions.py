"""Review storage exceptions."""


class ReviewError(Exception):
    """Base class for review errors."""


class DuplicateReviewError(ReviewError):
    """Raised by a repository when the user already reviewed the listing."""
