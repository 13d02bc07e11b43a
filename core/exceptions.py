"""
Domain errors raised by the services.

Each error carries the HTTP status it maps to; the handlers registered in
``dependencies.setup_error_handlers`` turn them into JSON responses.
"""


class BlogError(Exception):
    status_code: int = 500
    default_detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(BlogError):
    status_code = 400
    default_detail = "Invalid input"


class BadRequestError(BlogError):
    status_code = 400
    default_detail = "Bad request"


class AuthError(BlogError):
    status_code = 401
    default_detail = "Could not validate credentials"


class NotFoundError(BlogError):
    status_code = 404
    default_detail = "Not found"


class ConflictError(BlogError):
    status_code = 409
    default_detail = "Conflict"
