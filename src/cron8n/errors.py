"""
Error hierarchy for cron8n.

Every failure the user can act on is a Cron8nError carrying a message and an
optional hint. The CLI and the web UI catch these at their boundary; library
code raises them and lets them propagate.
"""


class Cron8nError(Exception):
    """Base error with a machine-readable code and an optional remediation hint."""

    code = "CRON8N_ERROR"

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return {"error": self.message, "hint": self.hint, "code": self.code}


class AuthError(Cron8nError):
    """Not logged in, or the server rejected the credentials."""

    code = "AUTH_ERROR"


class ApiError(Cron8nError):
    """Non-2xx response (or transport failure) from the n8n REST API."""

    code = "API_ERROR"

    def __init__(self, message: str, status_code: int | None = None, hint: str | None = None):
        super().__init__(message, hint)
        self.status_code = status_code

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.status_code is not None:
            data["statusCode"] = self.status_code
        return data


class ValidationError(Cron8nError):
    """Bad user input: cron, URL, slug, missing field."""

    code = "VALIDATION_ERROR"


class FileError(Cron8nError):
    """Missing, unreadable or structurally invalid local file."""

    code = "FILE_ERROR"
