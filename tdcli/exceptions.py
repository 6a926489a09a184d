"""
tdcli exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class CliError(Exception):
    """Exit code 1 for every reported failure."""

    exit_code = 1


class UsageError(CliError):
    """Wrong arity or a malformed argument. Raised before any API call."""

    def __init__(self, message, usage=None):
        super().__init__(message)
        self.usage = usage


class OperationError(CliError):
    """An API call, output write or encode step failed.

    ``context`` names the failed step (e.g. "Failed to list audiences").
    ``status``, ``server_message`` and ``request_id`` carry transport detail
    that is only shown in verbose mode.
    """

    def __init__(self, message, context=None, status=None, server_message=None, request_id=None):
        super().__init__(message)
        self.message = message
        self.context = context
        self.status = status
        self.server_message = server_message
        self.request_id = request_id

    def __str__(self):
        if self.context:
            return f"{self.context}: {self.message}"
        return self.message

    def with_context(self, context):
        """Return a copy of this error labelled with *context*."""
        return OperationError(
            self.message,
            context=context,
            status=self.status,
            server_message=self.server_message,
            request_id=self.request_id,
        )

    def verbose_str(self):
        detail = []
        if self.status is not None:
            detail.append(f"Status: {self.status}")
            detail.append(f"Message: {self.server_message or ''}")
        if self.request_id:
            detail.append(f"Request ID: {self.request_id}")
        if not detail:
            return str(self)
        return f"{self} ({', '.join(detail)})"


class ConfigError(CliError):
    """Missing or malformed API key, bad config value, unreadable config file."""


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors that callers want to handle."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
