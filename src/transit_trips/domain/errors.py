"""Errors raised by providers.

Unknown or ambiguous locations are not errors: they come back as result
statuses. Broken preconditions on model construction raise ValueError.
"""


class TransportFailure(Exception):
    """The network or the backend's transport layer failed. Never retried here."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"request to {url} failed{status}: {reason}")


class UpstreamFormatError(Exception):
    """A backend response did not have the expected shape."""

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"unexpected response from {source}: {detail}")
