class ReaderError(Exception):
    """Base class for errors raised by the reading pipeline."""

    status_code = 500


class ValidationError(ReaderError):
    """The submitted URL or request is malformed or targets a blocked host."""

    status_code = 400


class UpstreamFailure(ReaderError):
    """The upstream server answered with a non-2xx status."""

    def __init__(self, status: int, reason: str = ""):
        super().__init__(f"{status} {reason}".strip())
        self.status = status
        self.reason = reason or str(status)

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return self.status


class TransportFailure(ReaderError):
    """DNS, TLS, timeout or connection problems; recovered by the pipeline."""


class NotFound(ReaderError):
    status_code = 404


class AuthError(ReaderError):
    status_code = 401


class InternalError(ReaderError):
    """Unexpected failure; the detail is logged and never sent to the caller."""
