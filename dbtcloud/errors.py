NOT_FOUND_PREFIX = "resource-not-found"


class TransientError(Exception):
    """Retryable errors: timeouts, connection failures, dbt Cloud 5xx responses.

    Surfaced to the caller unchanged; nothing in this package retries.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"TransientError: {self.message}"


class PermanentError(Exception):
    """Non-retryable errors: rejected payloads, bad identifiers, auth failures.

    Maps to dbt Cloud 4xx responses.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"PermanentError: {self.message}"


class NotFoundError(PermanentError):
    """The requested object does not exist on the dbt Cloud side.

    Read treats this as an out-of-band deletion rather than a failure.
    """

    def __init__(self, message: str) -> None:
        if not message.startswith(NOT_FOUND_PREFIX):
            message = f"{NOT_FOUND_PREFIX}: {message}"
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def is_not_found(exc: BaseException) -> bool:
    """Return ``True`` if *exc* signals a missing remote object.

    Besides :class:`NotFoundError`, any error whose message carries the
    ``resource-not-found`` prefix is recognised.
    """
    if isinstance(exc, NotFoundError):
        return True
    message = getattr(exc, "message", None)
    if not isinstance(message, str):
        message = str(exc)
    return message.startswith(NOT_FOUND_PREFIX)
