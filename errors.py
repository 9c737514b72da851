"""
Errors raised by the Mango Office client

Every failure surfaces to the caller; nothing is retried here. The only
transient condition is StatsNotReadyError, which the caller may retry after
``retry_after`` seconds with the same key.
"""


class MangoAPIError(Exception):
    """Base class for all client errors"""

    retryable = False


class TransportError(MangoAPIError):
    """Network or connection failure while talking to the provider"""


class MalformedResponseError(MangoAPIError):
    """Response body could not be decoded"""


class MalformedRecordError(MalformedResponseError):
    """A statistics row could not be decoded"""

    def __init__(self, message, row=None):
        if row is not None:
            message = f"row {row}: {message}"
        super().__init__(message)
        self.row = row


class StatsNotFoundError(MangoAPIError):
    """Export key is invalid, unknown or expired"""

    def __init__(self, key):
        super().__init__("data not found, sent invalid/wrong/expired key")
        self.key = key


class StatsNotReadyError(MangoAPIError):
    """Export is still being prepared; poll again with the same key"""

    retryable = True

    def __init__(self, key, retry_after=5):
        super().__init__(f"data not ready, retry after {retry_after} seconds")
        self.key = key
        self.retry_after = retry_after


class ProviderError(MangoAPIError):
    """Unexpected HTTP status from the provider"""

    def __init__(self, status_code, body):
        super().__init__(f"unknown error, code: {status_code}, body: {body}")
        self.status_code = status_code
        self.body = body


class UserNotFoundError(MangoAPIError):
    """User lookup returned no users"""

    def __init__(self, extension):
        super().__init__(f"user {extension} not found")
        self.extension = extension
