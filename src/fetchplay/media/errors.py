"""Custom media request exceptions."""


class MediaError(Exception):
    """Base exception for media request errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class InvalidInputError(MediaError):
    """Raised when a request line yields no usable cache key.

    This typically occurs when:
    - The line is empty or only a line terminator
    - The URL ends with '/' (no file name after it)
    - The file name would be '.' or '..'
    """

    pass


class DirectoryUnavailableError(MediaError):
    """Raised when the media directory cannot be opened."""

    pass


class FetchError(MediaError):
    """Exception raised when downloading a media file fails.

    This typically occurs when:
    - The server answers with a non-2xx status
    - The host is unreachable or the transfer times out
    - The body is shorter than the advertised Content-Length
    - The file cannot be written to the media directory
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class DecodeUnavailableError(MediaError):
    """Raised when a media file cannot be opened for decoding."""

    pass
