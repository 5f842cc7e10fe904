#!/usr/bin/env python3
"""
Error types for the UK Repeater Bot
Every failure that can happen while answering a command is one of these,
and each knows the text the user should see for it
"""

from typing import Optional

INPUT_TOO_SHORT = "No query given, enter a callsign or locator to search for!"
INVALID_ARGUMENT = "Invalid query, use 1-6 letters or digits!"


class RepeaterBotError(Exception):
    """Base class for failures that are reported back to the user as text"""

    def reply_text(self) -> str:
        """Get the user-facing reply for this failure"""
        return str(self)


class InputTooShortError(RepeaterBotError):
    """Raised when the whole command line is too short to hold a query"""

    def __init__(self, message: str = INPUT_TOO_SHORT):
        super().__init__(message)


class InvalidArgumentError(RepeaterBotError):
    """Raised when the argument is not 1-6 letters or digits"""

    def __init__(self, message: str = INVALID_ARGUMENT):
        super().__init__(message)


class TooShortError(RepeaterBotError):
    """Raised when the normalized query is shorter than a two character prefix"""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Command is not long enough!: {query}")


class UnknownPrefixError(RepeaterBotError):
    """Raised when the query prefix does not map to a lookup kind"""

    def __init__(self, prefix: str, query: str):
        self.prefix = prefix
        self.query = query
        super().__init__(f"Command is not known: {prefix}, Full: {query}")


class NotFoundError(RepeaterBotError):
    """Raised when upstream has nothing for the requested name or locator"""


class FetchError(RepeaterBotError):
    """Raised when a request to the repeater API fails"""

    def reply_text(self) -> str:
        return f"Error: {self}"


class RequestBuildError(FetchError):
    """Raised when a request cannot be built from the URL"""

    def __init__(self, message: str = "Error building request"):
        super().__init__(message)


class ConnectError(FetchError):
    """Raised when the API cannot be reached or the body cannot be read"""

    def __init__(self, message: str = "Error contacting API"):
        super().__init__(message)


class HTTPNotFoundError(FetchError, NotFoundError):
    """Raised when the API answers 404"""

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class UnexpectedStatusError(FetchError):
    """Raised when the API answers with anything other than 200 or 404"""

    def __init__(self, status_code: Optional[int] = None,
                 message: str = "Unexpected status code received from server"):
        self.status_code = status_code
        super().__init__(message)


class DecodeError(RepeaterBotError):
    """Raised when the API body is not the JSON shape we expect"""

    def reply_text(self) -> str:
        return f"Error extracting repeater data response: {self}"


class RefreshFailedError(RepeaterBotError):
    """Raised when the upstream database refresh call fails"""

    def __init__(self, cause: FetchError):
        self.cause = cause
        super().__init__(f"There was an issue updating: {cause}")
