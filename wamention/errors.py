"""Error types and user-facing error classification.

The mention core itself never raises on message text: bad input just
produces empty results. These errors come from the edges, meaning roster
files and lookup backends.
"""

import asyncio
import sqlite3

import httpx


class MentionError(Exception):
    """Base class for wamention errors."""
    pass

class ParticipantLoadError(MentionError):
    """Roster file could not be read or parsed."""
    pass

class LookupResponseError(MentionError):
    """Lookup backend answered with something we cannot use."""
    pass


def classify_error(e: Exception) -> str:
    """Classify any exception into a short message for the CLI user."""
    if isinstance(e, ParticipantLoadError):
        return f"Could not load participants: {e}"
    if isinstance(e, LookupResponseError):
        return f"Lookup bridge returned an unusable response: {e}"

    if isinstance(e, httpx.HTTPStatusError):
        code = e.response.status_code
        if code in (401, 403):
            return "Lookup bridge refused the request (authentication)."
        if 500 <= code < 600:
            return "Lookup bridge is having server issues. Please try again later."
        return f"Lookup bridge returned HTTP {code}."
    if isinstance(e, httpx.ConnectError):
        return "Cannot connect to the lookup bridge."
    if isinstance(e, (httpx.TimeoutException, asyncio.TimeoutError)):
        return "Lookup timed out. Please try again."

    if isinstance(e, sqlite3.Error):
        return f"Session store error: {e}"

    type_name = type(e).__name__
    return f"Something went wrong ({type_name}). Check logs for details."
