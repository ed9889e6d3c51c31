"""
Input validation and sanitization helpers for chat requests.

Functions
---------
is_valid_session_id(session_id: str) -> bool
    Check that a session identifier has the canonical UUID-v4 textual shape.
sanitize_message(message: str) -> str
    Normalize user text before it is persisted or sent to the provider.

Constants
---------
MAX_MESSAGE_LENGTH : int
    Upper bound on the raw message length (characters, before trimming).
MIN_MESSAGE_LENGTH : int
    Lower bound on the raw message length.
MAX_WHITESPACE_RUN : int
    Longest whitespace run kept by `sanitize_message`.
"""

import re

MAX_MESSAGE_LENGTH = 2000
MIN_MESSAGE_LENGTH = 1
MAX_WHITESPACE_RUN = 10

_UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_WHITESPACE_RUN_PATTERN = re.compile(r"\s{%d,}" % MAX_WHITESPACE_RUN)


def is_valid_session_id(session_id: str) -> bool:
    """
    Validate the shape of a session identifier.

    Parameters
    ----------
    session_id : str
        Identifier supplied by the client.

    Returns
    -------
    bool
        True when `session_id` is a UUID-v4 string (any letter case).
        Existence in storage is not checked here.
    """
    return bool(_UUID_V4_PATTERN.fullmatch(session_id or ""))


def sanitize_message(message: str) -> str:
    """
    Normalize a user message.

    - Trims surrounding whitespace.
    - Removes embedded NUL characters.
    - Collapses every run of 10 or more whitespace characters to exactly 10 spaces.

    The result may be empty; callers decide whether that is an error.
    """
    sanitized = message.strip()
    sanitized = sanitized.replace("\0", "")
    sanitized = _WHITESPACE_RUN_PATTERN.sub(" " * MAX_WHITESPACE_RUN, sanitized)
    return sanitized
