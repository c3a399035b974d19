# topmark:header:start
#
#   project      : Coral
#   file         : exit_codes.py
#   file_relpath : src/coral/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for Coral CLI.

Coral aligns with the BSD `sysexits` convention where practical, so that other
tooling can interpret failures consistently.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for Coral CLI.

    Attributes:
        SUCCESS: Successful execution; no error-level diagnostics.
        FAILURE: The checker reported error-level diagnostics, or a generic failure.
        USAGE_ERROR: Command-line invocation error (invalid flags/args). Mirrors
            BSD ``EX_USAGE (64)``.
        DECODE_ERROR: The checker emitted a malformed record. Mirrors BSD
            ``EX_DATAERR (65)``.
        WATCH_ERROR: A watch path is missing or unreadable. Mirrors BSD
            ``EX_NOINPUT (66)``.
        CHECKER_UNAVAILABLE: The checker executable could not be launched.
            Mirrors BSD ``EX_UNAVAILABLE (69)``.
        CONFIG_ERROR: Configuration error (missing/invalid/malformed config).
            Mirrors BSD ``EX_CONFIG (78)``.
        UNEXPECTED_ERROR: Unhandled/unknown error (last-resort).
    """

    SUCCESS = 0
    FAILURE = 1

    USAGE_ERROR = 64  # EX_USAGE
    DECODE_ERROR = 65  # EX_DATAERR
    WATCH_ERROR = 66  # EX_NOINPUT
    CHECKER_UNAVAILABLE = 69  # EX_UNAVAILABLE
    CONFIG_ERROR = 78  # EX_CONFIG

    UNEXPECTED_ERROR = 255
