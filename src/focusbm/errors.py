"""
Error types shared by the providers and the restorer
"""


class FocusBMError(Exception):
    """Base class for every expected focusbm failure"""

    kind = "error"

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return self.detail or self.kind


class NotFoundError(FocusBMError):
    """A target, tab, window or process could not be located"""

    kind = "not_found"


class ExecutionFailedError(FocusBMError):
    """An external automation call returned an error"""

    kind = "execution_failed"


class NotAvailableError(FocusBMError):
    """A required external facility (tmux, osascript) is not running"""

    kind = "not_available"


class ParseError(FocusBMError):
    """Output from an external enumeration call could not be parsed"""

    kind = "parse_error"
