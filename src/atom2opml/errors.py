# ABOUTME: Error taxonomy for the Atom to OPML conversion.
# ABOUTME: Separates input acquisition failures, malformed feeds, and wrapped conversion errors.


class Atom2OpmlError(Exception):
    """Base class for all conversion errors."""

    @property
    def user_message(self) -> str:
        return str(self)


class InputAcquisitionError(Atom2OpmlError):
    """No usable text could be obtained from a file or URL."""

    def __init__(self, detail: str, source: str | None = None, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.source = source
        self.status_code = status_code


class MalformedInputError(Atom2OpmlError):
    """Input is not well-formed XML or is not an Atom feed."""

    def __init__(self, reason: str, detail: str | None = None):
        message = f"{reason}: {detail}" if detail else reason
        super().__init__(message)
        self.reason = reason
        self.detail = detail

    @property
    def user_message(self) -> str:
        return f"This does not look like an Atom feed ({self.reason})."


class ConversionError(Atom2OpmlError):
    """Terminal failure of one conversion attempt, wrapping its cause."""

    def __init__(self, cause: Exception):
        super().__init__(str(cause))
        self.cause = cause

    @property
    def user_message(self) -> str:
        if isinstance(self.cause, Atom2OpmlError):
            return self.cause.user_message
        return "Conversion failed due to an internal error."
