"""Exceptions raised while grading a release."""


class GraderError(Exception):
    """Base exception for grading failures."""

    pass


class ParseError(GraderError):
    """Release tag does not name a project."""

    def __init__(self, tag: str):
        super().__init__(f"Unable to parse project from release {tag}.")
        self.tag = tag


class DateParseError(GraderError):
    """Timestamp is not valid ISO-8601."""

    def __init__(self, value: str, reason: str | None = None):
        message = f"Unable to parse date {value!r} as ISO-8601."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)
        self.value = value


class ConfigurationError(GraderError):
    """A deadline, display name, or setting is missing or invalid."""

    pass


class TrackerUnavailableError(GraderError):
    """The issue tracker did not answer with a success status."""

    def __init__(self, message: str, status: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status = status
        self.body = body


class UnsupportedTypeError(GraderError):
    """Submission type has no grading path."""

    def __init__(self, value: str):
        super().__init__(f'The value "{value}" is not a valid project grade type.')
        self.value = value


class MissingStateError(GraderError):
    """A value saved by an earlier workflow step is absent."""

    def __init__(self, names: list[str]):
        joined = ", ".join(names)
        super().__init__(f"Missing saved state: {joined}.")
        self.names = list(names)
