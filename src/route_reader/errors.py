"""Errors raised while reading resource declarations.

Every error is tied to the resource class and method it was raised for, so
a scan can collect them and keep going.
"""


class ReaderError(RuntimeError):
    """Base class for structural problems found in resource declarations."""

    def __init__(self, message: str, resource: str | None = None, method: str | None = None):
        self.message = message
        self.resource = resource
        self.method = method
        super().__init__(message)

    @property
    def location(self) -> str:
        if self.resource and self.method:
            return f"{self.resource}.{self.method}"
        return self.resource or self.method or "<unknown>"

    def bind(self, resource: str, method: str | None = None) -> "ReaderError":
        """Attach the offending resource/method if not already set."""
        if self.resource is None:
            self.resource = resource
        if self.method is None:
            self.method = method
        return self

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class MissingParameterName(ReaderError):
    pass


class MissingResponseDescription(ReaderError):
    pass


class DuplicateOperation(ReaderError):
    def __init__(self, path: str, verb: str, resource: str | None = None, method: str | None = None):
        self.path = path
        self.verb = verb
        super().__init__(f"{verb.upper()} {path} is already declared", resource, method)


class MalformedPathExpression(ReaderError):
    pass


class ResourceLoadError(ReaderError):
    """Raised when a `module:Class` reference cannot be imported."""


class MissingParameterLocation(ReaderError):
    pass


class InvalidParameterLocation(ReaderError):
    pass


class InvalidDeclaration(ReaderError):
    """Raised when declared values do not form a valid document model."""
