"""typelink custom exceptions."""


class TypelinkError(Exception):
    """Base exception for typelink errors."""


class SignatureParseError(TypelinkError):
    """A type signature could not be parsed."""


class ConfigLoadError(TypelinkError):
    """A type mapping configuration could not be loaded or validated."""

    def __init__(self, message: str, issues: list[str] | None = None) -> None:
        self.issues = issues or []
        if self.issues:
            message = message + ":\n" + "\n".join(f"  {issue}" for issue in self.issues)
        super().__init__(message)


class FetchError(TypelinkError):
    """A document could not be fetched or read."""


class DocumentParseError(TypelinkError):
    """A fetched document could not be parsed."""


class CircularReferenceError(TypelinkError):
    """A dependency's discovery path loops back to one of its ancestors."""

    def __init__(self, full_name: str, path: tuple[str, ...]) -> None:
        self.full_name = full_name
        self.path = path
        chain = " -> ".join((*path, full_name))
        super().__init__(f"circular reference detected for {full_name}: {chain}")


class DeclarationNotFoundError(TypelinkError):
    """Declaration not found in the repository."""
