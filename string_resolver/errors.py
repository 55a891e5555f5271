"""Error types raised while resolving localized strings."""


class StringResolverError(RuntimeError):
    """Base class for all string resolver failures."""


class ValidationError(StringResolverError):
    """Raised when a merger is configured with an invalid platform or version."""


class ConfigurationError(StringResolverError):
    """Raised when command-line or config file values are invalid."""


class ConflictError(StringResolverError):
    """Raised when two documents supply a value for the same key and language."""

    def __init__(self, key: str, lang: str, titles: tuple[str, str], message: str | None = None):
        self.key = key
        self.lang = lang
        self.titles = titles
        if message is None:
            message = f"Conflicting key {key} ({lang}) in {titles[1]} and {titles[0]}"
        super().__init__(message)


class DuplicateError(ConflictError):
    """Raised when one document supplies the same key and language twice."""

    def __init__(self, key: str, lang: str, title: str):
        super().__init__(
            key, lang, (title, title),
            f"Duplicate key {key} ({lang}) in {title}"
        )


class MissingBaseValueError(StringResolverError):
    """Raised when a key has no value in the base culture."""

    def __init__(self, key: str, culture: str):
        self.key = key
        self.culture = culture
        super().__init__(f"{key} is missing a value in the base culture ({culture})")


class ContentLoadError(StringResolverError):
    """Raised when a content file cannot be read or parsed."""

    def __init__(self, path: str, error: str):
        self.path = path
        self.error = error
        super().__init__(f"Could not load {path}: {error}")
