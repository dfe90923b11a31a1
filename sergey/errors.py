class SergeyError(Exception):
    """Base class for sergey errors."""


class ConfigError(SergeyError):
    """The build cannot start (missing imports folder, unsafe output path)."""


class TemplateDepthError(SergeyError):
    """Import nesting went past the configured maximum depth (usually a cycle)."""


class CssSyntaxError(SergeyError):
    """A stylesheet could not be split into rules."""
