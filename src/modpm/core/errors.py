"""Exception types raised by modpm operations.

Item-level errors (bad identifiers, failed VCS commands, filesystem failures)
are reported per module and counted by the caller. Pre-flight errors
(ToolMissingError, MirrorsUnreachableError, PromptUnavailableError) abort the
whole run.
"""


class ModpmError(Exception):
    """Base class for all errors raised by modpm."""


class ToolMissingError(ModpmError):
    """Raised when a required VCS executable cannot be found on PATH."""

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(
            f"VCS executable `{executable}` was not found. "
            f"Install it and make sure it is on your PATH."
        )


class InvalidIdentifierError(ModpmError):
    """Raised when a module identifier is too short or starts with a bad character."""

    def __init__(self, ident: str):
        self.ident = ident
        super().__init__(
            f"Invalid module identifier `{ident}`: "
            "identifiers must be at least 2 characters long and start with a letter or digit."
        )


class InvalidURLError(ModpmError):
    """Raised when a module URL cannot be parsed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"Invalid module URL `{url}`: {reason}")


class UnresolvableNameError(ModpmError):
    """Raised when no module name can be extracted from a URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Failed to derive a module name from `{url}`.")


class MirrorError(ModpmError):
    """Raised when every mirror failed to serve a request."""


class MirrorsUnreachableError(MirrorError):
    """Raised when none of the configured mirrors responds."""

    def __init__(self, server_urls: list[str]):
        self.server_urls = server_urls
        tried = ", ".join(server_urls) if server_urls else "<none configured>"
        super().__init__(f"No responding registry server found. Tried: {tried}")


class VcsExecutionError(ModpmError):
    """Raised when a VCS subprocess exits with a non-zero status."""


class ModuleFilesystemError(ModpmError):
    """Raised when creating or removing a module directory fails."""


class PromptUnavailableError(ModpmError):
    """Raised when a confirmation is required but prompting is disabled."""


class ManifestError(ModpmError):
    """Raised when a module manifest exists but cannot be parsed."""
