"""Custom exceptions for nixscope."""


class NixscopeError(Exception):
    """Base exception for all nixscope errors."""

    pass


class ProjectRootNotFoundError(NixscopeError):
    """Raised when no directory holding the manifest can be found."""

    def __init__(self, start: str, manifest: str = "flake.nix") -> None:
        super().__init__(f"No {manifest} found in {start} or any parent directory")
        self.start = start
        self.manifest = manifest


class ConfigError(NixscopeError):
    """Raised when the nixscope config file cannot be used."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path
