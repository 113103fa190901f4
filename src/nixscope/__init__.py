"""nixscope - inspect the module graph of a nix configuration repository."""

__version__ = "0.1.0"
