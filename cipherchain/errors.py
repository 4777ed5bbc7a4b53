"""
Exception hierarchy for cipherchain.

All exceptions inherit from CipherChainError for unified handling.
Module failures (ConfigError, DecodeError) are recorded by the pipeline
as stage results; BoundsError and UnknownModuleError are raised straight
to the caller.
"""


class CipherChainError(Exception):
    """Base exception for all cipherchain errors."""
    pass


class ModuleError(CipherChainError):
    """Raised by a module's process(); names the module that failed."""

    def __init__(self, message: str, module: str = None):
        super().__init__(message)
        self.message = message
        self.module = module

    def __str__(self):
        if self.module:
            return f"{self.module}: {self.message}"
        return self.message


class ConfigError(ModuleError):
    """Raised when a module parameter is missing, mistyped or inconsistent."""
    pass


class DecodeError(ModuleError):
    """Raised when input is malformed for the configured direction."""
    pass


class BoundsError(CipherChainError, IndexError):
    """Raised when a pipeline position is out of range."""

    def __init__(self, message: str, position: int = None, size: int = None):
        super().__init__(message)
        self.position = position
        self.size = size


class UnknownModuleError(CipherChainError, KeyError):
    """Raised when the registry has no module of the requested kind."""

    def __init__(self, kind: str):
        super().__init__(kind)
        self.kind = kind

    def __str__(self):
        return f"Unknown module kind: '{self.kind}'"
