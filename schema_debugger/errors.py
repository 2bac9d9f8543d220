"""Exceptions raised at the package's outer surfaces."""


class SchemaDebuggerError(Exception):
    """Base class for schema_debugger errors."""


class SchemaImportError(SchemaDebuggerError):
    """Raised when a ``module:attribute`` schema target cannot be loaded."""


class RelayError(SchemaDebuggerError):
    """Raised when a relay port or subscriber is not usable."""
