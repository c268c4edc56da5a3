"""
Custom exception classes for the PS2 → PSP converter.

Defines a hierarchy of exceptions for the failure kinds the pipeline can
hit: bad configuration, an unreachable or silent remote service, and
filesystem problems while scanning or generating output.
"""

class ConverterError(Exception):
    """Base exception class for this application."""
    pass

# --- Configuration Errors ---
class ConfigError(ConverterError):
    """Base class for configuration-related errors. Raised before any network activity."""
    pass

class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested configuration file cannot be found."""
    pass

class ConfigParsingError(ConfigError):
    """Raised when the configuration file cannot be parsed (e.g., invalid YAML)."""
    pass

class ApiKeyError(ConfigError):
    """Raised when no Perplexity API key could be resolved."""
    pass

class SourceFolderError(ConfigError):
    """Raised when the PS2 source folder does not exist or is not a directory."""
    pass

# --- File Processing Errors ---
class FileProcessingError(ConverterError):
    """Base class for filesystem errors during scanning or generation."""
    pass

class FileReadError(FileProcessingError):
    """Raised when the source tree cannot be listed or stat'ed."""
    pass

class FileWriteError(FileProcessingError):
    """Raised when an output artifact cannot be written."""
    pass

# --- API Call Errors ---
class ApiCallError(ConverterError):
    """Base class for failures talking to the remote text service."""
    pass

class ConnectivityError(ApiCallError):
    """Raised when the service is unreachable, times out, or rejects the credentials."""
    pass

class ApiResponseError(ApiCallError):
    """Raised when the service answers but the response is unusable."""
    pass

class EmptyResponseError(ApiResponseError):
    """Raised when the plan request returns no completion text."""
    pass
