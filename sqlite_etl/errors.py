class PipelineError(Exception):
    """Base class for failures reported by a pipeline step."""


class NetworkError(PipelineError):
    """Raised when the source file cannot be fetched."""


class FileWriteError(PipelineError):
    """Raised when a downloaded file cannot be written to disk."""


class ParseError(PipelineError):
    """Raised when the source file is not well-formed delimited data."""


class StorageError(PipelineError):
    """Raised when the database or table cannot be read or written."""
