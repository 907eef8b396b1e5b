"""Domain-level exceptions.

Services raise these errors to express failures of the analysis pipeline.
Route handlers catch them and map ``kind`` to HTTP status codes, so the
retry policy and the HTTP layer never inspect message text.
"""

from enum import Enum


class DomainError(Exception):
    """Base class for all domain errors."""


class ErrorKind(str, Enum):
    """Tag identifying the failure class of an :class:`AnalysisError`."""
    TIMEOUT = "timeout"
    TRUNCATED_OUTPUT = "truncated_output"
    MALFORMED_OUTPUT = "malformed_output"
    SCHEMA_INVALID = "schema_invalid"
    CONFIGURATION_MISSING = "configuration_missing"
    UPSTREAM_REJECTED = "upstream_rejected"


class AnalysisError(DomainError):
    """Base class for failures of a model-backed analysis attempt."""

    kind: ErrorKind = ErrorKind.UPSTREAM_REJECTED

    def __init__(self, message: str, model: str | None = None):
        self.model = model
        # Token usage of the failed attempt, when a completion was received
        self.stats = None
        super().__init__(message)

    @property
    def escalates(self) -> bool:
        """Whether the retry policy may try another tier after this error."""
        return self.kind in (ErrorKind.TIMEOUT, ErrorKind.TRUNCATED_OUTPUT)


class ModelTimeoutError(AnalysisError):
    """Generation did not finish within the attempt's timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, model: str, timeout: float):
        self.timeout = timeout
        super().__init__(f"Model request timed out after {timeout:g}s ({model})", model)


class TruncatedOutputError(AnalysisError):
    """Generation stopped because the output token budget was exhausted."""

    kind = ErrorKind.TRUNCATED_OUTPUT

    def __init__(self, model: str, max_tokens: int):
        self.max_tokens = max_tokens
        super().__init__(f"Model output hit the {max_tokens} token limit ({model})", model)


class MalformedOutputError(AnalysisError):
    """Model output is not JSON and could not be repaired."""

    kind = ErrorKind.MALFORMED_OUTPUT


class SchemaInvalidError(AnalysisError):
    """Parsed payload violates the analysis contract."""

    kind = ErrorKind.SCHEMA_INVALID

    def __init__(self, field_path: str, reason: str, model: str | None = None):
        self.field_path = field_path
        self.reason = reason
        super().__init__(f"Invalid response shape at {field_path}: {reason}", model)


class ConfigurationMissingError(AnalysisError):
    """Provider credential is not configured."""

    kind = ErrorKind.CONFIGURATION_MISSING

    @property
    def escalates(self) -> bool:
        return False


class UpstreamRejectedError(AnalysisError):
    """Provider failed the request for a reason not otherwise classified."""

    kind = ErrorKind.UPSTREAM_REJECTED


class WordTreeError(DomainError):
    """Word derivation tree could not be produced."""
