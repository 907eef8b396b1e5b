"""Mapping of analysis failures to HTTP responses."""

from domain.model.errors import AnalysisError, ErrorKind

_ERROR_RESPONSES: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.TIMEOUT: (504, "Analysis failed: the language model timed out. Please try again."),
    ErrorKind.TRUNCATED_OUTPUT: (502, "Analysis failed: the model response was too long. Please try a shorter sentence."),
    ErrorKind.MALFORMED_OUTPUT: (502, "Analysis failed: incomplete response from the language model. Please try again."),
    ErrorKind.SCHEMA_INVALID: (502, "Analysis failed: invalid response from the language model. Please try again."),
    ErrorKind.CONFIGURATION_MISSING: (500, "Analysis service is not configured"),
    ErrorKind.UPSTREAM_REJECTED: (502, "Analysis failed: the language model provider returned an error."),
}

REQUEST_TIMEOUT_RESPONSE = (504, "Analysis took too long. Please try again.")
UNEXPECTED_ERROR_RESPONSE = (500, "An unexpected error occurred")


def get_analysis_error_response(e: Exception) -> tuple[int, str]:
    """Get HTTP status code and user-facing message for an analysis failure.

    Internal details (field paths, model names) are never included.

    Args:
        e: Exception to handle

    Returns:
        Tuple of (status_code, message)
    """
    if isinstance(e, AnalysisError):
        return _ERROR_RESPONSES[e.kind]
    return UNEXPECTED_ERROR_RESPONSE
