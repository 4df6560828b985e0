"""Exception types for extraction errors.

This module defines the exception hierarchy for violated assumptions about
article markup. Extraction is all-or-nothing: every subclass of
ExtractionAssumptionException aborts the parse of the whole document.
Fetch failures are TransientException subclasses instead, because a
later attempt may succeed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from strictly.data_types import DocumentPosition


class ExtractionAssumptionException(Exception):
    """Base class for article assumption violations.

    The extractor makes assumptions about heading labels, table layouts
    and cell formats. When one of them does not hold, the source markup
    has drifted in a way the extractor does not model yet, and the parse
    is abandoned with an exception describing what was seen.
    """

    def __init__(
        self,
        message: str,
        source: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the assumption violation.
            source: Label of the document being parsed (e.g. "series 7").
            context: Optional dict of additional context (state, cell text).
        """
        self.message = message
        self.source = source
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context.

        Returns:
            Formatted error message string.
        """
        parts = [self.message]
        parts.append(f"Source: {self.source}")

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


class SectionHeadingException(ExtractionAssumptionException):
    """Raised when a week heading carries no parseable week number.

    Attributes:
        label: The heading label that failed to parse.
    """

    def __init__(self, label: str, source: str) -> None:
        self.label = label
        super().__init__(
            f"Week heading without a week number: '{label}'",
            source,
            {"label": label},
        )


class ProtocolViolation(ExtractionAssumptionException):
    """Raised when the episode row automaton reaches an unmodelled state.

    This usually means the layout of a score table changed (an extra
    spanning cell, a missing column) and the automaton would otherwise
    attribute scores to the wrong couple.

    Attributes:
        state: Name of the automaton state when the violation was seen.
        position: Where in the document the violation was seen.
    """

    def __init__(
        self,
        message: str,
        state: str,
        position: DocumentPosition,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.state = state
        self.position = position
        full_context = {
            "state": state,
            "section": position.section,
            "row": position.row,
        }
        full_context.update(context or {})
        super().__init__(message, position.source, full_context)


class IncompleteRowException(ProtocolViolation):
    """Raised when a completed row lacks a required field."""


class CoupleFormatException(ExtractionAssumptionException):
    """Raised when a couple cell is not of the form "performer & partner".

    Attributes:
        fragment: The couple text that failed to split.
        position: Where in the document the fragment was found.
    """

    def __init__(self, fragment: str, position: DocumentPosition) -> None:
        self.fragment = fragment
        self.position = position
        super().__init__(
            f"Expected exactly one '&' in couple '{fragment}'",
            position.source,
            {"section": position.section, "row": position.row},
        )


class DataFormatAssumptionException(ExtractionAssumptionException):
    """Raised when an extracted record doesn't match the record schema.

    This exception is raised during Pydantic validation, for example when
    the derived average score falls outside the judges' 1-10 scale. It
    means the score cell was read with the wrong judge count or the wrong
    cell was taken as the score.
    """

    def __init__(
        self,
        errors: list[dict[str, Any]],
        failed_doc: dict[str, Any],
        model_name: str,
        source: str,
    ) -> None:
        """Initialize the exception.

        Args:
            errors: List of Pydantic validation errors.
            failed_doc: The document that failed validation.
            model_name: Name of the Pydantic model that was validated against.
            source: Label of the document that produced this data.
        """
        self.errors = errors
        self.failed_doc = failed_doc
        self.model_name = model_name

        error_summary = ", ".join(
            f"{err['loc'][0]}: {err['msg']}" for err in errors
        )

        message = (
            f"Data validation failed for model '{model_name}': {error_summary}"
        )

        context = {
            "model": model_name,
            "error_count": len(errors),
            "failed_doc": failed_doc,
        }

        super().__init__(message, source, context)


class ScoreFileFormatException(Exception):
    """Raised when a CSV read by the comparison has an unreadable row.

    Series and week must be integers in both datasets, and our output's
    totals must be integers.

    Attributes:
        path: The file that holds the row.
        line: Line number of the row.
        message: Human-readable error message.
    """

    def __init__(self, path: str, line: int, detail: str) -> None:
        self.path = path
        self.line = line
        self.message = f"{path}, line {line}: {detail}"
        super().__init__(self.message)


class ReferenceFormatException(ScoreFileFormatException):
    """Raised when the reference dataset holds an unreadable total.

    Only integers and the "-" placeholder for unscored dances are valid
    totals in the reference CSV.
    """

    def __init__(self, value: str, line: int, path: str = "reference") -> None:
        self.value = value
        super().__init__(
            path,
            line,
            f"Reference total '{value}' is neither an integer nor '-'",
        )


# =============================================================================
# Transient Exceptions
# =============================================================================


class TransientException(Exception):
    """Base class for transient errors that might resolve on retry.

    Transient exceptions represent temporary failures like network issues,
    server errors, or timeouts while fetching an article. Unlike assumption
    exceptions, which mean the extractor needs updating, these suggest a
    later run may succeed.
    """

    pass


class HTMLResponseAssumptionException(TransientException):
    """Raised when the article request returns an unexpected status code.

    Attributes:
        status_code: The actual HTTP status code received.
        expected_codes: List of status codes that were expected.
        url: The URL that returned the unexpected status.
        message: Human-readable error message.
    """

    def __init__(
        self,
        status_code: int,
        expected_codes: list[int],
        url: str,
    ) -> None:
        self.status_code = status_code
        self.expected_codes = expected_codes
        self.url = url

        expected_str = ", ".join(str(code) for code in expected_codes)
        self.message = (
            f"HTTP {status_code} from {url} (expected one of: {expected_str})"
        )
        super().__init__(self.message)


class RequestTimeoutException(TransientException):
    """Raised when the article request times out.

    Attributes:
        url: The URL that timed out.
        timeout_seconds: The timeout duration in seconds.
        message: Human-readable error message.
    """

    def __init__(self, url: str, timeout_seconds: float | None) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.message = f"Request to {url} timed out after {timeout_seconds}s"
        super().__init__(self.message)
