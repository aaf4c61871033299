"""Remediation hints for configuration validation errors."""

from typing import Final


# Hints keyed by pydantic error type
ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required.",
    "extra_forbidden": "Unknown field. Check the spelling against the config sections.",
    "enum": "Use one of the category names: Science, History, Philosophy, "
    "Economics, Psychology, Literature, Mathematics, Technology.",
    "int_type": "This field must be an integer (whole number).",
    "int_parsing": "This field must be an integer (whole number).",
    "float_type": "This field must be a number.",
    "float_parsing": "This field must be a number.",
    "string_type": "This field must be a text string.",
    "dict_type": "This section must be a mapping.",
    "list_type": "This field must be a list.",
    "greater_than": "The value is too small.",
    "greater_than_equal": "The value is too small.",
    "less_than_equal": "The value is too large.",
    "string_too_short": "The text is too short.",
    "string_pattern_mismatch": "The format is invalid.",
    "value_error": "The combination of values is inconsistent.",
    "yaml_parse_error": "Invalid YAML syntax. Check indentation.",
}

# Hints keyed by the last segment of the field path
FIELD_HINTS: Final[dict[str, str]] = {
    "catalog_url": "Must be an http(s) URL, e.g. 'https://gutendex.com/books'.",
    "batch_size": "Items appended per batch; between 1 and 500.",
    "min_paragraph_chars": "Shortest paragraph kept; between 40 and 500.",
    "prefetch_threshold": "Distance from the feed end that triggers a batch.",
    "keep_threshold": "Minimum segment impact score; between 0.0 and 1.0.",
    "max_pages": "Catalog pages to follow; between 1 and 20.",
    "max_books": "Candidate books per refresh; between 1 and 100.",
    "max_workers": "Parallel book downloads; between 1 and 32.",
    "section_min_chars": "Must be below section_max_chars.",
    "section_max_chars": "Must be above section_min_chars.",
    "correct_index": "Must point at one of the question's options (0-based).",
}


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a hint for a validation error.

    Args:
        error_type: The pydantic error type (e.g. 'missing').
        field_name: Optional dotted field path for field-specific hints.

    Returns:
        A hint string.
    """
    if field_name:
        simple_field = field_name.split(".")[-1]
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]

    return ERROR_HINTS.get(error_type, "Check the allowed values for this field.")


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with an optional hint.

    Args:
        location: Dotted error location (e.g. 'remote.max_books').
        message: The original error message.
        error_type: The error type.
        include_hint: Whether to include a hint.

    Returns:
        Formatted error string.
    """
    base = f"{location}: {message}" if location else message
    if include_hint:
        hint = get_error_hint(error_type, location)
        return f"{base}\n    Hint: {hint}"
    return base
