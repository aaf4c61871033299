"""Configuration errors."""

from pydantic import ValidationError


class ConfigValidationError(Exception):
    """Raised when a YAML configuration or library file fails validation."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")

    @classmethod
    def from_validation_error(
        cls, error: ValidationError, file_path: str
    ) -> "ConfigValidationError":
        """Flatten a pydantic ValidationError into location/message pairs.

        Args:
            error: The pydantic error.
            file_path: File the data came from.

        Returns:
            ConfigValidationError with one entry per failing field.
        """
        details = [
            {
                "location": ".".join(str(part) for part in item["loc"]),
                "type": item["type"],
                "message": item["msg"],
            }
            for item in error.errors()
        ]
        return cls(details, file_path)
