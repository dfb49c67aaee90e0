"""Custom exceptions for gradlemedic with user-friendly error messages."""


class GradlemedicError(Exception):
    """Base exception with user-friendly message and optional hint.

    Attributes:
        message: The main error message.
        hint: Optional hint for resolving the error.
    """

    def __init__(self, message: str, hint: str = "") -> None:
        """Initialize the exception.

        Args:
            message: The main error message.
            hint: Optional hint for resolving the error.
        """
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation."""
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ConfigurationError(GradlemedicError):
    """Invalid configuration."""

    pass


class MissingTokenError(ConfigurationError):
    """Required token is missing."""

    def __init__(
        self,
        token_name: str,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Required environment variable {token_name} is not set"
        if not hint:
            hint = f"Set {token_name} in your environment or CI/CD variables."
        super().__init__(message, hint)


class MissingTargetVersionError(ConfigurationError):
    """No target Gradle version could be determined."""

    def __init__(
        self,
        message: str = "No target Gradle version specified",
        hint: str = "Pass --target VERSION or set migration.latest_known_version in .gradlemedic.yml.",
    ) -> None:
        super().__init__(message, hint)


class ProbeError(GradlemedicError):
    """The project probe tool failed."""

    def __init__(
        self,
        tool: str,
        returncode: int | None = None,
        stderr: str = "",
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Probe tool {tool} failed"
            if returncode is not None:
                message += f" with exit code {returncode}"
            if stderr:
                message += f": {stderr.strip()}"
        if not hint:
            hint = "Check that jbang is installed and the tools directory is correct."
        self.tool = tool
        self.returncode = returncode
        super().__init__(message, hint)


class AnalysisServiceError(GradlemedicError):
    """The text-analysis service call failed."""

    def __init__(
        self,
        original_error: Exception | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = "Text analysis request failed"
            if original_error:
                message += f": {original_error}"
        if not hint:
            hint = "Check your network connection and ANTHROPIC_API_KEY."
        super().__init__(message, hint)


class ParseError(GradlemedicError):
    """Failed to parse a response payload."""

    pass


class FixApplicationError(GradlemedicError):
    """Reading or writing a file for an auto-fix failed."""

    def __init__(
        self,
        file: str,
        original_error: Exception | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Failed to apply fix to {file}"
            if original_error:
                message += f": {original_error}"
        if not hint:
            hint = "Verify the file exists and is writable."
        self.file = file
        super().__init__(message, hint)
