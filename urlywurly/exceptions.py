from urlywurly.constants import Message


class UrlyWurlyError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:urlywurly_error'


class ConfigurationError(UrlyWurlyError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class ValidationError(UrlyWurlyError):
    """Base exception for rejected client input.

    Every subclass carries the message shown to the client.
    """

    error_code = 'validation:validation_error'
    message: str = 'invalid input'

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.message)


class MissingURLError(ValidationError):
    """Raised when neither `url` nor `text` carries a value."""

    error_code = 'validation:missing_url'
    message = Message.NO_URL


class URLDecodeError(ValidationError):
    """Raised when the long URL is not a valid query-escaped string."""

    error_code = 'validation:url_decode_error'
    message = Message.UNDECODABLE_URL


class URIParseError(ValidationError):
    """Raised when the decoded long URL is not a well-formed URI."""

    error_code = 'validation:uri_parse_error'
    message = Message.UNPARSEABLE_URI


class UnsupportedSchemeError(ValidationError):
    """Raised when the long URL scheme is neither http nor https."""

    error_code = 'validation:unsupported_scheme'
    message = Message.UNSUPPORTED_SCHEME


class CustomCodeTakenError(ValidationError):
    """Raised when a custom short code already maps to a URL."""

    error_code = 'validation:custom_code_taken'
    message = Message.CUSTOM_CODE_TAKEN


class InvalidCustomCodeError(ValidationError):
    """Raised when a custom short code doesn't match the allowed pattern."""

    error_code = 'validation:invalid_custom_code'
    message = Message.INVALID_CUSTOM_CODE
