from enum import StrEnum


# Service identity reported in every log line
SERVICE_NAME = 'urly-wurly'
SERVICE_VERSION = '1.0.0'

# Custom short codes: ASCII word characters and dashes, at least 6 of them
CUSTOM_CODE_PATTERN = r'^[\w-]{6,}$'

# Path segment accepted by the redirect route
SHORTCODE_PATH_PATTERN = r'[A-Za-z0-9_-]+'

DEFAULT_PORT = 8080
DEFAULT_PUBLIC_DIR = 'public'


class StoreBackend(StrEnum):
    S3 = 's3'
    MEMORY = 'memory'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        TRACING = 'TRACING'

    class Server(StrEnum):
        PORT = 'PORT'
        DOMAIN = 'DOMAIN'
        PUBLIC_DIR = 'PUBLIC_DIR'

    class Store(StrEnum):
        BACKEND = 'STORE_BACKEND'
        BUCKET = 'BUCKET'

    class AWS(StrEnum):
        REGION = 'AWS_REGION'
        ENDPOINT_URL = 'AWS_ENDPOINT_URL'  # usually http://localstack:4566


class Message(StrEnum):
    """User-facing response messages."""

    URL_SHORTENED = 'url shortened!'
    NO_URL = 'no url to shorten provided!'
    UNDECODABLE_URL = 'unable to decode URL. was it encoded?'
    UNPARSEABLE_URI = 'unable to parse URI. was it encoded?'
    UNSUPPORTED_SCHEME = 'provided input is not a HTTP/HTTPS URL!'
    CUSTOM_CODE_TAKEN = 'Custom name already registered to another URL!'
    INVALID_CUSTOM_CODE = 'custom name should be at least 6 alphanumeric characters incl. underscores and dashes!'
    STORAGE_UNAVAILABLE = 'unable to access storage!'
    URL_NOT_FOUND = 'unable to find URL!'
    INTERNAL_SERVER_ERROR = 'Internal Server Error'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
