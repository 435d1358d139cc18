from urlywurly.utils.config import Settings, load_settings
from urlywurly.utils.helpers import get_short_url, query_parameter, query_unescape, parse_uri, require_environment, guarantee_500_response
from urlywurly.utils.shortener import generate_shortcode
from urlywurly.utils.logging import initialize_logging
from urlywurly.utils.tracing import Tracer, NullTracer, LoggingTracer, get_tracer


__all__ = [
    'generate_shortcode',
    'Settings',
    'load_settings',
    'get_short_url',
    'query_parameter',
    'query_unescape',
    'parse_uri',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
    'Tracer',
    'NullTracer',
    'LoggingTracer',
    'get_tracer',
]
