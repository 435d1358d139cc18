import json
import logging

from urlywurly.types import LambdaEvent, LambdaContext, LambdaResponse, HttpHeaders
from urlywurly.constants import Message
from urlywurly.dao import ShortURLBaseDAO, get_short_url_dao
from urlywurly.dao.exceptions import DAOError
from urlywurly.exceptions import ConfigurationError, ValidationError
from urlywurly.service import shorten
from urlywurly.utils import Settings, load_settings, query_parameter, guarantee_500_response
from urlywurly.utils.tracing import Tracer, NullTracer, get_tracer


logger = logging.getLogger(__name__)

HEADERS: HttpHeaders = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET,POST,OPTIONS',
    'Content-Type': 'application/json',
}


def encode_body(message: str, shortened_url: str | None = None) -> str:
    body = {}
    if shortened_url:
        body['shortened_url'] = shortened_url
    body['message'] = message

    try:
        return json.dumps(body)
    except (TypeError, ValueError):
        logger.exception('Unable to encode response body.')
        return ''


def response(status_code: int, message: str, shortened_url: str | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': dict(HEADERS),
        'body': encode_body(message, shortened_url),
    }


def response_options() -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': dict(HEADERS),
        'body': '',
    }


def handle(event: LambdaEvent, *, settings: Settings, dao: ShortURLBaseDAO, tracer: Tracer | None = None) -> LambdaResponse:
    """Shorten the URL carried by an API Gateway proxy event

    This handler follows this procedure to shorten URLs:
    - Step 1: Answer CORS preflight requests
    - Step 2: Extract long URL (`url`, falling back to `text`) and `customname` from the query string
    - Step 3: Shorten the URL (validate, resolve code, write mapping)
    - Step 4: Respond to user with the public short URL

    HTTP responses:
        200: Successful URL shortening
            shortened_url: public short URL
            message: 'url shortened!'
        200 (OPTIONS): empty body
        400: Bad client request
            message: reason the long URL or custom name was rejected
        500: Storage failure
            message: 'unable to access storage!'

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        settings (Settings):
            Application settings.
        dao (ShortURLBaseDAO):
            Mapping store.
        tracer (Tracer | None):
            Observability hooks.

    Returns:
        LambdaResponse:
            Response following API Gateway Lambda Proxy output format.

    Example:
        >>> event = {'httpMethod': 'GET', 'queryStringParameters': {'url': 'https://example.com/page'}}
        >>> response = handle(event, settings=settings, dao=dao)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['message']
        'url shortened!'
    """
    # 1- CORS preflight
    if event.get('httpMethod') == 'OPTIONS':
        return response_options()

    # 2- Extract query string parameters
    long_url = query_parameter(event, 'url') or query_parameter(event, 'text')
    custom_code = query_parameter(event, 'customname')

    # 3- Shorten
    try:
        short_url = shorten(long_url, custom_code, dao=dao, settings=settings, tracer=tracer or NullTracer())
    except ValidationError as e:
        logger.info(
            'Rejected shorten request. Responding with 400.',
            extra={'event': e.error_code, 'customCode': custom_code},
        )
        return response(400, str(e))
    except DAOError:
        logger.exception('Unable to write short URL mapping. Responding with 500.')
        return response(500, Message.STORAGE_UNAVAILABLE)

    # 4- Return successful response to user
    return response(200, Message.URL_SHORTENED, shortened_url=short_url)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs (see handle())."""
    try:
        settings = load_settings()
        dao = get_short_url_dao(settings)
    except ConfigurationError:
        logger.exception('Failed to load settings for shorten URL function. Responding with 500.')
        return response(500, Message.INTERNAL_SERVER_ERROR)

    return handle(event, settings=settings, dao=dao, tracer=get_tracer(settings.tracing))
