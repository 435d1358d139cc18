import json
import logging

from urlywurly.types import LambdaEvent, LambdaContext, LambdaResponse, HttpHeaders
from urlywurly.constants import Message
from urlywurly.dao import ShortURLBaseDAO, get_short_url_dao
from urlywurly.dao.exceptions import DAOError, ShortURLNotFoundError
from urlywurly.exceptions import ConfigurationError
from urlywurly.service import lengthen
from urlywurly.utils import load_settings, guarantee_500_response
from urlywurly.utils.tracing import Tracer, NullTracer, get_tracer


logger = logging.getLogger(__name__)

HEADERS: HttpHeaders = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET,OPTIONS',
}


def response_301(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 301,
        'headers': {**HEADERS, 'Location': location},
        'body': '',  # no body needed for redirects
    }


def response_400(message: str = Message.URL_NOT_FOUND) -> LambdaResponse:
    return {
        'statusCode': 400,
        'headers': {**HEADERS, 'Content-Type': 'application/json'},
        'body': json.dumps({'message': message}),
    }


def response_500(message: str = Message.INTERNAL_SERVER_ERROR) -> LambdaResponse:
    return {
        'statusCode': 500,
        'headers': {**HEADERS, 'Content-Type': 'application/json'},
        'body': json.dumps({'message': message}),
    }


def response_options() -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': dict(HEADERS),
        'body': '',
    }


def handle(event: LambdaEvent, *, dao: ShortURLBaseDAO, tracer: Tracer | None = None) -> LambdaResponse:
    """Redirect to the long URL behind the short code in an API Gateway proxy event

    This handler follows this procedure to redirect URLs:
    - Step 1: Answer CORS preflight requests
    - Step 2: Extract shortcode from request path
    - Step 3: Read the long URL from the store
    - Step 4: Redirect client to the long URL

    HTTP responses:
        301: Successful redirect
            headers:
                Location: long URL
        200 (OPTIONS): empty body
        400: Short code missing, unknown, or the store couldn't be read
            message: 'unable to find URL!'

    Example:
        >>> event = {'httpMethod': 'GET', 'pathParameters': {'shortcode': 'my-link1'}}
        >>> response = handle(event, dao=dao)
        >>> response['statusCode']
        301
        >>> response['headers']['Location']
        'https://a.example'
    """
    # 1- CORS preflight
    if event.get('httpMethod') == 'OPTIONS':
        return response_options()

    # 2- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.')
        return response_400()

    # 3- Read long URL
    try:
        long_url = lengthen(shortcode, dao=dao, tracer=tracer or NullTracer())
    except ShortURLNotFoundError:
        logger.info('Short URL record not found in store. Responding with 400.', extra={'shortcode': shortcode})
        return response_400()
    except DAOError:
        logger.exception('Unable to read short URL record. Responding with 400.', extra={'shortcode': shortcode})
        return response_400()

    # 4- Redirect client to long URL
    logger.info('Redirecting client to long URL. Responding with 301.', extra={'shortcode': shortcode})
    return response_301(location=long_url)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs (see handle())."""
    try:
        settings = load_settings()
        dao = get_short_url_dao(settings)
    except ConfigurationError:
        logger.exception('Failed to load settings for redirect URL function. Responding with 500.')
        return response_500()

    return handle(event, dao=dao, tracer=get_tracer(settings.tracing))
