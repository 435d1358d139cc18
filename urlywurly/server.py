"""HTTP server for urly-wurly.

Routes:
    GET|POST|OPTIONS /s            -> shorten handler (query: url | text, customname)
    GET|OPTIONS      /{shortcode}  -> redirect handler, shortcode matching [A-Za-z0-9_-]+
    everything else                -> static files from `settings.public_dir`

Each request is translated into an API Gateway proxy event and passed to the
same handlers the Lambda functions use, so both deployments answer identically.

Usage:
    $ DOMAIN=urly.example BUCKET=urly-links PORT=8080 urlywurly
"""

import os
import sys
import logging
import urllib.parse

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.staticfiles import StaticFiles
from starlette.convertors import Convertor, register_url_convertor

from urlywurly.types import LambdaEvent, LambdaResponse
from urlywurly.constants import SERVICE_NAME, SERVICE_VERSION, SHORTCODE_PATH_PATTERN
from urlywurly.dao import ShortURLBaseDAO, get_short_url_dao
from urlywurly.exceptions import ConfigurationError
from urlywurly.lambdas.shorten_url import app as shorten_url
from urlywurly.lambdas.redirect_url import app as redirect_url
from urlywurly.utils import Settings, load_settings, initialize_logging, guarantee_500_response
from urlywurly.utils.tracing import Tracer, get_tracer


logger = logging.getLogger(__name__)


class ShortcodeConvertor(Convertor):
    regex = SHORTCODE_PATH_PATTERN

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        return value


register_url_convertor('shortcode', ShortcodeConvertor())


def to_event(request: Request, path_parameters: dict[str, str] | None = None) -> LambdaEvent:
    """Translate an HTTP request into an API Gateway proxy event.

    Query parameters are decoded once, keeping bytes that are not valid UTF-8
    as lone surrogates so the handlers see exactly what the client sent.
    """
    query_string = request.scope['query_string'].decode('utf-8', 'surrogateescape')
    multi_value_parameters: dict[str, list[str]] = {}
    for name, value in urllib.parse.parse_qsl(query_string, keep_blank_values=True, errors='surrogateescape'):
        multi_value_parameters.setdefault(name, []).append(value)

    return {
        'httpMethod': request.method,
        'path': request.url.path,
        'headers': dict(request.headers),
        'queryStringParameters': {name: values[-1] for name, values in multi_value_parameters.items()} or None,
        'multiValueQueryStringParameters': multi_value_parameters or None,
        'pathParameters': path_parameters,
        'requestContext': {
            'domainName': request.url.netloc,
            'httpMethod': request.method,
        },
    }


def to_response(result: LambdaResponse) -> Response:
    """Translate an API Gateway proxy response into an HTTP response.

    Header values go out as the bytes they were decoded from: UTF-8, with
    lone surrogates mapped back to the raw bytes they escape.
    """
    headers = {
        name: value.encode('utf-8', 'surrogateescape').decode('latin-1')
        for name, value in (result.get('headers') or {}).items()
    }
    return Response(
        content=result.get('body') or b'',
        status_code=result['statusCode'],
        headers=headers,
    )


handle_shorten_url = guarantee_500_response(shorten_url.handle)
handle_redirect_url = guarantee_500_response(redirect_url.handle)


def create_app(settings: Settings, dao: ShortURLBaseDAO | None = None, tracer: Tracer | None = None) -> FastAPI:
    """Build the HTTP application

    Args:
        settings (Settings):
            Application settings.
        dao (ShortURLBaseDAO | None):
            Mapping store, built from `settings` when None.
        tracer (Tracer | None):
            Observability hooks, built from `settings` when None.

    Returns:
        FastAPI: configured application
    """
    if dao is None:
        dao = get_short_url_dao(settings)
    if tracer is None:
        tracer = get_tracer(settings.tracing)

    app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION, docs_url=None, redoc_url=None, openapi_url=None)

    @app.api_route('/s', methods=['GET', 'POST', 'OPTIONS'])
    def shorten_url_route(request: Request) -> Response:
        event = to_event(request)
        return to_response(handle_shorten_url(event, settings=settings, dao=dao, tracer=tracer))

    @app.api_route('/{shortcode:shortcode}', methods=['GET', 'OPTIONS'])
    def redirect_url_route(request: Request) -> Response:
        event = to_event(request, path_parameters={'shortcode': request.path_params['shortcode']})
        return to_response(handle_redirect_url(event, dao=dao, tracer=tracer))

    if os.path.isdir(settings.public_dir):
        app.mount('/', StaticFiles(directory=settings.public_dir, html=True), name='public')
    else:
        logger.warning('Public directory not found, static files are disabled.', extra={'publicDir': settings.public_dir})

    return app


def main() -> None:
    initialize_logging()

    try:
        settings = load_settings()
        app = create_app(settings)
    except (ConfigurationError, ValueError):
        logger.exception('Failed to start %s. Exiting.', SERVICE_NAME)
        sys.exit(1)

    logger.info(
        'Starting %s %s.',
        SERVICE_NAME,
        SERVICE_VERSION,
        extra={'port': settings.port, 'storeBackend': str(settings.store_backend), 'domain': settings.domain},
    )
    uvicorn.run(app, host='0.0.0.0', port=settings.port, log_config=None)  # noqa: S104


if __name__ == '__main__':
    main()
