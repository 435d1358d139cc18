"""Unit tests for the HTTP server in server.py.

Test coverage includes:

1. Shorten route (/s)
2. Redirect route (/{shortcode})
3. Static files for every other path
4. main() startup behavior
"""

from io import BytesIO
from dataclasses import replace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from urlywurly import server
from urlywurly.dao.base import ShortURLBaseDAO
from urlywurly.dao.s3 import ShortURLS3DAO
from urlywurly.exceptions import MissingEnvironmentVariableError
from urlywurly.utils.shortener import generate_shortcode


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def public_dir(tmp_path):
    (tmp_path / 'index.html').write_text('<h1>urly-wurly</h1>')
    (tmp_path / 'style.css').write_text('h1 { color: red; }')
    return tmp_path


@pytest.fixture
def client(settings, memory_dao, public_dir):
    app = server.create_app(replace(settings, public_dir=str(public_dir)), dao=memory_dao)
    return TestClient(app, follow_redirects=False)


# -------------------------------
# 1. Shorten route
# -------------------------------


def test_shorten_then_redirect(client):
    response = client.get('/s', params={'url': 'https://example.com/page'})
    shortcode = generate_shortcode('https://example.com/page')

    assert response.status_code == 200
    assert response.headers['access-control-allow-origin'] == '*'
    assert response.json() == {'shortened_url': f'https://urly.test/{shortcode}', 'message': 'url shortened!'}

    redirect = client.get(f'/{shortcode}')

    assert redirect.status_code == 301
    assert redirect.headers['location'] == 'https://example.com/page'


def test_shorten_double_encoded_url(client, memory_dao):
    response = client.get('/s?url=https%253A%252F%252Fexample.com%252Fpage')

    assert response.status_code == 200
    assert memory_dao.links == {generate_shortcode('https://example.com/page'): 'https://example.com/page'}


def test_shorten_with_post_and_custom_name(client):
    response = client.post('/s', params={'url': 'https://a.example', 'customname': 'my-link1'})

    assert response.status_code == 200
    assert response.json()['shortened_url'] == 'https://urly.test/my-link1'
    assert client.get('/my-link1').headers['location'] == 'https://a.example'


def test_shorten_first_value_wins(client, memory_dao):
    client.get('/s?url=https%3A%2F%2Fa.example&url=https%3A%2F%2Fb.example')

    assert list(memory_dao.links.values()) == ['https://a.example']


def test_shorten_custom_name_taken(client):
    client.get('/s', params={'url': 'https://a.example', 'customname': 'my-link1'})

    response = client.get('/s', params={'url': 'https://b.example', 'customname': 'my-link1'})

    assert response.status_code == 400
    assert response.json() == {'message': 'Custom name already registered to another URL!'}
    assert client.get('/my-link1').headers['location'] == 'https://a.example'


def test_shorten_empty_custom_name(client):
    response = client.get('/s?url=https%3A%2F%2Fa.example&customname=')

    assert response.status_code == 400
    assert response.json() == {'message': 'custom name should be at least 6 alphanumeric characters incl. underscores and dashes!'}


def test_shorten_rejects_other_schemes(client, memory_dao):
    response = client.get('/s', params={'url': 'ftp://example.com/file'})

    assert response.status_code == 400
    assert response.json() == {'message': 'provided input is not a HTTP/HTTPS URL!'}
    assert memory_dao.links == {}


def test_shorten_preflight(client):
    response = client.options('/s')

    assert response.status_code == 200
    assert response.headers['access-control-allow-methods'] == 'GET,POST,OPTIONS'
    assert response.content == b''


# -------------------------------
# 2. Redirect route
# -------------------------------


def test_redirect_unknown_shortcode(client):
    response = client.get('/nope12')

    assert response.status_code == 400
    assert response.json() == {'message': 'unable to find URL!'}


def test_redirect_preflight(client):
    response = client.options('/my-link1')

    assert response.status_code == 200
    assert response.headers['access-control-allow-methods'] == 'GET,OPTIONS'


def test_redirect_non_ascii_location(client):
    client.get('/s', params={'url': 'https://example.com/%E2%9C%93', 'customname': 'check1'})

    response = client.get('/check1')

    assert response.status_code == 301
    assert response.headers['location'] == 'https://example.com/✓'


def test_shorten_and_redirect_keep_raw_bytes(client, memory_dao):
    response = client.get('/s?url=https%3A%2F%2Fa.example%2F%25ff')
    shortcode = generate_shortcode('https://a.example/\udcff')

    assert response.status_code == 200
    assert memory_dao.links == {shortcode: 'https://a.example/\udcff'}

    redirect = client.get(f'/{shortcode}')

    assert redirect.status_code == 301
    assert (b'location', b'https://a.example/\xff') in redirect.headers.raw


def test_redirect_from_s3_object_with_invalid_utf8(settings, public_dir):
    s3_client = MagicMock()
    s3_client.get_object.return_value = {'Body': BytesIO(b'https://a.example/\xff')}
    dao = ShortURLS3DAO(bucket='urly-test-links', s3_client=s3_client)
    client = TestClient(server.create_app(replace(settings, public_dir=str(public_dir)), dao=dao), follow_redirects=False)

    response = client.get('/abcdef')

    assert response.status_code == 301
    assert (b'location', b'https://a.example/\xff') in response.headers.raw


@pytest.mark.parametrize('path', ['/abcdef', '/s?url=https%3A%2F%2Fa.example&customname=abcdef'])
def test_unexpected_error_responds_with_500(monkeypatch, settings, public_dir, path):
    monkeypatch.setattr('urlywurly.utils.helpers.running_locally', lambda: False)
    dao = MagicMock(spec=ShortURLBaseDAO)
    dao.read.side_effect = RuntimeError('boom')
    client = TestClient(server.create_app(replace(settings, public_dir=str(public_dir)), dao=dao), follow_redirects=False)

    response = client.get(path)

    assert response.status_code == 500
    assert response.headers['access-control-allow-origin'] == '*'
    assert response.json() == {'message': 'Internal Server Error', 'error_code': 'UNKNOWN_INTERNAL_SERVER_ERROR'}


# -------------------------------
# 3. Static files
# -------------------------------


@pytest.mark.parametrize('path, content', [('/', '<h1>urly-wurly</h1>'), ('/style.css', 'h1 { color: red; }')])
def test_static_files(client, path, content):
    response = client.get(path)

    assert response.status_code == 200
    assert response.text == content


def test_static_file_not_found(client):
    assert client.get('/missing.js').status_code == 404


def test_without_public_dir(settings, memory_dao, tmp_path):
    app = server.create_app(replace(settings, public_dir=str(tmp_path / 'missing')), dao=memory_dao)
    client = TestClient(app, follow_redirects=False)

    assert client.get('/s', params={'url': 'https://a.example'}).status_code == 200
    assert client.get('/').status_code == 404


# -------------------------------
# 4. main()
# -------------------------------


def test_main_runs_uvicorn(monkeypatch, settings):
    calls = []
    monkeypatch.setattr(server, 'initialize_logging', lambda: None)
    monkeypatch.setattr(server, 'load_settings', lambda: replace(settings, port=9090))
    monkeypatch.setattr(server.uvicorn, 'run', lambda app, **kwargs: calls.append(kwargs))

    server.main()

    assert calls == [{'host': '0.0.0.0', 'port': 9090, 'log_config': None}]


def test_main_exits_on_configuration_error(monkeypatch):
    def load_settings():
        raise MissingEnvironmentVariableError("Missing required environment variables: 'DOMAIN'")

    monkeypatch.setattr(server, 'initialize_logging', lambda: None)
    monkeypatch.setattr(server, 'load_settings', load_settings)

    with pytest.raises(SystemExit) as exc_info:
        server.main()

    assert exc_info.value.code == 1
