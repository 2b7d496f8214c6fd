"""
Test Configuration and Fixtures
"""
import io

import pytest
import requests
from PyPDF2 import PdfWriter

from config import TestingConfig
from pdfdrop import create_app


@pytest.fixture(scope='function')
def upload_dir(tmp_path):
    return tmp_path / 'uploads'


@pytest.fixture(scope='function')
def app(monkeypatch, upload_dir):
    """Create application for testing (local-store mode)"""
    monkeypatch.setattr(TestingConfig, 'UPLOAD_DIR', str(upload_dir))
    app = create_app('testing')
    yield app


@pytest.fixture(scope='function')
def proxy_app(app):
    """Same application switched to proxy mode"""
    app.config['UPLOAD_MODE'] = 'proxy'
    return app


@pytest.fixture(scope='function')
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture(scope='session')
def pdf_bytes():
    """A real two page PDF"""
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def make_response(status=200, body=b'', headers=None, reason='OK'):
    """Build a requests.Response without touching the network"""
    r = requests.Response()
    r.status_code = status
    r.reason = reason
    r._content = body
    r.encoding = 'utf-8'
    r.headers.update(headers or {})
    r.url = 'http://pdfdrop.test/api/upload'
    return r


class FlaskSession:
    """requests-like session that sends to a Flask test client"""

    def __init__(self, test_client):
        self.test_client = test_client
        self.calls = []

    def post(self, url, files=None, timeout=None):
        self.calls.append({'url': url, 'files': files, 'timeout': timeout})
        data = {}
        for field, (name, content, content_type) in (files or {}).items():
            data[field] = (io.BytesIO(content), name, content_type)
        resp = self.test_client.post('/api/upload', data=data, content_type='multipart/form-data')
        return make_response(
            status=resp.status_code,
            body=resp.get_data(),
            headers=dict(resp.headers),
            reason=resp.status.split(' ', 1)[1] if ' ' in resp.status else '',
        )


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def flask_session(client):
    return FlaskSession(client)
