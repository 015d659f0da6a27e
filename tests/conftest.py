"""Shared test fixtures for demo_app."""

import threading

import pytest

import demo_app
from demo_app import Config


@pytest.fixture
def app():
    return demo_app.create_app(Config(host="127.0.0.1", port=0))


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def live_server(app):
    """Server bound to a real socket on an ephemeral port, stopped after the test."""
    server = demo_app.bind(Config(host="127.0.0.1", port=0), app)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    thread.join(timeout=5)
