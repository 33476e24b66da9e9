import json
from pathlib import Path

import pytest

import api_helpers
from app import create_app
from config import Settings


@pytest.fixture
def data_dir(tmp_path) -> Path:
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def settings(data_dir, tmp_path) -> Settings:
    return Settings(
        data_dir=str(data_dir),
        purchase_delay=0,
        env="testing",
        log_path=str(tmp_path / "logs" / "petclinic_test.log"),
    )


@pytest.fixture
def flask_app(settings):
    app = create_app(settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(flask_app):
    with api_helpers.wsgi_client(flask_app) as c:
        yield c


@pytest.fixture
def write_collection(data_dir):
    """Seed a collection file directly, bypassing the API."""
    def _write(name, documents):
        (data_dir / name).write_text(json.dumps(documents, indent=2), encoding="utf-8")
    return _write


@pytest.fixture
def read_collection(data_dir):
    def _read(name):
        path = data_dir / name
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))
    return _read
