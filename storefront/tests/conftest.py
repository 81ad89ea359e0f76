import pytest

from storefront import app as flask_app


@pytest.fixture(autouse=True)
def configure_test_env(tmp_path, monkeypatch):
    flask_app.app.config.update(TESTING=True)
    data_dir = tmp_path / "data"
    monkeypatch.setattr(flask_app, "DATA_DIR", data_dir)
    monkeypatch.setattr(flask_app, "_CLIENT_STATE", None)
    talisman = flask_app.app.extensions.get("talisman")
    if talisman:
        talisman.force_https = False
    yield data_dir


@pytest.fixture
def client():
    return flask_app.app.test_client()
