from pathlib import Path

import flask

flask.cli.load_dotenv()

import pytest

from hlsplaylist.app import app

DATA_DIR = Path(__file__).parent / "data"


def _read(name):
    return (DATA_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def master_text():
    return _read("playlist.m3u8")


@pytest.fixture
def media_text():
    return _read("media_list.m3u8")


@pytest.fixture
def ad_media_text():
    return _read("twitch_ad_media_list.m3u8")


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def client():
    app.testing = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def runner():
    return app.test_cli_runner()


@pytest.fixture
def m3u8(tmp_path):
    return tmp_path / "playlist.m3u8"
