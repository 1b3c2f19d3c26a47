import os

import pytest

from gitbuilder.conf import get_builder_key, get_storage_params
from gitbuilder.env import FakeEnv


@pytest.fixture
def creds(tmp_path):
    location = tmp_path / "creds"
    location.mkdir()
    (location / "foo").write_text("hello world\n")
    (location / "builder-bucket").write_text("git")
    return location


def test_get_storage_params_reads_files(creds):
    params = get_storage_params(FakeEnv(), str(creds))
    assert params["foo"] == "hello world\n"
    assert params["bucket"] == "git"
    assert params["container"] is None
    assert "regionendpoint" not in params


def test_get_storage_params_skips_directories(creds):
    (creds / "bar").mkdir()
    os.symlink(creds / "bar", creds / "..data")
    params = get_storage_params(FakeEnv(), str(creds))
    assert "bar" not in params
    assert "..data" not in params
    assert params["foo"] == "hello world\n"


def test_get_storage_params_minio(creds):
    env = FakeEnv(
        {
            "BUILDER_STORAGE": "minio",
            "DEIS_MINIO_SERVICE_HOST": "localhost",
            "DEIS_MINIO_SERVICE_PORT": "8088",
        }
    )
    params = get_storage_params(env, str(creds))
    assert params["regionendpoint"] == "http://localhost:8088"
    assert params["secure"] is False
    assert params["region"] == "us-east-1"
    assert params["bucket"] == "git"


def test_get_storage_params_gcs_key_by_path(creds):
    (creds / "key.json").write_text("{}")
    params = get_storage_params(FakeEnv(), str(creds))
    assert params["keyfile"] == os.path.join(str(creds), "key.json")
    assert "key.json" not in params


def test_get_storage_params_missing_location(tmp_path):
    with pytest.raises(FileNotFoundError):
        get_storage_params(FakeEnv(), str(tmp_path / "absent"))


def test_get_builder_key(tmp_path):
    location = tmp_path / "builder-key"
    location.write_text("testbuilderkey")
    assert get_builder_key(str(location)) == "testbuilderkey"


def test_get_builder_key_strips_newlines(tmp_path):
    location = tmp_path / "builder-key"
    location.write_text("\ntestbuilderkey\n\n")
    assert get_builder_key(str(location)) == "testbuilderkey"


def test_get_builder_key_error(tmp_path):
    with pytest.raises(OSError, match="couldn't get builder key"):
        get_builder_key(str(tmp_path / "missing"))