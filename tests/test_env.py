from gitbuilder.env import FakeEnv, RealEnv

EXPECTED_ENV = "mmmcoffee"


def test_real_env_get(monkeypatch):
    monkeypatch.setenv("DEIS_BUILDER_REAL_ENV_TEST", EXPECTED_ENV)
    assert RealEnv().get("DEIS_BUILDER_REAL_ENV_TEST") == EXPECTED_ENV


def test_real_env_missing_is_empty(monkeypatch):
    monkeypatch.delenv("DEIS_BUILDER_REAL_ENV_MISSING", raising=False)
    assert RealEnv().get("DEIS_BUILDER_REAL_ENV_MISSING") == ""


def test_fake_env_get():
    env = FakeEnv()
    env.envs["DEIS_BUILDER_FAKE_ENV_TEST"] = EXPECTED_ENV
    assert env.get("DEIS_BUILDER_FAKE_ENV_TEST") == EXPECTED_ENV


def test_fake_env_missing_is_empty():
    assert FakeEnv().get("NOPE") == ""