import pytest

from gitbuilder.sshd_config import ServerConfig

REQUIRED = {
    "DEIS_CONTROLLER_SERVICE_HOST": "controller.local",
    "DEIS_CONTROLLER_SERVICE_PORT": "8000",
}


def test_defaults_applied():
    cnf = ServerConfig.from_env(REQUIRED)
    assert cnf.controller_host == "controller.local"
    assert cnf.controller_port == "8000"
    assert cnf.ssh_host_ip == "0.0.0.0"
    assert cnf.ssh_host_port == 2223
    assert cnf.health_srv_port == 8092
    assert cnf.storage_type == "minio"
    assert cnf.slug_builder_image_pull_policy == "Always"
    assert cnf.docker_builder_image_pull_policy == "Always"
    assert cnf.lock_timeout == 10


def test_overrides_are_converted():
    environ = dict(REQUIRED, SSH_HOST_PORT="2022", BUILDER_STORAGE="s3", GIT_LOCK_TIMEOUT="3")
    cnf = ServerConfig.from_env(environ)
    assert cnf.ssh_host_port == 2022
    assert cnf.storage_type == "s3"
    assert cnf.lock_timeout == 3


@pytest.mark.parametrize("missing", sorted(REQUIRED))
def test_missing_required_raises(missing):
    environ = {k: v for k, v in REQUIRED.items() if k != missing}
    with pytest.raises(ValueError, match=missing):
        ServerConfig.from_env(environ)


def test_invalid_int_raises():
    with pytest.raises(ValueError, match="SSH_HOST_PORT"):
        ServerConfig.from_env(dict(REQUIRED, SSH_HOST_PORT="not-a-port"))


def test_durations():
    cnf = ServerConfig.from_env(REQUIRED)
    assert cnf.cleaner_poll_sleep_duration() == 5
    assert cnf.git_lock_timeout() == 600


def test_from_env_reads_process_environment(monkeypatch):
    for key, value in REQUIRED.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("HEALTH_SERVER_PORT", "9000")
    cnf = ServerConfig.from_env()
    assert cnf.health_srv_port == 9000