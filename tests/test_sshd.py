import hashlib
import io
import struct

import pytest

from gitbuilder.sshd import (
    MULTIPLE_PUSH,
    RepoNameError,
    clean_exec,
    clean_repo_name,
    fingerprint,
    git_pkt_line,
    ping,
    ssh_connection,
)


def _ssh_string(text: str) -> bytes:
    data = text.encode()
    return struct.pack(">I", len(data)) + data


class RecordingChannel:
    def __init__(self, fail_write=False):
        self.writes = []
        self.requests = []
        self.fail_write = fail_write

    def write(self, data):
        if self.fail_write:
            raise OSError("broken pipe")
        self.writes.append(data)
        return len(data)

    def send_request(self, name, want_reply, payload):
        self.requests.append((name, want_reply, payload))
        return True


def test_fingerprint_of_empty_blob():
    assert fingerprint(b"") == "d4:1d:8c:d9:8f:00:b2:04:e9:80:09:98:ec:f8:42:7e"


def test_fingerprint_shape():
    blob = b"\x00\x00\x00\x07ssh-rsa" + bytes(range(64))
    fp = fingerprint(blob)
    groups = fp.split(":")
    assert len(groups) == 16
    assert all(len(g) == 2 for g in groups)
    assert fp.replace(":", "") == hashlib.md5(blob).hexdigest()


def test_ssh_connection_from_strings():
    assert ssh_connection("10.1.2.3:5000", "10.9.8.7:2223") == "10.1.2.3 5000 10.9.8.7 2223"


def test_ssh_connection_from_tuples_and_ipv6():
    assert ssh_connection(("10.1.2.3", 5000), "[::1]:22") == "10.1.2.3 5000 ::1 22"


def test_ssh_connection_bad_address():
    assert ssh_connection("nonsense", "10.9.8.7:2223") == "  10.9.8.7 2223"


def test_clean_exec_plain_command():
    assert clean_exec(_ssh_string("git-receive-pack 'myapp.git'")) == "git-receive-pack 'myapp.git'"


def test_clean_exec_strips_dollar_and_backtick():
    assert clean_exec(_ssh_string("git-upload-pack `$HOME`")) == "git-upload-pack 'HOME'"


@pytest.mark.parametrize("payload", [b"", b"\x00\x00", b"\x00\x00\x00\x10short"])
def test_clean_exec_malformed(payload):
    assert clean_exec(payload) == ""


def test_clean_repo_name_strips_quotes_suffix_and_slash():
    assert clean_repo_name("'/myapp.git'") == "myapp"


def test_clean_repo_name_removes_one_suffix_only():
    assert clean_repo_name("app.git.git") == "app.git"


def test_clean_repo_name_empty():
    with pytest.raises(RepoNameError, match="empty repo name"):
        clean_repo_name("")


def test_clean_repo_name_parent_dir():
    with pytest.raises(RepoNameError, match="cannot change directory"):
        clean_repo_name("../etc/passwd")


def test_git_pkt_line_protocol_example():
    buf = io.BytesIO()
    git_pkt_line(buf, "a\n")
    assert buf.getvalue() == b"0006a\n"


def test_git_pkt_line_length_prefix_matches():
    buf = io.BytesIO()
    git_pkt_line(buf, f"ERR {MULTIPLE_PUSH}\n")
    out = buf.getvalue()
    assert int(out[:4], 16) == len(out)
    assert out[4:] == f"ERR {MULTIPLE_PUSH}\n".encode()


def test_ping_writes_pong_and_exit_status():
    channel = RecordingChannel()
    ping(channel)
    assert channel.writes == [b"pong"]
    assert channel.requests == [("exit-status", False, b"\x00\x00\x00\x00")]


def test_ping_survives_write_failure():
    channel = RecordingChannel(fail_write=True)
    ping(channel)
    assert channel.writes == []
    assert [r[0] for r in channel.requests] == ["exit-status"]