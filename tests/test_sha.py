import pytest

from gitbuilder.sha import InvalidGitSha, new_sha


@pytest.mark.parametrize("raw", ["abcdefghij", "abc", ""])
def test_sha_too_short(raw):
    with pytest.raises(InvalidGitSha):
        new_sha(raw)


@pytest.mark.parametrize(
    "raw",
    [
        "71a09fbed590558ff822536584fc77248f070384",
        "39d8ef3ea964c98f884a67aecef56b4c8abfc700",
        "1b48115b57304d04c8c2e72d62e0a9d1bcd0d48f",
    ],
)
def test_new_sha(raw):
    sha = new_sha(raw)
    assert sha.full == raw
    assert sha.short == raw[:8]


def test_invalid_sha_message():
    with pytest.raises(InvalidGitSha) as info:
        new_sha("abc123")
    assert str(info.value) == "git sha abc123 was invalid"


def test_trailing_newline_rejected():
    with pytest.raises(InvalidGitSha):
        new_sha("71a09fbed590558ff822536584fc77248f070384\n")


def test_uppercase_rejected():
    with pytest.raises(InvalidGitSha):
        new_sha("71A09FBED590558FF822536584FC77248F070384")