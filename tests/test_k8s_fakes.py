import pytest

from gitbuilder.k8s_fakes import FakeSecret, FakeSecretsNamespacer


def test_get_delegates_to_function():
    seen = []
    stored = {"data": {"test": b"test"}}
    fake = FakeSecret(fn_get=lambda name: seen.append(name) or stored)
    assert fake.get("test-secret") is stored
    assert seen == ["test-secret"]


def test_get_error_propagates():
    def fail(name):
        raise LookupError(name)

    with pytest.raises(LookupError, match="test-secret"):
        FakeSecret(fn_get=fail).get("test-secret")


def test_create_and_update_delegate():
    created, updated = [], []
    fake = FakeSecret(
        fn_create=lambda s: created.append(s) or s,
        fn_update=lambda s: updated.append(s) or s,
    )
    manifest = {"metadata": {"name": "test"}}
    assert fake.create(manifest) is manifest
    assert fake.update(manifest) is manifest
    assert created == [manifest]
    assert updated == [manifest]


def test_unconfigured_function_raises():
    with pytest.raises(RuntimeError, match="no create function configured"):
        FakeSecret().create({})


def test_delete_records_name_and_list_is_empty():
    calls = []
    fake = FakeSecret(fn_get=lambda name: calls.append(name))
    assert fake.delete("test") is None
    assert fake.deleted == ["test"]
    assert fake.list() == []
    assert calls == []


def test_namespacer_passes_namespace():
    deis_client = FakeSecret()
    other_client = FakeSecret()
    namespacer = FakeSecretsNamespacer(
        fn=lambda ns: deis_client if ns == "deis" else other_client
    )
    assert namespacer.secrets("deis") is deis_client
    assert namespacer.secrets("myapp") is other_client