from __future__ import annotations

import pytest

from src.qr_attendance.qr_attendance.core.exceptions import IdentityFailure
from src.qr_attendance.qr_attendance.identity.model import Identity
from src.qr_attendance.qr_attendance.identity.service import IdentityBootstrap

from tests.fakes import BrokenStore, InMemoryIdentities


def _bootstrap(repo, *, secret_key="test-secret"):
    uids = iter(["anon-1", "anon-2", "anon-3"])
    return IdentityBootstrap(
        repo,
        installation_id="asistencia-qr-test",
        secret_key=secret_key,
        uid_factory=lambda: next(uids),
    )


def test_first_visit_creates_anonymous_identity():
    repo = InMemoryIdentities()
    identity = _bootstrap(repo).establish()

    assert identity.uid == "anon-1"
    assert "anon-1" in repo.by_uid


def test_live_session_is_resumed():
    repo = InMemoryIdentities()
    boot = _bootstrap(repo)
    first = boot.establish()

    again = boot.establish(session_uid=first.uid)

    assert again.uid == first.uid
    assert len(repo.by_uid) == 1


def test_unknown_session_uid_falls_back_to_new_identity():
    repo = InMemoryIdentities()
    identity = _bootstrap(repo).establish(session_uid="gone")

    assert identity.uid == "anon-1"


def test_token_is_exchanged_for_its_identity():
    repo = InMemoryIdentities()
    boot = _bootstrap(repo)
    token = boot.issue_token(Identity(uid="shared-uid"))

    identity = boot.establish(token=token)

    assert identity.uid == "shared-uid"
    assert "shared-uid" in repo.by_uid


def test_token_signed_with_other_key_is_rejected():
    token = _bootstrap(InMemoryIdentities(), secret_key="other").issue_token(Identity(uid="x"))

    with pytest.raises(IdentityFailure):
        _bootstrap(InMemoryIdentities()).establish(token=token)


def test_storage_failure_fails_closed():
    with pytest.raises(IdentityFailure):
        _bootstrap(BrokenStore()).establish()


def test_tenant_key_prefixes_installation():
    boot = _bootstrap(InMemoryIdentities())
    assert boot.tenant_for(Identity(uid="abc")).key == "asistencia-qr-test/abc"
