import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser, Group
from django.test import RequestFactory

from hr_core.revisions.context import RevisionContext, capture_revision_context
from hr_core.revisions.models import OperationKind


def test_none_resolves_to_defaults():
    ctx = capture_revision_context(None)
    assert ctx == RevisionContext(actor_id="anonymous", actor_role="USER", origin_address="unknown")


def test_defaults_come_from_settings(settings):
    settings.HR_CORE = {**settings.HR_CORE, "REVISION_DEFAULT_ACTOR": "batch", "REVISION_DEFAULT_ROLE": "SYSTEM"}
    ctx = capture_revision_context({})
    assert ctx.actor_id == "batch"
    assert ctx.actor_role == "SYSTEM"


def test_mapping_fields_and_aliases():
    ctx = capture_revision_context({"actor": "jdoe", "role": "HR", "remote_addr": "10.1.1.1"})
    assert ctx == RevisionContext(actor_id="jdoe", actor_role="HR", origin_address="10.1.1.1")


def test_partial_mapping_fills_defaults():
    ctx = capture_revision_context({"actor_id": "  jdoe  ", "actor_role": ""})
    assert ctx.actor_id == "jdoe"
    assert ctx.actor_role == "USER"
    assert ctx.origin_address == "unknown"


def test_unreadable_context_never_raises():
    class Broken:
        @property
        def META(self):
            raise RuntimeError("boom")

        @property
        def headers(self):
            raise RuntimeError("boom")

    assert capture_revision_context(Broken()) == capture_revision_context(None)
    assert capture_revision_context(42) == capture_revision_context(None)


def test_context_instance_passes_through():
    ctx = RevisionContext(actor_id="a", actor_role="b", origin_address="c")
    assert capture_revision_context(ctx) is ctx


def test_anonymous_request_uses_headers(settings):
    settings.HR_CORE = {**settings.HR_CORE, "TRUST_X_FORWARDED_FOR": True}
    request = RequestFactory().get(
        "/",
        HTTP_X_ACTOR_ID="svc-payroll",
        HTTP_X_ACTOR_ROLE="SERVICE",
        HTTP_X_FORWARDED_FOR="203.0.113.9, 10.0.0.2",
    )
    request.user = AnonymousUser()

    ctx = capture_revision_context(request)
    assert ctx == RevisionContext(actor_id="svc-payroll", actor_role="SERVICE", origin_address="203.0.113.9")


def test_request_without_headers_uses_remote_addr():
    request = RequestFactory().get("/", REMOTE_ADDR="198.51.100.4")

    ctx = capture_revision_context(request)
    assert ctx.actor_id == "anonymous"
    assert ctx.origin_address == "198.51.100.4"


@pytest.mark.django_db
def test_authenticated_user_wins_over_actor_header():
    user = get_user_model().objects.create_user(username="manager1", password="x")
    user.groups.add(Group.objects.create(name="MANAGER"))

    request = RequestFactory().get("/", HTTP_X_ACTOR_ID="spoofed")
    request.user = user

    ctx = capture_revision_context(request)
    assert ctx.actor_id == "manager1"
    assert ctx.actor_role == "MANAGER"


@pytest.mark.django_db
def test_authenticated_user_cannot_claim_another_role():
    user = get_user_model().objects.create_user(username="hr1", password="x")
    user.groups.add(Group.objects.create(name="HR"))

    request = RequestFactory().get("/", HTTP_X_ACTOR_ROLE="ADMIN", REMOTE_ADDR="1.2.3.4")
    request.user = user

    ctx = capture_revision_context(request)
    assert ctx == RevisionContext(actor_id="hr1", actor_role="HR", origin_address="1.2.3.4")


@pytest.mark.django_db
def test_authenticated_user_without_role_gets_default_not_header():
    user = get_user_model().objects.create_user(username="plain", password="x")

    request = RequestFactory().get("/", HTTP_X_ACTOR_ROLE="ADMIN")
    request.user = user

    assert capture_revision_context(request).actor_role == "USER"


def test_forwarded_for_is_ignored_unless_trusted(settings):
    settings.HR_CORE = {**settings.HR_CORE, "TRUST_X_FORWARDED_FOR": False}
    request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR="203.0.113.9", REMOTE_ADDR="198.51.100.4")

    assert capture_revision_context(request).origin_address == "198.51.100.4"


def test_metadata_carries_operation_and_timestamp():
    meta = RevisionContext.system().metadata(OperationKind.DELETE)
    assert meta.actor_id == "system"
    assert meta.actor_role == "SYSTEM"
    assert meta.operation == "DELETE"
    assert meta.committed_at is not None
