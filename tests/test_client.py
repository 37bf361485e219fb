import pytest

from client.api_client import ApiError, StudyPlanClient
from client.session import AuthSession


@pytest.fixture
def make_client(client):
    def factory() -> StudyPlanClient:
        return StudyPlanClient(client, AuthSession())
    return factory


def test_register_loads_session(make_client):
    api = make_client()

    user = api.register("Alice", "a@x.com", "secret123", "MIT")

    assert api.session.is_authenticated
    assert api.session.user_id == user["id"]
    assert api.plans == []


def test_mutations_refetch_cache(make_client):
    alice, bob = make_client(), make_client()
    alice.register("Alice", "a@x.com", "secret123")
    bob.register("Bob", "b@x.com", "secret123")

    plan = alice.create_plan("Finals", "2026-11-01", "2026-12-01")
    assert [p["id"] for p in alice.plans] == [plan["id"]]

    plan = alice.invite(plan["id"], "b@x.com")
    bob.refresh()
    assert [p["id"] for p in bob.pending_invitations] == [plan["id"]]

    bob.respond_to_invitation(plan["id"], plan["invitations"][0]["id"], "accepted")
    assert bob.pending_invitations == []
    assert [p["id"] for p in bob.plans] == [plan["id"]]

    plan = alice.create_task(plan["id"], "Read notes", "2026-11-05", priority="low")
    task_id = plan["tasks"][0]["id"]
    alice.assign_task(plan["id"], task_id, bob.session.user_id)
    assert alice.plans[0]["tasks"][0]["assignedTo"] == bob.session.user_id

    bob.update_task(plan["id"], task_id, status="completed")
    assert bob.plans[0]["tasks"][0]["status"] == "completed"
    assert [m["name"] for m in bob.list_members(plan["id"])] == ["Alice", "Bob"]


def test_errors_raise_api_error(make_client):
    api = make_client()
    api.register("Alice", "a@x.com", "secret123")
    plan = api.create_plan("Finals", "2026-11-01", "2026-12-01")
    api.invite(plan["id"], "b@x.com")

    with pytest.raises(ApiError) as exc_info:
        api.invite(plan["id"], "b@x.com")

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "User already invited"


def test_logout_clears_session_and_cache(make_client):
    api = make_client()
    api.register("Alice", "a@x.com", "secret123")
    api.create_plan("Finals", "2026-11-01", "2026-12-01")

    api.logout()

    assert not api.session.is_authenticated
    assert api.session.user is None
    assert api.plans == []
    with pytest.raises(ApiError) as exc_info:
        api.refresh()
    assert exc_info.value.status_code == 401


def test_login_and_restore(make_client):
    first = make_client()
    first.register("Alice", "a@x.com", "secret123")
    token = first.session.token

    second = make_client()
    assert second.restore(token)
    assert second.session.user["email"] == "a@x.com"

    third = make_client()
    assert not third.restore("garbage")
    assert not third.session.is_authenticated

    fourth = make_client()
    with pytest.raises(ApiError):
        fourth.login("a@x.com", "wrong-password")
    assert fourth.login("a@x.com", "secret123")["email"] == "a@x.com"


def test_session_loaded_with_token_only():
    session = AuthSession()
    session.load("token", None)

    assert session.is_authenticated
    assert session.user_id is None
    assert session.auth_headers() == {"Authorization": "Bearer token"}
