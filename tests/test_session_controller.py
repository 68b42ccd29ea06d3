"""Tests for the session controller."""

import asyncio

import httpx

from diet_web.domain.users import LoginCredentials, RegistrationForm
from diet_web.services.notifications import Notification, NotificationLevel
from diet_web.services.session import (
    LOGGED_OUT,
    PASSWORD_MISMATCH,
    PROFILE_REMINDER,
)
from tests.conftest import FakeApiClient, Visitor, http_error, user_payload


def test_initialize_without_token_skips_profile(
    visitor: Visitor, api_client: FakeApiClient
) -> None:
    session = visitor.services.session
    assert session.loading is True

    asyncio.run(session.initialize())

    assert session.loading is False
    assert session.user is None
    assert api_client.calls == []


def test_initialize_restores_user(visitor: Visitor, api_client: FakeApiClient) -> None:
    visitor.token_store.set("t1")
    api_client.respond("GET", "/auth/profile", {"user": user_payload()})
    session = visitor.services.session

    asyncio.run(session.initialize())
    asyncio.run(session.initialize())

    assert session.is_authenticated
    assert session.display_name == "Ann"
    assert api_client.paths() == ["/auth/profile"]
    assert api_client.tokens_seen == ["t1"]


def test_initialize_with_rejected_token_clears_it(
    visitor: Visitor, api_client: FakeApiClient
) -> None:
    visitor.token_store.set("stale")
    api_client.respond(
        "GET", "/auth/profile", http_error(401, {"error": "Token has expired"})
    )
    session = visitor.services.session

    asyncio.run(session.initialize())

    assert session.user is None
    assert session.loading is False
    assert visitor.token_store.get() is None
    assert visitor.navigator.location == "/login"


def test_initialize_survives_network_error(
    visitor: Visitor, api_client: FakeApiClient
) -> None:
    visitor.token_store.set("t1")
    api_client.respond("GET", "/auth/profile", httpx.ConnectError("refused"))
    session = visitor.services.session

    asyncio.run(session.initialize())

    assert session.user is None
    assert session.loading is False
    assert visitor.token_store.get() is None


def test_login_stores_token_and_welcomes(
    visitor: Visitor, api_client: FakeApiClient
) -> None:
    api_client.respond(
        "POST",
        "/auth/login",
        {"message": "Login successful", "token": "t1", "user": user_payload()},
    )
    session = visitor.services.session

    ok = asyncio.run(
        session.login(LoginCredentials(email="ann@example.com", password="pw"))
    )

    assert ok is True
    assert visitor.token_store.get() == "t1"
    assert session.user is not None
    assert session.user.name == "Ann"
    assert visitor.notifier.drain() == [
        Notification(NotificationLevel.SUCCESS, "Welcome, Ann!")
    ]
    assert api_client.calls[0][2] == {"email": "ann@example.com", "password": "pw"}


def test_login_with_incomplete_profile_reminds(
    visitor: Visitor, api_client: FakeApiClient
) -> None:
    api_client.respond(
        "POST",
        "/auth/login",
        {"token": "t1", "user": user_payload(tinggi_badan=None)},
    )

    asyncio.run(
        visitor.services.session.login(
            LoginCredentials(email="ann@example.com", password="pw")
        )
    )

    levels = [item.level for item in visitor.notifier.drain()]
    assert levels == [NotificationLevel.SUCCESS, NotificationLevel.INFO]
    assert visitor.services.session.has_completed_profile is False


def test_login_failure_reports_server_message(
    visitor: Visitor, api_client: FakeApiClient
) -> None:
    api_client.respond(
        "POST", "/auth/login", http_error(400, {"error": "Invalid email or password"})
    )
    session = visitor.services.session

    ok = asyncio.run(session.login(LoginCredentials(email="a@b.c", password="x")))

    assert ok is False
    assert session.user is None
    assert visitor.token_store.get() is None
    assert visitor.notifier.drain() == [
        Notification(NotificationLevel.ERROR, "Invalid email or password")
    ]


def test_register_rejects_mismatched_passwords(
    visitor: Visitor, api_client: FakeApiClient
) -> None:
    form = RegistrationForm(
        email="ann@example.com", password="secret1", confirm_password="secret2"
    )

    ok = asyncio.run(visitor.services.session.register(form))

    assert ok is False
    assert api_client.calls == []
    assert visitor.notifier.drain() == [
        Notification(NotificationLevel.ERROR, PASSWORD_MISMATCH)
    ]


def test_register_logs_in(visitor: Visitor, api_client: FakeApiClient) -> None:
    api_client.respond(
        "POST",
        "/auth/register",
        {"token": "t2", "user": user_payload(nama="Budi", umur=None)},
    )
    form = RegistrationForm(
        email="budi@example.com",
        password="secret1",
        confirm_password="secret1",
        name="Budi",
    )

    ok = asyncio.run(visitor.services.session.register(form))

    assert ok is True
    assert visitor.token_store.get() == "t2"
    body = api_client.calls[0][2]
    assert body is not None
    assert body["nama"] == "Budi"
    assert "confirm_password" not in body
    assert visitor.notifier.drain() == [
        Notification(
            NotificationLevel.SUCCESS, "Registration successful! Welcome, Budi!"
        ),
        Notification(NotificationLevel.INFO, PROFILE_REMINDER),
    ]


def test_logout_clears_session_and_goes_home(
    visitor: Visitor, api_client: FakeApiClient
) -> None:
    visitor.token_store.set("t1")
    api_client.respond("GET", "/auth/profile", {"user": user_payload()})
    session = visitor.services.session
    asyncio.run(session.initialize())

    session.logout()

    assert session.user is None
    assert visitor.token_store.get() is None
    assert visitor.navigator.location == "/"
    assert visitor.notifier.drain() == [
        Notification(NotificationLevel.SUCCESS, LOGGED_OUT)
    ]


def test_refresh_failure_logs_out(visitor: Visitor, api_client: FakeApiClient) -> None:
    visitor.token_store.set("t1")
    api_client.respond("GET", "/auth/profile", {"user": user_payload()})
    session = visitor.services.session
    asyncio.run(session.initialize())
    api_client.respond("GET", "/auth/profile", http_error(500))

    asyncio.run(session.refresh_user())

    assert session.user is None
    assert visitor.token_store.get() is None
    assert visitor.navigator.location == "/"


def test_unauthorized_refresh_keeps_login_navigation(
    visitor: Visitor, api_client: FakeApiClient
) -> None:
    visitor.token_store.set("t1")
    api_client.respond_in_turn(
        "GET", "/auth/profile", {"user": user_payload()}, http_error(401)
    )
    session = visitor.services.session
    asyncio.run(session.initialize())

    asyncio.run(session.refresh_user())

    assert session.user is None
    assert visitor.token_store.get() is None
    assert visitor.navigator.history == ["/login"]


def test_protect_route_waits_for_initialize(visitor: Visitor) -> None:
    session = visitor.services.session

    assert session.protect_route("/profile") is None
    assert visitor.navigator.history == []


def test_protect_route_redirects_anonymous_visitor(visitor: Visitor) -> None:
    session = visitor.services.session
    asyncio.run(session.initialize())

    decision = session.protect_route("/profile")

    assert decision is not None
    assert visitor.navigator.location == "/login?redirect=%2Fprofile"
    assert visitor.notifier.drain() == []


def test_protect_route_denies_non_admin(
    visitor: Visitor, api_client: FakeApiClient
) -> None:
    visitor.token_store.set("t1")
    api_client.respond("GET", "/auth/profile", {"user": user_payload()})
    session = visitor.services.session
    asyncio.run(session.initialize())

    session.protect_route("/admin")

    assert visitor.navigator.location == "/"
    assert visitor.notifier.drain()[0].level is NotificationLevel.ERROR


def test_admin_permissions(visitor: Visitor, api_client: FakeApiClient) -> None:
    visitor.token_store.set("t1")
    api_client.respond("GET", "/auth/profile", {"user": user_payload(role="admin")})
    session = visitor.services.session
    asyncio.run(session.initialize())

    assert session.is_admin
    assert session.protect_route("/admin") is None
    assert session.can_access("editor")
    assert session.can_modify(99)


def test_user_permissions(visitor: Visitor, api_client: FakeApiClient) -> None:
    session = visitor.services.session
    assert session.can_access() is False
    assert session.can_modify(1) is False

    visitor.token_store.set("t1")
    api_client.respond("GET", "/auth/profile", {"user": user_payload(user_id=5)})
    asyncio.run(session.initialize())

    assert session.can_access()
    assert session.can_access("user")
    assert not session.can_access("editor")
    assert session.can_modify(5)
    assert not session.can_modify(6)
    assert not session.can_modify(None)


def test_display_name_falls_back(visitor: Visitor, api_client: FakeApiClient) -> None:
    session = visitor.services.session
    assert session.display_name == "User"

    visitor.token_store.set("t1")
    api_client.respond("GET", "/auth/profile", {"user": user_payload(nama="")})
    asyncio.run(session.initialize())

    assert session.display_name == "User"
