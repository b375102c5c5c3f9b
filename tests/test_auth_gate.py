import pytest

from shop_admin.services.auth_gate import AuthenticationGate, extract_bearer_token
from shop_admin.services.auth_service import AuthService
from shop_admin.services.token_registry import SessionTokenRegistry
from shop_admin.utils.exceptions import DuplicateEmailError, UnauthenticatedError


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, None),
        ("", None),
        ("Basic abc", None),
        ("Bearer ", None),
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("BEARER abc ", "abc"),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


@pytest.fixture
def gate(registry, store):
    return AuthenticationGate(registry, store)


@pytest.fixture
def user(store):
    return store.insert(email="linh@rareperfume.vn", password="hunter22", name="Linh")


def test_authenticate_resolves_user(gate, registry, user):
    token = registry.issue(user.id)
    assert gate.authenticate(f"Bearer {token}").id == user.id


def test_missing_token(gate):
    with pytest.raises(UnauthenticatedError, match="No token provided"):
        gate.authenticate(None)
    with pytest.raises(UnauthenticatedError, match="No token provided"):
        gate.authenticate("Token abc")


def test_unknown_token(gate):
    with pytest.raises(UnauthenticatedError, match="Token expired or invalid"):
        gate.authenticate("Bearer not-a-token")


def test_expired_token_is_rejected_and_evicted(gate, registry, clock, user):
    token = registry.issue(user.id)
    clock.advance(hours=25)

    with pytest.raises(UnauthenticatedError, match="Token expired or invalid"):
        gate.authenticate(f"Bearer {token}")
    assert token not in registry


def test_token_for_deleted_user(gate, registry):
    token = registry.issue("no-such-user")

    with pytest.raises(UnauthenticatedError, match="User not found"):
        gate.authenticate(f"Bearer {token}")


def test_register_then_login(auth_service):
    user, token = auth_service.register_user(email="an@rareperfume.vn", password="pw123456", name="An")

    assert auth_service.authenticate(f"Bearer {token}").id == user.id

    logged_in, second = auth_service.login(email="an@rareperfume.vn", password="pw123456")
    assert logged_in.id == user.id
    assert second != token


def test_register_duplicate(auth_service):
    auth_service.register_user(email="an@rareperfume.vn", password="pw123456", name="An")

    with pytest.raises(DuplicateEmailError):
        auth_service.register_user(email="an@rareperfume.vn", password="other", name="An")


def test_login_failures_are_indistinguishable(auth_service):
    auth_service.register_user(email="an@rareperfume.vn", password="pw123456", name="An")

    with pytest.raises(UnauthenticatedError) as wrong_password:
        auth_service.login(email="an@rareperfume.vn", password="nope")
    with pytest.raises(UnauthenticatedError) as unknown_email:
        auth_service.login(email="ghost@rareperfume.vn", password="pw123456")

    assert wrong_password.value.message == unknown_email.value.message == "Invalid email or password"


def test_refresh_keeps_old_token(auth_service):
    user, token = auth_service.register_user(email="an@rareperfume.vn", password="pw123456", name="An")

    fresh = auth_service.refresh(user)

    assert fresh != token
    assert auth_service.authenticate(f"Bearer {token}").id == user.id
    assert auth_service.authenticate(f"Bearer {fresh}").id == user.id


def test_logout_revokes_presented_token(auth_service):
    user, token = auth_service.register_user(email="an@rareperfume.vn", password="pw123456", name="An")
    other = auth_service.refresh(user)

    auth_service.logout(f"Bearer {token}")

    with pytest.raises(UnauthenticatedError):
        auth_service.authenticate(f"Bearer {token}")
    assert auth_service.authenticate(f"Bearer {other}").id == user.id


def test_ensure_default_admin_is_idempotent(auth_service, store):
    auth_service.ensure_default_admin("root@rareperfume.vn", "admin123")
    auth_service.ensure_default_admin("root@rareperfume.vn", "admin123")

    admin = store.find_by_email("root@rareperfume.vn")
    assert admin.role == "admin"
    assert store.verify_credential("root@rareperfume.vn", "admin123") is not None


def test_injected_components_are_kept(store):
    registry = SessionTokenRegistry()
    service = AuthService(store=store, registry=registry)

    # an empty registry is falsy through __len__
    assert len(registry) == 0
    assert service.registry is registry
    assert service.store is store

    _, token = service.register_user(email="an@rareperfume.vn", password="pw123456", name="An")
    assert token in registry
