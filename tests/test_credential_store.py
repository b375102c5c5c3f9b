import pytest

from shop_admin.models.user_account import UserRole
from shop_admin.utils.exceptions import DuplicateEmailError


def test_insert_hashes_password(store):
    user = store.insert(email="linh@rareperfume.vn", password="hunter22", name="Linh")

    assert user.id
    assert user.role == UserRole.USER.value
    assert user.password_hash != "hunter22"
    assert user.password_hash.startswith("$2")
    assert store.find_by_email("linh@rareperfume.vn").id == user.id
    assert store.find_by_id(user.id).email == "linh@rareperfume.vn"


def test_find_missing_user(store):
    assert store.find_by_email("nobody@rareperfume.vn") is None
    assert store.find_by_id("missing") is None


def test_duplicate_email_rejected_by_unique_index(store):
    store.insert(email="linh@rareperfume.vn", password="hunter22", name="Linh")

    with pytest.raises(DuplicateEmailError) as exc_info:
        store.insert(email="linh@rareperfume.vn", password="other", name="Linh 2")

    assert exc_info.value.status_code == 409
    assert exc_info.value.message == "User already exists"


def test_verify_credential(store):
    user = store.insert(email="linh@rareperfume.vn", password="hunter22", name="Linh")

    assert store.verify_credential("linh@rareperfume.vn", "hunter22").id == user.id
    assert store.verify_credential("linh@rareperfume.vn", "wrong") is None
    assert store.verify_credential("ghost@rareperfume.vn", "hunter22") is None


def test_long_password(store):
    password = "p" * 100
    store.insert(email="long@rareperfume.vn", password=password, name="Long")

    assert store.verify_credential("long@rareperfume.vn", password) is not None
