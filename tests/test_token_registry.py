import threading
from datetime import timedelta

from shop_admin.services.token_registry import SessionTokenRegistry


def test_issue_and_validate(registry):
    token = registry.issue("user-1")

    assert len(token) == 64
    int(token, 16)
    assert registry.validate(token) == "user-1"
    assert token in registry


def test_tokens_are_distinct(registry):
    tokens = {registry.issue("user-1") for _ in range(50)}
    assert len(tokens) == 50
    assert len(registry) == 50


def test_unknown_token_is_rejected(registry):
    assert registry.validate("deadbeef") is None


def test_token_valid_until_expiry_instant(registry, clock):
    token = registry.issue("user-1")

    clock.advance(hours=24)
    assert registry.validate(token) == "user-1"


def test_expired_token_is_evicted_on_lookup(registry, clock):
    token = registry.issue("user-1")
    other = registry.issue("user-2")

    clock.advance(hours=24, seconds=1)

    assert registry.validate(token) is None
    assert token not in registry
    # entries nobody asks about stay until restart
    assert other in registry


def test_per_token_ttl(registry, clock):
    short = registry.issue("user-1", ttl=timedelta(minutes=5))
    regular = registry.issue("user-1")

    clock.advance(minutes=6)

    assert registry.validate(short) is None
    assert registry.validate(regular) == "user-1"


def test_revoke(registry):
    token = registry.issue("user-1")
    registry.revoke(token)
    registry.revoke("never-issued")

    assert registry.validate(token) is None
    assert len(registry) == 0


def test_clear(registry):
    registry.issue("user-1")
    registry.issue("user-2")
    registry.clear()
    assert len(registry) == 0


def test_concurrent_issue():
    registry = SessionTokenRegistry()
    issued = []
    lock = threading.Lock()

    def worker():
        for _ in range(100):
            token = registry.issue("user-1")
            with lock:
                issued.append(token)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(issued) == 800
    assert len(set(issued)) == 800
    assert len(registry) == 800
