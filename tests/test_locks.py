import threading
import time

from utils.locks import KeyedLock, user_locks
from webapp.services.auth_service import LoginResult, login


def test_lock_entry_is_dropped_after_release():
    locks = KeyedLock()
    with locks.hold("alice"):
        assert len(locks) == 1
    assert len(locks) == 0


def test_lock_entry_survives_while_someone_waits():
    locks = KeyedLock()
    order = []
    entered = threading.Event()

    def second():
        entered.set()
        with locks.hold("alice"):
            order.append("second")

    with locks.hold("alice"):
        thread = threading.Thread(target=second)
        thread.start()
        entered.wait()
        time.sleep(0.05)
        order.append("first")
    thread.join()

    assert order == ["first", "second"]
    assert len(locks) == 0


def test_lock_released_when_body_raises():
    locks = KeyedLock()
    try:
        with locks.hold("alice"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert len(locks) == 0


def test_logins_for_unknown_users_do_not_grow_lock_map(db):
    before = len(user_locks)
    for n in range(200):
        assert login(f"nobody{n}", "Secret123") is LoginResult.INVALID_CREDENTIALS
    assert len(user_locks) == before
