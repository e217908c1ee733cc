"""
OTP Store - Unit Golden Tests
"""
import threading

import pytest

from microservices.auth_service.models import SignupVerifyRequest, VerifyCodeRequest
from microservices.auth_service.otp_store import InMemoryOTPStore

pytestmark = [pytest.mark.unit, pytest.mark.golden]


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store(clock):
    return InMemoryOTPStore(ttl_seconds=300, clock=clock)


class TestInMemoryOTPStore:

    def test_get_missing(self, store):
        assert store.get("signup:9876543210") is None

    def test_live_until_ttl(self, store, clock):
        store.set("signup:9876543210", "123456")
        clock.now = 299.999

        assert store.get("signup:9876543210") == "123456"

    def test_expired_at_ttl(self, store, clock):
        store.set("signup:9876543210", "123456")
        clock.now = 300

        assert store.get("signup:9876543210") is None
        assert len(store) == 0

    def test_set_replaces_and_resets_expiry(self, store, clock):
        store.set("login:9876543210", "111111")
        clock.now = 200
        store.set("login:9876543210", "222222")
        clock.now = 400

        assert store.get("login:9876543210") == "222222"

    def test_delete_is_idempotent(self, store):
        store.set("login:9876543210", "111111")
        store.delete("login:9876543210")
        store.delete("login:9876543210")

        assert store.get("login:9876543210") is None

    def test_keys_are_independent(self, store):
        store.set("signup:9876543210", "111111")
        store.set("login:9876543210", "222222")

        assert store.get("signup:9876543210") == "111111"
        assert store.get("login:9876543210") == "222222"

    def test_concurrent_writers(self):
        store = InMemoryOTPStore()

        def write(n):
            for i in range(100):
                store.set(f"signup:{n:05d}{i:05d}", "123456")

        threads = [threading.Thread(target=write, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 800


class TestVerifyRequestModels:

    def test_numeric_code_coerced_to_string(self):
        assert VerifyCodeRequest(phone="9876543210", code=123456).code == "123456"

    def test_phone_and_code_stripped(self):
        request = SignupVerifyRequest(phone=" 9876543210 ", code=" 012345 ")

        assert request.phone == "9876543210"
        assert request.code == "012345"
        assert request.full_name is None


class TestUserModel:

    def test_validates_from_attribute_objects(self):
        from types import SimpleNamespace
        from microservices.auth_service.models import User, UserRole

        record = SimpleNamespace(user_id="usr_1", phone="9876543210", role="admin", is_blocked=True)

        user = User.model_validate(record)

        assert user.role == UserRole.ADMIN
        assert user.is_blocked is True
        assert user.full_name is None
        assert User.model_config["from_attributes"] is True
