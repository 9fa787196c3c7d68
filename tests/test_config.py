"""
Tests for subscription configuration.

Covers:
- Factory paths for both kinds
- Kind-checked setters
- Contract-before-event ordering
- Call-once setters and locking
"""
import pytest
from pydantic import ValidationError

from active_sse import (
    ActivityTarget,
    Config,
    ConfigLockedError,
    EventTarget,
    ContractNotSetError,
    FieldAlreadySetError,
    IncompatibleConfigError,
    Settings,
    SubscriptionKind,
    SubscriptionManager,
)

from conftest import StubTransport

BASE_URL = "http://host:5260"


class TestFactories:
    """Tests for new_activity() and new_event()."""

    def test_activity_path(self):
        """An activity config points at the activity subscribe endpoint."""
        config = Config.new_activity(BASE_URL)

        assert config.kind == SubscriptionKind.ACTIVITY
        assert config.base_url == BASE_URL
        assert config.resolved_path == "http://host:5260/api/activity/subscribe/"

    def test_event_path(self):
        """An event config points at the events endpoint."""
        config = Config.new_event(BASE_URL)

        assert config.kind == SubscriptionKind.EVENT
        assert config.resolved_path == "http://host:5260/api/events/"

    def test_optional_fields_start_unset(self):
        """No optional fields are set on a fresh config."""
        for config in (Config.new_activity(BASE_URL), Config.new_event(BASE_URL)):
            assert config.stream_id is None
            assert config.contract_id is None
            assert config.event_name is None
            assert not config.is_locked


class TestActivitySetters:
    """Tests for setters on activity configs."""

    def test_set_stream_id(self):
        """set_stream_id() appends the stream ID to the path."""
        config = Config.new_activity(BASE_URL)

        config.set_stream_id("stream-1")

        assert config.stream_id == "stream-1"
        assert config.resolved_path == "http://host:5260/api/activity/subscribe/stream-1"

    def test_set_stream_id_returns_config(self):
        """Setters return the config so calls can be chained."""
        config = Config.new_activity(BASE_URL)

        assert config.set_stream_id("stream-1") is config

    @pytest.mark.parametrize("setter", ["set_contract", "set_event"])
    def test_event_setters_rejected(self, setter):
        """Event-only setters raise IncompatibleConfigError on activity configs."""
        config = Config.new_activity(BASE_URL)

        with pytest.raises(IncompatibleConfigError) as exc_info:
            getattr(config, setter)("value")

        assert exc_info.value.setter == setter
        assert exc_info.value.kind == "activity"
        assert config.resolved_path == "http://host:5260/api/activity/subscribe/"

    def test_set_event_rejected_as_incompatible_not_missing_contract(self):
        """Kind is checked before contract ordering."""
        config = Config.new_activity(BASE_URL)

        with pytest.raises(IncompatibleConfigError):
            config.set_event("fired")


class TestEventSetters:
    """Tests for setters on event configs."""

    def test_set_contract(self):
        """set_contract() appends the contract ID to the path."""
        config = Config.new_event(BASE_URL)

        config.set_contract("c1")

        assert config.contract_id == "c1"
        assert config.resolved_path == "http://host:5260/api/events/c1"

    def test_set_contract_then_event(self):
        """Contract and event name are concatenated without a separator."""
        config = Config.new_event(BASE_URL)

        config.set_contract("c1")
        config.set_event("fired")

        assert config.event_name == "fired"
        assert config.resolved_path == "http://host:5260/api/events/c1fired"

    def test_chained_setters(self):
        """Setters can be chained."""
        config = Config.new_event(BASE_URL).set_contract("A").set_event("B")

        assert config.resolved_path.endswith("AB")

    def test_set_stream_id_rejected(self):
        """set_stream_id() raises IncompatibleConfigError on event configs."""
        config = Config.new_event(BASE_URL)

        with pytest.raises(IncompatibleConfigError) as exc_info:
            config.set_stream_id("stream-1")

        assert exc_info.value.kind == "event"
        assert config.stream_id is None
        assert config.resolved_path == "http://host:5260/api/events/"

    def test_set_event_without_contract(self):
        """set_event() before set_contract() raises and leaves the path alone."""
        config = Config.new_event(BASE_URL)
        before = config.resolved_path

        with pytest.raises(ContractNotSetError):
            config.set_event("fired")

        assert config.resolved_path == before
        assert config.event_name is None

    @pytest.mark.parametrize(
        "base_url",
        ["", "http://host:5260", "http://host:5260/", "https://ledger.example/api/events/c1"],
    )
    def test_set_event_without_contract_any_base_url(self, base_url):
        """ContractNotSetError does not depend on the base URL."""
        with pytest.raises(ContractNotSetError):
            Config.new_event(base_url).set_event("fired")

    def test_reverse_order_is_impossible(self):
        """An event name can never precede the contract in the path."""
        config = Config.new_event(BASE_URL)

        with pytest.raises(ContractNotSetError):
            config.set_event("B")
        config.set_contract("A")

        assert config.resolved_path == "http://host:5260/api/events/A"


class TestCallOnce:
    """Tests for the call-once setter policy."""

    def test_stream_id_twice(self):
        """A second set_stream_id() is rejected and the path keeps one segment."""
        config = Config.new_activity(BASE_URL).set_stream_id("s1")

        with pytest.raises(FieldAlreadySetError) as exc_info:
            config.set_stream_id("s2")

        assert exc_info.value.field == "stream_id"
        assert exc_info.value.current == "s1"
        assert config.resolved_path == "http://host:5260/api/activity/subscribe/s1"

    def test_stream_id_same_value_twice(self):
        """Repeating the same value is still rejected."""
        config = Config.new_activity(BASE_URL).set_stream_id("s1")

        with pytest.raises(FieldAlreadySetError):
            config.set_stream_id("s1")

    def test_contract_twice(self):
        """A second set_contract() is rejected."""
        config = Config.new_event(BASE_URL).set_contract("c1")

        with pytest.raises(FieldAlreadySetError):
            config.set_contract("c2")

        assert config.resolved_path == "http://host:5260/api/events/c1"

    def test_event_twice(self):
        """A second set_event() is rejected."""
        config = Config.new_event(BASE_URL).set_contract("c1").set_event("fired")

        with pytest.raises(FieldAlreadySetError):
            config.set_event("again")

        assert config.resolved_path == "http://host:5260/api/events/c1fired"

    def test_contract_after_event(self):
        """The contract cannot be replaced once an event name follows it."""
        config = Config.new_event(BASE_URL).set_contract("c1").set_event("fired")

        with pytest.raises(FieldAlreadySetError):
            config.set_contract("c2")


class TestLocking:
    """Tests for lock()."""

    def test_setters_rejected_after_lock(self):
        """Every setter raises ConfigLockedError once locked."""
        activity = Config.new_activity(BASE_URL)
        event = Config.new_event(BASE_URL)
        activity.lock()
        event.lock()

        with pytest.raises(ConfigLockedError):
            activity.set_stream_id("s1")
        with pytest.raises(ConfigLockedError):
            event.set_contract("c1")
        with pytest.raises(ConfigLockedError):
            event.set_event("fired")

        assert activity.is_locked
        assert activity.resolved_path == "http://host:5260/api/activity/subscribe/"

    def test_wrong_kind_on_locked_config(self):
        """A wrong-kind setter still raises IncompatibleConfigError once locked."""
        activity = Config.new_activity(BASE_URL)
        event = Config.new_event(BASE_URL)
        activity.lock()
        event.lock()

        with pytest.raises(IncompatibleConfigError):
            event.set_stream_id("s1")
        with pytest.raises(IncompatibleConfigError):
            activity.set_contract("c1")
        with pytest.raises(IncompatibleConfigError):
            activity.set_event("fired")

    def test_wrong_kind_after_handoff_to_manager(self):
        """Handing the config to a manager does not change the kind error."""
        config = Config.new_event(BASE_URL)
        SubscriptionManager(config, transport=StubTransport())

        with pytest.raises(IncompatibleConfigError):
            config.set_stream_id("s1")
        assert config.resolved_path == "http://host:5260/api/events/"

    def test_lock_keeps_path(self):
        """Locking does not alter the resolved path."""
        config = Config.new_event(BASE_URL).set_contract("c1")

        config.lock()

        assert config.resolved_path == "http://host:5260/api/events/c1"


class TestFromSettings:
    """Tests for Config.from_settings()."""

    def test_uses_settings_base_url(self):
        """The base URL comes from the given settings."""
        settings = Settings(base_url="http://ledger:5261")

        config = Config.from_settings(SubscriptionKind.ACTIVITY, stream_id="s1", settings=settings)

        assert config.resolved_path == "http://ledger:5261/api/activity/subscribe/s1"

    def test_event_fields(self):
        """Contract and event are applied in order."""
        settings = Settings(base_url="http://ledger:5261")

        config = Config.from_settings(
            SubscriptionKind.EVENT,
            contract_id="c1",
            event_name="fired",
            settings=settings,
        )

        assert config.resolved_path == "http://ledger:5261/api/events/c1fired"

    def test_incompatible_field(self):
        """Fields of the other kind are rejected like the setters reject them."""
        with pytest.raises(IncompatibleConfigError):
            Config.from_settings(
                SubscriptionKind.EVENT,
                stream_id="s1",
                settings=Settings(base_url=BASE_URL),
            )

    def test_event_without_contract(self):
        """An event name without a contract is rejected."""
        with pytest.raises(ContractNotSetError):
            Config.from_settings(
                SubscriptionKind.EVENT,
                event_name="fired",
                settings=Settings(base_url=BASE_URL),
            )


class TestTargetPayload:
    """Tests for building a config from a target payload."""

    def test_dict_payload_selected_by_kind(self):
        """A dict payload is validated into the target for its kind."""
        config = Config(BASE_URL, {"kind": SubscriptionKind.EVENT, "contractId": "c1"})

        assert isinstance(config.target, EventTarget)
        assert config.contract_id == "c1"
        assert config.resolved_path == "http://host:5260/api/events/c1"

    def test_payload_with_unknown_kind_rejected(self):
        """The kind must name one of the two subscription kinds."""
        with pytest.raises(ValidationError):
            Config(BASE_URL, {"kind": "transaction", "streamId": "s1"})

    def test_payload_without_kind_rejected(self):
        with pytest.raises(ValidationError):
            Config(BASE_URL, {"streamId": "s1"})

    def test_event_payload_without_contract_rejected(self):
        with pytest.raises(ValidationError):
            Config(BASE_URL, {"kind": SubscriptionKind.EVENT, "eventName": "fired"})

    def test_setters_keep_target_model(self):
        """Accepted fields produce a validated target of the same kind."""
        config = Config.new_activity(BASE_URL).set_stream_id("s1")

        assert config.target == ActivityTarget(stream_id="s1")
