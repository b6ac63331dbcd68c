"""
Unit Tests for Emitter Subscription Management
==============================================

Test Coverage
-------------
- subscribe / unsubscribe and unsubscribe handles
- subscribe_any / unsubscribe_any
- clear_listeners and listener_count
- Argument validation
- Registry snapshot ordering
"""

from dataclasses import dataclass, field

import pytest

from asyncemit import Emitter, EmitterValidationError
from asyncemit.core.event.registry import ListenerRegistry, is_registered


def noop(data):
    return None


def noop_any(event_name, data):
    return None


@dataclass
class RecordingHandler:
    """Callable dataclass; unhashable because it is not frozen."""

    label: str
    seen: list = field(default_factory=list)

    def __call__(self, *args):
        self.seen.append(args)


@dataclass(frozen=True)
class FrozenHandler:
    label: str

    def __call__(self, *args):
        return self.label


# ============================================================================
# SUBSCRIBE / UNSUBSCRIBE
# ============================================================================


@pytest.mark.unit
@pytest.mark.event
class TestSubscribe:
    """Test per-event registration."""

    def test_subscribe_counts_listener(self, emitter):
        # Arrange & Act
        emitter.subscribe("x", noop)

        # Assert
        assert emitter.listener_count("x") == 1

    def test_handle_removes_registration(self, emitter):
        # Arrange
        off = emitter.subscribe("x", noop)

        # Act
        off()

        # Assert
        assert emitter.listener_count("x") == 0

    def test_handle_is_idempotent(self, emitter):
        # Arrange
        off = emitter.subscribe("x", noop)
        other = emitter.subscribe("x", lambda data: None)

        # Act
        off()
        off()

        # Assert
        assert emitter.listener_count("x") == 1
        other()
        assert emitter.listener_count("x") == 0

    def test_duplicate_subscribe_is_noop(self, emitter):
        emitter.subscribe("x", noop)
        emitter.subscribe("x", noop)

        assert emitter.listener_count("x") == 1

    def test_same_listener_on_two_events_tracked_independently(self, emitter):
        # Arrange
        emitter.subscribe("x", noop)
        emitter.subscribe("y", noop)

        # Act
        emitter.unsubscribe("x", noop)

        # Assert
        assert emitter.listener_count("x") == 0
        assert emitter.listener_count("y") == 1

    def test_same_listener_as_event_and_wildcard(self, emitter):
        # Arrange
        emitter.subscribe("x", noop)
        emitter.subscribe_any(noop)

        # Act
        emitter.unsubscribe_any(noop)

        # Assert
        assert emitter.listener_count("x") == 1
        assert emitter.listener_count() == 1

    def test_unsubscribe_unknown_listener_is_silent(self, emitter):
        emitter.unsubscribe("never-used", noop)

        assert emitter.listener_count("never-used") == 0

    def test_listeners_are_matched_by_identity(self, emitter):
        """Each `obj.method` expression is a new object; keep the reference."""

        class Handler:
            def on_x(self, data):
                return data

        handler = Handler()
        bound = handler.on_x
        emitter.subscribe("x", bound)
        emitter.subscribe("x", bound)
        assert emitter.listener_count("x") == 1

        emitter.unsubscribe("x", handler.on_x)
        assert emitter.listener_count("x") == 1

        emitter.unsubscribe("x", bound)
        assert emitter.listener_count("x") == 0

    def test_unhashable_callable_can_subscribe(self, emitter):
        # Arrange
        handler = RecordingHandler("a")

        # Act
        off = emitter.subscribe("x", handler)
        emitter.subscribe_any(handler)

        # Assert
        assert emitter.listener_count("x") == 2
        off()
        emitter.unsubscribe_any(handler)
        assert emitter.listener_count() == 0

    def test_equal_but_distinct_callables_are_separate(self, emitter):
        # Arrange
        first, second = FrozenHandler("same"), FrozenHandler("same")
        assert first == second

        # Act
        emitter.subscribe("x", first)
        emitter.subscribe("x", second)
        emitter.unsubscribe("x", first)

        # Assert
        assert emitter.listener_count("x") == 1
        assert emitter._registry.snapshot("x")[0][0] is second

    def test_emitters_do_not_share_state(self):
        first, second = Emitter(), Emitter()

        first.subscribe("x", noop)

        assert first.listener_count() == 1
        assert second.listener_count() == 0


@pytest.mark.unit
@pytest.mark.event
class TestSubscribeAny:
    """Test wildcard registration."""

    def test_subscribe_any_returns_handle(self, emitter):
        off = emitter.subscribe_any(noop_any)
        assert emitter.listener_count() == 1

        off()
        off()
        assert emitter.listener_count() == 0

    def test_duplicate_subscribe_any_is_noop(self, emitter):
        emitter.subscribe_any(noop_any)
        emitter.subscribe_any(noop_any)

        assert emitter.listener_count() == 1

    def test_wildcard_counts_toward_every_event(self, emitter):
        emitter.subscribe_any(noop_any)
        emitter.subscribe("x", noop)

        assert emitter.listener_count("x") == 2
        assert emitter.listener_count("unrelated") == 1


# ============================================================================
# COUNT / CLEAR
# ============================================================================


@pytest.mark.unit
@pytest.mark.event
class TestListenerCount:
    """Test listener_count semantics."""

    def test_count_scenario(self, emitter):
        # Arrange & Act & Assert
        assert emitter.listener_count() == 0

        emitter.subscribe_any(noop_any)
        assert emitter.listener_count() == 1

        emitter.subscribe("y", noop)
        assert emitter.listener_count() == 2

    def test_total_sums_all_events(self, emitter):
        emitter.subscribe("a", noop)
        emitter.subscribe("b", noop)
        emitter.subscribe("b", lambda data: None)

        assert emitter.listener_count() == 3

    def test_count_rejects_non_string(self, emitter):
        with pytest.raises(EmitterValidationError):
            emitter.listener_count(123)


@pytest.mark.unit
@pytest.mark.event
class TestClearListeners:
    """Test clear_listeners semantics."""

    def test_clear_one_event(self, emitter):
        # Arrange
        emitter.subscribe("a", noop)
        emitter.subscribe("b", noop)
        emitter.subscribe_any(noop_any)

        # Act
        emitter.clear_listeners("a")

        # Assert
        assert emitter.listener_count("a") == 1  # wildcard only
        assert emitter.listener_count("b") == 2

    def test_clear_everything(self, emitter):
        # Arrange
        emitter.subscribe("a", noop)
        emitter.subscribe("b", noop)
        emitter.subscribe_any(noop_any)

        # Act
        emitter.clear_listeners()

        # Assert
        assert emitter.listener_count() == 0

    def test_resubscribe_after_clear(self, emitter):
        emitter.subscribe("a", noop)
        emitter.clear_listeners()

        emitter.subscribe("a", noop)

        assert emitter.listener_count("a") == 1

    def test_clear_rejects_non_string(self, emitter):
        with pytest.raises(EmitterValidationError):
            emitter.clear_listeners(42)

    def test_event_names_skips_cleared_events(self, emitter):
        emitter.subscribe("b", noop)
        emitter.subscribe("a", noop)
        emitter.subscribe("c", noop)
        emitter.clear_listeners("c")

        assert emitter.event_names() == ["a", "b"]

    def test_repr_shows_counts(self, emitter):
        emitter.subscribe("a", noop)
        emitter.subscribe_any(noop_any)

        assert repr(emitter) == "<Emitter events=1 listeners=2>"


# ============================================================================
# VALIDATION
# ============================================================================


@pytest.mark.unit
@pytest.mark.event
class TestValidation:
    """Test argument validation happens before any mutation."""

    @pytest.mark.parametrize("event_name", [None, 1, b"x", ["x"]])
    def test_subscribe_rejects_bad_event_name(self, emitter, event_name):
        with pytest.raises(EmitterValidationError) as exc_info:
            emitter.subscribe(event_name, noop)

        assert "event_name must be a string" in str(exc_info.value)
        assert emitter.listener_count() == 0

    def test_subscribe_rejects_non_callable(self, emitter):
        with pytest.raises(EmitterValidationError) as exc_info:
            emitter.subscribe("x", "not callable")

        assert exc_info.value.field_name == "listener"
        assert emitter.listener_count() == 0

    def test_validation_error_is_type_error(self, emitter):
        with pytest.raises(TypeError):
            emitter.unsubscribe("x", None)

    def test_subscribe_any_rejects_non_callable(self, emitter):
        with pytest.raises(EmitterValidationError):
            emitter.subscribe_any(42)

    def test_unsubscribe_any_rejects_non_callable(self, emitter):
        with pytest.raises(EmitterValidationError):
            emitter.unsubscribe_any(42)

    def test_emit_rejects_bad_event_name_at_call_time(self, emitter):
        with pytest.raises(EmitterValidationError):
            emitter.emit_concurrent(42)
        with pytest.raises(EmitterValidationError):
            emitter.emit_serial(None)

    def test_validation_error_carries_details(self, emitter):
        with pytest.raises(EmitterValidationError) as exc_info:
            emitter.subscribe(7, noop)

        payload = exc_info.value.to_dict()
        assert payload["error_code"] == "VALIDATION_ERROR"
        assert payload["details"] == {"field_name": "event_name", "value_type": "int"}


# ============================================================================
# REGISTRY
# ============================================================================


@pytest.mark.unit
@pytest.mark.event
class TestListenerRegistry:
    """Test the registry's snapshot and membership primitives."""

    def test_snapshot_preserves_insertion_order(self):
        registry = ListenerRegistry()
        first, second, third = (lambda d: 1), (lambda d: 2), (lambda d: 3)
        for listener in (second, first, third):
            registry.add_listener("x", listener)

        listeners, wildcard = registry.snapshot("x")

        assert listeners == (second, first, third)
        assert wildcard == ()

    def test_snapshot_is_not_affected_by_later_changes(self):
        registry = ListenerRegistry()
        registry.add_listener("x", noop)
        listeners, _ = registry.snapshot("x")

        registry.remove_listener("x", noop)

        assert listeners == (noop,)
        assert not is_registered(registry.listeners_for("x"), noop)

    def test_clear_keeps_live_set_identity(self):
        registry = ListenerRegistry()
        registry.add_listener("x", noop)
        live = registry.listeners_for("x")

        registry.clear()
        registry.add_listener("x", noop)

        assert live is registry.listeners_for("x")
        assert is_registered(live, noop)

    def test_remove_reports_membership(self):
        registry = ListenerRegistry()
        registry.add_wildcard(noop_any)

        assert registry.remove_wildcard(noop_any) is True
        assert registry.remove_wildcard(noop_any) is False
