"""Property-based tests for the task registry state machine."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from brollkit.models.errors import InvalidTransitionError, ValidationError
from brollkit.models.task import TaskStatus, can_transition
from brollkit.pipeline.registry import TaskRegistry
from tests.property.conftest import asset_ids, statuses

pytestmark = pytest.mark.property


class TestRegistryProperties:
    @given(asset_id=asset_ids, n=st.integers(min_value=1, max_value=50))
    @settings(max_examples=30)
    def test_create_ids_unique_and_pending(self, asset_id, n):
        registry = TaskRegistry()
        tasks = [registry.create(asset_id) for _ in range(n)]
        assert len({t.id for t in tasks}) == n
        assert all(t.status == TaskStatus.PENDING and t.progress == 0 for t in tasks)

    @given(requested=st.lists(statuses, max_size=12))
    @settings(max_examples=100)
    def test_random_status_sequences_respect_state_machine(self, requested):
        """Whatever callers ask for, the stored task only follows legal edges."""
        registry = TaskRegistry()
        task = registry.create("asset")
        previous = task
        for status in requested:
            legal = can_transition(previous.status, status)
            try:
                current = registry.update(task.id, status=status)
            except InvalidTransitionError:
                assert not legal
                assert registry.get(task.id) == previous
                continue
            assert legal
            assert current.updated_at > previous.updated_at
            if not current.is_terminal:
                assert current.progress >= previous.progress
            previous = current

        in_flight = registry.get_by_asset_id("asset")
        if previous.is_terminal:
            assert in_flight is None
        else:
            assert in_flight.id == task.id

    @given(values=st.lists(st.integers(min_value=0, max_value=100), min_size=1, max_size=10))
    @settings(max_examples=50)
    def test_progress_never_decreases(self, values):
        registry = TaskRegistry()
        task = registry.create("asset")
        for value in values:
            before = registry.get(task.id).progress
            try:
                registry.update(task.id, progress=value)
            except ValidationError:
                assert value < before
            assert registry.get(task.id).progress >= before

    @given(asset_id=asset_ids)
    @settings(max_examples=30)
    def test_at_most_one_in_flight_per_asset(self, asset_id):
        registry = TaskRegistry()
        for _ in range(3):
            task = registry.create_for_asset(asset_id)
            registry.update(task.id, status=TaskStatus.FAILED)
        registry.create_for_asset(asset_id)
        registry.create_for_asset(asset_id)
        in_flight = [t for t in registry.get_all() if not t.is_terminal]
        assert len(in_flight) == 1
