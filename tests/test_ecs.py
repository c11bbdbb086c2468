"""Tests for the entity store."""

import pytest

from wandcraft.components import Position, Velocity
from wandcraft.ecs import World


class TestWorld:

    @pytest.fixture
    def world(self):
        return World()

    def test_create_with_components(self, world):
        eid = world.create_entity(Position(1, 2), Velocity(3, 4))

        assert world.get_component(eid, Position) == Position(1, 2)
        assert world.has_component(eid, Velocity)
        assert world.entity_count() == 1

    def test_query_in_creation_order(self, world):
        ids = [world.create_entity(Position(i, 0)) for i in range(5)]
        world.add_component(ids[3], Velocity())
        world.add_component(ids[1], Velocity())

        assert [eid for eid, _, _ in world.query(Position, Velocity)] == [ids[1], ids[3]]

    def test_destroy_is_deferred(self, world):
        eid = world.create_entity(Position())

        world.destroy_entity(eid)

        assert not world.is_alive(eid)
        assert list(world.query(Position)) == []
        assert world.get_component(eid, Position) is not None

        world.process_dead_entities()

        assert world.get_component(eid, Position) is None
        assert world.entity_count() == 0

    def test_add_component_to_missing_entity(self, world):
        with pytest.raises(KeyError):
            world.add_component(42, Position())

    def test_remove_component(self, world):
        eid = world.create_entity(Position(), Velocity())

        world.remove_component(eid, Velocity)

        assert not world.has_component(eid, Velocity)
        assert world.is_alive(eid)

    def test_ids_are_not_reused(self, world):
        first = world.create_entity()
        world.destroy_entity(first)
        world.process_dead_entities()

        assert world.create_entity() != first
