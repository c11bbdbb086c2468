"""
Entity-Component-System Core
=============================
Integer entity IDs with one component dictionary per component type.
"""

from typing import Any, Dict, Iterator, Optional, Set, Tuple, Type, TypeVar


C = TypeVar('C')


class World:
    """
    Entity store for the simulation.

    Destruction is deferred: destroy_entity() only marks the entity, and
    process_dead_entities() drops it with all its components at the end of
    the tick. Marked entities are already reported dead by is_alive() and
    skipped by queries.
    """

    def __init__(self):
        self._next_entity_id: int = 0
        self._entities: Set[int] = set()
        self._components: Dict[Type, Dict[int, Any]] = {}
        self._dead_entities: Set[int] = set()

    def create_entity(self, *components: Any) -> int:
        """Create an entity, optionally with initial components."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities.add(entity_id)
        for component in components:
            self.add_component(entity_id, component)
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark an entity for removal at the end of the tick."""
        if entity_id in self._entities:
            self._dead_entities.add(entity_id)

    def process_dead_entities(self) -> None:
        """Remove every marked entity and its components."""
        for entity_id in self._dead_entities:
            self._entities.discard(entity_id)
            for store in self._components.values():
                store.pop(entity_id, None)
        self._dead_entities.clear()

    def add_component(self, entity_id: int, component: Any) -> None:
        """Attach a component, replacing any of the same type."""
        if entity_id not in self._entities:
            raise KeyError(f'Entity {entity_id} does not exist')
        self._components.setdefault(type(component), {})[entity_id] = component

    def remove_component(self, entity_id: int, component_type: Type[C]) -> None:
        store = self._components.get(component_type)
        if store is not None:
            store.pop(entity_id, None)

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        """Get a component for an entity, or None if missing."""
        store = self._components.get(component_type)
        if store is None:
            return None
        return store.get(entity_id)

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        store = self._components.get(component_type)
        return store is not None and entity_id in store

    def query(self, *component_types: Type) -> Iterator[Tuple[Any, ...]]:
        """
        Yield (entity_id, component1, component2, ...) for every live
        entity holding all the given component types, in creation order.
        """
        if not component_types:
            return

        stores = []
        for component_type in component_types:
            store = self._components.get(component_type)
            if not store:
                return
            stores.append(store)

        # Iterate the smallest store, probe the rest
        smallest = min(stores, key=len)
        for entity_id in sorted(smallest):
            if entity_id in self._dead_entities:
                continue
            if all(entity_id in store for store in stores):
                yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def entity_count(self) -> int:
        """Number of live entities."""
        return len(self._entities) - len(self._dead_entities)

    def is_alive(self, entity_id: int) -> bool:
        """True while the entity exists and is not marked for removal."""
        return entity_id in self._entities and entity_id not in self._dead_entities
