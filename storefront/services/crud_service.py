"""Generic CRUD over a JSON-file repository."""
from __future__ import annotations

import uuid
from typing import Generic, Iterable, Optional, Type, TypeVar

from storefront.repositories.json_storage import FileRepository, Record

T = TypeVar("T", bound=Record)


class CrudService(Generic[T]):
    """
    Read-all / mutate / write-all operations shared by every entity service.

    Each call reloads the file, so two services pointing at the same path
    always see each other's writes.
    """

    entity_type: Type[T]

    def __init__(self, path: str) -> None:
        self.repo: FileRepository[T] = FileRepository(path, self.entity_type)

    def get_all(self) -> list[T]:
        return self.repo.read_all()

    def find_by_id(self, entity_id: str) -> Optional[T]:
        for entity in self.repo.read_all():
            if entity.id == entity_id:
                return entity
        return None

    def add(self, entity: T) -> T:
        items = self.repo.read_all()
        entity.id = str(uuid.uuid4())
        items.append(entity)
        self.repo.save_all(items)
        return entity

    def update(self, entity: T) -> None:
        items = self.repo.read_all()
        for index, current in enumerate(items):
            if current.id == entity.id:
                items[index] = entity
                break
        self.repo.save_all(items)

    def delete(self, entity_id: str) -> None:
        items = [entity for entity in self.repo.read_all() if entity.id != entity_id]
        self.repo.save_all(items)

    def save_all(self, entities: Iterable[T]) -> None:
        self.repo.save_all(list(entities))
