from models.category import CategoryKind
from models.errors import ValidationError
from services.entity_store import EntityStore


class CategoryService:
    def __init__(self, store: EntityStore):
        self._store = store

    def get_business(self) -> list[str]:
        return self._store.business_categories

    def get_home(self) -> list[str]:
        return self._store.home_categories

    def add(self, kind: CategoryKind, name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty.")
        self._store.add_category(CategoryKind(kind), name)
        return name
