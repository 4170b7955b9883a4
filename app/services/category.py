"""Category service."""

from sqlalchemy.orm import Session

from app.errors import ValidationError
from app.models.category import Category

MAX_NAME_LENGTH = 128


class CategoryService:
    """Creates and lists a user's lecture categories."""

    def create_category(self, db: Session, user_id: int, name: str) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["The name field is required."]})
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError({"name": [f"The name may not be greater than {MAX_NAME_LENGTH} characters."]})

        category = Category(user_id=user_id, name=name)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    def get_user_categories(self, db: Session, user_id: int) -> list[Category]:
        """Get all categories for a user, alphabetically."""
        return db.query(Category).filter(Category.user_id == user_id).order_by(Category.name).all()


_category_service: CategoryService | None = None


def get_category_service() -> CategoryService:
    """Get singleton category service instance."""
    global _category_service
    if _category_service is None:
        _category_service = CategoryService()
    return _category_service
