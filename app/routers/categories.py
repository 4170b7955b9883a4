"""Category API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.schemas.category import CategoryCreateRequest, CategoryResponse
from app.services.category import get_category_service

router = APIRouter(prefix="/api/v1/categories", tags=["Categories"])


@router.get("/", response_model=list[CategoryResponse])
def list_categories(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[CategoryResponse]:
    categories = get_category_service().get_user_categories(db, user.user_id)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post("/", response_model=CategoryResponse, status_code=201)
def create_category(
    body: CategoryCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CategoryResponse:
    category = get_category_service().create_category(db, user.user_id, body.name)
    return CategoryResponse.model_validate(category)
