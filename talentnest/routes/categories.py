import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import commit_or_raise, get_db
from ..models import Category, User
from ..shared.errors import ConflictError
from ..shared.policy import Action, authorize
from ..utils.sanitization import sanitize_string

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["Categories"])


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    icon: Optional[str] = Field(None, max_length=100)


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    icon: Optional[str]
    isActive: bool

    @classmethod
    def from_model(cls, category: Category) -> "CategoryResponse":
        return cls(
            id=category.id,
            name=category.name,
            description=category.description,
            icon=category.icon,
            isActive=category.is_active,
        )


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: Session = Depends(get_db)):
    """Active categories, alphabetical"""
    categories = (
        db.query(Category).filter(Category.is_active.is_(True)).order_by(Category.name).all()
    )
    return [CategoryResponse.from_model(c) for c in categories]


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    data: CategoryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add a browsing category (admins only)"""
    authorize(current_user, Action.MANAGE_CATEGORIES)

    name = sanitize_string(data.name)
    if db.query(Category).filter(Category.name.ilike(name)).first():
        raise ConflictError(f"Category '{name}' already exists")

    category = Category(
        name=name,
        description=sanitize_string(data.description) if data.description else None,
        icon=data.icon,
        is_active=True,
    )
    db.add(category)
    commit_or_raise(db, "create the category")
    db.refresh(category)

    logger.info(f"✅ Category {category.id} '{category.name}' created by admin {current_user.id}")
    return CategoryResponse.from_model(category)
