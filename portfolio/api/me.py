from fastapi import APIRouter, Depends

from portfolio.core.security import get_current_user
from portfolio.models.user import User
from portfolio.services.sso import entry_point_for

router = APIRouter(tags=["auth"])


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    """Current user, plus where the frontend should land them."""
    return {
        "id": str(current_user.id),
        "email": current_user.email,
        "full_name": current_user.full_name,
        "role": current_user.role,
        "grade": current_user.grade,
        "school_name": current_user.school_name,
        "is_active": current_user.is_active,
        "entry_point": entry_point_for(current_user.role),
    }
