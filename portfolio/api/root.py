from fastapi import APIRouter

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": "Student Portfolio Backend",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "steps": "/steps",
    }
