from fastapi import APIRouter

from storefront.utils.timeutils import utcnow

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok", "message": "API is running", "timestamp": utcnow().isoformat()}
