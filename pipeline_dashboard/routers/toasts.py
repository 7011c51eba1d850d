from fastapi import APIRouter, Depends, Query
from pipeline_dashboard.deps import get_toasts
from pipeline_dashboard.services.toasts import ToastCenter

router = APIRouter()

@router.get("/toasts")
def get_recent_toasts(limit: int = Query(default=50, ge=1, le=500), toasts: ToastCenter = Depends(get_toasts)):
    return {"items": [t.to_dict() for t in toasts.recent(limit)]}
