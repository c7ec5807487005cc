from fastapi import APIRouter, Depends, HTTPException
from ..dependencies import get_dashboard_service
from ..services.dashboard_service import DashboardService
from ..models import DashboardResponse, DashboardStats, ErrorResponse

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse, responses={500: {"model": ErrorResponse}})
async def get_dashboard_stats(service: DashboardService = Depends(get_dashboard_service)):
    try:
        data = await service.get_stats()
        return {"success": True, "message": "Dashboard stats", "data": DashboardStats(**data)}
    except Exception as e:
        raise HTTPException(status_code=500, detail={"message": "Failed to compute dashboard stats", "details": {"error": str(e)}})
