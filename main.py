"""
Main entry point for the FastAPI application.
"""
from booking_dashboard.api.app import create_app
from booking_dashboard.api.config import settings

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
        access_log=True
    )
