from fastapi import FastAPI
from config.database import Database
from config.settings import get_cors_origins
from services.session_service import SessionManager
from routes import (
    appointment_routes,
    testimonial_routes,
    user_routes,
    catalog_routes
)
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

logger = logging.getLogger(__name__)

app = FastAPI(title="NUVÓ Essence Ritual API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(appointment_routes.router, prefix="/api/appointments", tags=["appointments"])
app.include_router(testimonial_routes.router, prefix="/api/testimonials", tags=["testimonials"])
app.include_router(user_routes.router, prefix="/api/users", tags=["users"])
app.include_router(catalog_routes.router, prefix="/api/catalog", tags=["catalog"])


@app.on_event("startup")
async def startup():
    try:
        if Database.db is None:
            await Database.connect_db()
        app.state.session_manager = SessionManager()
    except Exception as e:
        logger.error(f"Error during startup: {str(e)}")
        raise


@app.on_event("shutdown")
async def shutdown():
    try:
        session_manager = getattr(app.state, "session_manager", None)
        if session_manager is not None:
            session_manager.dispose()
        await Database.close_db()
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}")


@app.get("/")
def read_root():
    return {"message": "Welcome to the NUVÓ Essence Ritual API"}


if __name__ == "__main__":
    port = int(os.environ.get("PORT", "10000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
