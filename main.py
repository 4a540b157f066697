import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from database.database import engine
from models import models
from api import users, quizzes, training, incidents, announcements, analytics
from utils import config

# Create database tables
models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="Workforce API", description="API for workforce training and incident management")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(quizzes.router, prefix="/api/quizzes", tags=["Quizzes"])
app.include_router(training.router, prefix="/api/training", tags=["Training"])
app.include_router(incidents.router, prefix="/api/incidents", tags=["Incidents"])
app.include_router(announcements.router, prefix="/api/announcements", tags=["Announcements"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["Analytics"])

# Serve uploaded files
os.makedirs(config.UPLOAD_DIR, exist_ok=True)
app.mount(config.MEDIA_URL_PREFIX, StaticFiles(directory=config.UPLOAD_DIR), name="media")


@app.get("/")
def read_root():
    return {"message": "Welcome to the Workforce API"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
