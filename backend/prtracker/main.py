from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from prtracker.api.auth import router as auth_router
from prtracker.api.records import router as records_router
from prtracker.api.profiles import router as profiles_router
from prtracker.api.storage import router as storage_router
from prtracker.db import Base, engine
from prtracker.models.user import User  # noqa: F401  (import ensures table is registered)
from prtracker.models.profile import Profile  # noqa: F401
from prtracker.models.personal_record import PersonalRecord  # noqa: F401
from prtracker.core.config import settings
from prtracker.core.logger import setup_logger
import os


setup_logger(level=settings.log_level, log_file=settings.log_file)

app = FastAPI()

# Allow CORS for the browser frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables (users, profiles, personal_records) on startup
Base.metadata.create_all(bind=engine)

# Ensure uploads directory exists
os.makedirs(settings.uploads_dir, exist_ok=True)

app.include_router(auth_router)
app.include_router(records_router)
app.include_router(profiles_router)
app.include_router(storage_router)

logger.info("PR tracker backend initialized")


@app.get("/")
def root():
    return {"message": "PR tracker backend is running"}
