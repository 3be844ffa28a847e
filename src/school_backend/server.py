import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from school_backend.database import get_engine, get_db
from school_backend.model import Base
from school_backend.seeder import seed
from school_backend.settings import settings
from school_backend.api.auth import auth_router
from school_backend.api.users import user_router
from school_backend.api.roles import role_router, permission_router
from school_backend.api.students import student_router
from school_backend.api.parents import parent_router
from school_backend.api.guardians import guardian_router
from school_backend.api.employees import employee_router
from school_backend.api.academic import (
    academic_year_router,
    subject_router,
    classroom_router,
    teaching_assignment_router,
    schedule_router
)
from school_backend.api.attendance import attendance_router
from school_backend.api.grades import grade_router
from school_backend.api.finance import finance_router
from school_backend.api.violations import violation_router
from school_backend.api.dashboard import dashboard_router

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


def startup_logic():
    if settings.AUTO_MIGRATE:
        Base.metadata.create_all(get_engine())
        logger.info("Database schema ensured")

    if settings.AUTO_SEED:
        db = next(get_db())
        try:
            seed(db)
        finally:
            db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup_logic()
    yield


app = FastAPI(title="School Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(user_router, prefix="/users", tags=["users"])
app.include_router(role_router, prefix="/roles", tags=["roles"])
app.include_router(permission_router, prefix="/permissions", tags=["permissions"])

app.include_router(student_router, prefix="/students", tags=["students"])
app.include_router(parent_router, prefix="/parents", tags=["parents"])
app.include_router(guardian_router, prefix="/guardians", tags=["guardians"])
app.include_router(employee_router, prefix="/employees", tags=["employees"])

app.include_router(academic_year_router, prefix="/academic-years", tags=["academic"])
app.include_router(subject_router, prefix="/subjects", tags=["academic"])
app.include_router(classroom_router, prefix="/classrooms", tags=["academic"])
app.include_router(teaching_assignment_router, prefix="/teaching-assignments", tags=["academic"])
app.include_router(schedule_router, prefix="/schedules", tags=["academic", "schedules"])

app.include_router(attendance_router, prefix="/attendance", tags=["attendance"])
app.include_router(grade_router, prefix="/grades", tags=["grades"])
app.include_router(finance_router, prefix="/finance", tags=["finance"])
app.include_router(violation_router, prefix="/violations", tags=["violations"])
app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])


@app.get("/", tags=["system"])
def health():
    return {"status": "ok"}
