# surveyhub/app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from surveyhub.app.core.config import settings
from surveyhub.app.core.errors import ServiceError, service_error_handler
from surveyhub.db.session import engine
from surveyhub.db import Base
from surveyhub.db import models  # noqa: F401  registers tables on Base.metadata
from surveyhub.app.routers import auth, public, surveys, users

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(ServiceError, service_error_handler)

app.include_router(auth.router)
# public routes go first so /surveys/public/... never reaches /surveys/{survey_id}
app.include_router(public.router)
app.include_router(surveys.router)
app.include_router(users.router)


@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)


@app.get("/health")
def health():
    return {"status": "ok"}
