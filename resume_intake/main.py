import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

load_dotenv()

from .config import settings
from .errors import ResumeIntakeError
from .routers import candidates, resume

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Resume Intake API",
    description="FastAPI backend to turn uploaded resumes into structured candidate records.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ResumeIntakeError)
async def resume_intake_error_handler(request: Request, exc: ResumeIntakeError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.warning(f"{request.method} {request.url.path} rejected: {detail}")
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {detail}"})


app.include_router(resume.router, prefix="/api/v1", tags=["Resumes"])
app.include_router(candidates.router, prefix="/api/v1", tags=["Candidates"])


@app.get("/")
async def root():
    return {"message": "Resume Intake API is running. Use endpoints under /api/v1/"}


# Local development runner
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("resume_intake.main:app", host="127.0.0.1", port=8000, reload=True)
