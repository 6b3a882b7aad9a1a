from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from copyfixer.core.config import settings

router = APIRouter(include_in_schema=False)

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _context() -> dict:
    return {"project_name": settings.PROJECT_NAME, "api_prefix": settings.API_PREFIX}


@router.get("/", response_class=HTMLResponse)
def workflow_page(request: Request):
    return templates.TemplateResponse(request, "index.html", _context())


@router.get("/history", response_class=HTMLResponse)
def history_page(request: Request):
    return templates.TemplateResponse(request, "history.html", _context())


@router.get("/admin", response_class=HTMLResponse)
def admin_page(request: Request):
    return templates.TemplateResponse(request, "admin.html", _context())
