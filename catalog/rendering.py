"""
View Renderer

Turns controller outcomes into HTTP responses:
- Render   -> Jinja2 TemplateResponse (status from the outcome)
- Redirect -> 303 See Other, so a POST is followed by a GET

Text fields reach the templates already escaped by the form rules; the
templates mark them |safe so they aren't escaped a second time.
"""

from pathlib import Path

from fastapi import Request
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from catalog.services.forms import Outcome, Redirect

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, outcome: Outcome) -> Response:
    if isinstance(outcome, Redirect):
        return RedirectResponse(url=outcome.location, status_code=303)
    return templates.TemplateResponse(
        request,
        outcome.template,
        outcome.context,
        status_code=outcome.status_code,
    )


def render_error(request: Request, status_code: int, message: str, detail: str | None = None) -> Response:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"title": message, "message": message, "status": status_code, "detail": detail},
        status_code=status_code,
    )
