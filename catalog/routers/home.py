"""Home page router: /catalog/ shows counts of every entity type."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from catalog.controllers.dashboard import index
from catalog.dependencies import Store
from catalog.rendering import render

router = APIRouter(tags=["Home"], default_response_class=HTMLResponse)


@router.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/catalog", status_code=303)


@router.get("/catalog", name="index")
@router.get("/catalog/", include_in_schema=False)
async def catalog_index(request: Request, store: Store) -> Response:
    """Dashboard with book, copy, author and genre counts."""
    return render(request, await index(store))
