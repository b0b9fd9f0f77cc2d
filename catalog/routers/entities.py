"""
Entity Routers

Every entity exposes the same eight routes, so the router is built by a
factory instead of being written out four times:

    GET  /catalog/<plural>               list
    GET  /catalog/<name>/create          create form
    POST /catalog/<name>/create          create
    GET  /catalog/<name>/{id}            detail
    GET  /catalog/<name>/{id}/update     update form
    POST /catalog/<name>/{id}/update     update
    GET  /catalog/<name>/{id}/delete     delete confirmation
    POST /catalog/<name>/{id}/delete     delete

The create routes are registered before /{id} so "create" is never taken
for an id.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from catalog.dependencies import FormInput
from catalog.rendering import render
from catalog.services.forms import FormController


def build_entity_router(
    name: str,
    plural: str,
    get_controller: Callable[..., FormController],
    tag: str,
) -> APIRouter:
    """
    Create the router for one entity.

    Args:
        name: Singular path segment ("author")
        plural: List path segment ("authors")
        get_controller: Dependency returning the entity's FormController
        tag: OpenAPI tag
    """
    router = APIRouter(
        prefix="/catalog",
        tags=[tag],
        default_response_class=HTMLResponse,
        responses={404: {"description": f"{tag} not found"}},
    )
    Controller = Annotated[FormController, Depends(get_controller)]

    @router.get(f"/{plural}", name=f"{name}_list")
    async def list_view(request: Request, controller: Controller) -> Response:
        return render(request, await controller.list_all())

    @router.get(f"/{name}/create", name=f"{name}_create_get")
    async def create_get(request: Request, controller: Controller) -> Response:
        return render(request, await controller.create_get())

    @router.post(f"/{name}/create", name=f"{name}_create_post")
    async def create_post(
        request: Request, controller: Controller, form: FormInput
    ) -> Response:
        return render(request, await controller.create_post(form))

    @router.get(f"/{name}/{{entity_id}}", name=f"{name}_detail")
    async def detail(request: Request, entity_id: str, controller: Controller) -> Response:
        return render(request, await controller.detail(entity_id))

    @router.get(f"/{name}/{{entity_id}}/update", name=f"{name}_update_get")
    async def update_get(
        request: Request, entity_id: str, controller: Controller
    ) -> Response:
        return render(request, await controller.update_get(entity_id))

    @router.post(f"/{name}/{{entity_id}}/update", name=f"{name}_update_post")
    async def update_post(
        request: Request, entity_id: str, controller: Controller, form: FormInput
    ) -> Response:
        return render(request, await controller.update_post(entity_id, form))

    @router.get(f"/{name}/{{entity_id}}/delete", name=f"{name}_delete_get")
    async def delete_get(
        request: Request, entity_id: str, controller: Controller
    ) -> Response:
        return render(request, await controller.delete_get(entity_id))

    @router.post(f"/{name}/{{entity_id}}/delete", name=f"{name}_delete_post")
    async def delete_post(
        request: Request, entity_id: str, controller: Controller
    ) -> Response:
        return render(request, await controller.delete_post(entity_id))

    return router
