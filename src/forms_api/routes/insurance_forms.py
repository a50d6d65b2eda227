"""Insurance form CRUD and search endpoints.

Writes go to the record store first and are then mirrored into the search
index. The two calls are not atomic: if the index write fails, the error
propagates and the store keeps the new value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from fastapi import APIRouter, Path, Query, Request, status
from fastapi.responses import JSONResponse, Response

from forms_api.errors import FormNotFoundError, InvalidRequestError
from forms_api.forms.schemas import MAX_FORM_ID, MIN_FORM_ID, InsuranceForm
from forms_api.headers import (
    create_entity_creation_alert,
    create_entity_deletion_alert,
    create_entity_update_alert,
)

if TYPE_CHECKING:
    from forms_api.config import Settings
    from forms_api.forms.repository import FormRepository
    from forms_api.search.index import FormSearchIndex

logger = structlog.get_logger()

router = APIRouter(tags=["insurance-forms"])

ENTITY_NAME = "insuranceForm"


def _repository(request: Request) -> FormRepository:
    return request.app.state.repository


def _search_index(request: Request) -> FormSearchIndex:
    return request.app.state.search_index


def _settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post(
    "/insurance-forms",
    response_model=InsuranceForm,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "A new insurance form cannot already have an id"}},
)
async def create_insurance_form(request: Request, form: InsuranceForm) -> JSONResponse:
    """Create a new insurance form.

    Args:
        request: FastAPI request (provides access to app state).
        form: Form to create; must not carry an id.

    Returns:
        The stored form with 201 Created, a Location header and a
        creation alert.

    Raises:
        InvalidRequestError: If the form already has an id.
    """
    logger.debug("rest_request_create_insurance_form", form=form.model_dump())
    if form.id is not None:
        raise InvalidRequestError(
            "A new insuranceForm cannot already have an ID", ENTITY_NAME, "idexists"
        )

    result = _repository(request).save(form)
    _search_index(request).save(result)
    logger.info("insurance_form_created", form_id=result.id)

    settings = _settings(request)
    location = request.url_for("get_insurance_form", form_id=str(result.id)).path
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=result.model_dump(mode="json"),
        headers={
            "Location": location,
            **create_entity_creation_alert(
                settings.application_name,
                settings.enable_translation,
                ENTITY_NAME,
                str(result.id),
            ),
        },
    )


@router.put(
    "/insurance-forms",
    response_model=InsuranceForm,
    responses={400: {"description": "The insurance form has no id"}},
)
async def update_insurance_form(request: Request, form: InsuranceForm) -> JSONResponse:
    """Replace an existing insurance form.

    The store upserts: a form whose id was never created is stored under
    that id.

    Args:
        request: FastAPI request (provides access to app state).
        form: Complete replacement form; must carry an id.

    Returns:
        The stored form with 200 OK and an update alert.

    Raises:
        InvalidRequestError: If the form has no id.
    """
    logger.debug("rest_request_update_insurance_form", form=form.model_dump())
    if form.id is None:
        raise InvalidRequestError("Invalid id", ENTITY_NAME, "idnull")

    result = _repository(request).save(form)
    _search_index(request).save(result)
    logger.info("insurance_form_updated", form_id=result.id)

    settings = _settings(request)
    return JSONResponse(
        content=result.model_dump(mode="json"),
        headers=create_entity_update_alert(
            settings.application_name,
            settings.enable_translation,
            ENTITY_NAME,
            str(form.id),
        ),
    )


@router.get("/insurance-forms", response_model=list[InsuranceForm])
async def get_all_insurance_forms(request: Request) -> list[InsuranceForm]:
    """List every stored insurance form in ascending id order."""
    logger.debug("rest_request_get_all_insurance_forms")
    return _repository(request).find_all()


@router.get(
    "/insurance-forms/{form_id}",
    response_model=InsuranceForm,
    responses={404: {"description": "Insurance form not found"}},
)
async def get_insurance_form(
    request: Request,
    form_id: int = Path(..., ge=MIN_FORM_ID, le=MAX_FORM_ID),
) -> InsuranceForm:
    """Retrieve a single insurance form.

    Args:
        request: FastAPI request (provides access to app state).
        form_id: Identifier of the form.

    Returns:
        The stored form.

    Raises:
        FormNotFoundError: If no form has this id (404, empty body).
    """
    logger.debug("rest_request_get_insurance_form", form_id=form_id)
    form = _repository(request).find_by_id(form_id)
    if form is None:
        raise FormNotFoundError(form_id)
    return form


@router.delete(
    "/insurance-forms/{form_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_insurance_form(
    request: Request,
    form_id: int = Path(..., ge=MIN_FORM_ID, le=MAX_FORM_ID),
) -> Response:
    """Delete an insurance form from the store and the search index.

    Deleting an id that does not exist still answers 204.

    Args:
        request: FastAPI request (provides access to app state).
        form_id: Identifier of the form.

    Returns:
        Empty 204 response with a deletion alert.
    """
    logger.debug("rest_request_delete_insurance_form", form_id=form_id)
    _repository(request).delete_by_id(form_id)
    _search_index(request).delete_by_id(form_id)
    logger.info("insurance_form_deleted", form_id=form_id)

    settings = _settings(request)
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers=create_entity_deletion_alert(
            settings.application_name,
            settings.enable_translation,
            ENTITY_NAME,
            str(form_id),
        ),
    )


@router.get(
    "/_search/insurance-forms",
    response_model=list[InsuranceForm],
    summary="Full-text search across insurance forms",
)
async def search_insurance_forms(
    request: Request,
    query: str = Query(..., description="Search query string"),
) -> list[InsuranceForm]:
    """Search insurance forms by free text.

    Results come from the search index, not the record store.

    Args:
        request: FastAPI request (provides access to app state).
        query: Free-text query.

    Returns:
        Matching forms, best match first; empty when nothing matches.
    """
    logger.debug("rest_request_search_insurance_forms", query=query)
    return _search_index(request).search(query)
