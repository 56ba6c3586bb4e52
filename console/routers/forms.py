"""
Forms router.

POST   /forms                      mount the ADD form for a console pathname
GET    /forms/{form_id}            current field state
PATCH  /forms/{form_id}/fields/{k} one input event; re-validates the field
POST   /forms/{form_id}/submit     validate, build payload, create
DELETE /forms/{form_id}            unmount
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from console.core.deps import get_api_client, get_form_store, get_registry
from console.core.errors import ScreenNotFoundError, ValidationFailedError
from console.schemas.forms import (
    FieldChangeRequest,
    FieldOut,
    FormResponse,
    MountFormRequest,
    SubmitResponse,
)
from console.services.api_client import BencherApiClient
from console.services.fields import FieldDescriptor
from console.services.forms import FormState, FormStore, SubmitStatus
from console.services.resources import Operation, ResourceRegistry
from console.services.routes import resolve_screen

router = APIRouter(prefix="/forms", tags=["forms"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _field_out(descriptor: FieldDescriptor) -> FieldOut:
    spec = descriptor.spec
    config = spec.config
    return FieldOut(
        key=spec.key,
        kind=spec.kind.value,
        label=config.label if spec.label else None,
        type=config.type,
        placeholder=config.placeholder,
        icon=config.icon,
        help=config.help,
        options=list(config.options),
        value=descriptor.value,
        valid=descriptor.valid,
        validate_=spec.validate,
        nullify=spec.nullify,
        clear=spec.clear,
    )


def _form_to_response(form: FormState) -> FormResponse:
    return FormResponse(
        id=form.id,
        resource=form.resource,
        pathname=form.pathname,
        title=form.title,
        back=form.back,
        fields=[_field_out(d) for d in form.fields],
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=FormResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Mount an ADD form",
    responses={404: {"description": "Pathname is not an ADD screen, or the resource has none."}},
)
def mount_form(
    payload: MountFormRequest,
    registry: ResourceRegistry = Depends(get_registry),
    forms: FormStore = Depends(get_form_store),
):
    """
    Create form state for the ADD screen at `pathname`. Every field starts
    with its default value and `valid: null`; FIXED fields take their value
    from the pathname (e.g. the project slug).
    """
    route = resolve_screen(payload.pathname, registry)
    if route is None or route.operation != Operation.ADD:
        raise ScreenNotFoundError(payload.pathname)
    config = registry.require_config(route.resource, Operation.ADD)
    form = forms.mount(route.resource, config, route.pathname, route.path_params)
    return _form_to_response(form)


@router.get("/{form_id}", response_model=FormResponse, summary="Current form state")
def get_form(form_id: str, forms: FormStore = Depends(get_form_store)):
    return _form_to_response(forms.get(form_id))


@router.patch(
    "/{form_id}/fields/{key}",
    response_model=FieldOut,
    summary="Apply an input event to a field",
)
def change_field(
    form_id: str,
    key: str,
    payload: FieldChangeRequest,
    forms: FormStore = Depends(get_form_store),
):
    """Sets the value and re-validates it. FIXED fields keep their value."""
    form = forms.get(form_id)
    return _field_out(form.change(key, payload.value))


@router.post(
    "/{form_id}/submit",
    response_model=SubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit the form",
    responses={
        409: {"description": "A submit for this form is already in flight."},
        422: {"description": "A gated field is invalid; nothing was sent."},
        502: {"description": "The API rejected the create; form state is kept for a retry."},
    },
)
async def submit_form(
    form_id: str,
    forms: FormStore = Depends(get_form_store),
    api: BencherApiClient = Depends(get_api_client),
):
    """
    Runs the submit protocol. On success returns the sent payload and the
    path to navigate to; fields marked `clear` are reset.
    """
    form = forms.get(form_id)
    result = await form.submit(api)

    if result.status == SubmitStatus.INVALID:
        raise ValidationFailedError(field=result.invalid_field, invalid=result.invalid)
    if result.status == SubmitStatus.FAILED:
        raise result.error

    return SubmitResponse(
        status=result.status.value,
        payload=result.payload,
        navigate_to=result.navigate_to,
        created=result.created,
        form=_form_to_response(form) if form.mounted else None,
    )


@router.delete(
    "/{form_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unmount a form",
)
def unmount_form(form_id: str, forms: FormStore = Depends(get_form_store)):
    forms.unmount(form_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
