"""Request-scoped dependencies and body helpers shared by the routers."""
from __future__ import annotations

import logging
from typing import Any, Sequence, TypeVar

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from services.journey_store import JourneyStore
from services.sealing import TransportSealer, is_transport_envelope

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

MSG_INVALID_PAYLOAD = "Invalid request payload"
MSG_UNDECRYPTABLE = "Unable to decrypt payload"


def get_journey_store(request: Request) -> JourneyStore:
    return request.app.state.journey_store


def flatten_validation_errors(errors: Sequence[dict[str, Any]]) -> dict[str, Any]:
    """Group errors by dotted field path; errors without a field go to formErrors."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] == "body":
            loc = loc[1:]
        if loc:
            field_errors.setdefault(".".join(loc), []).append(err["msg"])
        else:
            form_errors.append(err["msg"])
    return {"formErrors": form_errors, "fieldErrors": field_errors}


def parse_body(model: type[ModelT], payload: Any) -> ModelT:
    """Validate an already-decoded body, reporting errors like FastAPI's own body parsing."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in e.errors(include_url=False)]
        ) from e


async def read_json(request: Request, *, required: bool = True) -> Any:
    try:
        return await request.json()
    except ValueError:
        if required:
            raise HTTPException(status_code=400, detail=MSG_INVALID_PAYLOAD)
        return {}


def open_transport_body(body: Any, sealer: TransportSealer) -> Any:
    """Replace `{"envelope": {...}}` bodies with their decrypted contents."""
    if not (isinstance(body, dict) and is_transport_envelope(body.get("envelope"))):
        return body
    try:
        return sealer.open(body["envelope"])
    except ValueError:
        logger.exception("Transport payload decrypt failed")
        raise HTTPException(status_code=400, detail=MSG_UNDECRYPTABLE)
