"""Personas API endpoints.

GET /api/personas - List the caller's personas
POST /api/personas - Create a persona
POST /api/personas/defaults - Ensure the caller has the default personas
GET /api/personas/{persona_id} - Get a persona
PATCH /api/personas/{persona_id} - Update a persona
DELETE /api/personas/{persona_id} - Delete a persona
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from honeytrap.api.app import get_caller, get_store
from honeytrap.db import repo
from honeytrap.models.domain import Caller, PersonaEntity
from honeytrap.models.types import PersonaCreate, PersonaUpdate
from honeytrap.store.base import RecordStore

router = APIRouter()


@router.get("/personas", response_model=list[PersonaEntity])
def get_personas(
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> list[PersonaEntity]:
    """List the caller's personas, newest first."""
    return repo.get_personas(store, caller)


@router.post("/personas", response_model=PersonaEntity, status_code=201)
def create_persona(
    persona: PersonaCreate,
    store: RecordStore = Depends(get_store),
) -> PersonaEntity:
    """Create a persona."""
    return repo.create_persona(store, persona)


@router.post("/personas/defaults", response_model=list[PersonaEntity])
def ensure_default_personas(
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> list[PersonaEntity]:
    """Create the built-in personas the caller is missing.

    Returns:
        Personas created by this request (empty when all exist).

    Raises:
        HTTPException: 401 if there is no caller.
    """
    if caller is None:
        raise HTTPException(status_code=401, detail="Caller required")

    return repo.ensure_default_personas(store, caller.user_id)


@router.get("/personas/{persona_id}", response_model=PersonaEntity)
def get_persona(
    persona_id: str,
    store: RecordStore = Depends(get_store),
) -> PersonaEntity:
    """Get a persona by ID.

    Raises:
        HTTPException: 404 if persona not found.
    """
    persona = repo.get_persona(store, persona_id)

    if persona is None:
        raise HTTPException(status_code=404, detail="Persona not found")

    return persona


@router.patch("/personas/{persona_id}", status_code=204)
def update_persona(
    persona_id: str,
    updates: PersonaUpdate,
    store: RecordStore = Depends(get_store),
) -> Response:
    """Update a persona."""
    repo.update_persona(store, persona_id, updates)
    return Response(status_code=204)


@router.delete("/personas/{persona_id}", status_code=204)
def delete_persona(
    persona_id: str,
    store: RecordStore = Depends(get_store),
) -> Response:
    """Delete a persona."""
    repo.delete_persona(store, persona_id)
    return Response(status_code=204)
