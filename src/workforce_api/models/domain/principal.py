"""Signed-in principal supplied by the identity provider."""

from uuid import UUID

from pydantic import BaseModel


class Principal(BaseModel):
    """Authenticated caller and its capability flags."""

    id: UUID
    is_admin: bool = False
    can_terminate: bool = False
