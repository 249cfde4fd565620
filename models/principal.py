# models/principal.py

from typing import Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from typing_extensions import Annotated

from models.enums import AccessLevel, AdminPage


# ===============================================================
# PRINCIPAL: who is asking, tagged by role
# ===============================================================

class AdminPrincipal(BaseModel):
    role: Literal["admin"] = "admin"


class SeoPrincipal(BaseModel):
    role: Literal["seo"] = "seo"


class CustomPrincipal(BaseModel):
    role: Literal["custom"] = "custom"
    permissions: Dict[AdminPage, AccessLevel] = {}


Principal = Annotated[
    Union[AdminPrincipal, SeoPrincipal, CustomPrincipal],
    Field(discriminator="role"),
]

_principal_adapter = TypeAdapter(Principal)


def coerce_permission_map(raw) -> Dict[AdminPage, AccessLevel]:
    """
    Turn a loosely-typed stored map into {AdminPage: AccessLevel}.
    Unknown pages are dropped; unknown or malformed levels become `none`.
    """
    if not isinstance(raw, dict):
        return {}

    resolved = {}
    for key, value in raw.items():
        try:
            page = AdminPage(key)
        except ValueError:
            continue
        try:
            resolved[page] = AccessLevel(value)
        except (ValueError, TypeError):
            resolved[page] = AccessLevel.none
    return resolved


def build_principal(role, permissions=None) -> Optional[Union[AdminPrincipal, SeoPrincipal, CustomPrincipal]]:
    """
    Build a principal from a session's role + permission map.
    Returns None for roles that are not recognised.
    """
    role_value = getattr(role, "value", role)
    payload = {"role": role_value}
    if role_value == "custom":
        payload["permissions"] = coerce_permission_map(permissions)

    try:
        return _principal_adapter.validate_python(payload)
    except ValidationError:
        return None
