"""Auth Schemas — users, roles and permissions."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PermissionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class PermissionUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)


class PermissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)


class RoleUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=50)


class RoleRead(BaseModel):
    id: int
    name: str
    permissions: list[PermissionRead] = []


class AssignPermissions(BaseModel):
    """Permission ids to add to a role; ids already assigned are skipped."""
    permission_ids: list[int] = Field(min_length=1)


def _normalize_email(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip().lower()
    if "@" not in v:
        raise ValueError("email must contain '@'")
    return v


class UserCreate(BaseModel):
    """New user. password_hash arrives already hashed from the identity collaborator."""
    email: str = Field(min_length=3, max_length=255)
    password_hash: str = Field(min_length=1, max_length=255)
    role_name: str = Field(min_length=1, max_length=50)

    normalize_email = field_validator("email")(_normalize_email)


class UserUpdate(BaseModel):
    """Partial user change; a new email is normalized like on create."""
    email: str | None = Field(None, min_length=3, max_length=255)
    role_id: int | None = None

    normalize_email = field_validator("email")(_normalize_email)


class UserRead(BaseModel):
    id: int
    email: str
    role: RoleRead
