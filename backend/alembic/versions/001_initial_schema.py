"""Initial schema — auth tables, blood catalogue, donations, seed data.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_BLOOD_TYPES = [
    (group, rh) for group in ("A", "B", "AB", "O") for rh in ("+", "-")
]

_PERMISSIONS = [
    f"{resource}_{action}"
    for resource in (
        "blood", "donor", "health_entity", "request",
        "user", "role", "permission",
    )
    for action in ("create", "read", "update", "delete")
] + ["report_read"]

_ROLE_PERMISSIONS = {
    "admin": _PERMISSIONS,
    "entity": [
        "blood_read", "donor_read", "health_entity_read", "health_entity_update",
        "request_create", "request_read", "request_update", "request_delete",
        "report_read",
    ],
    "donor": ["blood_read", "donor_read", "donor_update", "request_read"],
}


def upgrade() -> None:
    permissions = op.create_table(
        "permissions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
    )
    roles = op.create_table(
        "roles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
    )
    op.create_table(
        "role_permissions",
        sa.Column("role_id", sa.Integer, sa.ForeignKey("roles.id"), primary_key=True),
        sa.Column(
            "permission_id", sa.Integer, sa.ForeignKey("permissions.id"), primary_key=True,
        ),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role_id", sa.Integer, sa.ForeignKey("roles.id"), nullable=False),
    )
    bloods = op.create_table(
        "bloods",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("type", sa.String(2), nullable=False),
        sa.Column("rh", sa.String(1), nullable=False),
        sa.UniqueConstraint("type", "rh", name="uq_bloods_type_rh"),
    )
    op.create_table(
        "donors",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("document", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("lastname", sa.String(100), nullable=False),
        sa.Column("birth_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("blood_id", sa.Integer, sa.ForeignKey("bloods.id"), nullable=False),
    )
    op.create_table(
        "health_entities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("nit", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("institution_type", sa.String(20), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False, unique=True),
    )
    op.create_table(
        "requests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "date_created", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("quantity_needed", sa.Integer, nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("blood_id", sa.Integer, sa.ForeignKey("bloods.id"), nullable=False),
        sa.Column(
            "health_entity_id", sa.Integer, sa.ForeignKey("health_entities.id"),
            nullable=False,
        ),
    )
    op.create_index("ix_requests_health_entity_id", "requests", ["health_entity_id"])
    op.create_table(
        "blood_bags",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column(
            "donation_date", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("expiration_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("blood_id", sa.Integer, sa.ForeignKey("bloods.id"), nullable=False),
        sa.Column("donor_id", sa.Integer, sa.ForeignKey("donors.id"), nullable=False),
        sa.Column("request_id", sa.Integer, sa.ForeignKey("requests.id"), nullable=False),
    )
    op.create_index("ix_blood_bags_donor_id", "blood_bags", ["donor_id"])
    op.create_index("ix_blood_bags_request_id", "blood_bags", ["request_id"])

    # ─── Seed data ───────────────────────────────────────────────
    op.bulk_insert(bloods, [{"type": t, "rh": rh} for t, rh in _BLOOD_TYPES])
    op.bulk_insert(permissions, [{"name": name} for name in _PERMISSIONS])
    op.bulk_insert(roles, [{"name": name} for name in _ROLE_PERMISSIONS])
    for role, names in _ROLE_PERMISSIONS.items():
        for name in names:
            op.execute(
                sa.text(
                    "INSERT INTO role_permissions (role_id, permission_id) "
                    "SELECT r.id, p.id FROM roles r, permissions p "
                    "WHERE r.name = :role AND p.name = :permission",
                ).bindparams(role=role, permission=name),
            )


def downgrade() -> None:
    op.drop_index("ix_blood_bags_request_id", table_name="blood_bags")
    op.drop_index("ix_blood_bags_donor_id", table_name="blood_bags")
    op.drop_table("blood_bags")
    op.drop_index("ix_requests_health_entity_id", table_name="requests")
    op.drop_table("requests")
    op.drop_table("health_entities")
    op.drop_table("donors")
    op.drop_table("bloods")
    op.drop_table("users")
    op.drop_table("role_permissions")
    op.drop_table("roles")
    op.drop_table("permissions")
