"""create_translation_tables

Revision ID: 5e1c7a9d2b40
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5e1c7a9d2b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "languages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_languages_code"), "languages", ["code"], unique=True)

    op.create_table(
        "translations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("language_id", sa.Integer(), nullable=False),
        sa.Column("key_name", sa.String(length=255), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("context", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["language_id"], ["languages.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "project_id", "language_id", "key_name", name="uq_translation_project_lang_key"
        ),
    )
    op.create_index(
        op.f("ix_translations_project_id"), "translations", ["project_id"], unique=False
    )
    op.create_index(
        "ix_translations_project_key", "translations", ["project_id", "key_name"], unique=False
    )

    op.create_table(
        "translation_histories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("translation_id", sa.Integer(), nullable=True),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("key_name", sa.String(length=255), nullable=False),
        sa.Column("language_id", sa.Integer(), nullable=False),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("operation", sa.String(length=10), nullable=False),
        sa.Column("operated_by", sa.Integer(), nullable=False),
        sa.Column("operated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("metadata", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_translation_histories_translation_id"),
        "translation_histories",
        ["translation_id"],
        unique=False,
    )
    op.create_index(
        "ix_translation_histories_project_operated",
        "translation_histories",
        ["project_id", "operated_at"],
        unique=False,
    )
    op.create_index(
        "ix_translation_histories_user_operated",
        "translation_histories",
        ["operated_by", "operated_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_translation_histories_user_operated", table_name="translation_histories")
    op.drop_index("ix_translation_histories_project_operated", table_name="translation_histories")
    op.drop_index(
        op.f("ix_translation_histories_translation_id"), table_name="translation_histories"
    )
    op.drop_table("translation_histories")
    op.drop_index("ix_translations_project_key", table_name="translations")
    op.drop_index(op.f("ix_translations_project_id"), table_name="translations")
    op.drop_table("translations")
    op.drop_index(op.f("ix_languages_code"), table_name="languages")
    op.drop_table("languages")
