"""Initial schema for SiteFlow cashflow forecasting.

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:30:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _enums() -> list[sa.Enum]:
    return [
        sa.Enum("tender", "active", "completed", "cancelled", name="project_status"),
        sa.Enum("percent", "value", name="allocation_type"),
        sa.Enum("plant", "labour", "material", "subcontractor", "other", name="cost_type"),
        sa.Enum("draft", "submitted", "approved", "rejected", name="variation_status"),
        sa.Enum("draft", "submitted", "certified", "paid", name="claim_status"),
    ]


def _id_column() -> sa.Column:
    return sa.Column("id", sa.Integer(), primary_key=True)


def _project_fk() -> sa.Column:
    return sa.Column(
        "project_id", sa.Integer(), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )


def _daily_log_fk() -> sa.Column:
    return sa.Column(
        "daily_log_id", sa.Integer(), sa.ForeignKey("daily_logs.id", ondelete="CASCADE"), nullable=False
    )


def _wbs_fk() -> sa.Column:
    return sa.Column(
        "wbs_item_id", sa.Integer(), sa.ForeignKey("wbs_items.id", ondelete="CASCADE"), nullable=False
    )


def upgrade() -> None:
    project_status, allocation_type, cost_type, variation_status, claim_status = _enums()
    for enum_type in (project_status, allocation_type, cost_type, variation_status, claim_status):
        enum_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "company_settings",
        sa.Column("id", sa.String(length=50), primary_key=True),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("default_retention_percent", sa.Numeric(5, 2), nullable=False, server_default="5"),
        sa.Column("head_office_monthly_cost", sa.Numeric(18, 2), nullable=False, server_default="50000"),
        sa.Column("bank_facility_limit", sa.Numeric(18, 2), nullable=False, server_default="500000"),
        sa.Column("gst_rate", sa.Numeric(6, 4), nullable=False, server_default="0.15"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "projects",
        _id_column(),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("client", sa.String(length=255), nullable=True),
        sa.Column("status", project_status, nullable=False, server_default="tender"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("retention_percent", sa.Numeric(5, 2), nullable=False, server_default="5"),
        sa.Column("payment_terms_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "retention_percent >= 0 AND retention_percent <= 100",
            name="ck_projects_retention_percent_range",
        ),
    )
    op.create_index("ix_projects_id", "projects", ["id"])
    op.create_index("ix_projects_code", "projects", ["code"], unique=True)
    op.create_index("ix_projects_status", "projects", ["status"])

    op.create_table(
        "plant_types",
        _id_column(),
        sa.Column("code", sa.String(length=50), nullable=False, unique=True),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(14, 2), nullable=False, server_default="0"),
    )
    op.create_table(
        "labour_types",
        _id_column(),
        sa.Column("code", sa.String(length=50), nullable=False, unique=True),
        sa.Column("role", sa.String(length=255), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(14, 2), nullable=False, server_default="0"),
    )
    op.create_table(
        "material_types",
        _id_column(),
        sa.Column("code", sa.String(length=50), nullable=False, unique=True),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("unit", sa.String(length=20), nullable=False),
        sa.Column("base_rate", sa.Numeric(14, 2), nullable=False, server_default="0"),
    )
    op.create_table(
        "subcontractor_types",
        _id_column(),
        sa.Column("code", sa.String(length=50), nullable=False, unique=True),
        sa.Column("trade", sa.String(length=255), nullable=False),
    )

    op.create_table(
        "wbs_items",
        _id_column(),
        _project_fk(),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Numeric(18, 4), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(length=20), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("duration_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_payment_milestone", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("schedule_of_rates_rate", sa.Numeric(14, 2), nullable=False, server_default="0"),
    )
    op.create_index("ix_wbs_items_project_id", "wbs_items", ["project_id"])

    op.create_table(
        "wbs_plant_assignments",
        _id_column(),
        _wbs_fk(),
        sa.Column("plant_type_id", sa.Integer(), sa.ForeignKey("plant_types.id"), nullable=False),
        sa.Column("budgeted_hours", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("hourly_rate", sa.Numeric(14, 2), nullable=False, server_default="0"),
    )
    op.create_table(
        "wbs_labour_assignments",
        _id_column(),
        _wbs_fk(),
        sa.Column("labour_type_id", sa.Integer(), sa.ForeignKey("labour_types.id"), nullable=False),
        sa.Column("budgeted_hours", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("hourly_rate", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_table(
        "wbs_material_assignments",
        _id_column(),
        _wbs_fk(),
        sa.Column("material_type_id", sa.Integer(), sa.ForeignKey("material_types.id"), nullable=False),
        sa.Column("budgeted_quantity", sa.Numeric(18, 4), nullable=False, server_default="0"),
        sa.Column("unit_rate", sa.Numeric(14, 2), nullable=False, server_default="0"),
    )
    op.create_table(
        "wbs_subcontractor_assignments",
        _id_column(),
        _wbs_fk(),
        sa.Column(
            "subcontractor_type_id", sa.Integer(), sa.ForeignKey("subcontractor_types.id"), nullable=False
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("budgeted_value", sa.Numeric(18, 2), nullable=False, server_default="0"),
    )
    for table in (
        "wbs_plant_assignments",
        "wbs_labour_assignments",
        "wbs_material_assignments",
        "wbs_subcontractor_assignments",
    ):
        op.create_index(f"ix_{table}_wbs_item_id", table, ["wbs_item_id"])

    op.create_table(
        "programme_tasks",
        _id_column(),
        _project_fk(),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("duration_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("percent_complete", sa.Numeric(5, 2), nullable=False, server_default="0"),
    )
    op.create_index("ix_programme_tasks_project_id", "programme_tasks", ["project_id"])

    op.create_table(
        "programme_wbs_mappings",
        _id_column(),
        _project_fk(),
        sa.Column(
            "programme_task_id",
            sa.Integer(),
            sa.ForeignKey("programme_tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _wbs_fk(),
        sa.Column("allocation_type", allocation_type, nullable=False, server_default="percent"),
        sa.Column("allocation_percent", sa.Numeric(7, 3), nullable=True, server_default="100"),
        sa.Column("allocation_value", sa.Numeric(18, 2), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.UniqueConstraint("programme_task_id", "wbs_item_id", name="uq_programme_wbs_mappings_task_wbs"),
    )
    op.create_index("ix_programme_wbs_mappings_project_id", "programme_wbs_mappings", ["project_id"])
    op.create_index("ix_programme_wbs_mappings_programme_task_id", "programme_wbs_mappings", ["programme_task_id"])
    op.create_index("ix_programme_wbs_mappings_wbs_item_id", "programme_wbs_mappings", ["wbs_item_id"])

    op.create_table(
        "daily_logs",
        _id_column(),
        _project_fk(),
        sa.Column("log_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_daily_logs_project_id", "daily_logs", ["project_id"])

    op.create_table(
        "actual_plant_hours",
        _id_column(),
        _daily_log_fk(),
        sa.Column("wbs_item_id", sa.Integer(), sa.ForeignKey("wbs_items.id"), nullable=False),
        sa.Column("plant_type_id", sa.Integer(), sa.ForeignKey("plant_types.id"), nullable=False),
        sa.Column("hours", sa.Numeric(10, 2), nullable=False, server_default="0"),
    )
    op.create_table(
        "actual_labour_hours",
        _id_column(),
        _daily_log_fk(),
        sa.Column("wbs_item_id", sa.Integer(), sa.ForeignKey("wbs_items.id"), nullable=False),
        sa.Column("labour_type_id", sa.Integer(), sa.ForeignKey("labour_types.id"), nullable=False),
        sa.Column("hours", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("workers", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_table(
        "actual_materials",
        _id_column(),
        _daily_log_fk(),
        sa.Column("wbs_item_id", sa.Integer(), sa.ForeignKey("wbs_items.id"), nullable=False),
        sa.Column("material_type_id", sa.Integer(), sa.ForeignKey("material_types.id"), nullable=False),
        sa.Column("quantity", sa.Numeric(18, 4), nullable=False, server_default="0"),
        sa.Column("unit_cost", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("docket_number", sa.String(length=100), nullable=True),
    )
    op.create_table(
        "actual_quantities",
        _id_column(),
        _daily_log_fk(),
        sa.Column("wbs_item_id", sa.Integer(), sa.ForeignKey("wbs_items.id"), nullable=False),
        sa.Column("quantity_completed", sa.Numeric(18, 4), nullable=False, server_default="0"),
    )
    for table in ("actual_plant_hours", "actual_labour_hours", "actual_materials", "actual_quantities"):
        op.create_index(f"ix_{table}_daily_log_id", table, ["daily_log_id"])
    op.create_index("ix_actual_quantities_wbs_item_id", "actual_quantities", ["wbs_item_id"])

    op.create_table(
        "cost_entries",
        _id_column(),
        _project_fk(),
        sa.Column("wbs_item_id", sa.Integer(), sa.ForeignKey("wbs_items.id"), nullable=True),
        sa.Column("cost_type", cost_type, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("invoice_number", sa.String(length=100), nullable=True),
        sa.Column("invoice_date", sa.Date(), nullable=True),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_cost_entries_project_id", "cost_entries", ["project_id"])

    op.create_table(
        "variations",
        _id_column(),
        _project_fk(),
        sa.Column("variation_number", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", variation_status, nullable=False, server_default="draft"),
        sa.Column("claimed_value", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("approved_value", sa.Numeric(18, 2), nullable=False, server_default="0"),
    )
    op.create_index("ix_variations_project_id", "variations", ["project_id"])

    op.create_table(
        "progress_claims",
        _id_column(),
        _project_fk(),
        sa.Column("claim_number", sa.Integer(), nullable=False),
        sa.Column("claim_period_start", sa.Date(), nullable=False),
        sa.Column("claim_period_end", sa.Date(), nullable=False),
        sa.Column("submitted_date", sa.Date(), nullable=True),
        sa.Column("this_claim", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("certified_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("status", claim_status, nullable=False, server_default="draft"),
    )
    op.create_index("ix_progress_claims_project_id", "progress_claims", ["project_id"])


def downgrade() -> None:
    for table in (
        "progress_claims",
        "variations",
        "cost_entries",
        "actual_quantities",
        "actual_materials",
        "actual_labour_hours",
        "actual_plant_hours",
        "daily_logs",
        "programme_wbs_mappings",
        "programme_tasks",
        "wbs_subcontractor_assignments",
        "wbs_material_assignments",
        "wbs_labour_assignments",
        "wbs_plant_assignments",
        "wbs_items",
        "subcontractor_types",
        "material_types",
        "labour_types",
        "plant_types",
        "projects",
        "company_settings",
    ):
        op.drop_table(table)

    for enum_type in reversed(_enums()):
        enum_type.drop(op.get_bind(), checkfirst=True)
