"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(100), unique=True, nullable=False, index=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum("admin", "manager", "user", name="userrole"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login_ip", sa.String(45), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "user_login_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("login_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.String(500), nullable=True),
    )

    # Reservations
    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("reservation_date", sa.Date(), nullable=False, index=True),
        sa.Column("status", sa.String(20), nullable=False, index=True),
        sa.Column("contact_name", sa.String(255), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=False, index=True),
        sa.Column("contact_phone", sa.String(50), nullable=False),
        sa.Column("contact_nationality", sa.String(50), nullable=False),
        sa.Column("client_come_from", sa.String(255), nullable=True),
        sa.Column("contact_note", sa.Text(), nullable=True),
        sa.Column("invoice_same_as_contact", sa.Boolean(), nullable=False),
        sa.Column("invoice_name", sa.String(255), nullable=True),
        sa.Column("invoice_company", sa.String(255), nullable=True),
        sa.Column("invoice_ic", sa.String(20), nullable=True),
        sa.Column("invoice_dic", sa.String(20), nullable=True),
        sa.Column("invoice_email", sa.String(255), nullable=True),
        sa.Column("invoice_phone", sa.String(50), nullable=True),
        sa.Column("transfer_selected", sa.Boolean(), nullable=False),
        sa.Column("transfer_count", sa.Integer(), nullable=True),
        sa.Column("transfer_address", sa.String(500), nullable=True),
        sa.Column("agreement", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "reservation_persons",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "reservation_id", sa.Integer(), sa.ForeignKey("reservations.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column("person_type", sa.String(10), nullable=False),
        sa.Column("menu", sa.String(255), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("transaction_id", sa.String(64), unique=True, nullable=False, index=True),
        sa.Column("status", sa.String(20), nullable=False, index=True),
        sa.Column(
            "reservation_id", sa.Integer(), sa.ForeignKey("reservations.id", ondelete="SET NULL"),
            nullable=True, index=True,
        ),
        sa.Column("reservation_reference", sa.String(50), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
    )

    # Pricing and calendar
    op.create_table(
        "pricing_defaults",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("adult_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("child_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("infant_price", sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "pricing_date_overrides",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("override_date", sa.Date(), unique=True, nullable=False, index=True),
        sa.Column("adult_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("child_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("infant_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("reason", sa.String(255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "disabled_dates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("date_from", sa.Date(), nullable=False, index=True),
        sa.Column("date_to", sa.Date(), nullable=True),
        sa.Column("reason", sa.String(255), nullable=True),
        sa.Column("project", sa.String(50), nullable=False, index=True),
        *_timestamps(),
    )

    # Menus
    op.create_table(
        "reservation_foods",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), unique=True, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_children_menu", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "food_item_price_overrides",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "reservation_food_id", sa.Integer(), sa.ForeignKey("reservation_foods.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column("date_from", sa.Date(), nullable=False, index=True),
        sa.Column("date_to", sa.Date(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("reason", sa.String(255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "food_item_availability",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "reservation_food_id", sa.Integer(), sa.ForeignKey("reservation_foods.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column("date_from", sa.Date(), nullable=False, index=True),
        sa.Column("date_to", sa.Date(), nullable=True),
        sa.Column("available", sa.Boolean(), nullable=False),
        sa.Column("reason", sa.String(255), nullable=True),
        *_timestamps(),
    )

    # Events
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("event_type", sa.String(20), nullable=False),
        sa.Column(
            "reservation_id", sa.Integer(), sa.ForeignKey("reservations.id", ondelete="SET NULL"),
            nullable=True, index=True,
        ),
        sa.Column("event_date", sa.Date(), nullable=False, index=True),
        sa.Column("event_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("guests_paid", sa.Integer(), nullable=False),
        sa.Column("guests_free", sa.Integer(), nullable=False),
        sa.Column("spaces", sa.JSON(), nullable=False),
        sa.Column("organizer_name", sa.String(255), nullable=True),
        sa.Column("organizer_company", sa.String(255), nullable=True),
        sa.Column("contact_person", sa.String(255), nullable=True),
        sa.Column("organizer_email", sa.String(255), nullable=True),
        sa.Column("organizer_phone", sa.String(50), nullable=True),
        sa.Column("coordinator_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("language", sa.String(2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("deposit_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("deposit_paid", sa.Boolean(), nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, index=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("organization_plan", sa.Text(), nullable=True),
        sa.Column("schedule", sa.Text(), nullable=True),
        sa.Column("catering_notes", sa.Text(), nullable=True),
        sa.Column("special_requirements", sa.Text(), nullable=True),
        *_timestamps(),
    )

    # Stock and recipes
    op.create_table(
        "stock_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, index=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("unit", sa.String(10), nullable=False),
        sa.Column("quantity_available", sa.Numeric(12, 3), nullable=False),
        sa.Column("min_quantity", sa.Numeric(12, 3), nullable=True),
        sa.Column("price_per_unit", sa.Numeric(10, 2), nullable=True),
        sa.Column("supplier", sa.String(255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "stock_movements",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "stock_item_id", sa.Integer(), sa.ForeignKey("stock_items.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column("movement_type", sa.String(20), nullable=False, index=True),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("balance_after", sa.Numeric(12, 3), nullable=False),
        sa.Column("reason", sa.String(500), nullable=True),
        sa.Column(
            "reservation_id", sa.Integer(), sa.ForeignKey("reservations.id", ondelete="SET NULL"),
            nullable=True, index=True,
        ),
        sa.Column(
            "event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="SET NULL"), nullable=True, index=True
        ),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
    )

    op.create_table(
        "recipes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "reservation_food_id", sa.Integer(), sa.ForeignKey("reservation_foods.id", ondelete="SET NULL"),
            nullable=True, index=True,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("portions", sa.Integer(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "recipe_ingredients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recipe_id", sa.Integer(), sa.ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column(
            "stock_item_id", sa.Integer(), sa.ForeignKey("stock_items.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column("quantity_required", sa.Numeric(12, 3), nullable=False),
        sa.UniqueConstraint("recipe_id", "stock_item_id", name="uq_recipe_ingredient_item"),
    )

    # Partners, vouchers and commissions
    op.create_table(
        "partners",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, index=True),
        sa.Column("partner_type", sa.String(20), nullable=False),
        sa.Column("contact_person", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("commission_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("commission_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=True),
        sa.Column("bank_account", sa.String(100), nullable=True),
        sa.Column("ic", sa.String(20), nullable=True),
        sa.Column("dic", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "vouchers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(50), unique=True, nullable=False, index=True),
        sa.Column(
            "partner_id", sa.Integer(), sa.ForeignKey("partners.id", ondelete="SET NULL"), nullable=True, index=True
        ),
        sa.Column("voucher_type", sa.String(20), nullable=False),
        sa.Column("discount_value", sa.Numeric(10, 2), nullable=False),
        sa.Column("max_uses", sa.Integer(), nullable=True),
        sa.Column("current_uses", sa.Integer(), nullable=False),
        sa.Column("valid_from", sa.Date(), nullable=True),
        sa.Column("valid_to", sa.Date(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "voucher_redemptions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("voucher_id", sa.Integer(), sa.ForeignKey("vouchers.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column(
            "reservation_id", sa.Integer(), sa.ForeignKey("reservations.id", ondelete="SET NULL"),
            nullable=True, index=True,
        ),
        sa.Column("redeemed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("redeemed_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("original_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("discount_applied", sa.Numeric(10, 2), nullable=False),
        sa.Column("final_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )

    op.create_table(
        "commission_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("partner_id", sa.Integer(), sa.ForeignKey("partners.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("voucher_id", sa.Integer(), sa.ForeignKey("vouchers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("reservation_id", sa.Integer(), sa.ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True),
        sa.Column("commission_type", sa.String(30), nullable=False),
        sa.Column("base_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("commission_rate", sa.Numeric(5, 2), nullable=True),
        sa.Column("commission_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_status", sa.String(20), nullable=False, index=True),
        sa.Column("payment_method", sa.String(20), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    # Staff
    op.create_table(
        "staff_members",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("role", sa.String(100), nullable=False, index=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=True),
        sa.Column("fixed_rate", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, index=True),
        sa.Column("emergency_contact", sa.String(255), nullable=True),
        sa.Column("emergency_phone", sa.String(50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "staff_attendance",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "staff_member_id", sa.Integer(), sa.ForeignKey("staff_members.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column("attendance_date", sa.Date(), nullable=False, index=True),
        sa.Column("check_in_time", sa.Time(), nullable=True),
        sa.Column("check_out_time", sa.Time(), nullable=True),
        sa.Column("hours_worked", sa.Numeric(5, 2), nullable=False),
        sa.Column("reservation_id", sa.Integer(), sa.ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="SET NULL"), nullable=True),
        sa.Column("payment_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_paid", sa.Boolean(), nullable=False, index=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "staffing_formulas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("category", sa.String(50), nullable=False, index=True),
        sa.Column("ratio", sa.Integer(), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, index=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )

    # Cashbox
    op.create_table(
        "cashboxes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("initial_balance", sa.Numeric(12, 2), nullable=False),
        sa.Column("current_balance", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "reservation_id", sa.Integer(), sa.ForeignKey("reservations.id", ondelete="SET NULL"),
            nullable=True, index=True,
        ),
        sa.Column(
            "event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="SET NULL"), nullable=True, index=True
        ),
        sa.Column("opened_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "cash_movements",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "cashbox_id", sa.Integer(), sa.ForeignKey("cashboxes.id", ondelete="CASCADE"), nullable=True, index=True
        ),
        sa.Column("movement_type", sa.String(10), nullable=False, index=True),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("payment_method", sa.String(20), nullable=True),
        sa.Column("reference_id", sa.String(100), nullable=True),
        sa.Column(
            "reservation_id", sa.Integer(), sa.ForeignKey("reservations.id", ondelete="SET NULL"),
            nullable=True, index=True,
        ),
        sa.Column(
            "event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="SET NULL"), nullable=True, index=True
        ),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("entry_date", sa.Date(), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "cashbox_closures",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "cashbox_id", sa.Integer(), sa.ForeignKey("cashboxes.id", ondelete="CASCADE"), nullable=False, index=True
        ),
        sa.Column("expected_cash", sa.Numeric(12, 2), nullable=False),
        sa.Column("actual_cash", sa.Numeric(12, 2), nullable=False),
        sa.Column("difference", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_income", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_expense", sa.Numeric(12, 2), nullable=False),
        sa.Column("net_result", sa.Numeric(12, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("closed_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Event details
    op.create_table(
        "event_tables",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("table_name", sa.String(100), nullable=False),
        sa.Column("room", sa.String(20), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("position_x", sa.Integer(), nullable=True),
        sa.Column("position_y", sa.Integer(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "event_guests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column(
            "event_table_id", sa.Integer(), sa.ForeignKey("event_tables.id", ondelete="SET NULL"),
            nullable=True, index=True,
        ),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("nationality", sa.String(50), nullable=True),
        sa.Column("guest_type", sa.String(10), nullable=False),
        sa.Column("is_paid", sa.Boolean(), nullable=False),
        sa.Column("is_present", sa.Boolean(), nullable=False),
        sa.Column("reservation_id", sa.Integer(), sa.ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True),
        sa.Column("person_index", sa.Integer(), nullable=True),
        sa.Column(
            "menu_item_id", sa.Integer(), sa.ForeignKey("reservation_foods.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "event_menu_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column(
            "reservation_food_id", sa.Integer(), sa.ForeignKey("reservation_foods.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("menu_name", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_per_unit", sa.Numeric(10, 2), nullable=True),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("serving_time", sa.Time(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "event_staff_assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column(
            "staff_member_id", sa.Integer(), sa.ForeignKey("staff_members.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column("role", sa.String(100), nullable=True),
        sa.Column("assignment_status", sa.String(20), nullable=False),
        sa.Column("attendance_status", sa.String(20), nullable=False),
        sa.Column("hours_worked", sa.Numeric(5, 2), nullable=True),
        sa.Column("payment_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("payment_status", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("event_id", "staff_member_id", name="uq_event_staff_member"),
    )


def downgrade() -> None:
    op.drop_table("event_staff_assignments")
    op.drop_table("event_menu_items")
    op.drop_table("event_guests")
    op.drop_table("event_tables")
    op.drop_table("cashbox_closures")
    op.drop_table("cash_movements")
    op.drop_table("cashboxes")
    op.drop_table("staffing_formulas")
    op.drop_table("staff_attendance")
    op.drop_table("staff_members")
    op.drop_table("commission_logs")
    op.drop_table("voucher_redemptions")
    op.drop_table("vouchers")
    op.drop_table("partners")
    op.drop_table("recipe_ingredients")
    op.drop_table("recipes")
    op.drop_table("stock_movements")
    op.drop_table("stock_items")
    op.drop_table("events")
    op.drop_table("food_item_availability")
    op.drop_table("food_item_price_overrides")
    op.drop_table("reservation_foods")
    op.drop_table("disabled_dates")
    op.drop_table("pricing_date_overrides")
    op.drop_table("pricing_defaults")
    op.drop_table("payments")
    op.drop_table("reservation_persons")
    op.drop_table("reservations")
    op.drop_table("user_login_logs")
    op.drop_table("users")
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
