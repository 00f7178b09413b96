"""SQLAlchemy models."""

from folklore_admin.models.user import User, UserLoginLog
from folklore_admin.models.reservation import (
    Payment,
    PaymentStatus,
    PersonType,
    Reservation,
    ReservationPerson,
    ReservationStatus,
)
from folklore_admin.models.pricing import DisabledDate, PricingDateOverride, PricingDefault
from folklore_admin.models.food import FoodItemAvailability, FoodItemPriceOverride, ReservationFood
from folklore_admin.models.stock import (
    MovementType,
    Recipe,
    RecipeIngredient,
    StockItem,
    StockMovement,
    StockUnit,
)
from folklore_admin.models.partner import (
    CommissionLog,
    CommissionStatus,
    CommissionType,
    Partner,
    PartnerType,
    Voucher,
    VoucherRedemption,
    VoucherType,
)
from folklore_admin.models.staff import StaffAttendance, StaffingCategory, StaffingFormula, StaffMember
from folklore_admin.models.cashbox import (
    CashCategory,
    CashMovement,
    CashMovementType,
    Cashbox,
    CashboxClosure,
    Currency,
)
from folklore_admin.models.event import (
    Event,
    EventGuest,
    EventMenuItem,
    EventSpace,
    EventStaffAssignment,
    EventStatus,
    EventTable,
    EventType,
)

__all__ = [
    "User", "UserLoginLog",
    "Reservation", "ReservationPerson", "ReservationStatus", "PersonType", "Payment", "PaymentStatus",
    "PricingDefault", "PricingDateOverride", "DisabledDate",
    "ReservationFood", "FoodItemPriceOverride", "FoodItemAvailability",
    "StockItem", "StockMovement", "StockUnit", "MovementType", "Recipe", "RecipeIngredient",
    "Partner", "PartnerType", "Voucher", "VoucherType", "VoucherRedemption",
    "CommissionLog", "CommissionType", "CommissionStatus",
    "StaffMember", "StaffAttendance", "StaffingFormula", "StaffingCategory",
    "Cashbox", "CashMovement", "CashboxClosure", "Currency", "CashMovementType", "CashCategory",
    "Event", "EventTable", "EventGuest", "EventMenuItem", "EventStaffAssignment",
    "EventType", "EventStatus", "EventSpace",
]
