"""API routes."""

from fastapi import APIRouter

from folklore_admin.api.routes import (
    auth, users, reservations, payments, foods, food_rules, pricing,
    stock, partners, staff, cashbox, events, dashboard,
)

api_router = APIRouter()

# Auth and users
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])

# Reservations
api_router.include_router(reservations.router, prefix="/reservations", tags=["reservations"])
api_router.include_router(payments.router, prefix="/payment", tags=["payments"])

# Menu, pricing and calendar
api_router.include_router(foods.router, prefix="/reservation-foods", tags=["menu"])
api_router.include_router(food_rules.price_overrides_router, prefix="/food-price-overrides", tags=["menu"])
api_router.include_router(food_rules.availability_router, prefix="/food-availability", tags=["menu"])
api_router.include_router(pricing.router, prefix="/pricing", tags=["pricing"])
api_router.include_router(pricing.disabled_dates_router, prefix="/disable-dates", tags=["pricing"])

# Stock
api_router.include_router(stock.router, prefix="/stock-items", tags=["stock"])
api_router.include_router(stock.movements_router, prefix="/stock-movements", tags=["stock"])
api_router.include_router(stock.recipes_router, prefix="/recipes", tags=["stock", "recipes"])

# Partners
api_router.include_router(partners.router, prefix="/partners", tags=["partners"])
api_router.include_router(partners.vouchers_router, prefix="/vouchers", tags=["partners", "vouchers"])
api_router.include_router(partners.commissions_router, prefix="/commission-logs", tags=["partners"])

# Staff
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])
api_router.include_router(staff.router, prefix="/staff-members", tags=["staff"], include_in_schema=False)
api_router.include_router(staff.attendance_router, prefix="/staff-attendance", tags=["staff"])
api_router.include_router(staff.formulas_router, prefix="/staffing-formulas", tags=["staff"])

# Cashbox
api_router.include_router(cashbox.router, prefix="/cashbox", tags=["cashbox"])
api_router.include_router(cashbox.cashboxes_router, prefix="/cashboxes", tags=["cashbox"])

# Events
api_router.include_router(events.router, prefix="/events", tags=["events"])

api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
