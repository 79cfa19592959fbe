import uuid
from decimal import Decimal

from pydantic import BaseModel

from floorline.common.enums import ChangeOrderType, InstallationType, QuoteStatus


class QuoteLine(BaseModel):
    id: uuid.UUID
    installer_id: uuid.UUID | None = None
    installation_type: InstallationType = InstallationType.MANAGED
    materials_amount: Decimal | None = None
    labor_amount: Decimal | None = None
    labor_deposit_percentage: Decimal | None = None
    status: QuoteStatus = QuoteStatus.ACCEPTED

    model_config = {"from_attributes": True}


class ChangeOrderLine(BaseModel):
    id: uuid.UUID | None = None
    quote_id: uuid.UUID | None = None
    description: str = ""
    amount: Decimal | None = None
    type: ChangeOrderType = ChangeOrderType.MATERIALS

    model_config = {"from_attributes": True}


class QuoteFinancials(BaseModel):
    quote_id: uuid.UUID
    installation_type: str
    base_total: Decimal
    change_orders_total: Decimal
    subtotal: Decimal
    deposit_percent: Decimal
    quote_deposit: Decimal
    change_order_deposit: Decimal
    deposit: Decimal


class FinancialSummary(BaseModel):
    grand_total: Decimal
    total_deposit: Decimal
    balance_due: Decimal
    total_materials: Decimal
    total_labor: Decimal
    unassigned_change_orders_total: Decimal
    quotes: list[QuoteFinancials] = []


class FinancialSummaryDisplay(BaseModel):
    grand_total: str
    total_deposit: str
    balance_due: str
