"""
Finance back-office endpoints.

Every route requires an administrator. List and aggregate routes accept
``from``/``to`` bounds and a named ``range``; explicit bounds win.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.api.dependencies import get_current_admin, get_db
from agrofinance.core.logging import get_logger, log_error
from agrofinance.models.debt import DebtType
from agrofinance.models.transaction import TransactionType
from agrofinance.models.user import User
from agrofinance.schemas.budget import (
    BudgetAlertResponse,
    BudgetCreate,
    BudgetResponse,
    BudgetUpdate,
    BudgetUtilizationResponse,
)
from agrofinance.schemas.debt import DebtCreate, DebtResponse, DebtSummary, DebtUpdate
from agrofinance.schemas.finance import (
    DeliveryFeeIncomeResponse,
    DriverPayoutResponse,
    FarmerPayoutResponse,
    IncomeBySourceResponse,
    OrderIncomeResponse,
    OverviewResponse,
)
from agrofinance.schemas.goal import GoalCreate, GoalResponse, GoalUpdate
from agrofinance.schemas.recurring import RecurringCreate, RecurringResponse, RecurringUpdate
from agrofinance.schemas.transaction import (
    SummaryResponse,
    TransactionCreate,
    TransactionCreateResponse,
    TransactionResponse,
    TransactionUpdate,
)
from agrofinance.services.budget import BudgetService
from agrofinance.services.debt import DebtService
from agrofinance.services.goal import GoalService
from agrofinance.services.income import IncomeService
from agrofinance.services.overview import OverviewService
from agrofinance.services.payouts import PayoutService, RateType
from agrofinance.services.ranges import DateRange, build_range, to_local_naive
from agrofinance.services.recurring import RecurringService
from agrofinance.services.reports import ReportKind, ReportService, csv_filename, pdf_filename
from agrofinance.services.transaction import TransactionService

router = APIRouter(dependencies=[Depends(get_current_admin)])
logger = get_logger(__name__)


async def get_date_range(
    range_name: Optional[str] = Query(None, alias="range", description="day, week, month or lastMonth"),
    start: Optional[datetime] = Query(None, alias="from", description="Inclusive lower bound"),
    end: Optional[datetime] = Query(None, alias="to", description="Inclusive upper bound"),
) -> DateRange:
    return build_range(range_name, to_local_naive(start), to_local_naive(end))


# Transactions
@router.get("/summary", response_model=SummaryResponse)
async def get_summary(db: AsyncSession = Depends(get_db)):
    """All-time income, expenses and balance."""
    return await TransactionService(db).get_summary()


@router.get("/transactions", response_model=List[TransactionResponse])
async def list_transactions(
    type: Optional[TransactionType] = Query(None, description="INCOME or EXPENSE"),
    q: Optional[str] = Query(None, description="Search category, description and source"),
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
):
    return await TransactionService(db).list_transactions(type=type, date_range=date_range, search=q)


@router.post("/transactions", response_model=TransactionCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    data: TransactionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Book a transaction.

    Creating an expense re-checks the budgets covering its category; any that
    reached their alert threshold are returned in ``budget_alerts``.
    """
    transaction = await TransactionService(db).create_transaction(data, created_by=current_user.id)
    response = TransactionCreateResponse.model_validate(transaction)

    if transaction.type == TransactionType.EXPENSE:
        try:
            alerts = await BudgetService(db).evaluate_alerts(transaction.category)
            response.budget_alerts = [BudgetAlertResponse.model_validate(alert) for alert in alerts]
        except Exception as e:
            log_error(logger, e, action="evaluate_budget_alerts", transaction_id=transaction.id)

    return response


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(transaction_id: int, db: AsyncSession = Depends(get_db)):
    return await TransactionService(db).get_transaction(transaction_id)


@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: int,
    data: TransactionUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await TransactionService(db).update_transaction(transaction_id, data)


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(transaction_id: int, db: AsyncSession = Depends(get_db)) -> None:
    await TransactionService(db).delete_transaction(transaction_id)


# Income
@router.get("/income/orders", response_model=OrderIncomeResponse)
async def get_order_income(
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
):
    return await IncomeService(db).get_order_income(date_range)


@router.get("/income/delivery-fees", response_model=DeliveryFeeIncomeResponse)
async def get_delivery_fee_income(
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
):
    return await IncomeService(db).get_delivery_fee_income(date_range)


@router.get("/income/by-source", response_model=IncomeBySourceResponse)
async def get_income_by_source(
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
):
    return await IncomeService(db).get_income_by_source(date_range)


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
):
    overview = await OverviewService(db).get_overview(date_range)
    return OverviewResponse.model_validate(overview, from_attributes=True)


# Payouts
@router.get("/expenses/driver-payouts", response_model=DriverPayoutResponse)
async def get_driver_payouts(
    rate_type: RateType = Query(RateType.FLAT, alias="rateType"),
    rate_value: Optional[Decimal] = Query(None, alias="rateValue", description="Defaults to the flat rate"),
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
):
    return await PayoutService(db).get_driver_payouts(date_range, rate_type, rate_value)


@router.get("/expenses/farmer-payouts", response_model=FarmerPayoutResponse)
async def get_farmer_payouts(
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
):
    return await PayoutService(db).get_farmer_payouts(date_range)


# Budgets
@router.get("/budgets", response_model=List[BudgetResponse])
async def list_budgets(db: AsyncSession = Depends(get_db)):
    return await BudgetService(db).list_budgets()


@router.get("/budgets/utilization", response_model=List[BudgetUtilizationResponse])
async def list_budget_utilization(db: AsyncSession = Depends(get_db)):
    """Current-period spend for every budget."""
    return await BudgetService(db).list_utilization()


@router.post("/budgets", response_model=BudgetResponse, status_code=status.HTTP_201_CREATED)
async def create_budget(
    data: BudgetCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    return await BudgetService(db).create_budget(data, created_by=current_user.id)


@router.get("/budgets/{budget_id}", response_model=BudgetResponse)
async def get_budget(budget_id: int, db: AsyncSession = Depends(get_db)):
    return await BudgetService(db).get_budget(budget_id)


@router.get("/budgets/{budget_id}/utilization", response_model=BudgetUtilizationResponse)
async def get_budget_utilization(budget_id: int, db: AsyncSession = Depends(get_db)):
    service = BudgetService(db)
    return await service.get_utilization(await service.get_budget(budget_id))


@router.put("/budgets/{budget_id}", response_model=BudgetResponse)
async def update_budget(budget_id: int, data: BudgetUpdate, db: AsyncSession = Depends(get_db)):
    return await BudgetService(db).update_budget(budget_id, data)


@router.delete("/budgets/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget(budget_id: int, db: AsyncSession = Depends(get_db)) -> None:
    await BudgetService(db).delete_budget(budget_id)


# Goals
@router.get("/goals", response_model=List[GoalResponse])
async def list_goals(db: AsyncSession = Depends(get_db)):
    return await GoalService(db).list_goals()


@router.post("/goals", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    data: GoalCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    return await GoalService(db).create_goal(data, created_by=current_user.id)


@router.put("/goals/{goal_id}", response_model=GoalResponse)
async def update_goal(goal_id: int, data: GoalUpdate, db: AsyncSession = Depends(get_db)):
    return await GoalService(db).update_goal(goal_id, data)


@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: int, db: AsyncSession = Depends(get_db)) -> None:
    await GoalService(db).delete_goal(goal_id)


# Debts
@router.get("/debts/summary", response_model=DebtSummary)
async def get_debt_summary(db: AsyncSession = Depends(get_db)):
    return await DebtService(db).get_summary()


@router.get("/debts", response_model=List[DebtResponse])
async def list_debts(
    type: Optional[DebtType] = Query(None, description="BORROWED or LENT"),
    db: AsyncSession = Depends(get_db),
):
    return await DebtService(db).list_debts(type)


@router.post("/debts", response_model=DebtResponse, status_code=status.HTTP_201_CREATED)
async def create_debt(
    data: DebtCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    return await DebtService(db).create_debt(data, created_by=current_user.id)


@router.put("/debts/{debt_id}", response_model=DebtResponse)
async def update_debt(debt_id: int, data: DebtUpdate, db: AsyncSession = Depends(get_db)):
    return await DebtService(db).update_debt(debt_id, data)


@router.delete("/debts/{debt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_debt(debt_id: int, db: AsyncSession = Depends(get_db)) -> None:
    await DebtService(db).delete_debt(debt_id)


# Recurring
@router.get("/recurring", response_model=List[RecurringResponse])
async def list_recurring(
    active: bool = Query(False, description="Only active entries"),
    db: AsyncSession = Depends(get_db),
):
    return await RecurringService(db).list_recurring(active_only=active)


@router.post("/recurring", response_model=RecurringResponse, status_code=status.HTTP_201_CREATED)
async def create_recurring(
    data: RecurringCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    return await RecurringService(db).create_recurring(data, created_by=current_user.id)


@router.put("/recurring/{recurring_id}", response_model=RecurringResponse)
async def update_recurring(recurring_id: int, data: RecurringUpdate, db: AsyncSession = Depends(get_db)):
    return await RecurringService(db).update_recurring(recurring_id, data)


@router.delete("/recurring/{recurring_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recurring(recurring_id: int, db: AsyncSession = Depends(get_db)) -> None:
    await RecurringService(db).delete_recurring(recurring_id)


# Reports
@router.get("/reports/transactions.csv")
async def export_transactions_csv(
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
) -> Response:
    content = await ReportService(db).transactions_csv(date_range)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{csv_filename()}"'},
    )


@router.get("/reports/{kind}.pdf")
async def export_pdf_report(
    kind: ReportKind,
    date_range: DateRange = Depends(get_date_range),
    db: AsyncSession = Depends(get_db),
) -> Response:
    content = await ReportService(db).render(kind, date_range)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(kind)}"'},
    )
