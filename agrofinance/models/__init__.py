"""Database models package"""

from agrofinance.models.base import Base, BaseModel
from agrofinance.models.budget import Budget, BudgetPeriod
from agrofinance.models.debt import Debt, DebtType
from agrofinance.models.delivery import Delivery, DeliveryStatus
from agrofinance.models.goal import Goal
from agrofinance.models.order import ItemType, Order, OrderItem, OrderStatus
from agrofinance.models.recurring import Cadence, RecurringTransaction
from agrofinance.models.transaction import FinanceTransaction, TransactionType
from agrofinance.models.user import User, UserRole

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "UserRole",
    "FinanceTransaction",
    "TransactionType",
    "Budget",
    "BudgetPeriod",
    "Goal",
    "Debt",
    "DebtType",
    "RecurringTransaction",
    "Cadence",
    "Order",
    "OrderItem",
    "OrderStatus",
    "ItemType",
    "Delivery",
    "DeliveryStatus",
]
