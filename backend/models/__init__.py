from models.app_config import AppConfig
from models.audit_log import AuditLog
from models.parties import Party
from models.products import Product
from models.sales import Sale
from models.sale_items import SaleItem
from models.purchases import Purchase
from models.payments import Payment
from models.returns import Return
from models.expense_categories import ExpenseCategory
from models.expenses import Expense

__all__ = ['AppConfig', 'AuditLog', 'Expense', 'ExpenseCategory', 'Party', 'Payment', 'Product', 'Purchase', 'Return', 'Sale', 'SaleItem',]
