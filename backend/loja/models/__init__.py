from .auth import UserGroup, User
from .customers import Customer
from .employees import Employee
from .inventory import Product, StockMovement, MovementType
from .sales import Sale, SaleItem
from .views import PRODUCT_PROJECTIONS, CUSTOMER_PRODUCTS_VIEW, EMPLOYEE_PRODUCTS_VIEW

__all__ = [
    'UserGroup', 'User',
    'Customer', 'Employee',
    'Product', 'StockMovement', 'MovementType',
    'Sale', 'SaleItem',
    'PRODUCT_PROJECTIONS', 'CUSTOMER_PRODUCTS_VIEW', 'EMPLOYEE_PRODUCTS_VIEW',
]
