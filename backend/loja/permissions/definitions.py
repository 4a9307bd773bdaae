# Overview: Grant definitions per role.
# Each grant is defined as: (role, resource, operations, description)

from .categories import AccessRole, Operation, Resource


# -- GERENCIA --

MANAGER_GRANTS = [
    (
        AccessRole.MANAGER,
        resource,
        Operation.ALL,
        "Full access to the store database",
    )
    for resource in Resource.ALL
]


# -- FUNCIONARIO --

EMPLOYEE_GRANTS = [
    (
        AccessRole.EMPLOYEE,
        Resource.EMPLOYEE_PRODUCTS_VIEW,
        (Operation.SELECT,),
        "Read the staff catalog projection",
    ),
    (
        AccessRole.EMPLOYEE,
        Resource.CUSTOMERS,
        (Operation.SELECT,),
        "Look up customers at the till",
    ),
    (
        AccessRole.EMPLOYEE,
        Resource.EMPLOYEES,
        (Operation.SELECT,),
        "Look up staff members",
    ),
    (
        AccessRole.EMPLOYEE,
        Resource.SALES,
        Operation.ALL,
        "Open, reconcile and remove sales",
    ),
    (
        AccessRole.EMPLOYEE,
        Resource.SALE_ITEMS,
        Operation.ALL,
        "Ring up sale items",
    ),
]


# -- CLIENTE --

CUSTOMER_GRANTS = [
    (
        AccessRole.CUSTOMER,
        Resource.CUSTOMER_PRODUCTS_VIEW,
        (Operation.SELECT,),
        "Browse the customer catalog projection",
    ),
]


GRANT_DEFINITIONS = MANAGER_GRANTS + EMPLOYEE_GRANTS + CUSTOMER_GRANTS


ROLE_DESCRIPTIONS = {
    AccessRole.MANAGER: "Store management (full access)",
    AccessRole.EMPLOYEE: "Sales staff",
    AccessRole.CUSTOMER: "Customer catalog access",
}
