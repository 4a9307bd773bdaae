"""
Access policy tests.

Verifies:
- Grant matrix for GERENCIA / FUNCIONARIO / CLIENTE
- Denied calls raise PermissionDeniedError before touching data
- Employees sell without holding grants on Produtos or MovimentacoesEstoque
- Projection views return the same rows, each readable only by its role
"""

from decimal import Decimal

import pytest

from loja.errors import InvalidArgumentError, NotFoundError
from loja.models import CUSTOMER_PRODUCTS_VIEW, EMPLOYEE_PRODUCTS_VIEW, StockMovement, User
from loja.permissions import AccessRole, Operation, Resource, get_role_grants
from loja.services import account_service, catalog_service, people_service, sales_service
from loja.services.permission_service import (
    AccessPolicy,
    DEFAULT_POLICY,
    PermissionDeniedError,
    context_for_role,
    context_for_user,
)
from loja.services.projection_service import list_product_projection


# =============================================================================
# GRANT MATRIX
# =============================================================================


class TestGrantMatrix:

    @pytest.mark.parametrize("resource", Resource.ALL)
    @pytest.mark.parametrize("operation", Operation.ALL)
    def test_manager_has_everything(self, resource, operation):
        assert DEFAULT_POLICY.allows(AccessRole.MANAGER, resource, operation)

    def test_employee_grants(self):
        expected = {
            (Resource.EMPLOYEE_PRODUCTS_VIEW, Operation.SELECT),
            (Resource.CUSTOMERS, Operation.SELECT),
            (Resource.EMPLOYEES, Operation.SELECT),
        }
        expected |= {(Resource.SALES, op) for op in Operation.ALL}
        expected |= {(Resource.SALE_ITEMS, op) for op in Operation.ALL}

        assert DEFAULT_POLICY.grants_for(AccessRole.EMPLOYEE) == expected

    def test_customer_grants(self):
        assert DEFAULT_POLICY.grants_for(AccessRole.CUSTOMER) == {
            (Resource.CUSTOMER_PRODUCTS_VIEW, Operation.SELECT),
        }

    @pytest.mark.parametrize("resource,operation", [
        (Resource.PRODUCTS, Operation.SELECT),
        (Resource.PRODUCTS, Operation.UPDATE),
        (Resource.STOCK_MOVEMENTS, Operation.INSERT),
        (Resource.CUSTOMER_PRODUCTS_VIEW, Operation.SELECT),
        (Resource.CUSTOMERS, Operation.INSERT),
        (Resource.USERS, Operation.SELECT),
    ])
    def test_employee_denied(self, resource, operation):
        assert not DEFAULT_POLICY.allows(AccessRole.EMPLOYEE, resource, operation)

    def test_policy_size(self):
        manager = len(Resource.ALL) * len(Operation.ALL)
        employee = 3 + 2 * len(Operation.ALL)
        assert len(DEFAULT_POLICY) == manager + employee + 1

    def test_role_grants_listing(self):
        grants = get_role_grants(AccessRole.CUSTOMER)
        assert grants == [{
            "role": AccessRole.CUSTOMER,
            "resource": Resource.CUSTOMER_PRODUCTS_VIEW,
            "operations": [Operation.SELECT],
            "description": "Browse the customer catalog projection",
        }]

    def test_custom_policy(self):
        policy = AccessPolicy([(AccessRole.CUSTOMER, Resource.PRODUCTS, Operation.SELECT)])
        access = context_for_role(AccessRole.CUSTOMER, policy=policy)

        assert access.can(Resource.PRODUCTS, Operation.SELECT)
        assert not access.can(Resource.CUSTOMER_PRODUCTS_VIEW, Operation.SELECT)

    def test_policy_rejects_unknown_grant(self):
        with pytest.raises(InvalidArgumentError):
            AccessPolicy([(AccessRole.CUSTOMER, "Fornecedores", Operation.SELECT)])


# =============================================================================
# ACCESS CONTEXTS
# =============================================================================


class TestAccessContext:

    def test_unknown_role(self):
        with pytest.raises(InvalidArgumentError):
            context_for_role("ADMIN")

    def test_context_for_user(self, db_session):
        account_service.ensure_default_accounts()
        user = db_session.query(User).filter_by(name="funcionario").one()

        access = context_for_user(user.id)

        assert access.role == AccessRole.EMPLOYEE
        assert access.user_id == user.id

    def test_context_for_unknown_user(self, db_session):
        with pytest.raises(NotFoundError):
            context_for_user(999999)

    def test_denial_carries_grant(self, customer_access):
        with pytest.raises(PermissionDeniedError) as exc:
            customer_access.require((Resource.SALES, Operation.INSERT))

        assert exc.value.role == AccessRole.CUSTOMER
        assert exc.value.resource == Resource.SALES
        assert exc.value.operation == Operation.INSERT


# =============================================================================
# ENFORCEMENT IN SERVICES
# =============================================================================


class TestServiceEnforcement:

    def test_employee_cannot_adjust_stock(self, db_session, make_product, employee_access, manager_access):
        product = make_product(stock=10)

        with pytest.raises(PermissionDeniedError):
            catalog_service.adjust_stock(product.id, "Entrada", 5, access=employee_access)

        assert catalog_service.available_stock(product.id, access=manager_access) == 10
        assert db_session.query(StockMovement).filter_by(product_id=product.id).count() == 1

    def test_customer_cannot_open_sale(self, buyer, clerk, customer_access):
        with pytest.raises(PermissionDeniedError):
            sales_service.create_sale(buyer.id, clerk.id, access=customer_access)

    def test_customer_cannot_read_stock(self, make_product, customer_access):
        product = make_product()

        with pytest.raises(PermissionDeniedError):
            catalog_service.available_stock(product.id, access=customer_access)

    def test_employee_cannot_register_customer(self, db_session, employee_access):
        with pytest.raises(PermissionDeniedError):
            people_service.create_customer("Carla", access=employee_access)

    def test_employee_sells_without_catalog_grants(self, make_product, open_sale, employee_access, manager_access):
        product = make_product(price="3.00", stock=4)
        sale = open_sale()

        sales_service.add_item(sale.id, product.id, 4, access=employee_access)

        assert catalog_service.available_stock(product.id, access=manager_access) == 0

    def test_denied_before_validation(self, customer_access):
        # Permission is checked before arguments are parsed
        with pytest.raises(PermissionDeniedError):
            catalog_service.adjust_stock(1, "bogus", -1, access=customer_access)


# =============================================================================
# PROJECTIONS
# =============================================================================


class TestProjections:

    def test_views_expose_same_rows(self, make_product, customer_access, employee_access):
        make_product(name="Borracha", price="1.25", stock=3)
        make_product(name="Régua", price="4.00", stock=0)

        customer_rows = list_product_projection(access=customer_access)
        employee_rows = list_product_projection(access=employee_access)

        assert customer_rows == employee_rows
        assert [(r["name"], r["price"], r["stock"]) for r in customer_rows] == [
            ("Borracha", Decimal("1.25"), 3),
            ("Régua", Decimal("4.00"), 0),
        ]

    def test_projection_reflects_stock_changes(self, make_product, manager_access, customer_access):
        product = make_product(stock=5)
        catalog_service.adjust_stock(product.id, "Saída", 2, access=manager_access)

        rows = list_product_projection(CUSTOMER_PRODUCTS_VIEW, access=customer_access)

        assert rows == [{"id": product.id, "name": "Caderno", "price": Decimal("5.00"), "stock": 3}]

    def test_customer_cannot_read_staff_view(self, db_session, customer_access):
        with pytest.raises(PermissionDeniedError):
            list_product_projection(EMPLOYEE_PRODUCTS_VIEW, access=customer_access)

    def test_employee_cannot_read_customer_view(self, db_session, employee_access):
        with pytest.raises(PermissionDeniedError):
            list_product_projection(CUSTOMER_PRODUCTS_VIEW, access=employee_access)

    def test_manager_reads_both(self, make_product, manager_access):
        make_product()

        assert list_product_projection(CUSTOMER_PRODUCTS_VIEW, access=manager_access) == \
            list_product_projection(EMPLOYEE_PRODUCTS_VIEW, access=manager_access)

    def test_unknown_view(self, db_session, manager_access):
        with pytest.raises(InvalidArgumentError):
            list_product_projection("Produtos", access=manager_access)
