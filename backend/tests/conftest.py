"""
Pytest fixtures for the store backend tests.

Provides the test database, role access contexts and catalog/sales records.
"""

from decimal import Decimal

import pytest

from loja import create_app
from loja.extensions import db
from loja.models import Customer, Employee
from loja.permissions import AccessRole
from loja.services import catalog_service, sales_service
from loja.services.permission_service import context_for_role


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture
def manager_access():
    return context_for_role(AccessRole.MANAGER)


@pytest.fixture
def employee_access():
    return context_for_role(AccessRole.EMPLOYEE)


@pytest.fixture
def customer_access():
    return context_for_role(AccessRole.CUSTOMER)


@pytest.fixture(scope='function')
def buyer(db_session):
    """A customer to attach sales to."""
    customer = Customer(name="Ana Souza", cpf="12345678909")
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture(scope='function')
def clerk(db_session):
    """An employee handling sales."""
    employee = Employee(name="Bruno Lima", cpf="98765432100", title="Vendedor", salary=Decimal("2500.00"))
    db_session.add(employee)
    db_session.commit()
    return employee


@pytest.fixture(scope='function')
def make_product(db_session, manager_access):
    """Factory: create a product with an opening stock (recorded as Entrada)."""
    def _make(name="Caderno", price="5.00", stock=10):
        return catalog_service.create_product(name, price, stock=stock, access=manager_access)
    return _make


@pytest.fixture(scope='function')
def open_sale(buyer, clerk, employee_access):
    """Factory: open an empty sale for the fixture customer and employee."""
    def _open():
        return sales_service.create_sale(buyer.id, clerk.id, access=employee_access)
    return _open
