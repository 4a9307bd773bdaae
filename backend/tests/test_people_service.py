"""
Customer, employee and account tests.

Verifies:
- CPF normalization, validation and uniqueness
- Delete restricted while sales reference the person
- Default groups and accounts are seeded idempotently
"""

from decimal import Decimal

import pytest

from loja.errors import ConflictError, InvalidArgumentError, NotFoundError
from loja.models import User, UserGroup
from loja.permissions import AccessRole
from loja.services import account_service, people_service


class TestCustomers:

    def test_create_customer_normalizes_cpf(self, db_session, manager_access):
        customer = people_service.create_customer(" Diego ", "111.444.777-35", access=manager_access)

        fetched = people_service.get_customer(customer.id, access=manager_access)
        assert fetched.name == "Diego"
        assert fetched.cpf == "11144477735"
        assert fetched.to_dict()["cpf"] == "11144477735"
        assert fetched.created_at is not None

    def test_cpf_is_optional(self, db_session, manager_access):
        first = people_service.create_customer("Sem CPF 1", access=manager_access)
        second = people_service.create_customer("Sem CPF 2", "", access=manager_access)

        assert first.cpf is None
        assert second.cpf is None

    @pytest.mark.parametrize("cpf", ["123", "1234567890a", "123456789012"])
    def test_malformed_cpf(self, db_session, manager_access, cpf):
        with pytest.raises(InvalidArgumentError):
            people_service.create_customer("Elisa", cpf, access=manager_access)

    def test_duplicate_cpf(self, buyer, manager_access):
        with pytest.raises(ConflictError):
            people_service.create_customer("Outra Ana", buyer.cpf, access=manager_access)

    def test_employee_can_look_up_customer(self, buyer, employee_access):
        assert people_service.get_customer(buyer.id, access=employee_access).name == "Ana Souza"

    def test_unknown_customer(self, db_session, manager_access):
        with pytest.raises(NotFoundError):
            people_service.get_customer(999999, access=manager_access)

    def test_delete_customer_without_sales(self, buyer, manager_access):
        customer_id = buyer.id

        people_service.delete_customer(customer_id, access=manager_access)

        with pytest.raises(NotFoundError):
            people_service.get_customer(customer_id, access=manager_access)

    def test_delete_customer_with_sales_restricted(self, buyer, open_sale, manager_access):
        open_sale()

        with pytest.raises(ConflictError):
            people_service.delete_customer(buyer.id, access=manager_access)


class TestEmployees:

    def test_create_employee(self, db_session, manager_access):
        employee = people_service.create_employee(
            "Fábio", "52998224725", title="Gerente", salary="4200.5", access=manager_access
        )

        fetched = people_service.get_employee(employee.id, access=manager_access)
        assert fetched.title == "Gerente"
        assert fetched.salary == Decimal("4200.50")
        assert fetched.to_dict()["salary"] == "4200.50"

    def test_negative_salary(self, db_session, manager_access):
        with pytest.raises(InvalidArgumentError):
            people_service.create_employee("Gabi", salary="-1", access=manager_access)

    def test_delete_employee_with_sales_restricted(self, clerk, open_sale, manager_access):
        open_sale()

        with pytest.raises(ConflictError):
            people_service.delete_employee(clerk.id, access=manager_access)

    def test_delete_employee_without_sales(self, clerk, manager_access):
        employee_id = clerk.id

        people_service.delete_employee(employee_id, access=manager_access)

        with pytest.raises(NotFoundError):
            people_service.get_employee(employee_id, access=manager_access)


class TestAccounts:

    def test_default_accounts_are_idempotent(self, db_session):
        account_service.ensure_default_accounts()
        account_service.ensure_default_accounts()

        groups = {g.name for g in db_session.query(UserGroup).all()}
        assert groups == set(AccessRole.ALL)
        users = {(u.name, u.group.name) for u in db_session.query(User).all()}
        assert users == {
            ("gerencia", AccessRole.MANAGER),
            ("funcionario", AccessRole.EMPLOYEE),
            ("cliente", AccessRole.CUSTOMER),
        }

    def test_create_and_list_users(self, db_session, manager_access):
        account_service.ensure_default_groups()

        user = account_service.create_user("Helena", AccessRole.EMPLOYEE, access=manager_access)

        listed = account_service.list_users(access=manager_access)
        assert [u.id for u in listed] == [user.id]
        assert listed[0].group.name == AccessRole.EMPLOYEE
        assert listed[0].to_dict()["group"] == AccessRole.EMPLOYEE

    def test_create_user_unknown_group(self, db_session, manager_access):
        with pytest.raises(NotFoundError):
            account_service.create_user("Igor", "ADMIN", access=manager_access)
