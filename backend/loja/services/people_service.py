# Overview: Customer and employee records referenced by sales.

from __future__ import annotations

import logging

from ..errors import ConflictError, NotFoundError
from ..extensions import db
from ..models import Customer, Employee, Sale
from ..permissions import Operation, Resource
from ..validation import normalize_cpf, optional_text, require_non_negative_money, require_text
from .concurrency import run_with_retry


logger = logging.getLogger(__name__)


def _ensure_cpf_free(model, cpf: str | None) -> None:
    if cpf is None:
        return
    if db.session.query(model.id).filter_by(cpf=cpf).first():
        raise ConflictError("CPF already registered", details={"cpf": cpf})


def create_customer(name, cpf=None, *, access) -> Customer:
    access.require((Resource.CUSTOMERS, Operation.INSERT))
    name = require_text(name, "name", 120)
    cpf = normalize_cpf(cpf)

    def _op():
        _ensure_cpf_free(Customer, cpf)
        customer = Customer(name=name, cpf=cpf)
        db.session.add(customer)
        db.session.commit()
        logger.info("Customer created: customer_id=%s", customer.id)
        return customer

    return run_with_retry(_op)


def get_customer(customer_id: int, *, access) -> Customer:
    access.require((Resource.CUSTOMERS, Operation.SELECT))
    customer = db.session.get(Customer, customer_id)
    if customer is None:
        raise NotFoundError("Customer not found", details={"customer_id": customer_id})
    return customer


def delete_customer(customer_id: int, *, access) -> None:
    """RESTRICT: refused while any sale references the customer."""
    access.require((Resource.CUSTOMERS, Operation.DELETE))

    def _op():
        customer = db.session.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError("Customer not found", details={"customer_id": customer_id})
        if db.session.query(Sale.id).filter_by(customer_id=customer.id).first():
            raise ConflictError("Customer has sales", details={"customer_id": customer.id})
        db.session.delete(customer)
        db.session.commit()

    run_with_retry(_op)


def create_employee(name, cpf=None, title=None, salary=None, *, access) -> Employee:
    access.require((Resource.EMPLOYEES, Operation.INSERT))
    name = require_text(name, "name", 120)
    cpf = normalize_cpf(cpf)
    title = optional_text(title, "title", 60)
    if salary is not None:
        salary = require_non_negative_money(salary, "salary")

    def _op():
        _ensure_cpf_free(Employee, cpf)
        employee = Employee(name=name, cpf=cpf, title=title, salary=salary)
        db.session.add(employee)
        db.session.commit()
        logger.info("Employee created: employee_id=%s", employee.id)
        return employee

    return run_with_retry(_op)


def get_employee(employee_id: int, *, access) -> Employee:
    access.require((Resource.EMPLOYEES, Operation.SELECT))
    employee = db.session.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found", details={"employee_id": employee_id})
    return employee


def delete_employee(employee_id: int, *, access) -> None:
    """RESTRICT: refused while any sale references the employee."""
    access.require((Resource.EMPLOYEES, Operation.DELETE))

    def _op():
        employee = db.session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee not found", details={"employee_id": employee_id})
        if db.session.query(Sale.id).filter_by(employee_id=employee.id).first():
            raise ConflictError("Employee has sales", details={"employee_id": employee.id})
        db.session.delete(employee)
        db.session.commit()

    run_with_retry(_op)
