# Overview: Role, resource and operation constants for the store access policy.


class AccessRole:
    """Account groups; one per fixed store login (gerencia, funcionario, cliente)."""
    MANAGER = "GERENCIA"
    EMPLOYEE = "FUNCIONARIO"
    CUSTOMER = "CLIENTE"

    ALL = (MANAGER, EMPLOYEE, CUSTOMER)


class Operation:
    """Statement kinds a grant can cover."""
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    ALL = (SELECT, INSERT, UPDATE, DELETE)


class Resource:
    """Tables and views a grant can name."""
    USER_GROUPS = "grupos_usuarios"
    USERS = "usuarios"
    CUSTOMERS = "Clientes"
    EMPLOYEES = "Funcionarios"
    PRODUCTS = "Produtos"
    SALES = "Vendas"
    SALE_ITEMS = "ItensVenda"
    STOCK_MOVEMENTS = "MovimentacoesEstoque"
    CUSTOMER_PRODUCTS_VIEW = "v_produtos_cliente"
    EMPLOYEE_PRODUCTS_VIEW = "v_produtos_funcionario"

    ALL = (
        USER_GROUPS,
        USERS,
        CUSTOMERS,
        EMPLOYEES,
        PRODUCTS,
        SALES,
        SALE_ITEMS,
        STOCK_MOVEMENTS,
        CUSTOMER_PRODUCTS_VIEW,
        EMPLOYEE_PRODUCTS_VIEW,
    )
