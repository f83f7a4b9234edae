"""Role groups referenced by ``allowedEditors`` in the lifecycle documents."""

SUPER_ADMIN = "SUPER_ADMIN"
CLAIMS_EMPLOYEE = "CLAIMS_EMPLOYEE"
OPERATIONS_EMPLOYEE = "OPERATIONS_EMPLOYEE"
ADMIN_EMPLOYEE = "ADMIN_EMPLOYEE"

# All broker staff
BROKER_EMPLOYEES = [SUPER_ADMIN, CLAIMS_EMPLOYEE, OPERATIONS_EMPLOYEE, ADMIN_EMPLOYEE]

# Staff allowed to work claims
SENIOR_CLAIM_MANAGERS = [SUPER_ADMIN, CLAIMS_EMPLOYEE]

SUPER_ADMIN_ONLY = [SUPER_ADMIN]

__all__ = [
    "SUPER_ADMIN",
    "CLAIMS_EMPLOYEE",
    "OPERATIONS_EMPLOYEE",
    "ADMIN_EMPLOYEE",
    "BROKER_EMPLOYEES",
    "SENIOR_CLAIM_MANAGERS",
    "SUPER_ADMIN_ONLY",
]
