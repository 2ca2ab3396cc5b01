from functools import wraps

from flask import session

from carhire.exceptions import ForbiddenError, UnauthorizedError
from carhire.models.user import Caller
from carhire.utils.constants import Role


def current_caller() -> Caller:
    """Build the caller identity from the signed session cookie."""
    if session.get("role") == Role.OPERATOR:
        return Caller.operator()
    cid = session.get("customer_id")
    if cid is not None:
        return Caller.customer(cid)
    return Caller()


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_caller().role is None:
            raise UnauthorizedError("Error: please login first")
        return fn(*args, **kwargs)

    return wrapper


def role_required(*roles):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            role = current_caller().role
            if role is None:
                raise UnauthorizedError("Error: please login first")
            if role not in roles:
                raise ForbiddenError("Error: insufficient permission")
            return fn(*args, **kwargs)

        return wrapper

    return deco


operator_required = role_required(Role.OPERATOR)
customer_required = role_required(Role.CUSTOMER)
