"""
Role-based access policy

One table decides what each role may see and change. API permissions, the
``/auth/me`` flags and the client session all consult ``can_access``.
"""
import unicodedata

from rest_framework.permissions import BasePermission, SAFE_METHODS

ADMIN = 'admin'
SECRETARIA = 'secretaria'
EMPLOYEE = 'employee'

ROLES = (ADMIN, SECRETARIA, EMPLOYEE)

ROLE_ALIASES = {
    'admin': ADMIN,
    'administrador': ADMIN,
    'secretaria': SECRETARIA,
    'employee': EMPLOYEE,
    'funcionario': EMPLOYEE,
}

ALL_ROLES = frozenset(ROLES)
OFFICE = frozenset({ADMIN, SECRETARIA})
ADMIN_ONLY = frozenset({ADMIN})

# resource -> action -> roles allowed
ACCESS_POLICY = {
    'dashboard': {'view': ADMIN_ONLY, 'edit': ADMIN_ONLY},
    'events': {'view': ALL_ROLES, 'edit': ADMIN_ONLY},
    'agenda': {'view': ALL_ROLES, 'edit': ADMIN_ONLY},
    'clients': {'view': ALL_ROLES, 'edit': ADMIN_ONLY},
    'employees': {'view': OFFICE, 'edit': ADMIN_ONLY},
    'employee_payments': {'view': ADMIN_ONLY, 'edit': ADMIN_ONLY},
    'inventory': {'view': OFFICE, 'edit': ADMIN_ONLY},
    'financial': {'view': ADMIN_ONLY, 'edit': ADMIN_ONLY},
    'purchases': {'view': ADMIN_ONLY, 'edit': ADMIN_ONLY},
    'reports': {'view': ADMIN_ONLY, 'edit': ADMIN_ONLY},
    'settings': {'view': ADMIN_ONLY, 'edit': ADMIN_ONLY},
    'users': {'view': ADMIN_ONLY, 'edit': ADMIN_ONLY},
    'contracts': {'view': ADMIN_ONLY, 'edit': ADMIN_ONLY},
    'time_tracking': {'view': ALL_ROLES, 'edit': ALL_ROLES, 'manage': ADMIN_ONLY},
}

FINANCIAL_EVENT_FIELDS = (
    'contract_value', 'entry_value', 'payment_method', 'card_type',
    'payment_date', 'installments', 'installment_value',
)


def normalize_role(role):
    """Lowercase and strip accents so 'Secretária' and 'funcionário' match"""
    if not role:
        return None
    text = unicodedata.normalize('NFKD', str(role).strip().lower())
    text = ''.join(ch for ch in text if not unicodedata.combining(ch))
    return ROLE_ALIASES.get(text)


def user_role(user):
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    if user.is_superuser:
        return ADMIN
    return normalize_role(getattr(user, 'role', None))


def can_access(role, resource, action='view'):
    role = normalize_role(role)
    if role is None:
        return False
    allowed = ACCESS_POLICY.get(resource, {}).get(action)
    return bool(allowed) and role in allowed


def access_flags(role):
    """``can_access_<resource>`` flags for every resource in the policy"""
    return {f'can_access_{resource}': can_access(role, resource) for resource in ACCESS_POLICY}


def sees_financials(user):
    return user_role(user) == ADMIN


def role_access(resource, write_action='edit', read_action='view'):
    """
    Build a DRF permission class for one resource.

    Safe methods need ``read_action``; everything else needs ``write_action``.
    """
    class RoleAccess(BasePermission):
        message = 'Acesso negado'

        def has_permission(self, request, view):
            role = user_role(request.user)
            action = read_action if request.method in SAFE_METHODS else write_action
            return can_access(role, resource, action)

    RoleAccess.__name__ = f'RoleAccess_{resource}_{read_action}_{write_action}'
    return RoleAccess
