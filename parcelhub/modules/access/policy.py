"""Role- and ownership-based capability checks.

Evaluated before any state mutation. A denial raises ``Forbidden``, which callers
must keep distinct from ``IllegalTransition``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from parcelhub.modules.accounts.models import Account, Role
from parcelhub.modules.common.exceptions import Forbidden
from parcelhub.modules.lifecycle.models import PackageStatus

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    READ_ORDER = "read_order"
    CREATE_ORDER = "create_order"
    PRICE_ORDER = "price_order"
    APPROVE_ORDER = "approve_order"
    PAY_ORDER = "pay_order"
    COMPLETE_ORDER = "complete_order"
    CANCEL_ORDER = "cancel_order"
    LIST_ALL = "list_all"

    READ_PACKAGE = "read_package"
    CREATE_PACKAGE = "create_package"
    EDIT_PACKAGE = "edit_package"
    SET_CUSTOMS_FEE = "set_customs_fee"
    PAY_CUSTOMS = "pay_customs"
    ADVANCE_PACKAGE = "advance_package"
    REASSIGN_SHOP = "reassign_shop"

    READ_WALLET = "read_wallet"
    CREDIT_WALLET = "credit_wallet"


STAFF_OPERATIONS = frozenset(Operation) - {Operation.PAY_ORDER, Operation.PAY_CUSTOMS}

CUSTOMER_OWN_OPERATIONS = frozenset(
    {
        Operation.READ_ORDER,
        Operation.CREATE_ORDER,
        Operation.PAY_ORDER,
        Operation.CANCEL_ORDER,
        Operation.READ_PACKAGE,
        Operation.PAY_CUSTOMS,
        Operation.REASSIGN_SHOP,
        Operation.READ_WALLET,
    }
)

SHOP_OPERATIONS = frozenset({Operation.READ_PACKAGE, Operation.ADVANCE_PACKAGE})
SHOP_TARGET_STATUSES = frozenset({PackageStatus.RECEIVED})
CUSTOMER_TARGET_STATUSES = frozenset({PackageStatus.CANCELLED})


class AccessPolicy:
    """Decides whether an actor may perform an operation on a resource."""

    def is_allowed(
        self,
        actor: Account,
        operation: Operation,
        *,
        resource_owner_id: Optional[str] = None,
        shop_account_id: Optional[str] = None,
        target_status: Optional[PackageStatus] = None,
    ) -> bool:
        if not actor.is_active:
            return False
        if actor.is_staff():
            return operation in STAFF_OPERATIONS
        if actor.role is Role.SHOP:
            if operation not in SHOP_OPERATIONS:
                return False
            if shop_account_id is None or shop_account_id != actor.id:
                return False
            if operation is Operation.ADVANCE_PACKAGE:
                return target_status in SHOP_TARGET_STATUSES
            return True
        if actor.role is Role.REGULAR:
            if resource_owner_id is None or resource_owner_id != actor.id:
                return False
            if operation is Operation.ADVANCE_PACKAGE:
                return target_status in CUSTOMER_TARGET_STATUSES
            return operation in CUSTOMER_OWN_OPERATIONS
        return False

    def authorize(
        self,
        actor: Account,
        operation: Operation,
        *,
        resource_owner_id: Optional[str] = None,
        shop_account_id: Optional[str] = None,
        target_status: Optional[PackageStatus] = None,
    ) -> None:
        allowed = self.is_allowed(
            actor,
            operation,
            resource_owner_id=resource_owner_id,
            shop_account_id=shop_account_id,
            target_status=target_status,
        )
        if not allowed:
            logger.warning(
                "Denied %s for account %s (%s)", operation.value, actor.id, actor.role.value
            )
            raise Forbidden(f"{actor.role.value} account may not {operation.value.replace('_', ' ')}")


default_policy = AccessPolicy()
