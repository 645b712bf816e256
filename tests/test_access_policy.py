import pytest

from factories import build_account
from parcelhub.modules.access import AccessPolicy, Operation
from parcelhub.modules.accounts import Role
from parcelhub.modules.common.exceptions import Forbidden
from parcelhub.modules.lifecycle.models import PackageStatus

policy = AccessPolicy()


@pytest.mark.parametrize("role", [Role.ADMIN, Role.OWNER])
def test_staff_manage_but_never_pay(role):
    staff = build_account(role, "staff-1")
    for operation in (Operation.APPROVE_ORDER, Operation.SET_CUSTOMS_FEE, Operation.CREDIT_WALLET):
        assert policy.is_allowed(staff, operation, resource_owner_id="acc-1")
    assert not policy.is_allowed(staff, Operation.PAY_ORDER, resource_owner_id="acc-1")
    assert not policy.is_allowed(staff, Operation.PAY_CUSTOMS, resource_owner_id="acc-1")


def test_customer_acts_on_own_resources_only():
    customer = build_account(Role.REGULAR, "acc-1")
    assert policy.is_allowed(customer, Operation.PAY_ORDER, resource_owner_id="acc-1")
    assert not policy.is_allowed(customer, Operation.PAY_ORDER, resource_owner_id="acc-2")
    assert not policy.is_allowed(customer, Operation.APPROVE_ORDER, resource_owner_id="acc-1")
    assert not policy.is_allowed(customer, Operation.CREDIT_WALLET, resource_owner_id="acc-1")


def test_shop_only_confirms_pickup_for_its_packages():
    shop = build_account(Role.SHOP, "shop-1")
    allowed = dict(shop_account_id="shop-1", target_status=PackageStatus.RECEIVED)
    assert policy.is_allowed(shop, Operation.ADVANCE_PACKAGE, **allowed)
    assert policy.is_allowed(shop, Operation.READ_PACKAGE, shop_account_id="shop-1")
    assert not policy.is_allowed(
        shop, Operation.ADVANCE_PACKAGE, shop_account_id="shop-1", target_status=PackageStatus.IN_SHOP
    )
    assert not policy.is_allowed(shop, Operation.ADVANCE_PACKAGE, **{**allowed, "shop_account_id": "shop-2"})
    assert not policy.is_allowed(shop, Operation.PAY_CUSTOMS, shop_account_id="shop-1")


def test_inactive_accounts_are_denied_everything():
    disabled = build_account(Role.OWNER, "owner-1", is_active=False)
    assert not policy.is_allowed(disabled, Operation.READ_ORDER, resource_owner_id="owner-1")


def test_authorize_raises_forbidden():
    with pytest.raises(Forbidden):
        policy.authorize(build_account(Role.REGULAR, "acc-1"), Operation.READ_ORDER, resource_owner_id="acc-2")


def test_customer_may_only_cancel_own_package():
    customer = build_account(Role.REGULAR, "acc-1")
    assert policy.is_allowed(
        customer, Operation.ADVANCE_PACKAGE, resource_owner_id="acc-1", target_status=PackageStatus.CANCELLED
    )
    assert not policy.is_allowed(
        customer, Operation.ADVANCE_PACKAGE, resource_owner_id="acc-1", target_status=PackageStatus.RECEIVED
    )
    assert not policy.is_allowed(
        customer, Operation.ADVANCE_PACKAGE, resource_owner_id="acc-2", target_status=PackageStatus.CANCELLED
    )


def test_only_staff_edit_package_details():
    assert policy.is_allowed(build_account(Role.ADMIN, "staff-1"), Operation.EDIT_PACKAGE, resource_owner_id="acc-1")
    assert not policy.is_allowed(
        build_account(Role.REGULAR, "acc-1"), Operation.EDIT_PACKAGE, resource_owner_id="acc-1"
    )
    assert not policy.is_allowed(build_account(Role.SHOP, "shop-1"), Operation.EDIT_PACKAGE, shop_account_id="shop-1")
