"""Shipment endpoints: registration, tracking, customs and delivery progress."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from parcelhub.interfaces.http.deps import get_coordinator, get_current_account, get_db_session
from parcelhub.modules.accounts import Account
from parcelhub.modules.coordinator import TransactionCoordinator
from parcelhub.modules.lifecycle.models import PackageStatus
from parcelhub.modules.packages import Package, PackageCreateInput, PackageService
from parcelhub.schemas import (
    CustomsFeeUpdate,
    CustomsPaymentRequest,
    PackageCreate,
    PackageDetailsUpdate,
    PackageEventResponse,
    PackageListResponse,
    PackageResponse,
    PackageStatusUpdate,
    PackageTrackingResponse,
    ShopAssignment,
)

router = APIRouter()


def _list_response(packages: list[Package]) -> PackageListResponse:
    return PackageListResponse(
        total=len(packages),
        packages=[PackageResponse.model_validate(package) for package in packages],
    )


@router.post("", response_model=PackageResponse, status_code=status.HTTP_201_CREATED, summary="Register a package")
async def create_package(
    payload: PackageCreate,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PackageResponse:
    package = await PackageService.with_session(db).create_package(
        PackageCreateInput(
            owner_account_id=payload.owner_account_id,
            shop_account_id=payload.shop_account_id,
            description=payload.description,
            tracking_number=payload.tracking_number,
            order_id=payload.order_id,
            customs_fee_cents=payload.customs_fee_cents,
        ),
        account,
    )
    await db.commit()
    return PackageResponse.model_validate(package)


@router.get("/mine", response_model=PackageListResponse, summary="Packages owned by the caller")
async def list_my_packages(
    status_filter: Optional[PackageStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PackageListResponse:
    packages = await PackageService.with_session(db).list_own_packages(account, status_filter, limit, offset)
    return _list_response(packages)


@router.get("/shop", response_model=PackageListResponse, summary="Packages routed to the calling shop")
async def list_shop_packages(
    status_filter: Optional[PackageStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PackageListResponse:
    packages = await PackageService.with_session(db).list_shop_packages(account, status_filter, limit, offset)
    return _list_response(packages)


@router.get("", response_model=PackageListResponse, summary="All packages (staff)")
async def list_packages(
    status_filter: Optional[PackageStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PackageListResponse:
    packages = await PackageService.with_session(db).list_all_packages(account, status_filter, limit, offset)
    return _list_response(packages)


@router.get("/track/{tracking_number}", response_model=PackageTrackingResponse, summary="Tracking history")
async def track_package(
    tracking_number: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PackageTrackingResponse:
    tracking = await PackageService.with_session(db).track(tracking_number, account)
    return PackageTrackingResponse(
        package=PackageResponse.model_validate(tracking.package),
        events=[PackageEventResponse.model_validate(event) for event in tracking.events],
    )


@router.get("/{package_id}", response_model=PackageResponse, summary="Package details")
async def get_package(
    package_id: str,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PackageResponse:
    package = await PackageService.with_session(db).get_package(package_id, account)
    return PackageResponse.model_validate(package)


@router.patch("/{package_id}", response_model=PackageResponse, summary="Edit tracking number or description (staff)")
async def update_package_details(
    package_id: str,
    payload: PackageDetailsUpdate,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PackageResponse:
    package = await PackageService.with_session(db).update_details(
        package_id,
        account,
        tracking_number=payload.tracking_number,
        description=payload.description,
    )
    await db.commit()
    return PackageResponse.model_validate(package)


@router.put("/{package_id}/customs-fee", response_model=PackageResponse, summary="Assess the customs fee")
async def set_customs_fee(
    package_id: str,
    payload: CustomsFeeUpdate,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PackageResponse:
    package = await PackageService.with_session(db).set_customs_fee(
        package_id, payload.customs_fee_cents, account
    )
    await db.commit()
    return PackageResponse.model_validate(package)


@router.post("/{package_id}/customs-payments", response_model=PackageResponse, summary="Pay customs from the wallet")
async def pay_customs(
    package_id: str,
    payload: CustomsPaymentRequest,
    account: Account = Depends(get_current_account),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> PackageResponse:
    package = await coordinator.pay_customs(package_id, payload.amount_cents, account)
    return PackageResponse.model_validate(package)


@router.post("/{package_id}/status", response_model=PackageResponse, summary="Advance the package status")
async def advance_package(
    package_id: str,
    payload: PackageStatusUpdate,
    account: Account = Depends(get_current_account),
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> PackageResponse:
    package = await coordinator.advance_package(package_id, payload.status, account, payload.note)
    return PackageResponse.model_validate(package)


@router.put("/{package_id}/shop", response_model=PackageResponse, summary="Change the pickup shop")
async def reassign_shop(
    package_id: str,
    payload: ShopAssignment,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PackageResponse:
    package = await PackageService.with_session(db).reassign_shop(package_id, payload.shop_account_id, account)
    await db.commit()
    return PackageResponse.model_validate(package)
