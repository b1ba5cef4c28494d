"""Reference data API endpoints: sites, staff, services, payment methods, accounts, tiers."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clinic_ledger.core.auth import get_request_context
from clinic_ledger.core.context import RequestContext
from clinic_ledger.core.database import get_db
from clinic_ledger.models.account import Account
from clinic_ledger.models.assistant import Assistant
from clinic_ledger.models.catalog_service import CatalogService, PriceList
from clinic_ledger.models.doctor import Doctor
from clinic_ledger.models.payment_method import PaymentMethod
from clinic_ledger.models.percentage_tier import PercentageTier
from clinic_ledger.models.site import Site
from clinic_ledger.repositories.account_repository import AccountRepository
from clinic_ledger.repositories.assistant_repository import AssistantRepository
from clinic_ledger.repositories.catalog_service_repository import CatalogServiceRepository
from clinic_ledger.repositories.doctor_repository import DoctorRepository
from clinic_ledger.repositories.payment_method_repository import PaymentMethodRepository
from clinic_ledger.repositories.percentage_tier_repository import PercentageTierRepository
from clinic_ledger.repositories.site_repository import SiteRepository
from clinic_ledger.schemas.account import AccountCreate, AccountResponse
from clinic_ledger.schemas.assistant import AssistantCreate, AssistantResponse
from clinic_ledger.schemas.catalog_service import CatalogServiceCreate, CatalogServiceResponse
from clinic_ledger.schemas.doctor import DoctorCreate, DoctorResponse
from clinic_ledger.schemas.payment_method import PaymentMethodCreate, PaymentMethodResponse
from clinic_ledger.schemas.percentage_tier import PercentageTierCreate, PercentageTierResponse
from clinic_ledger.schemas.site import SiteCreate, SiteResponse

router = APIRouter()


def _require_site(ctx: RequestContext) -> UUID:
    if ctx.site_id is None:
        raise HTTPException(status_code=400, detail="Select a site first")
    return ctx.site_id


def _require_admin(ctx: RequestContext) -> None:
    if not ctx.is_admin:
        raise HTTPException(status_code=403, detail="Only an admin or owner can change the catalog")


@router.get("/sites", response_model=list[SiteResponse], summary="List sites")
async def list_sites(db: Session = Depends(get_db)) -> list[Site]:
    return SiteRepository(db).get_all()


@router.post("/sites", response_model=SiteResponse, status_code=201, summary="Create site")
async def create_site(
    data: SiteCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> Site:
    _require_admin(ctx)
    try:
        return SiteRepository(db).create(data)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Site already exists") from None


@router.get("/doctors", response_model=list[DoctorResponse], summary="List doctors")
async def list_doctors(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[Doctor]:
    """Doctors of the selected site."""
    return DoctorRepository(db).get_all(_require_site(ctx))


@router.post("/doctors", response_model=DoctorResponse, status_code=201, summary="Create doctor")
async def create_doctor(
    data: DoctorCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> Doctor:
    _require_admin(ctx)
    try:
        return DoctorRepository(db).create(data)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Doctor already exists") from None


@router.get("/assistants", response_model=list[AssistantResponse], summary="List assistants")
async def list_assistants(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[Assistant]:
    """Assistants of the selected site."""
    return AssistantRepository(db).get_all(_require_site(ctx))


@router.post(
    "/assistants", response_model=AssistantResponse, status_code=201, summary="Create assistant"
)
async def create_assistant(
    data: AssistantCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> Assistant:
    _require_admin(ctx)
    try:
        return AssistantRepository(db).create(data)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Assistant already exists") from None


@router.get("/services", response_model=list[CatalogServiceResponse], summary="List services")
async def list_services(
    price_list: PriceList = PriceList.STANDARD,
    db: Session = Depends(get_db),
) -> list[CatalogService]:
    """Service catalog for one price list."""
    return CatalogServiceRepository(db).get_all(price_list)


@router.post(
    "/services", response_model=CatalogServiceResponse, status_code=201, summary="Create service"
)
async def create_service(
    data: CatalogServiceCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> CatalogService:
    _require_admin(ctx)
    try:
        return CatalogServiceRepository(db).create(data)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=409, detail="Service already exists in this price list"
        ) from None


@router.get(
    "/payment_methods", response_model=list[PaymentMethodResponse], summary="List payment methods"
)
async def list_payment_methods(db: Session = Depends(get_db)) -> list[PaymentMethod]:
    return PaymentMethodRepository(db).get_all()


@router.post(
    "/payment_methods",
    response_model=PaymentMethodResponse,
    status_code=201,
    summary="Create payment method",
)
async def create_payment_method(
    data: PaymentMethodCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> PaymentMethod:
    """Create a payment method. The kind is derived from the name when omitted."""
    _require_admin(ctx)
    try:
        return PaymentMethodRepository(db).create(data)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Payment method already exists") from None


@router.get("/accounts", response_model=list[AccountResponse], summary="List accounts")
async def list_accounts(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> list[Account]:
    """Bank accounts of the selected site, for transfers."""
    return AccountRepository(db).get_all(_require_site(ctx))


@router.post("/accounts", response_model=AccountResponse, status_code=201, summary="Create account")
async def create_account(
    data: AccountCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> Account:
    _require_admin(ctx)
    return AccountRepository(db).create(data)


@router.get(
    "/percentage_tiers",
    response_model=list[PercentageTierResponse],
    summary="List percentage tiers",
)
async def list_percentage_tiers(db: Session = Depends(get_db)) -> list[PercentageTier]:
    return PercentageTierRepository(db).get_all()


@router.put(
    "/percentage_tiers",
    response_model=PercentageTierResponse,
    summary="Create or update a percentage tier",
)
async def upsert_percentage_tier(
    data: PercentageTierCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
) -> PercentageTier:
    """Set the payout fraction of a tier. Overridden tiers keep their fixed fraction."""
    _require_admin(ctx)
    return PercentageTierRepository(db).upsert(data)
