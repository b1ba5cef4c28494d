import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from clinic_ledger.core.config import settings
from clinic_ledger.routers import cash_drawer, catalog, patients, records, settlements

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

OPENAPI_TAGS = [
    {"name": "Records", "description": "Register services, pay open records and list entries."},
    {"name": "Patients", "description": "Search patients and their credit balance."},
    {"name": "Cash Drawer", "description": "Read and correct the cash on hand of a site."},
    {"name": "Settlements", "description": "Run, browse and export practitioner settlements."},
    {"name": "Catalog", "description": "Sites, staff, services, payment methods and accounts."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Billing and settlement backend for dental clinics. "
        "Tracks services rendered, payments and deposits, the cash drawer "
        "and practitioner settlements."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)


@app.middleware("http")
async def options_handler(request: Request, call_next):  # type: ignore[no-untyped-def]
    if request.method == "OPTIONS":
        origin = request.headers.get("origin", "*")
        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Methods": "*",
                "Access-Control-Allow-Headers": "*",
                "Access-Control-Allow-Credentials": "true",
                "Access-Control-Max-Age": "86400",
            },
        )
    return await call_next(request)


app.include_router(records.router, prefix="/v1/records", tags=["Records"])
app.include_router(patients.router, prefix="/v1/patients", tags=["Patients"])
app.include_router(cash_drawer.router, prefix="/v1/cash_drawer", tags=["Cash Drawer"])
app.include_router(settlements.router, prefix="/v1/settlements", tags=["Settlements"])
app.include_router(catalog.router, prefix="/v1/catalog", tags=["Catalog"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
