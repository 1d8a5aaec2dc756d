import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import CORS_ORIGINS, LOG_LEVEL
from .errors import ConfigurationError, NotFoundError, StoreError, ValidationError
from .routers import (
    chart_of_accounts,
    checks,
    customers,
    employees,
    inventory,
    journal_entries,
    loans,
    payroll,
    purchases,
    reports,
    sales,
    subscriptions,
    suppliers,
    transfers,
)

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Cafebooks API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
def handle_validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
def handle_not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(ConfigurationError)
def handle_configuration_error(request: Request, exc: ConfigurationError):
    logger.error("Chart of accounts misconfigured while handling %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})


@app.exception_handler(StoreError)
def handle_store_error(request: Request, exc: StoreError):
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


app.include_router(chart_of_accounts.router)
app.include_router(journal_entries.router)
app.include_router(purchases.router)
app.include_router(sales.router)
app.include_router(subscriptions.router)
app.include_router(payroll.router)
app.include_router(inventory.router)
app.include_router(suppliers.router)
app.include_router(customers.router)
app.include_router(employees.router)
app.include_router(transfers.router)
app.include_router(checks.router)
app.include_router(loans.router)
app.include_router(reports.router)


@app.get("/")
def root():
    return {"status": "ok"}
