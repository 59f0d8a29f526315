from fastapi import APIRouter

from backoffice.api.audit import audit_router
from backoffice.api.catalog import catalog_router
from backoffice.api.employees import employees_router
from backoffice.api.requests import requests_router

api_router = APIRouter()
api_router.include_router(requests_router)
api_router.include_router(employees_router)
api_router.include_router(catalog_router)
api_router.include_router(audit_router)
