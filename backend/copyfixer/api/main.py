from fastapi import APIRouter

from copyfixer.api.routes import generate, login, product_types, reference_files, submissions, utils

api_router = APIRouter()
api_router.include_router(login.router, tags=["login"])
api_router.include_router(utils.router, tags=["utils"])
api_router.include_router(generate.router, tags=["generate"])
api_router.include_router(product_types.router, prefix="/product-types", tags=["product-types"])
api_router.include_router(reference_files.router, prefix="/upload-reference", tags=["reference-files"])
api_router.include_router(submissions.router, prefix="/submissions", tags=["submissions"])
