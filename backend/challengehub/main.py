from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from scalar_fastapi import get_scalar_api_reference

from challengehub.campaign_validation.routes import router as campaign_validation_router
from challengehub.core.constants import CORS_ALLOWED_ORIGINS, SERVICE_NAME
from challengehub.core.exceptions import AppError, app_error_handler
from challengehub.proofs.routes import router as proofs_router


app = FastAPI(
    title="ChallengeHub API",
    description="Campaign standings, manager validations and proof access for the sales hierarchy.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppError, app_error_handler)

app.include_router(campaign_validation_router)
app.include_router(proofs_router)


@app.get("/scalar", include_in_schema=False)
async def scalar_html():
    return get_scalar_api_reference(
        openapi_url=app.openapi_url,
        title=app.title,
    )


@app.get("/", include_in_schema=False)
async def redirect_to_docs():
    return RedirectResponse(url="/docs")


@app.get("/health", tags=["Health"])
def health():
    """Liveness check."""
    return {"status": "ok", "service": SERVICE_NAME}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
