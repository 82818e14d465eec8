from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from couponflow.core.config import settings
from couponflow.routers import auth, coupons, notifications, sms_templates

OPENAPI_TAGS = [
    {"name": "Auth", "description": "Staff sign-in and current profile."},
    {"name": "Coupons", "description": "Issue, scan, look up and verify coupons."},
    {"name": "SMS Templates", "description": "Manage issue and verify message templates."},
    {"name": "Notifications", "description": "Send coupon SMS notifications."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Coupon issuance and verification for multi-branch stores. "
        "Issue single-use coupon codes, redeem them with a branch password, "
        "and notify customers by SMS."
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
    expose_headers=["X-Total-Count", "Retry-After"],
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


app.include_router(auth.router, prefix="/v1/auth", tags=["Auth"])
app.include_router(coupons.router, prefix="/v1/coupons", tags=["Coupons"])
app.include_router(sms_templates.router, prefix="/v1/sms_templates", tags=["SMS Templates"])
app.include_router(notifications.router, prefix="/v1/notifications", tags=["Notifications"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
