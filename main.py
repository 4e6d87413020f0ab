from fastapi import APIRouter, FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shared.config.database import engine, Base
from shared.config.settings import SERVICE_NAME
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from shared.security import limiter

# IMPORTANT: import models so they register with Base
from services.customer_service import models as customer_models  # noqa: F401
from services.contact_service import models as contact_models  # noqa: F401
from services.product_service import models as product_models  # noqa: F401
from services.inventory_service import models as inventory_models  # noqa: F401
from services.quotation_service import models as quotation_models  # noqa: F401
from services.order_service import models as order_models  # noqa: F401
from services.user_service import models as user_models  # noqa: F401

from services.auth_service.router import router as auth_router
from services.contact_service.router import customer_router as customer_contacts_router
from services.contact_service.router import router as contact_router
from services.customer_service.router import router as customer_router
from services.inventory_service.router import router as inventory_router
from services.order_service.router import router as order_router
from services.product_service.router import router as product_router
from services.quotation_service.router import router as quotation_router
from services.report_service.router import dashboard_router, router as report_router
from services.user_service.router import router as user_router

app = FastAPI(
    title="SCMS Backend",
    version="1.0.0",
    description="Sales and customer management back office: customers, products, inventory, quotations, orders.",
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, SERVICE_NAME)

# --- SECURITY SETUP ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- ERROR RENDERING ---
register_exception_handlers(app)

api = APIRouter(prefix="/api")


@api.get("/health")
async def health_check():
    return {"status": "healthy"}


for router in (
    auth_router,
    user_router,
    customer_router,
    customer_contacts_router,
    contact_router,
    product_router,
    inventory_router,
    quotation_router,
    order_router,
    dashboard_router,
    report_router,
):
    api.include_router(router)

app.include_router(api)


@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
