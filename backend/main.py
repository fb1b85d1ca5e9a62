from fastapi import FastAPI
from dotenv import load_dotenv

load_dotenv()
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from database import Base, engine
from datetime import datetime
import logging
import os
import models  # noqa: F401  registers every table on Base.metadata
import routers.app_config as app_config
import routers.audit_logs as audit_logs
import routers.expenses as expenses
import routers.ledgers as ledgers
import routers.parties as parties
import routers.payments as payments
import routers.products as products
import routers.purchases as purchases
import routers.returns as returns
import routers.sales as sales
import routers.stats as stats

LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging():
    """One timestamped file per process start, mirrored to the console."""
    os.makedirs(LOG_DIR, exist_ok=True)
    log_file = os.path.join(LOG_DIR, f"app_{datetime.now().strftime('%Y-%m-%d_%H-%M-%S')}.log")
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, filename=log_file, filemode='a')

    console = logging.StreamHandler()
    console.setLevel(LOG_LEVEL)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(console)


configure_logging()
logger = logging.getLogger(__name__)
logger.info("GreenLedger API starting")

Base.metadata.create_all(bind=engine)

app = FastAPI()

allowed_origins = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(',')
    if origin.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title="GreenLedger API",
        version="1.0.0",
        description="Parties, sales, purchases, payments, returns, expenses and party ledger statements",
        routes=app.routes,
    )
    # Every route expects a Cognito access token
    schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
    }
    schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = schema
    return app.openapi_schema

app.openapi = custom_openapi

for module in (parties, products, sales, purchases, payments, returns, expenses, ledgers, stats, app_config, audit_logs):
    app.include_router(module.router)
app.include_router(expenses.categories_router)


@app.get("/")
async def root():
    return {"message": "GreenLedger API is running"}
