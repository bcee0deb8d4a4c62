"""
Main application file for OohPay.
Exposes the compensation and analytics engine as a JSON API.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request

from config import config
from routes.analytics import burden_distribution, frequency_matrix, interruption_correlation
from routes.compensation import calculate_compensation, get_rates
from utils.error_handler import OohPayError, handle_application_error, handle_unexpected_error

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

# FastAPI app setup
app = FastAPI(title="OohPay", version=config.VERSION)
app.add_exception_handler(OohPayError, handle_application_error)
app.add_exception_handler(Exception, handle_unexpected_error)


# Route registrations
@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": config.VERSION}


@app.get("/api/rates")
def rates_route():
    """Configured default payment rates."""
    return get_rates()


@app.post("/api/compensation")
async def compensation_route(request: Request):
    """Compensation per user and in total."""
    return await calculate_compensation(request)


@app.post("/api/analytics/frequency")
async def frequency_route(request: Request):
    """On-call frequency matrix."""
    return await frequency_matrix(request)


@app.post("/api/analytics/burden")
async def burden_route(request: Request):
    """On-call burden distribution."""
    return await burden_distribution(request)


@app.post("/api/analytics/interruptions")
async def interruptions_route(request: Request):
    """Interruption/pay correlation."""
    return await interruption_correlation(request)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.is_development()
    )
