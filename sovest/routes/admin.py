"""Admin triggers for scoring and price update jobs."""
from fastapi import APIRouter, Depends, HTTPException

from sovest.deps import verify_admin
from sovest.jobs.queue import enqueue_job, get_job_status
from sovest.jobs.scoring import job_evaluate_predictions, job_update_stock_prices
from sovest.app_logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/evaluate")
async def trigger_evaluation(admin: str = Depends(verify_admin)):
    """Queue a batch evaluation of expired predictions."""
    logger.info(f"Admin {admin} triggered prediction evaluation")

    job = enqueue_job(job_evaluate_predictions, queue_name='high', job_timeout=600)

    return {
        "message": "Evaluation job enqueued",
        "job_id": job.id,
    }


@router.post("/update-prices")
async def trigger_price_update(admin: str = Depends(verify_admin)):
    """Queue a price refresh for all active stocks."""
    logger.info(f"Admin {admin} triggered stock price update")

    # Rate limited at 12s per stock by default
    job = enqueue_job(job_update_stock_prices, queue_name='low', job_timeout=1800)

    return {
        "message": "Price update job enqueued",
        "job_id": job.id,
    }


@router.get("/jobs/{job_id}")
async def job_status(job_id: str, admin: str = Depends(verify_admin)):
    """Get status of a queued job."""
    status = get_job_status(job_id)
    if not status:
        raise HTTPException(status_code=404, detail="Job not found")

    return status
