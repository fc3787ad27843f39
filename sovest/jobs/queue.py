"""Redis Queue setup for SoVest scoring and price update jobs."""
import redis
from rq import Queue
from rq.job import Job
from typing import Optional, Any, Dict

from sovest.config import settings
from sovest.app_logging import get_logger

logger = get_logger(__name__)

# Create Redis connection
redis_conn = redis.from_url(settings.REDIS_URL)

# Evaluation runs on high; price refreshes are slow (rate limited) and run on low
high_queue = Queue('high', connection=redis_conn)
default_queue = Queue('default', connection=redis_conn)
low_queue = Queue('low', connection=redis_conn)

QUEUES = {
    'high': high_queue,
    'default': default_queue,
    'low': low_queue,
}

TASK_DESCRIPTIONS = {
    'job_evaluate_predictions': "Evaluate expired predictions and update reputation",
    'job_update_stock_prices': "Refresh closing prices for active stocks",
    'job_initialize_default_stocks': "Track the configured default stocks",
}

# Keys of a job result that summarize the run
SUMMARY_KEYS = ('total', 'evaluated', 'errors', 'updated')


def enqueue_job(
    func,
    *args,
    queue_name: str = 'default',
    job_timeout: int = 300,
    **kwargs
) -> Job:
    """Enqueue a SoVest task, tagging it with its task name."""
    queue = QUEUES.get(queue_name, default_queue)
    task = func.__name__

    job = queue.enqueue(
        func,
        *args,
        job_timeout=job_timeout,
        description=TASK_DESCRIPTIONS.get(task, task),
        meta={'task': task},
        **kwargs
    )

    logger.info(f"Enqueued {task} as job {job.id} on {queue_name} queue")
    return job


def get_job_status(job_id: str) -> Optional[Dict[str, Any]]:
    """Status of a queued task, with its run summary once finished."""
    try:
        job = Job.fetch(job_id, connection=redis_conn)
    except Exception as e:
        logger.error(f"Error fetching job {job_id}: {e}")
        return None

    result = job.return_value()
    summary = None
    if isinstance(result, dict):
        summary = {key: result[key] for key in SUMMARY_KEYS if key in result}

    return {
        'id': job.id,
        'task': job.meta.get('task', job.func_name),
        'description': job.description,
        'status': job.get_status(),
        'summary': summary,
        'result': result,
        'error': job.exc_info,
        'created_at': job.created_at,
        'started_at': job.started_at,
        'ended_at': job.ended_at
    }
