"""RQ Worker process."""
import redis
from rq import Worker, Queue

from sovest.config import settings
from sovest.app_logging import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


def run_worker():
    """Run the RQ worker."""
    redis_conn = redis.from_url(settings.REDIS_URL)

    queues = [
        Queue('high', connection=redis_conn),
        Queue('default', connection=redis_conn),
        Queue('low', connection=redis_conn),
    ]

    worker = Worker(queues, connection=redis_conn)
    logger.info(f"Starting worker for queues: {[q.name for q in queues]}")
    worker.work()


if __name__ == '__main__':
    run_worker()
