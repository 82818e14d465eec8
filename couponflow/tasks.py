import logging
from typing import Any

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings
from arq.jobs import Job

from couponflow.core.config import settings
from couponflow.schemas.sms_template import SmsSendRequest

logger = logging.getLogger(__name__)

# Redis connection settings
redis_settings = RedisSettings.from_dsn(settings.REDIS_URL)


async def get_redis_pool() -> ArqRedis:
    """Get or create Redis pool for arq"""
    return await create_pool(redis_settings)


async def enqueue_task(task_name: str, *args: Any, **kwargs: Any) -> Job:
    """
    Enqueue a task to the arq worker.

    Args:
        task_name: Name of the task function
        *args: Positional arguments for the task
        **kwargs: Keyword arguments for the task

    Returns:
        Job object from arq
    """
    pool = await get_redis_pool()
    try:
        job = await pool.enqueue_job(task_name, *args, **kwargs)
        return job  # type: ignore[return-value]
    finally:
        await pool.close()


async def enqueue_send_coupon_sms(request: SmsSendRequest) -> Job | None:
    """Queue a coupon SMS; enqueue failures are logged and dropped."""
    try:
        return await enqueue_task(
            "send_coupon_sms_task", request.model_dump(mode="json", by_alias=True)
        )
    except Exception:
        logger.exception("Failed to enqueue SMS for coupon %s", request.coupon_code)
        return None
