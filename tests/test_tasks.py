"""Tests for background tasks."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from couponflow.models.sms_template import SmsTemplateType
from couponflow.schemas.sms_template import SmsSendRequest
from couponflow.tasks import enqueue_send_coupon_sms, enqueue_task, get_redis_pool


def _sms_request():
    return SmsSendRequest(
        type=SmsTemplateType.VERIFY,
        phone="01012345678",
        coupon_code="ABCD2345",
        discount_label="무료 입장",
        headcount_label="2인",
        issued_branch="GDXC",
        verified_branch="NWXC",
        verified_at="2026-03-01T12:00:00+00:00",
    )


class TestTasks:
    @pytest.mark.asyncio
    async def test_get_redis_pool(self):
        """Test get_redis_pool creates a pool."""
        mock_pool = MagicMock()

        with patch("couponflow.tasks.create_pool", new_callable=AsyncMock) as mock_create:
            mock_create.return_value = mock_pool

            result = await get_redis_pool()

            assert result == mock_pool
            mock_create.assert_called_once()

    @pytest.mark.asyncio
    async def test_enqueue_task(self):
        """Test enqueue_task enqueues a job and closes the pool."""
        mock_job = MagicMock()
        mock_job.job_id = "job-123"

        mock_pool = MagicMock()
        mock_pool.enqueue_job = AsyncMock(return_value=mock_job)
        mock_pool.close = AsyncMock()

        with patch("couponflow.tasks.get_redis_pool", new_callable=AsyncMock) as mock_get_pool:
            mock_get_pool.return_value = mock_pool

            result = await enqueue_task("my_task", "arg1", kwarg1="value1")

            assert result == mock_job
            mock_pool.enqueue_job.assert_called_once_with("my_task", "arg1", kwarg1="value1")
            mock_pool.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_enqueue_task_closes_pool_on_error(self):
        """Test enqueue_task closes pool even when job enqueue fails."""
        mock_pool = MagicMock()
        mock_pool.enqueue_job = AsyncMock(side_effect=Exception("Redis error"))
        mock_pool.close = AsyncMock()

        with patch("couponflow.tasks.get_redis_pool", new_callable=AsyncMock) as mock_get_pool:
            mock_get_pool.return_value = mock_pool

            with pytest.raises(Exception, match="Redis error"):
                await enqueue_task("failing_task")

            mock_pool.close.assert_called_once()


class TestEnqueueSendCouponSms:
    @pytest.mark.asyncio
    async def test_enqueues_camel_case_payload(self):
        mock_job = MagicMock()
        with patch("couponflow.tasks.enqueue_task", new_callable=AsyncMock) as mock_enqueue:
            mock_enqueue.return_value = mock_job

            result = await enqueue_send_coupon_sms(_sms_request())

        assert result == mock_job
        task_name, payload = mock_enqueue.call_args.args
        assert task_name == "send_coupon_sms_task"
        assert payload["type"] == "verify"
        assert payload["couponCode"] == "ABCD2345"
        assert payload["verifiedBranch"] == "NWXC"
        assert payload["discountLabel"] == "무료 입장"

    @pytest.mark.asyncio
    async def test_redis_failure_is_swallowed(self):
        with patch(
            "couponflow.tasks.get_redis_pool",
            new_callable=AsyncMock,
            side_effect=ConnectionError("Redis unavailable"),
        ):
            result = await enqueue_send_coupon_sms(_sms_request())

        assert result is None
