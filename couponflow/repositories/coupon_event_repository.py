"""Repository for CouponEvent inserts and queries."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from couponflow.models.coupon_event import CouponEvent, CouponEventType
from couponflow.models.shared import generate_uuid


class CouponEventRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        coupon_code: str,
        event_type: CouponEventType,
        branch_code: str | None = None,
        meta: dict[str, Any] | None = None,
    ) -> CouponEvent:
        event = CouponEvent(
            id=generate_uuid(),
            coupon_code=coupon_code,
            event_type=event_type.value,
            branch_code=branch_code,
            meta=meta or {},
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event

    def get_by_coupon(
        self,
        coupon_code: str,
        skip: int = 0,
        limit: int = 100,
        event_type: CouponEventType | None = None,
    ) -> list[CouponEvent]:
        query = self.db.query(CouponEvent).filter(CouponEvent.coupon_code == coupon_code)
        if event_type is not None:
            query = query.filter(CouponEvent.event_type == event_type.value)
        return (
            query.order_by(CouponEvent.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_coupon(
        self,
        coupon_code: str,
        event_type: CouponEventType | None = None,
    ) -> int:
        query = self.db.query(CouponEvent).filter(CouponEvent.coupon_code == coupon_code)
        if event_type is not None:
            query = query.filter(CouponEvent.event_type == event_type.value)
        return query.count()
