"""Discount and headcount selections attached to a coupon.

Both follow the same shape: a value from a fixed catalogue, or ``CUSTOM``
together with free text. ``CouponOption`` makes the invalid combinations
(custom without text, text on a catalogue value) unrepresentable.
"""

from dataclasses import dataclass
from enum import Enum

from couponflow.models.coupon import DiscountType, HeadcountType

DISCOUNT_LABELS: dict[str, str] = {
    DiscountType.MINUS_2000.value: "2,000원",
    DiscountType.MINUS_3000.value: "3,000원",
    DiscountType.MINUS_5000.value: "5,000원",
    DiscountType.MINUS_10000.value: "10,000원",
    DiscountType.FREE.value: "무료 입장",
}

HEADCOUNT_LABELS: dict[str, str] = {
    HeadcountType.ONE.value: "1인",
    HeadcountType.TWO.value: "2인",
    HeadcountType.THREE.value: "3인",
    HeadcountType.FOUR.value: "4인",
    HeadcountType.FIVE.value: "5인",
    HeadcountType.SIX.value: "6인",
    HeadcountType.TEAM_ALL.value: "팀 전체",
}

CUSTOM = "CUSTOM"


@dataclass(frozen=True)
class CouponOption:
    """A catalogue value, or CUSTOM with non-empty trimmed text."""

    kind: Enum
    custom_text: str | None = None

    def __post_init__(self) -> None:
        if self.kind.value == CUSTOM:
            text = (self.custom_text or "").strip()
            if not text:
                raise ValueError("custom text is required for CUSTOM")
            object.__setattr__(self, "custom_text", text)
        else:
            object.__setattr__(self, "custom_text", None)

    @property
    def is_custom(self) -> bool:
        return self.kind.value == CUSTOM


def _label(value: str | None, custom_text: str | None, labels: dict[str, str]) -> str:
    if not value:
        return "-"
    if value == CUSTOM:
        return custom_text or "-"
    return labels.get(value, value)


def discount_label(value: str | None, custom_text: str | None = None) -> str:
    """Human-readable discount, e.g. ``"-5000"`` -> ``"5,000원"``."""
    return _label(value, custom_text, DISCOUNT_LABELS)


def headcount_label(value: str | None, custom_text: str | None = None) -> str:
    """Human-readable headcount, e.g. ``"TEAM_ALL"`` -> ``"팀 전체"``."""
    return _label(value, custom_text, HEADCOUNT_LABELS)
