"""Tests for branch password checks and discount/headcount options."""

from unittest.mock import patch

import pytest

from couponflow.core.branches import BranchCode, check_branch_password
from couponflow.core.config import settings
from couponflow.models.coupon import DiscountType, HeadcountType
from couponflow.services.coupon_options import CouponOption, discount_label, headcount_label
from tests.conftest import BRANCH_PASSWORDS


class TestCheckBranchPassword:
    @pytest.mark.parametrize("branch", list(BranchCode))
    def test_each_branch_accepts_its_own_password(self, branch):
        assert check_branch_password(branch, BRANCH_PASSWORDS[branch.value]) is True

    def test_other_branch_password_rejected(self):
        assert check_branch_password(BranchCode.GDXC, BRANCH_PASSWORDS["NWXC"]) is False

    def test_empty_and_missing(self):
        assert check_branch_password(BranchCode.GDXC, "") is False
        assert check_branch_password(BranchCode.GDXC, None) is False

    def test_unknown_branch(self):
        assert check_branch_password("XXXX", "48291") is False

    def test_string_branch_code(self):
        assert check_branch_password("GDXC", "48291") is True

    def test_reads_configured_secrets(self):
        with patch.dict(settings.BRANCH_PASSWORDS, {"GDXC": "11111"}):
            assert check_branch_password(BranchCode.GDXC, "11111") is True
            assert check_branch_password(BranchCode.GDXC, "48291") is False


class TestCouponOption:
    def test_catalogue_value_drops_custom_text(self):
        option = CouponOption(kind=DiscountType.MINUS_5000, custom_text="ignored")
        assert option.custom_text is None
        assert option.is_custom is False

    def test_custom_requires_text(self):
        with pytest.raises(ValueError):
            CouponOption(kind=DiscountType.CUSTOM, custom_text="   ")
        with pytest.raises(ValueError):
            CouponOption(kind=HeadcountType.CUSTOM)

    def test_custom_text_is_trimmed(self):
        option = CouponOption(kind=HeadcountType.CUSTOM, custom_text="  최대 8인 ")
        assert option.custom_text == "최대 8인"
        assert option.is_custom is True


class TestLabels:
    def test_discount_labels(self):
        assert discount_label("-2000") == "2,000원"
        assert discount_label("-10000") == "10,000원"
        assert discount_label("FREE") == "무료 입장"
        assert discount_label("CUSTOM", "굿즈 증정") == "굿즈 증정"

    def test_headcount_labels(self):
        assert headcount_label("3") == "3인"
        assert headcount_label("TEAM_ALL") == "팀 전체"
        assert headcount_label("CUSTOM", "가족 단위") == "가족 단위"

    def test_missing_and_unknown(self):
        assert discount_label(None) == "-"
        assert headcount_label("CUSTOM", None) == "-"
        assert discount_label("-7000") == "-7000"
