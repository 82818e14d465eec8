"""Branch codes and the shared branch-password capability check."""

import hmac
from enum import Enum

from couponflow.core.config import settings


class BranchCode(str, Enum):
    GDXC = "GDXC"
    GDXR = "GDXR"
    NWXC = "NWXC"
    GNXC = "GNXC"
    SWXC = "SWXC"


def check_branch_password(branch: BranchCode | str, password: str | None) -> bool:
    """Return True if ``password`` is the shared secret of ``branch``.

    This is the only place branch secrets are read. Unknown branches and
    missing passwords never match.
    """
    code = branch.value if isinstance(branch, BranchCode) else str(branch)
    secret = settings.BRANCH_PASSWORDS.get(code)
    if not secret or not password:
        return False
    return hmac.compare_digest(secret.encode("utf-8"), password.encode("utf-8"))
