"""PolicyService — describe which traits each family may derive."""

from __future__ import annotations

from guardtype.compat import POLICIES
from guardtype.domain.types import Family
from guardtype.services.base import BaseService
from guardtype.services.result import ServiceError, ServiceResult


class PolicyService(BaseService):
    """Read-only view over the trait compatibility tables."""

    def describe(self, family: str | None = None) -> ServiceResult:
        op = "traits"
        if family is None:
            families = list(Family)
        else:
            try:
                families = [Family(family)]
            except ValueError:
                allowed = ", ".join(f.value for f in Family)
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(
                        code="UNKNOWN_FAMILY",
                        message=f"Unknown family {family!r}. Expected one of: {allowed}",
                    ),
                )

        data = {
            fam.value: [
                {"trait": trait.value, "rule": rule.describe()}
                for trait, rule in POLICIES[fam].items()
            ]
            for fam in families
        }
        return ServiceResult(ok=True, op=op, data={"families": data})
