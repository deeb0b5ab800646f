"""Derivative-convention configuration for manifold metrics."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from ..math.se3 import DEFAULT_COUPLED, DEFAULT_GLOBAL


class MetricConfig(BaseModel):
    """Jacobian conventions shared by every primitive call of a metric."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    global_: StrictBool = Field(
        default=DEFAULT_GLOBAL,
        description="Express Jacobians w.r.t. global (left) instead of local (right) perturbations"
    )
    coupled: StrictBool = Field(
        default=DEFAULT_COUPLED,
        description="Compute SE(3) instead of SU(2) x R3 Jacobians"
    )
