import msgspec

from .slo_breach import SLOBreach
from .slo_status import SLOStatus


class SLOVerdict(msgspec.Struct, frozen=True, kw_only=True):
    status: SLOStatus
    breaches: list[SLOBreach] = msgspec.field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == SLOStatus.PASS
