from enum import Enum


class SLOStatus(Enum):
    PASS = "PASS"
    FAIL = "FAIL"
