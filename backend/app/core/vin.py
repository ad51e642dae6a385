from __future__ import annotations

import re
from typing import Any

VIN_LENGTH = 17
VIN_PATTERN = re.compile(r"[A-HJ-NPR-Z0-9]{17}")


def is_valid_vin(value: Any) -> bool:
    """True for a 17-character upper-case VIN without I, O or Q."""
    if not isinstance(value, str) or len(value) != VIN_LENGTH:
        return False
    return VIN_PATTERN.fullmatch(value) is not None
