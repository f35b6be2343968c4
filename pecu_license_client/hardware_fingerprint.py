import hashlib
import platform
import uuid
from functools import lru_cache
from typing import Optional

import psutil

from .config import settings

@lru_cache(maxsize=1)
def get_hardware_fingerprint() -> str:
    """
    Hash stable machine identifiers into a hardware id for license binding.

    MAC address, logical CPU count, OS and architecture are combined and
    hashed, so the raw identifiers never leave the machine.
    """
    mac = "{:012x}".format(uuid.getnode())
    cpu_count = psutil.cpu_count(logical=True) or 0

    fingerprint_data = f"{mac}|{cpu_count}|{platform.system()}|{platform.machine()}"
    return hashlib.sha256(fingerprint_data.encode()).hexdigest()

def resolve_hardware_hash(hardware_hash: Optional[str] = None) -> str:
    """
    Pick the hardware hash sent with a validation request.

    An explicit value wins. Otherwise the machine fingerprint is used when
    USE_HARDWARE_FINGERPRINT is on, and the fixed placeholder when it is off.
    """
    if hardware_hash:
        return hardware_hash
    if settings.USE_HARDWARE_FINGERPRINT:
        return get_hardware_fingerprint()
    return settings.DEFAULT_HARDWARE_HASH
