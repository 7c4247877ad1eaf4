from datetime import datetime, timezone
from typing import Optional

import uuid_utils


def generate_order_code(now: Optional[datetime] = None) -> str:
    """Human-readable order code: ORD-<epoch ms>-<6 random hex chars>."""
    now = now or datetime.now(timezone.utc)
    suffix = uuid_utils.uuid4().hex[:6].upper()
    return f'ORD-{int(now.timestamp() * 1000)}-{suffix}'


def generate_ticket_code() -> str:
    """Admission credential and QR payload. 122 random bits, so collisions are negligible."""
    return f'TKT-{str(uuid_utils.uuid4()).upper()}'
