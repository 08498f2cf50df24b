"""
Best-effort save/load of the customer data snapshot.

Used to survive an application restart mid-call. Failures are logged
and reported through the return value; they never raise, and never
touch the in-memory store.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from src.schemas.customer_schema import CustomerData

logger = logging.getLogger(__name__)


def save_customer_data(snapshot: CustomerData, path: Union[str, Path]) -> bool:
    """Write the snapshot as JSON. Returns False on any I/O or encoding error."""
    path = Path(path)
    payload = {
        "saved_at": datetime.now(timezone.utc).isoformat(),
        "customer_data": dict(snapshot),
    }
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp.replace(path)
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("Could not save customer data to %s: %s", path, exc)
        return False
    logger.debug("Customer data saved to %s (%d fields)", path, len(payload["customer_data"]))
    return True


def load_customer_data(path: Union[str, Path]) -> Optional[dict[str, Any]]:
    """Read a saved snapshot. Returns None if missing or unreadable."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Could not load customer data from %s: %s", path, exc)
        return None
    data = payload.get("customer_data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        logger.warning("Saved customer data at %s has an unexpected shape", path)
        return None
    return data
