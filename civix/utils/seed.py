"""
Technician roster seeding from a JSON file.

File shape: {"technicians": {"<id>": {...technician fields...}}}
"""

from typing import List
import json
import logging

from civix.models.technician import Technician
from civix.services.store.base import DispatchStore

logger = logging.getLogger(__name__)


def load_seed(path: str) -> List[Technician]:
    with open(path, "r", encoding="utf-8") as f:
        seed = json.load(f)

    technicians = []
    for tech_id, data in seed.get("technicians", {}).items():
        technicians.append(Technician(id=tech_id, **data))
    return technicians


def seed_store(store: DispatchStore, technicians: List[Technician], apply: bool = True) -> int:
    """
    Write technicians to the store.

    Returns:
        Number of technicians written (0 on a dry run)
    """
    written = 0
    for technician in technicians:
        logger.info(f"Preparing: technicians/{technician.id} ({technician.specialization})")
        if not apply:
            continue
        store.save_technician(technician)
        written += 1
    return written
