import os

from civix.models.technician import TechnicianStatus
from civix.services.store import MemoryDispatchStore
from civix.utils.seed import load_seed, seed_store

SEED_PATH = os.path.join(os.path.dirname(__file__), "..", "db_seed.json")


def test_load_seed():
    technicians = {t.id: t for t in load_seed(SEED_PATH)}
    assert "tech-elec-01" in technicians
    assert technicians["tech-water-02"].status == TechnicianStatus.ON_LEAVE


def test_dry_run_writes_nothing():
    store = MemoryDispatchStore()
    assert seed_store(store, load_seed(SEED_PATH), apply=False) == 0
    assert store.list_technicians() == []


def test_apply_writes_roster():
    store = MemoryDispatchStore()
    technicians = load_seed(SEED_PATH)
    assert seed_store(store, technicians) == len(technicians)
    assert store.get_technician("tech-road-01").specialization == "Roads and pavement"
