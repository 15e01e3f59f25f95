import itertools
from datetime import datetime

import pytest

import utils.file_manager as fm
from models.ledger import Ledger
from utils.business_time import to_millis


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(fm, "_DATA_DIR", tmp_path / "data")
    fm.ensure_defaults()
    return tmp_path / "data"


@pytest.fixture
def ledger(data_dir):
    # each new record is one second newer than the previous one
    ticks = itertools.count(to_millis(datetime(2024, 1, 10, 20, 0)), 1000)
    return Ledger(clock=lambda: next(ticks)).load()
