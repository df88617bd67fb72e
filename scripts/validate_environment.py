#!/usr/bin/env python3
"""Validate local FairSplit environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.domain.models import Amenities, Room, WeightField, WeightVector
from backend.repository.usage_repository import SqliteUsageCounterStore
from backend.services.allocation_service import allocate
from backend.services.rebalance_service import rebalance
from backend.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="fairsplit-env-")

    # CHECK 1: Python version >= 3.11
    if sys.version_info >= (3, 11):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.11",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable
    package_specs = [
        "fastapi",
        "uvicorn",
        "pydantic",
        "numpy",
        "pandas",
        "requests",
        "httpx",
        "pytest",
    ]
    import_errors: list[str] = []
    for module_name in package_specs:
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    try:
        # CHECK 3: Usage counter store
        try:
            settings = replace(
                get_settings(),
                database_path=Path(temp_dir) / "fairsplit_validation.db",
            )
            store = SqliteUsageCounterStore(settings)
            store.initialize_database()
            count = store.increment("helped")
            if count != 1:
                raise RuntimeError(f"expected first increment to return 1, got {count}")
            ok, line = _print_result("Usage counter store", True)
        except Exception as exc:
            ok, line = _print_result("Usage counter store", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 4: Allocation engine sums to total rent
        try:
            rooms = [
                Room(room_id="a", name="Master", size=150, amenities=Amenities(private_bathroom=True), noise_level=2, natural_light=5),
                Room(room_id="b", name="Small", size=100, noise_level=3, natural_light=3),
            ]
            split = allocate(1000.0, rooms, WeightVector(size=40, features=30, comfort=30))
            rent_sum = sum(item.rent for item in split)
            if abs(rent_sum - 1000.0) > 1e-6:
                raise RuntimeError(f"rent sum {rent_sum:.6f} != 1000")
            ok, line = _print_result(
                "Allocation engine",
                True,
                f": {split[0].rent:.2f} / {split[1].rent:.2f}",
            )
        except Exception as exc:
            ok, line = _print_result("Allocation engine", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 5: Rebalancer invariant
        try:
            weights = rebalance(WeightVector(size=50, features=50, comfort=0), WeightField.COMFORT, 100)
            if weights.as_dict() != {"size": 0, "features": 0, "comfort": 100}:
                raise RuntimeError(f"unexpected rebalance result {weights.as_dict()}")
            ok, line = _print_result("Weight rebalancer", True)
        except Exception as exc:
            ok, line = _print_result("Weight rebalancer", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" FairSplit Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
