from typing import List, Optional

from models.schema import HoursBreakdown

# Mock snapshot store standing in for the payroll table
mock_snapshots: List[HoursBreakdown] = []


def store_snapshot(snapshot: HoursBreakdown) -> None:
    mock_snapshots.append(snapshot)


def get_last_snapshot() -> Optional[HoursBreakdown]:
    if mock_snapshots:
        return mock_snapshots[-1]
    return None


def clear_snapshots() -> None:
    mock_snapshots.clear()
