import yaml
from pathlib import Path


def load_task_ranges_from_yaml(path: str) -> dict[int, str]:
    p = Path(path)
    if not p.exists():
        raise RuntimeError(f"task ranges file not found: {path}")

    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or "days" not in data:
        raise RuntimeError("Invalid task_ranges.yaml format")

    days = data["days"]
    if not isinstance(days, dict):
        raise RuntimeError("days must be a mapping of day number to range")

    ranges: dict[int, str] = {}
    for day, range_ in days.items():
        try:
            day_number = int(day)
        except (TypeError, ValueError):
            raise RuntimeError(f"Invalid day: {day!r}") from None
        if day_number < 1 or not isinstance(range_, str) or "!" not in range_:
            raise RuntimeError(f"Invalid task range entry: {day}: {range_!r}")
        ranges[day_number] = range_.strip()

    return ranges
