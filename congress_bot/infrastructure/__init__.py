from .task_ranges_loader import load_task_ranges_from_yaml

__all__ = ["load_task_ranges_from_yaml"]
