#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator

# Remote calls (sheets, drive, evaluator) are slower than pure bot actions.
DEFAULT_TARGETS_MS = {
    "telegram": 3000.0,
    "sheets": 1500.0,
    "drive": 3000.0,
    "evaluator": 5000.0,
}


@dataclass
class Stat:
    total: int = 0
    satisfied: int = 0
    tolerating: int = 0
    frustrated: int = 0
    total_ms: float = 0.0
    min_ms: float | None = None
    max_ms: float | None = None
    errors: Counter = field(default_factory=Counter)

    def apdex(self) -> float:
        if self.total == 0:
            return 0.0
        return (self.satisfied + 0.5 * self.tolerating) / self.total

    def avg_ms(self) -> float:
        if self.total == 0:
            return 0.0
        return self.total_ms / self.total

    def add(self, duration: float, success: bool, error: str | None, target_ms: float, factor: float) -> None:
        self.total += 1
        self.total_ms += duration
        self.min_ms = duration if self.min_ms is None else min(self.min_ms, duration)
        self.max_ms = duration if self.max_ms is None else max(self.max_ms, duration)
        if not success:
            self.errors[error or "unknown"] += 1
            self.frustrated += 1
        elif duration <= target_ms:
            self.satisfied += 1
        elif duration <= target_ms * factor:
            self.tolerating += 1
        else:
            self.frustrated += 1


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Calculate Apdex per action from the bot's metrics JSONL log."
    )
    parser.add_argument(
        "--log",
        type=Path,
        default=Path("/data/metrics/actions.log"),
        help="Path to JSONL log or directory with rotated logs (default: /data/metrics/actions.log)",
    )
    parser.add_argument(
        "--target",
        type=float,
        default=None,
        help="Satisfied threshold in ms for every action (default: per source)",
    )
    parser.add_argument(
        "--factor",
        type=float,
        default=4.0,
        help="Tolerating multiplier relative to target (default: 4x)",
    )
    parser.add_argument(
        "--source",
        action="append",
        default=None,
        help="Only count actions from this source (telegram, sheets, drive, evaluator); repeatable",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("apdex_report.md"),
        help="Where to write Markdown report (default: ./apdex_report.md)",
    )
    return parser.parse_args()


def iter_logs(path: Path) -> Iterator[Path]:
    if path.is_file():
        yield path
    elif path.is_dir():
        for entry in sorted(path.glob("*.log*")):
            if entry.is_file():
                yield entry
    else:
        raise FileNotFoundError(f"No such log file or directory: {path}")


def iter_payloads(log_path: Path) -> Iterator[Dict[str, Any]]:
    for file in iter_logs(log_path):
        with file.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line:
                    continue
                try:
                    payload = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if isinstance(payload, dict) and payload.get("action"):
                    yield payload


def aggregate_key(action: str) -> str:
    # callback:view_score, response:text, sheets:responses.append
    return action


def target_for(payload: Dict[str, Any], override: float | None) -> float:
    if override is not None:
        return override
    return DEFAULT_TARGETS_MS.get(payload.get("source") or "", 1000.0)


def collect_stats(
    log_path: Path,
    *,
    target_ms: float | None,
    tolerating_factor: float,
    sources: set[str] | None = None,
) -> dict[str, Stat]:
    stats: dict[str, Stat] = defaultdict(Stat)
    try:
        for payload in iter_payloads(log_path):
            if sources and payload.get("source") not in sources:
                continue
            stats[aggregate_key(payload["action"])].add(
                float(payload.get("duration_ms", 0)),
                bool(payload.get("success", False)),
                payload.get("error"),
                target_for(payload, target_ms),
                tolerating_factor,
            )
    except FileNotFoundError:
        print(f"[WARN] Log path '{log_path}' not found, skipping.")
        return {}
    return stats


def letter_grade(value: float) -> str:
    if value >= 0.94:
        return "A"
    if value >= 0.85:
        return "B"
    if value >= 0.70:
        return "C"
    if value >= 0.50:
        return "D"
    return "E"


def render_markdown(stats: dict[str, Stat], output: Path, target_ms: float | None, tolerating_factor: float) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    if target_ms is None:
        targets = ", ".join(f"{source} `{ms:.0f} ms`" for source, ms in DEFAULT_TARGETS_MS.items())
    else:
        targets = f"`{target_ms} ms`"
    lines: list[str] = [
        "# Apdex report",
        "",
        f"- Satisfied threshold: {targets}",
        f"- Tolerating threshold: {tolerating_factor}× satisfied",
        "- Failed calls count as frustrated",
        "",
        "| Action | Calls | Apdex | Grade | Avg ms | Min ms | Max ms | Errors | Sat | Tol | Frus |",
        "| --- | ---: | ---: | :-: | ---: | ---: | ---: | ---: | ---: | ---: | ---: |",
    ]
    for action in sorted(stats):
        stat = stats[action]
        apdex_value = stat.apdex()
        lines.append(
            f"| `{action}` | {stat.total} | {apdex_value:.3f} | {letter_grade(apdex_value)} | {stat.avg_ms():.1f} | "
            f"{(stat.min_ms or 0):.1f} | {(stat.max_ms or 0):.1f} | {sum(stat.errors.values())} | "
            f"{stat.satisfied} | {stat.tolerating} | {stat.frustrated} |"
        )

    failing = {action: stat for action, stat in stats.items() if stat.errors}
    if failing:
        lines.extend(["", "## Errors", "", "| Action | Error | Count |", "| --- | --- | ---: |"])
        for action in sorted(failing):
            for error, count in failing[action].errors.most_common():
                lines.append(f"| `{action}` | `{error}` | {count} |")
    output.write_text("\n".join(lines) + "\n", encoding="utf-8")


def main() -> None:
    args = parse_args()
    sources = set(args.source) if args.source else None
    stats = collect_stats(args.log, target_ms=args.target, tolerating_factor=args.factor, sources=sources)
    if not stats:
        print("No actions found. Did you point to the correct log?")
        return
    render_markdown(stats, args.output, args.target, args.factor)
    print(f"Wrote report to {args.output}")


if __name__ == "__main__":
    main()
