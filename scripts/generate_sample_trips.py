from __future__ import annotations

import argparse
import random
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Destination:
    name: str
    details: tuple[str, ...] = ()


def _compact(d: date) -> str:
    return d.strftime("%Y%m%d")


def generate_rows(
    *,
    trips: int,
    seed: int,
    start: date,
    destinations: list[Destination],
) -> list[str]:
    """Generate fake travel record rows (tab-delimited, no header)."""

    rng = random.Random(seed)
    cur = start
    out: list[str] = []

    for _ in range(trips):
        dest = rng.choice(destinations)
        length = rng.randint(2, 20)
        end = cur + timedelta(days=length)

        if not dest.details:
            out.append("\t".join([_compact(cur), _compact(end), dest.name, "", "", ""]))
        else:
            # split the trip into consecutive legs; adjacent legs share a boundary day
            legs = min(len(dest.details), max(1, length // 2))
            names = rng.sample(list(dest.details), legs)
            cuts = sorted(rng.sample(range(1, length), legs - 1)) if legs > 1 else []
            bounds = [cur] + [cur + timedelta(days=c) for c in cuts] + [end]
            for i, sub in enumerate(names):
                head = [_compact(cur), _compact(end), dest.name] if i == 0 else ["", "", ""]
                out.append("\t".join(head + [sub, _compact(bounds[i]), _compact(bounds[i + 1])]))

        # Sometimes go straight on (shared boundary day), sometimes stay home a while
        if rng.random() < 0.5:
            cur = end
        else:
            cur = end + timedelta(days=rng.randint(1, 30))

    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate fake travel records for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/trips.tsv", help="Output path")
    p.add_argument("--trips", type=int, default=30, help="Number of top-level trips")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--start", type=str, default="2023-01-01", help="First entry date, e.g. '2023-01-01'")
    args = p.parse_args()

    destinations = [
        Destination("日本"),
        Destination("韩国"),
        Destination("新加坡"),
        Destination("申根区域", ("法国", "德国", "瑞士", "奥地利")),
        Destination("英国", ("英格兰", "苏格兰")),
        Destination("美国", ("纽约州", "加利福尼亚州", "佛罗里达州")),
    ]

    rows = generate_rows(
        trips=args.trips,
        seed=args.seed,
        start=date.fromisoformat(args.start),
        destinations=destinations,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text("\n".join(rows) + "\n", encoding="utf-8")

    print(f"Generated: {out_path} (rows={len(rows)}, trips={args.trips}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
