"""Lightweight REST client for the warmap API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the warmap REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--players", type=Path, help="Players CSV to upload")
    parser.add_argument("--population", type=Path, help="State population CSV to upload")
    parser.add_argument("--international", type=Path, help="International players CSV to upload")
    parser.add_argument("--sample", action="store_true", help="Load the sample datasets")
    parser.add_argument("--bundled", action="store_true", help="Load the bundled JSON datasets")
    parser.add_argument("--metric", default="total_war", choices=("total_war", "war_per_million"))
    parser.add_argument("--decade", type=int, default=None, help="Decade for the aggregate query")
    parser.add_argument("--min-war", type=float, default=None, help="Update the minimum WAR filter")
    parser.add_argument("--countries", action="store_true", help="Query country aggregates instead")
    parser.add_argument("--limit", type=int, default=10, help="Number of aggregates to print")
    parser.add_argument("--export-path", type=Path, help="Download the aggregates CSV to this path")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.sample:
            resp = client.post("/sample")
            if resp.status_code == 502:
                raise SystemExit(f"sample data unavailable: {resp.json().get('detail')}")
            resp.raise_for_status()
        if args.bundled:
            resp = client.post("/bundled")
            if resp.status_code == 502:
                raise SystemExit(f"bundled data unavailable: {resp.json().get('detail')}")
            resp.raise_for_status()
        uploads = (
            ("/players", args.players),
            ("/populations", args.population),
            ("/international-players", args.international),
        )
        for endpoint, path in uploads:
            if path is None:
                continue
            resp = client.post(endpoint, files={"file": (path.name, path.read_bytes(), "text/csv")})
            resp.raise_for_status()
        resp = client.get("/validation")
        resp.raise_for_status()
        print("Validation:")
        _print_json(resp.json())

        if args.min_war is not None:
            filters_endpoint = "/international/filters" if args.countries else "/filters"
            resp = client.put(filters_endpoint, json={"min_war": args.min_war})
            resp.raise_for_status()

        params: dict[str, object] = {"limit": args.limit, "player_limit": 3}
        if args.decade is not None:
            params["decade"] = args.decade
        if args.countries:
            endpoint = "/aggregates/countries"
        else:
            endpoint = "/aggregates/states"
            params["metric"] = args.metric
        resp = client.get(endpoint, params=params)
        resp.raise_for_status()
        _print_json(resp.json())

        if args.export_path:
            csv_params = {key: value for key, value in params.items() if key in {"metric", "decade"}}
            resp = client.get(f"{endpoint}.csv", params=csv_params)
            resp.raise_for_status()
            args.export_path.write_text(resp.text)
            print(f"CSV export saved to {args.export_path}")


if __name__ == "__main__":
    main()
