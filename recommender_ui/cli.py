"""
Terminal front end for the SHL recommender UI.

Drives the same ``QueryController`` the Streamlit page uses, against the
remote service:

- ``query``  submit one query and print the rendered view
- ``batch``  run every query in a CSV/XLSX file and write a strict
             two-column CSV (``Query``, ``Assessment_url``)
- ``health`` ping the service
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import pandas as pd
from loguru import logger

from .client import RecommendationClient, RecommendationError
from .config import API_BASE_URL, RECOMMEND_TIMEOUT_SECONDS, configure_logging
from .render import CardToggles, build_view, render_text
from .state import Phase, QueryController


def load_queries(path: Path) -> List[str]:
    ext = path.suffix.lower()
    df = pd.read_excel(path) if ext in {".xlsx", ".xls"} else pd.read_csv(path)
    cols = {c.lower(): c for c in df.columns}
    qcol = cols.get("query")
    if not qcol:
        raise ValueError(f"Expected column 'Query' in {path}. Found: {list(df.columns)}")
    # one line per query
    return [" ".join(str(q).split()) for q in df[qcol].fillna("").tolist()]


def _dedup_preserve_order(seq: Sequence[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for s in seq:
        if s not in seen:
            seen.add(s)
            out.append(s)
    return out


def write_two_column_csv(preds: Dict[str, List[str]], out_path: Path) -> None:
    """
    Write exactly two columns with required casing:
      - Query
      - Assessment_url

    Each (query, url) pair becomes a row; order follows the service.
    """
    rows: List[Tuple[str, str]] = []
    for q, urls in preds.items():
        for u in urls:
            rows.append((q, u))
    df = pd.DataFrame(rows, columns=["Query", "Assessment_url"])
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)


def _make_client(args: argparse.Namespace) -> RecommendationClient:
    return RecommendationClient(base_url=args.api, timeout=args.timeout)


def cmd_query(args: argparse.Namespace, client: RecommendationClient) -> int:
    controller = QueryController(client.recommend)
    controller.set_query(" ".join(args.text))
    if not controller.can_submit:
        print("Nothing to search for: the query is empty.", file=sys.stderr)
        return 2
    controller.submit()

    view = build_view(controller.state)
    toggles = CardToggles()
    if args.expand:
        for card in view.cards:
            toggles.toggle(card.key)
    print(render_text(view, toggles))
    return 1 if controller.state.phase is Phase.ERROR else 0


def cmd_batch(args: argparse.Namespace, client: RecommendationClient) -> int:
    queries = load_queries(Path(args.inp))
    print(f"Loaded {len(queries)} queries from {args.inp}")
    unique_queries = _dedup_preserve_order(queries)
    print(f"Unique queries to evaluate: {len(unique_queries)}")

    controller = QueryController(client.recommend)
    unique_preds: Dict[str, List[str]] = {}
    failed = 0
    for i, uq in enumerate(unique_queries, 1):
        before = controller.state.result_set
        controller.set_query(uq)
        controller.submit()
        if controller.state.result_set == before:
            # nothing was sent; the state still holds the previous answer
            logger.warning("{}/{} skipped: empty query", i, len(unique_queries))
            unique_preds[uq] = []
        else:
            if controller.state.phase is Phase.ERROR:
                failed += 1
                logger.warning("{}/{} failed: {}", i, len(unique_queries), uq)
            urls = [item.url for item in controller.state.results if item.url]
            unique_preds[uq] = urls[: args.topk]
        if i % 10 == 0 or i == len(unique_queries):
            print(f"Processed {i}/{len(unique_queries)} unique queries")

    # fan back out so every input query keeps its row block
    final_preds = {q: unique_preds.get(q, []) for q in queries}
    out = Path(args.out)
    write_two_column_csv(final_preds, out)
    total_rows = sum(len(v) for v in final_preds.values())
    print(f"Wrote {total_rows} rows to {out}")
    return 1 if failed else 0


def cmd_health(args: argparse.Namespace, client: RecommendationClient) -> int:
    try:
        status = client.health().status
    except RecommendationError as e:
        print(f"{client.base_url}: unreachable ({e})", file=sys.stderr)
        return 1
    print(f"{client.base_url}: {status}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="recommender-ui", description=__doc__.splitlines()[1])
    ap.add_argument("--api", default=API_BASE_URL, help=f"service base URL (default {API_BASE_URL})")
    ap.add_argument(
        "--timeout",
        type=float,
        default=RECOMMEND_TIMEOUT_SECONDS,
        help="seconds to wait for a recommendation before giving up",
    )
    ap.add_argument("--log-level", default=None, help="stderr log level (default from RECOMMENDER_LOG_LEVEL)")
    sub = ap.add_subparsers(dest="command", required=True)

    q = sub.add_parser("query", help="submit one query and print the results")
    q.add_argument("text", nargs="+", help="role or skill description")
    q.add_argument("--expand", action="store_true", help="print full descriptions")
    q.set_defaults(func=cmd_query)

    b = sub.add_parser("batch", help="run a file of queries and write a predictions CSV")
    b.add_argument("--in", dest="inp", required=True, help="CSV/XLSX with a 'Query' column")
    b.add_argument("--out", dest="out", default="artifacts/predictions.csv", help="output CSV path")
    b.add_argument("--topk", type=int, default=10, help="max predictions per query (default 10)")
    b.set_defaults(func=cmd_batch)

    h = sub.add_parser("health", help="check that the service is up")
    h.set_defaults(func=cmd_health)
    return ap


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args, _make_client(args))


if __name__ == "__main__":
    sys.exit(main())
