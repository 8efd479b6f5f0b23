from __future__ import annotations
import argparse, json
from . import Engine
from .config import TOP_K, VERBOSE


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Search a site index from the command line")
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("--index", help="Path to index.json")
    g.add_argument("--url", help="URL of index.json (fetched once)")

    p.add_argument("-k", type=int, default=TOP_K, help="Top-K results")
    p.add_argument("--q", default=None, help="Single query to run once")
    p.add_argument("--repl", action="store_true", help="Interactive loop after load")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    eng = Engine()
    try:
        try:
            eng.load(path=args.index, url=args.url, verbose=args.verbose or VERBOSE)
        except (OSError, ValueError) as exc:
            p.error(f"could not load index: {exc}")

        def run_query(q: str):
            rows = eng.suggest(q, top_k=args.k)
            if args.json:
                print(json.dumps(rows, ensure_ascii=False, indent=2))
                return
            if not rows:
                print("(no results)"); return
            print("#  Title                                  Href")
            for i, r in enumerate(rows, 1):
                title = (r["title"][:36] + "..") if len(r["title"]) > 38 else r["title"]
                print(f"{i:<2} {title:<38} {r['href']}")

        if args.q is not None:
            run_query(args.q)

        if args.repl:
            print("Type a query (empty line to exit).")
            while True:
                try:
                    q = input("> ")
                except (EOFError, KeyboardInterrupt):
                    break
                if not q:
                    break
                run_query(q)

        return 0
    finally:
        eng.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
