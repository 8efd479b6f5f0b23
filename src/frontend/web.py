from __future__ import annotations
import argparse
import asyncio
from flask import Flask, request, jsonify, Response
from tinysearch import Engine, setup_autocomplete, boot
from tinysearch.config import TOP_K, INPUT_ID, QUERY_PARAM, DEBOUNCE_MS
from tinysearch.dom import Page

app = Flask(__name__)
_engine: Engine | None = None


def _require_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call main() or set frontend.web._engine.")
    return _engine


# ---------- page model ----------
def build_page(url: str) -> Page:
    """The search page: one input inside a wrapper, pre-filled from ?q=."""
    page = Page(url)
    wrap = page.body.append_child(page.create_element("div"))
    wrap.class_name = "search"
    inp = wrap.append_child(page.create_element("input"))
    inp.id = INPUT_ID
    inp.set_attribute("type", "text")
    inp.set_attribute("autocomplete", "off")
    inp.set_attribute("placeholder", "Search…")
    # store is already ready, so boot() never needs the event loop here
    boot(page, _require_engine().store())
    return page


async def _render_suggestions(query: str) -> str:
    page = Page()
    wrap = page.body.append_child(page.create_element("div"))
    inp = wrap.append_child(page.create_element("input"))
    inp.id = INPUT_ID
    ctl = setup_autocomplete(page, inp, _require_engine().store())
    await ctl.render_list(query)
    lst = ctl.list_element()
    return lst.to_html() if lst is not None else ""


# ---------- API ----------
@app.get("/api/search")
def api_search():
    q = request.args.get(QUERY_PARAM, "", type=str)
    k = request.args.get("k", TOP_K, type=int)
    if not q:
        return jsonify([])
    return jsonify(_require_engine().suggest(q, top_k=k))


@app.get("/api/suggest")
def api_suggest():
    q = request.args.get(QUERY_PARAM, "", type=str)
    if not q:
        return Response("", mimetype="text/html")
    return Response(asyncio.run(_render_suggestions(q)), mimetype="text/html")


@app.get("/index.json")
def index_json():
    docs = _require_engine().documents or []
    return jsonify([d.to_dict() for d in docs])


@app.get("/health")
def health():
    return jsonify({"ok": True, "documents": len(_require_engine().documents or [])})


# ---------- UI ----------
_PAGE = r"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Search</title>
<style>
body{margin:0;font:16px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Arial}
.search{position:relative;max-width:640px;margin:48px auto;padding:0 16px}
.search input{width:100%%;padding:10px 12px;font-size:16px}
.autocomplete-items{position:absolute;left:16px;right:16px;border:1px solid #ccc;background:#fff}
.autocomplete-items div{padding:8px 12px;cursor:pointer}
.autocomplete-active{background:#e8f0fe}
.no-results{color:#777}
</style>
</head>
%(body)s
<script>
const inp = document.getElementById("%(input_id)s");
const listId = inp.id + "-autocomplete-list";
let t = null, focus = -1;
function items(){ const l = document.getElementById(listId); return l ? [...l.querySelectorAll('[role=option]')] : []; }
function close(){
  const l = document.getElementById(listId); if (l) l.remove();
  focus = -1; inp.setAttribute("aria-expanded","false");
  inp.removeAttribute("aria-activedescendant"); inp.removeAttribute("aria-controls");
}
async function render(){
  const q = inp.value; close(); if (!q) return;
  const r = await fetch(`/api/suggest?q=${encodeURIComponent(q)}`);
  if (!r.ok || q !== inp.value) return;
  inp.insertAdjacentHTML("afterend", await r.text());
  inp.setAttribute("aria-controls", listId); inp.setAttribute("aria-expanded","true");
  items().forEach(el => el.addEventListener("click", () => { location.href = el.dataset.href; }));
}
function mark(xs){
  if (!xs.length) { focus = -1; return; }
  if (focus >= xs.length) focus = 0; if (focus < 0) focus = xs.length - 1;
  xs.forEach(el => { el.classList.remove("autocomplete-active"); el.setAttribute("aria-selected","false"); });
  xs[focus].classList.add("autocomplete-active"); xs[focus].setAttribute("aria-selected","true");
  inp.setAttribute("aria-activedescendant", xs[focus].id);
}
inp.addEventListener("input", () => { clearTimeout(t); t = setTimeout(render, %(debounce)d); });
inp.addEventListener("keydown", e => {
  const xs = items();
  if (e.key === "ArrowDown") { focus++; mark(xs); e.preventDefault(); }
  else if (e.key === "ArrowUp") { focus--; mark(xs); e.preventDefault(); }
  else if (e.key === "Enter") { e.preventDefault(); const el = xs[focus > -1 ? focus : 0]; if (el) el.click(); }
  else if (e.key === "Escape") { close(); }
});
document.addEventListener("click", e => { if (e.target !== inp) close(); });
</script>
</html>
"""


@app.get("/")
def home():
    page = build_page(request.full_path)
    html = _PAGE % {"body": page.body.to_html(), "input_id": INPUT_ID, "debounce": DEBOUNCE_MS}
    return Response(html, mimetype="text/html")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Serve the search page and index with Flask")
    ap.add_argument("--index", required=True, help="Path to index.json")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _engine
    _engine = Engine()
    _engine.load(path=args.index, verbose=args.verbose)

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
