import json
import os
from typing import List

import requests
import typer

from taixiu.config import settings
from taixiu.core.labels import normalize_outcome, to_display
from taixiu.logger import setup_logging

app = typer.Typer(help="Tài/Xỉu AI tổng hợp")
BASE = os.getenv("API_BASE", f"http://127.0.0.1:{settings.port}")


def _headers():
    h = {}
    if settings.api_key:
        h["X-API-Key"] = settings.api_key
    return h


def _parse_pattern(text: str) -> list[str]:
    # "TTX XT", "T,X,tai,xiu" ...
    for sep in (",", ";", "|", "/", "\t", "\n"):
        text = text.replace(sep, " ")
    out = []
    for tk in text.split():
        lab = normalize_outcome(tk)
        if lab:
            out.append(lab)
            continue
        # "TTXXT" viết liền
        out.extend(y for y in map(normalize_outcome, tk) if y)
    return out


@app.callback()
def main():
    setup_logging(settings.log_level)


@app.command()
def serve(host: str = typer.Option(settings.host), port: int = typer.Option(settings.port)):
    """Chạy API (uvicorn)."""
    import uvicorn
    uvicorn.run("taixiu.api.main:app", host=host, port=port)


@app.command()
def predict():
    """Gọi /api/taixiu/predict trên server đang chạy."""
    r = requests.get(f"{BASE}/api/taixiu/predict", headers=_headers(), timeout=settings.source_timeout + 5)
    typer.echo(json.dumps(r.json(), ensure_ascii=False, indent=2))
    if r.status_code != 200:
        raise typer.Exit(code=1)


@app.command()
def history():
    """In lịch sử đang lưu trong DB cục bộ."""
    from taixiu.db.base import engine, init_db
    from taixiu.history import HistoryStore

    init_db(engine)
    store = HistoryStore(engine)
    pattern = store.snapshot()
    typer.echo(f"[{''.join(pattern)}] ({len(pattern)}/{store.capacity}), last_updated={store.last_updated}")


@app.command()
def analyze(pattern: str, totals: List[float] = typer.Option([], "--total", "-t")):
    """Chạy ensemble offline trên một chuỗi T/X cho trước."""
    from taixiu.engine.ensemble import run_ensemble
    from taixiu.engine.explain import build_explanation

    labels = _parse_pattern(pattern)[-settings.history_capacity:]
    ens = run_ensemble(labels, totals, settings.total_min, settings.total_max)
    typer.echo(f"Dự đoán: {to_display(ens.outcome)} • Tin cậy {ens.confidence * 100:.2f}%")
    for name, p in ens.models.items():
        typer.echo(f"  {name:<12} {p:.4f}")
    typer.echo(build_explanation(labels, ens))


if __name__ == "__main__":
    app()
