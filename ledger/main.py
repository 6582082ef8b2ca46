import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager, suppress
from datetime import date as dt_date
from pathlib import Path

from fastapi import FastAPI, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .aggregate import category_chart_data, monthly_chart_data, summary
from .db import init_db
from .errors import LedgerError
from .formatting import (
    format_currency,
    format_date,
    format_month,
    format_signed_amount,
    type_label,
)
from .logic import TypeSelector
from .models import amount_to_json
from .queries import count_label, filter_categories, filter_transactions, search_transactions
from .settings import get_settings
from .storage import SqliteSnapshotStorage
from .store import TransactionStore
from .transfer import export_csv, export_filename, export_json, parse_import

BASE_DIR = Path(__file__).resolve().parent

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)

init_db(settings)
store = TransactionStore(SqliteSnapshotStorage(settings.db_path, settings.storage_key))
store.load()
selector = TypeSelector()


def autosave_tick() -> bool:
    try:
        return store.autosave()
    except sqlite3.Error:
        logger.exception("autosave failed")
        return False


async def _autosave_loop(interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        autosave_tick()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    task = None
    if settings.autosave_seconds > 0:
        task = asyncio.create_task(_autosave_loop(settings.autosave_seconds))
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task


app = FastAPI(lifespan=lifespan)
app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")
templates = Jinja2Templates(directory=BASE_DIR / "templates")
templates.env.filters.update(
    currency=format_currency,
    display_date=format_date,
    month_label=format_month,
    signed_amount=format_signed_amount,
    type_label=type_label,
)


def _is_htmx(request: Request) -> bool:
    return request.headers.get("HX-Request") == "true"


def _visible_transactions(
    txn_type: str | None, category: str | None, month: str | None, q: str | None
):
    selected = filter_transactions(
        store.transactions, txn_type=txn_type, category=category, month_prefix=month
    )
    return search_transactions(selected, q)


def _build_index_context(
    txn_type: str | None = None,
    category: str | None = None,
    month: str | None = None,
    q: str | None = None,
) -> dict:
    transactions = _visible_transactions(txn_type, category, month, q)
    return {
        "transactions": transactions,
        "count_label": count_label(len(transactions), len(store)),
        "filtered": any(
            value not in (None, "", "all") for value in (txn_type, category, month, q)
        ),
        "summary": summary(store.transactions),
        "filter_categories": filter_categories(store.transactions),
        "form_type": selector.current,
        "form_categories": selector.categories,
        "today": dt_date.today().isoformat(),
        "filters": {
            "type": txn_type or "all",
            "category": category or "all",
            "month": month or "",
            "q": q or "",
        },
    }


def _render_partial(message: str) -> HTMLResponse:
    context = _build_index_context()
    summary_html = templates.get_template("_summary.html").render(**context)
    table_html = templates.get_template("_transactions_table.html").render(**context)
    message_html = templates.get_template("_message.html").render(
        message=message, level="success", oob=True
    )
    return HTMLResponse(summary_html + table_html + message_html)


def _after_mutation(request: Request, message: str, event: str | None = None):
    if not _is_htmx(request):
        return RedirectResponse(url="/", status_code=303)
    response = _render_partial(message)
    if event:
        response.headers["HX-Trigger"] = event
    return response


def _rejected(request: Request, exc: LedgerError):
    # htmx only swaps 2xx responses, so the message is retargeted into #messages.
    if _is_htmx(request):
        html = templates.get_template("_message.html").render(
            message=str(exc), level="error", oob=False
        )
        return HTMLResponse(
            html, headers={"HX-Retarget": "#messages", "HX-Reswap": "innerHTML"}
        )
    raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.get("/", response_class=HTMLResponse)
def index(
    request: Request,
    txn_type: str | None = Query(default=None, alias="type"),
    category: str | None = None,
    month: str | None = None,
    q: str | None = None,
):
    return templates.TemplateResponse(
        request, "index.html", _build_index_context(txn_type, category, month, q)
    )


@app.post("/categories", response_class=HTMLResponse)
def select_transaction_type(
    request: Request, txn_type: str = Form(default="income", alias="type")
):
    # Single-user ledger: the entry-form selector is shared server state.
    try:
        categories = selector.select(txn_type)
    except LedgerError as exc:
        return _rejected(request, exc)
    return templates.TemplateResponse(
        request, "_category_options.html", {"categories": categories}
    )


@app.get("/transactions", response_class=HTMLResponse)
def transactions_table(
    request: Request,
    txn_type: str | None = Query(default=None, alias="type"),
    category: str | None = None,
    month: str | None = None,
    q: str | None = None,
):
    return templates.TemplateResponse(
        request,
        "_transactions_table.html",
        _build_index_context(txn_type, category, month, q),
    )


@app.post("/transactions", response_class=HTMLResponse)
def create_transaction(
    request: Request,
    txn_type: str = Form(..., alias="type"),
    amount: str = Form(...),
    category: str = Form(default=""),
    description: str = Form(default=""),
    date: str = Form(default=""),
):
    try:
        txn = store.add(
            txn_type=txn_type,
            amount=amount,
            category=category,
            description=description,
            date=date,
        )
    except LedgerError as exc:
        return _rejected(request, exc)
    return _after_mutation(
        request, f"{type_label(txn.type)} agregado correctamente", event="transactionAdded"
    )


@app.post("/transactions/{txn_id}/delete", response_class=HTMLResponse)
def delete_transaction(txn_id: int, request: Request):
    store.delete_by_id(txn_id)
    return _after_mutation(request, "Transacción eliminada")


@app.post("/import", response_class=HTMLResponse)
async def import_transactions(request: Request, file: UploadFile = File(...)):
    content = await file.read()
    try:
        store.replace_all(parse_import(content))
    except LedgerError as exc:
        logger.warning("import of %s rejected: %s", file.filename, exc)
        return _rejected(request, exc)
    return _after_mutation(request, "Datos importados correctamente")


@app.post("/clear", response_class=HTMLResponse)
def clear_transactions(request: Request):
    store.clear()
    return _after_mutation(request, "Todos los datos han sido eliminados")


@app.get("/api/transactions")
def api_transactions(
    txn_type: str | None = Query(default=None, alias="type"),
    category: str | None = None,
    month: str | None = None,
    q: str | None = None,
):
    transactions = _visible_transactions(txn_type, category, month, q)
    return {
        "transactions": [txn.to_dict() for txn in transactions],
        "count": len(transactions),
        "total": len(store),
    }


@app.get("/api/summary")
def api_summary():
    totals = summary(store.transactions)
    return {
        "totalIncome": amount_to_json(totals.total_income),
        "totalExpenses": amount_to_json(totals.total_expenses),
        "balance": amount_to_json(totals.balance),
    }


@app.get("/api/charts/monthly")
def api_monthly_chart():
    return monthly_chart_data(store.transactions)


@app.get("/api/charts/categories")
def api_category_chart():
    return category_chart_data(store.transactions)


@app.get("/export.json")
def export_json_file():
    filename = export_filename()
    return Response(
        content=export_json(store.transactions),
        media_type="application/json; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/export.csv")
def export_csv_file():
    filename = export_filename().replace(".json", ".csv")
    return Response(
        content=export_csv(store.transactions),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

