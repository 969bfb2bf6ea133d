# aviary/adapters/cli.py
"""
CLI of the farm records system (Typer).

Main commands:
- migrate                          -> apply migrations and create views
- login                            -> check credentials, list the role's features
- params set/get/show              -> manage global parameters
- batch add/list/sell/mortality    -> bird batches
- feed add/status/import           -> feed consumption and stock projection
- med add/list                     -> medication and vaccination schedule
- debeak add/list/complete         -> debeaking procedures
- eggs add/list/import             -> daily egg production
- inventory add/show/export/import -> egg stock by size, CSV export
- overview                         -> dashboard figures and alerts
- tui                              -> interactive terminal dashboard
"""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from aviary.config import DB_PATH, DEFAULTS
from aviary.domain.access import FEATURE_LABELS, authenticate, can_view, visible_features
from aviary.domain.errors import AuthenticationError, ValidationError
from aviary.infra.migrations import apply_migrations
from aviary.infra.views import create_views
from aviary.infra.repositories import ParamsRepo
from aviary.usecases.common import PARAM_KEYS, prepare_db
from aviary.usecases.batches import batch_overview, record_mortality, register_batch, sell
from aviary.usecases.feed import feed_status, record_feed
from aviary.usecases.medication import medication_schedule, record_medication
from aviary.usecases.debeaking import complete_debeaking, debeaking_schedule, schedule_debeaking
from aviary.usecases.production import production_summary, record_eggs
from aviary.usecases.imports import import_egg_sheet, import_feed_sheet
from aviary.usecases.inventory import export_inventory, import_inventory, inventory_summary, record_inventory
from aviary.usecases.overview import dashboard_overview


app = typer.Typer(help="Aviary farm records CLI")
console = Console()

DB_OPTION_HELP = "SQLite database path"

STATUS_STYLES = {
    "overdue": "bold red",
    "due": "bold yellow",
    "scheduled": "bold blue",
    "completed": "bold green",
    "active": "bold green",
    "sold": "dim",
    "archived": "dim",
    "urgent": "bold red",
    "warning": "bold yellow",
    "info": "bold blue",
}


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2, default=str))


def _fmt(val: Any, column: str = "") -> str:
    """Cell text for a value."""
    if val is None:
        return "-"
    if isinstance(val, bool):
        return "yes" if val else "no"
    if isinstance(val, float):
        return f"{val:,.1f}"
    if isinstance(val, datetime):
        return val.strftime("%Y-%m-%d %H:%M")
    if isinstance(val, date):
        return val.isoformat()
    text = str(val)
    if column in ("status", "level") and text in STATUS_STYLES:
        return f"[{STATUS_STYLES[text]}]{text}[/]"
    return text


def _display_table(data: Dict[str, Any] | List[Dict[str, Any]], title: str = "Result") -> None:
    """Show data as Rich tables."""
    if not data:
        console.print(Panel("No data found", title=title, border_style="yellow"))
        return

    # list of rows, the common case
    if isinstance(data, list) and isinstance(data[0], dict):
        table = Table(title=title, box=box.ROUNDED)
        columns = list(data[0].keys())
        for column in columns:
            sample = data[0].get(column)
            if isinstance(sample, (int, float)) and not isinstance(sample, bool):
                table.add_column(column, justify="right")
            elif isinstance(sample, (date, datetime)):
                table.add_column(column, justify="center")
            else:
                table.add_column(column)
        for row in data:
            table.add_row(*[_fmt(row.get(col), col) for col in columns])
        console.print(table)
        return

    # single record: field / value
    if isinstance(data, dict):
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Field")
        table.add_column("Value")
        for key, val in data.items():
            if isinstance(val, (list, dict)):
                continue
            table.add_row(key, _fmt(val, key))
        console.print(table)
        return

    _print_json(data)


def _run(fn: Callable[..., Any], *args, **kwargs) -> Any:
    """Call a use case; input errors end the command with exit code 1."""
    try:
        return fn(*args, **kwargs)
    except (ValidationError, AuthenticationError) as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(code=1)


def _require_feature(role: str, feature: str) -> None:
    if not can_view(role, feature):
        console.print(f"[bold red]Error:[/] {FEATURE_LABELS.get(feature, feature)} is not available to {role}")
        raise typer.Exit(code=1)


def _import_report(info: Dict[str, Any], title: str) -> None:
    lines = [
        f"File: {info['file']}",
        f"Rows: {info['total']}",
        f"Imported: {info['imported']}",
    ]
    if info["errors"]:
        lines.append(f"Errors: {len(info['errors'])}")
    console.print(Panel("\n".join(lines), title=title))
    if info["errors"]:
        errors = Table(title="Rejected rows")
        errors.add_column("Line", justify="right")
        errors.add_column("Error")
        for err in info["errors"]:
            errors.add_row(str(err["line"]), err["message"])
        console.print(errors)


# -----------------------
# infra commands
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP)):
    """Apply migrations and recreate the helper views."""
    apply_migrations(db_path)
    create_views(db_path)
    typer.echo(f">> Migrations applied and views created in: {db_path}")


@app.command("login")
def cmd_login(
    role: str = typer.Option(..., help="admin | worker"),
    username: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True),
):
    """Check the placeholder credentials and list the features of the role."""
    role = _run(authenticate, role, username, password)
    console.print(f"[bold green]Signed in as {role}[/]")
    _display_table(
        [{"feature": f, "label": FEATURE_LABELS[f]} for f in visible_features(role)],
        title="Available features",
    )


params_app = typer.Typer(help="Manage global parameters (cycle length, lookahead, feed stock).")
app.add_typer(params_app, name="params")


@params_app.command("set")
def cmd_params_set(
    full_cycle_weeks: Optional[int] = typer.Option(None, help="Weeks until end of cycle (e.g. 72)"),
    growing_weeks: Optional[int] = typer.Option(None, help="Weeks of the growing phase (e.g. 20)"),
    medication_lookahead_days: Optional[int] = typer.Option(None, help="Days a medication counts as due"),
    feed_window_records: Optional[int] = typer.Option(None, help="Feed records in the weekly window"),
    feed_stock_kg: Optional[float] = typer.Option(None, help="Feed in stock (kg)"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Set global parameters (only the given ones change)."""
    given = {
        "full_cycle_weeks": full_cycle_weeks,
        "growing_weeks": growing_weeks,
        "medication_lookahead_days": medication_lookahead_days,
        "feed_window_records": feed_window_records,
        "feed_stock_kg": feed_stock_kg,
    }
    items = [(k, str(v)) for k, v in given.items() if v is not None]
    if not items:
        typer.echo("Nothing to change. Give at least one parameter.")
        raise typer.Exit(code=1)
    if any(float(v) < 0 for _, v in items):
        console.print("[bold red]Error:[/] parameters cannot be negative")
        raise typer.Exit(code=1)
    prepare_db(db_path)
    ParamsRepo(db_path).set_many(items)
    typer.echo(">> Parameters updated.")


@params_app.command("get")
def cmd_params_get(
    key: str = typer.Argument(..., help=" | ".join(PARAM_KEYS)),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Show one stored parameter."""
    prepare_db(db_path)
    val = ParamsRepo(db_path).get(key)
    typer.echo("(None)" if val is None else val)


@params_app.command("show")
def cmd_params_show(db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP)):
    """Show the effective parameters (falling back to defaults)."""
    prepare_db(db_path)
    repo = ParamsRepo(db_path)
    table = Table(title="System parameters", box=box.ROUNDED)
    table.add_column("Parameter")
    table.add_column("Current value", justify="right")
    table.add_column("Default", justify="right")
    for key in PARAM_KEYS:
        default = getattr(DEFAULTS, key)
        table.add_row(key, repo.get(key, str(default)), str(default))
    console.print(table)
    console.print(f"[dim]Database: {db_path}[/dim]")


# -----------------------
# batches
# -----------------------

batch_app = typer.Typer(help="Bird batches")
app.add_typer(batch_app, name="batch")


@batch_app.command("add")
def cmd_batch_add(
    batch_number: str = typer.Option(..., help="e.g. B2024-001"),
    initial_count: str = typer.Option(..., help="Birds received"),
    breed: str = typer.Option(..., help="e.g. ISA Brown"),
    supplier: str = typer.Option(...),
    arrival_date: Optional[str] = typer.Option(None, help="YYYY-MM-DD (default: today)"),
    expected_sale_date: Optional[str] = typer.Option(None, help="YYYY-MM-DD (default: arrival + full cycle)"),
    notes: Optional[str] = typer.Option(None),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Register a new active batch."""
    form = {
        "batch_number": batch_number,
        "initial_count": initial_count,
        "breed": breed,
        "supplier": supplier,
        "arrival_date": arrival_date,
        "expected_sale_date": expected_sale_date,
        "notes": notes,
    }
    res = _run(register_batch, form, db_path=db_path)
    _display_table(res, title="Batch registered")


@batch_app.command("list")
def cmd_batch_list(db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP)):
    """List batches with age, phase and survival rate."""
    res = batch_overview(db_path=db_path)
    console.print(f"Active batches: {res['active_batches']}  Birds: {res['total_birds']:,}")
    rows = [
        {k: b[k] for k in ("id", "batch_number", "breed", "status", "arrival_date", "current_count",
                           "age_weeks", "phase", "survival_rate_pct", "weeks_remaining")}
        for b in res["batches"]
    ]
    _display_table(rows, title="Batches")


@batch_app.command("sell")
def cmd_batch_sell(
    ref: str = typer.Argument(..., help="Batch id or batch number"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Mark an active batch as sold."""
    res = _run(sell, ref, db_path=db_path)
    _display_table(res, title="Batch sold")


@batch_app.command("mortality")
def cmd_batch_mortality(
    ref: str = typer.Argument(..., help="Batch id or batch number"),
    losses: str = typer.Option(..., help="Dead or culled birds"),
    notes: Optional[str] = typer.Option(None),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Record bird losses on an active batch."""
    res = _run(record_mortality, ref, losses, db_path=db_path, notes=notes)
    _display_table(res, title="Losses recorded")


# -----------------------
# feed
# -----------------------

feed_app = typer.Typer(help="Feed consumption")
app.add_typer(feed_app, name="feed")


@feed_app.command("add")
def cmd_feed_add(
    amount_kg: str = typer.Option(..., help="Feed used (kg)"),
    feed_type: str = typer.Option(..., help="e.g. Layer Mash"),
    date_: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
    cost: Optional[str] = typer.Option(None),
    supplier: Optional[str] = typer.Option(None),
    notes: Optional[str] = typer.Option(None),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Record feed consumption."""
    form = {"date": date_, "amount_kg": amount_kg, "feed_type": feed_type,
            "cost": cost, "supplier": supplier, "notes": notes}
    res = _run(record_feed, form, db_path=db_path)
    _display_table(res, title="Feed recorded")


@feed_app.command("status")
def cmd_feed_status(
    stock_kg: Optional[float] = typer.Option(None, help="Override the stored feed stock (kg)"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Weekly consumption, daily average and days of stock left."""
    res = feed_status(db_path=db_path, current_stock_kg=stock_kg)
    console.print(Panel(
        "\n".join([
            f"Weekly total: {res['weekly_total_kg']} kg",
            f"Daily average: {res['daily_average_kg']} kg",
            f"Current stock: {res['current_stock_kg']} kg",
            f"Days remaining: {res['days_remaining_label']}",
        ]),
        title="Feed status",
    ))
    _display_table(res["records"], title="Feed records")


@feed_app.command("import")
def cmd_feed_import(
    path: str = typer.Argument(..., help="CSV/XLSX feed log"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Import feed records from a sheet."""
    info = _run(import_feed_sheet, path, db_path=db_path)
    _import_report(info, title="Feed import")


# -----------------------
# medication
# -----------------------

med_app = typer.Typer(help="Medication and vaccination")
app.add_typer(med_app, name="med")


@med_app.command("add")
def cmd_med_add(
    medication_name: str = typer.Option(..., help="e.g. Newcastle Disease Vaccine"),
    purpose: str = typer.Option(...),
    dosage: str = typer.Option(...),
    administered_by: str = typer.Option(...),
    frequency: str = typer.Option("monthly", help="monthly | quarterly | bi-annually | custom"),
    date_: Optional[str] = typer.Option(None, "--date", help="Day administered, YYYY-MM-DD"),
    next_due: Optional[str] = typer.Option(None, help="Only for custom frequency"),
    notes: Optional[str] = typer.Option(None),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Record an administered medication."""
    form = {
        "date": date_,
        "medication_name": medication_name,
        "purpose": purpose,
        "dosage": dosage,
        "frequency": frequency,
        "next_due": next_due,
        "administered_by": administered_by,
        "notes": notes,
    }
    res = _run(record_medication, form, db_path=db_path)
    _display_table(res, title="Medication recorded")


@med_app.command("list")
def cmd_med_list(
    lookahead_days: Optional[int] = typer.Option(None, help="Override the due-soon window (days)"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Medication records with their due status."""
    res = medication_schedule(db_path=db_path, lookahead_days=lookahead_days)
    console.print(f"Overdue: {res['overdue']}  Due within {res['lookahead_days']} days: {res['due']}")
    rows = [
        {k: r[k] for k in ("id", "date", "medication_name", "frequency", "next_due", "administered_by", "status")}
        for r in res["records"]
    ]
    _display_table(rows, title="Medication schedule")


# -----------------------
# debeaking
# -----------------------

debeak_app = typer.Typer(help="Debeaking procedures")
app.add_typer(debeak_app, name="debeak")


@debeak_app.command("add")
def cmd_debeak_add(
    batch_number: str = typer.Option(...),
    bird_age_weeks: str = typer.Option(..., help="Age of the birds at the procedure"),
    debeaking_type: str = typer.Option("first", "--type", help="first | second | third"),
    scheduled_date: Optional[str] = typer.Option(None, help="YYYY-MM-DD (default: today)"),
    performed_by: Optional[str] = typer.Option(None),
    notes: Optional[str] = typer.Option(None),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Schedule a debeaking procedure."""
    form = {
        "batch_number": batch_number,
        "bird_age_weeks": bird_age_weeks,
        "debeaking_type": debeaking_type,
        "scheduled_date": scheduled_date,
        "performed_by": performed_by,
        "notes": notes,
    }
    res = _run(schedule_debeaking, form, db_path=db_path)
    _display_table(res, title="Debeaking scheduled")


@debeak_app.command("list")
def cmd_debeak_list(db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP)):
    """Procedures by scheduled date."""
    res = debeaking_schedule(db_path=db_path)
    console.print(
        f"Scheduled: {res['scheduled']}  Overdue: {res['overdue']}  Completed: {res['completed']}"
    )
    rows = [
        {k: r[k] for k in ("id", "batch_number", "debeaking_type", "bird_age_weeks",
                           "scheduled_date", "completed_date", "performed_by", "status")}
        for r in res["records"]
    ]
    _display_table(rows, title="Debeaking schedule")


@debeak_app.command("complete")
def cmd_debeak_complete(
    record_id: int = typer.Argument(..., help="Debeaking record id"),
    performed_by: Optional[str] = typer.Option(None),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Mark a procedure as completed."""
    res = _run(complete_debeaking, record_id, performed_by, db_path=db_path)
    _display_table(res, title="Debeaking completed")


# -----------------------
# egg production
# -----------------------

eggs_app = typer.Typer(help="Daily egg production")
app.add_typer(eggs_app, name="eggs")


@eggs_app.command("add")
def cmd_eggs_add(
    small: Optional[str] = typer.Option(None),
    medium: Optional[str] = typer.Option(None),
    large: Optional[str] = typer.Option(None),
    extra_large: Optional[str] = typer.Option(None),
    date_: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
    notes: Optional[str] = typer.Option(None),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Record the day's collection by size."""
    form = {"date": date_, "small": small, "medium": medium, "large": large,
            "extra_large": extra_large, "notes": notes}
    res = _run(record_eggs, form, db_path=db_path)
    _display_table(res, title="Production recorded")


@eggs_app.command("list")
def cmd_eggs_list(db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP)):
    """Production records with today's total and the average."""
    res = production_summary(db_path=db_path)
    console.print(f"Today: {res['today_total']:,} eggs  Average: {res['average_production']:,} eggs/day")
    _display_table(res["records"], title="Egg production")


@eggs_app.command("import")
def cmd_eggs_import(
    path: str = typer.Argument(..., help="CSV/XLSX production log"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Import production records from a sheet."""
    info = _run(import_egg_sheet, path, db_path=db_path)
    _import_report(info, title="Production import")


# -----------------------
# inventory
# -----------------------

inv_app = typer.Typer(help="Egg inventory")
app.add_typer(inv_app, name="inventory")


@inv_app.command("add")
def cmd_inventory_add(
    small: Optional[str] = typer.Option(None),
    medium: Optional[str] = typer.Option(None),
    large: Optional[str] = typer.Option(None),
    extra_large: Optional[str] = typer.Option(None),
    date_: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Record a stock count by size."""
    form = {"date": date_, "small": small, "medium": medium, "large": large, "extra_large": extra_large}
    res = _run(record_inventory, form, db_path=db_path)
    _display_table(res, title="Stock recorded")


@inv_app.command("show")
def cmd_inventory_show(
    date_: Optional[str] = typer.Option(None, "--date", help="Only list snapshots of this day"),
    size: str = typer.Option("all", help="all | small | medium | large | extra_large"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Current stock, its distribution by size and the snapshot list."""
    res = _run(inventory_summary, db_path=db_path, on_date=date_, size=size)
    console.print(f"Total eggs: {res['total']:,}  Last updated: {_fmt(res['last_updated'])}")
    _display_table(res["distribution"], title="Distribution by size")
    _display_table(res["records"], title="Stock snapshots")


@inv_app.command("export")
def cmd_inventory_export(
    directory: str = typer.Option(".", "--dir", help="Output directory"),
    date_: Optional[str] = typer.Option(None, "--date", help="Only export snapshots of this day"),
    role: str = typer.Option("admin", help="admin | worker"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Write the stock snapshots to egg-inventory-<date>.csv."""
    _require_feature(role, "inventory-export")
    path = _run(export_inventory, directory, db_path=db_path, on_date=date_)
    typer.echo(f">> Inventory exported to: {path}")


@inv_app.command("import")
def cmd_inventory_import(
    path: str = typer.Argument(..., help="CSV written by 'inventory export'"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Load exported stock snapshots back."""
    info = _run(import_inventory, path, db_path=db_path)
    typer.echo(f">> {info['imported']} snapshots imported from {info['file']}")


# -----------------------
# overview
# -----------------------

@app.command("overview")
def cmd_overview(
    role: str = typer.Option("admin", help="admin | worker"),
    db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP),
):
    """Dashboard figures and alerts for a role."""
    res = _run(dashboard_overview, role, db_path=db_path)
    for section in ("production", "feed", "batch", "medication", "debeaking", "inventory"):
        if section in res:
            _display_table(res[section], title=FEATURE_LABELS[section])
    if res["alerts"]:
        _display_table(res["alerts"], title="Alerts")
    else:
        console.print(Panel("No alerts", title="Alerts", border_style="green"))


@app.command("tui")
def cmd_tui(db_path: str = typer.Option(DB_PATH, "--db", help=DB_OPTION_HELP)):
    """
    Start the interactive terminal dashboard.

    The dashboard asks for a role and credentials, then shows a menu with
    the features that role can use.
    """
    from aviary.adapters.dashboard_tui import main as tui_main
    typer.echo("Starting terminal dashboard...")
    try:
        tui_main(db_path)
    except KeyboardInterrupt:
        typer.echo("\nLeaving the dashboard...")
        raise typer.Exit(0)


def main():
    app()


if __name__ == "__main__":
    main()
