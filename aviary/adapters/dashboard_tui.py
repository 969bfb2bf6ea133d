from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Static, Tree

from aviary.config import DB_PATH, DEFAULTS
from aviary.domain.access import FEATURE_LABELS, authenticate, can_view
from aviary.domain.errors import AuthenticationError, ValidationError
from aviary.infra.logger import ENABLE_LOGGING, ENABLE_OUTPUT, LOG_FILES, get_log_summary, log_system_event
from aviary.infra.repositories import ParamsRepo
from aviary.usecases.common import PARAM_KEYS, load_params, prepare_db
from aviary.usecases.batches import batch_overview, record_mortality, register_batch, sell
from aviary.usecases.feed import feed_status, record_feed
from aviary.usecases.medication import medication_schedule, record_medication
from aviary.usecases.debeaking import complete_debeaking, debeaking_schedule, schedule_debeaking
from aviary.usecases.production import production_summary, record_eggs
from aviary.usecases.imports import import_egg_sheet, import_feed_sheet
from aviary.usecases.inventory import export_inventory, inventory_summary, record_inventory
from aviary.usecases.overview import dashboard_overview

# (key, label, placeholder)
Field = Tuple[str, str, str]

FORMS: Dict[str, Tuple[str, List[Field]]] = {
    "batch-add": ("Add Batch", [
        ("batch_number", "Batch number:", "B2024-001"),
        ("arrival_date", "Arrival date (YYYY-MM-DD, blank = today):", ""),
        ("initial_count", "Initial count:", "1500"),
        ("breed", "Breed:", "ISA Brown"),
        ("supplier", "Supplier:", "Sunrise Hatchery"),
        ("expected_sale_date", "Expected sale date (blank = end of cycle):", ""),
        ("notes", "Notes:", ""),
    ]),
    "batch-sell": ("Sell Batch", [
        ("batch", "Batch id or number:", "B2024-001"),
    ]),
    "batch-mortality": ("Record Losses", [
        ("batch", "Batch id or number:", "B2024-001"),
        ("losses", "Birds lost:", "3"),
        ("notes", "Notes:", ""),
    ]),
    "feed-add": ("Record Feed", [
        ("date", "Date (blank = today):", ""),
        ("amount_kg", "Amount (kg):", "48"),
        ("feed_type", "Feed type:", "Layer Mash"),
        ("cost", "Cost:", ""),
        ("supplier", "Supplier:", ""),
        ("notes", "Notes:", ""),
    ]),
    "med-add": ("Record Medication", [
        ("date", "Date administered (blank = today):", ""),
        ("medication_name", "Medication:", "Newcastle Disease Vaccine"),
        ("purpose", "Purpose:", "Vaccination"),
        ("dosage", "Dosage:", "0.5ml per bird"),
        ("frequency", "Frequency (monthly/quarterly/bi-annually/custom):", "monthly"),
        ("next_due", "Next due date (custom only):", ""),
        ("administered_by", "Administered by:", ""),
        ("notes", "Notes:", ""),
    ]),
    "debeak-add": ("Schedule Debeaking", [
        ("batch_number", "Batch number:", "B2024-001"),
        ("scheduled_date", "Scheduled date (blank = today):", ""),
        ("debeaking_type", "Type (first/second/third):", "first"),
        ("bird_age_weeks", "Bird age (weeks):", "1"),
        ("performed_by", "Performed by:", ""),
        ("notes", "Notes:", ""),
    ]),
    "debeak-complete": ("Complete Debeaking", [
        ("record_id", "Record id:", "1"),
        ("performed_by", "Performed by (blank = as scheduled):", ""),
    ]),
    "eggs-add": ("Record Production", [
        ("date", "Date (blank = today):", ""),
        ("small", "Small:", "0"),
        ("medium", "Medium:", "0"),
        ("large", "Large:", "0"),
        ("extra_large", "Extra large:", "0"),
        ("notes", "Notes:", ""),
    ]),
    "inventory-add": ("Record Stock", [
        ("date", "Date (blank = today):", ""),
        ("small", "Small:", "0"),
        ("medium", "Medium:", "0"),
        ("large", "Large:", "0"),
        ("extra_large", "Extra large:", "0"),
    ]),
    "inventory-show": ("Inventory Filter", [
        ("date", "Only snapshots of day (blank = all):", ""),
        ("size", "Size (all/small/medium/large/extra_large):", "all"),
    ]),
    "inventory-export": ("Export Inventory", [
        ("directory", "Output directory:", "."),
        ("date", "Only snapshots of day (blank = all):", ""),
    ]),
}

FILE_FORMS = {
    "eggs-import": "Import Production Sheet (CSV/XLSX)",
    "feed-import": "Import Feed Sheet (CSV/XLSX)",
}


def _cell(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, float):
        return f"{val:,.1f}"
    if isinstance(val, datetime):
        return val.strftime("%Y-%m-%d %H:%M")
    if isinstance(val, date):
        return val.isoformat()
    return str(val)


def rows_to_table(rows: Sequence[Dict[str, Any]]) -> Tuple[List[str], List[List[str]]]:
    """Column names and cell text for a list of dict rows."""
    if not rows:
        return [], []
    columns = list(rows[0].keys())
    return columns, [[_cell(r.get(c)) for c in columns] for r in rows]


def record_to_table(record: Dict[str, Any]) -> Tuple[List[str], List[List[str]]]:
    """Field/value table for a single record (nested values skipped)."""
    rows = [[k, _cell(v)] for k, v in record.items() if not isinstance(v, (list, dict))]
    return ["Field", "Value"], rows


class OutputDataTableScreen(Screen):
    """Screen to display a DataTable with query results."""
    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
        ("q", "app.pop_screen", "Back"),
    ]

    def __init__(self, title: str, columns: list, rows: list, summary: str = "") -> None:
        super().__init__()
        self.title = title
        self.columns = columns
        self.rows = rows
        self.summary = summary

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            yield Static(self.title, classes="output-title")
            if self.summary:
                yield Static(self.summary, markup=False)
            dt = DataTable(zebra_stripes=True)
            dt.add_columns(*self.columns)
            for row in self.rows:
                dt.add_row(*[str(cell) if cell is not None else "" for cell in row])
            yield dt
        yield Footer()


class OutputScreen(Screen):
    """Screen to display plain text output."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
        ("q", "app.pop_screen", "Back"),
    ]

    def __init__(self, title: str, content: str) -> None:
        super().__init__()
        self.title = title
        self.content = content

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            yield Static(self.title, classes="output-title")
            yield Static(self.content, markup=False)
        yield Footer()


class StatusDisplay(Static):
    """Signed-in role, database and logging switches."""

    def __init__(self, db_path: str = DB_PATH, role: Optional[str] = None) -> None:
        super().__init__()
        self.db_path = db_path
        self.role = role
        self.refresh_status()

    def status_lines(self) -> List[str]:
        db = Path(self.db_path)
        lines = [f"Role: {self.role or 'not signed in'}"]
        if db.exists():
            size_kb = db.stat().st_size / 1024
            lines.append(f"Database: {self.db_path} ({size_kb:.1f} KB)")
        else:
            lines.append(f"Database: {self.db_path} (not created yet)")
        lines.append(f"Logging: {'on' if ENABLE_LOGGING else 'off'}")
        lines.append(f"Output: {'on' if ENABLE_OUTPUT else 'off'}")
        return lines

    def refresh_status(self) -> None:
        self.update("\n".join(self.status_lines()))


class MenuTreeWidget(Tree):
    """Navigation tree holding only the features the role can view."""

    def __init__(self, role: str) -> None:
        super().__init__("Aviary - Main Menu")
        self.role = role
        self.setup_menu_tree()

    def setup_menu_tree(self) -> None:
        role = self.role
        if can_view(role, "overview"):
            self.root.add_leaf(FEATURE_LABELS["overview"], data="overview")

        if can_view(role, "batch"):
            node = self.root.add(FEATURE_LABELS["batch"], data="batch")
            node.add_leaf("Add Batch", data="batch-add")
            node.add_leaf("List Batches", data="batch-list")
            node.add_leaf("Record Losses", data="batch-mortality")
            node.add_leaf("Sell Batch", data="batch-sell")

        if can_view(role, "production"):
            node = self.root.add(FEATURE_LABELS["production"], data="production")
            node.add_leaf("Record Production", data="eggs-add")
            node.add_leaf("Production Records", data="eggs-list")
            node.add_leaf("Import Sheet", data="eggs-import")

        if can_view(role, "feed"):
            node = self.root.add(FEATURE_LABELS["feed"], data="feed")
            node.add_leaf("Record Feed", data="feed-add")
            node.add_leaf("Feed Status", data="feed-status")
            node.add_leaf("Import Sheet", data="feed-import")

        if can_view(role, "medication"):
            node = self.root.add(FEATURE_LABELS["medication"], data="medication")
            node.add_leaf("Record Medication", data="med-add")
            node.add_leaf("Medication Schedule", data="med-list")

        if can_view(role, "debeaking"):
            node = self.root.add(FEATURE_LABELS["debeaking"], data="debeaking")
            node.add_leaf("Schedule Debeaking", data="debeak-add")
            node.add_leaf("Debeaking Schedule", data="debeak-list")
            node.add_leaf("Mark Completed", data="debeak-complete")

        if can_view(role, "inventory"):
            node = self.root.add(FEATURE_LABELS["inventory"], data="inventory")
            node.add_leaf("Record Stock", data="inventory-add")
            node.add_leaf("Current Stock", data="inventory-show")
            if can_view(role, "inventory-export"):
                node.add_leaf("Export CSV", data="inventory-export")

        sys_node = self.root.add("System", data="system")
        sys_node.add_leaf("Apply Migrations", data="migrate")
        sys_node.add_leaf("Show Parameters", data="params-show")
        if role == "admin":
            sys_node.add_leaf("Set Parameters", data="params-set")
        sys_node.add_leaf("Log Summary", data="log-summary")
        self.root.expand()


class LoginForm(ModalScreen):
    """Role and credentials prompt shown before the menu."""

    BINDINGS = [
        ("escape", "app.quit", "Quit"),
    ]

    def compose(self) -> ComposeResult:
        with Container(id="login-modal"):
            yield Static("Aviary - Sign in", classes="modal-title")
            with Vertical():
                yield Label("Role (admin/worker):")
                yield Input(placeholder="admin", id="role-input")
                yield Label("Username:")
                yield Input(id="username-input")
                yield Label("Password:")
                yield Input(password=True, id="password-input")
                with Horizontal():
                    yield Button("Sign in", variant="primary", id="login-btn")
                    yield Button("Quit", id="quit-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "login-btn":
            self.dismiss({
                "role": self.query_one("#role-input", Input).value.strip().lower(),
                "username": self.query_one("#username-input", Input).value.strip(),
                "password": self.query_one("#password-input", Input).value,
            })
        elif event.button.id == "quit-btn":
            self.app.exit()


class RecordForm(ModalScreen):
    """Modal form built from a field list; returns the raw text values."""

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("ctrl+s", "save", "Save"),
    ]

    def __init__(self, operation: str, title: str, fields: List[Field]) -> None:
        super().__init__()
        self.operation = operation
        self.title = title
        self.fields = fields
        self.inputs: Dict[str, Input] = {}

    def compose(self) -> ComposeResult:
        with Container(id="record-modal"):
            yield Static(self.title, classes="modal-title")
            with Vertical():
                for key, label, placeholder in self.fields:
                    yield Label(label)
                    self.inputs[key] = Input(placeholder=placeholder, id=f"{key}-input")
                    yield self.inputs[key]
                with Horizontal():
                    yield Button("Save", variant="primary", id="save-btn")
                    yield Button("Cancel", id="cancel-btn")

    def values(self) -> Dict[str, str]:
        return {key: inp.value.strip() for key, inp in self.inputs.items()}

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self.action_save()
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def action_save(self) -> None:
        self.dismiss({"operation": self.operation, **self.values()})

    def action_cancel(self) -> None:
        self.dismiss(None)


class FileInputForm(ModalScreen):
    """Modal form asking for a sheet to import."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Cancel"),
    ]

    def __init__(self, operation: str, title: str) -> None:
        super().__init__()
        self.operation = operation
        self.title = title
        self.file_input: Optional[Input] = None

    def compose(self) -> ComposeResult:
        with Container(id="file-input-modal"):
            yield Static(self.title, classes="modal-title")
            with Vertical():
                yield Label("File (.csv or .xlsx):")
                self.file_input = Input(placeholder="production.csv", id="file-input")
                yield self.file_input
                with Horizontal():
                    yield Button("Import", variant="primary", id="execute-btn")
                    yield Button("Cancel", id="cancel-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "execute-btn":
            file_path = self.file_input.value.strip() if self.file_input else ""
            if not file_path:
                self.notify("Enter the file path.", severity="warning")
                return
            self.dismiss({"operation": self.operation, "file": file_path})
        elif event.button.id == "cancel-btn":
            self.dismiss(None)


class AviaryDashboardApp(App):
    """Terminal dashboard for the farm records."""

    CSS = """
    Screen {
        background: #0b1d0b;
    }

    .modal-title {
        background: #2d5a27;
        color: #ffffff;
        text-align: center;
        padding: 1;
        margin-bottom: 1;
    }

    .output-title {
        background: #3c7a34;
        color: #ffffff;
        text-align: center;
        padding: 1;
        margin-bottom: 1;
    }

    Container#login-modal, Container#record-modal, Container#file-input-modal {
        background: #142814;
        border: solid #7bc96f;
        width: 70;
        height: auto;
        max-height: 90%;
        margin: 2;
    }

    Tree {
        background: #102010;
        color: #d8f0d0;
    }

    StatusDisplay {
        background: #2d5a27;
        color: #ffffff;
        padding: 1;
    }

    Button {
        margin: 1;
    }
    """

    TITLE = "Aviary - Farm Dashboard"
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh Status"),
        ("l", "logout", "Sign out"),
    ]

    def __init__(self, db_path: str = DB_PATH) -> None:
        super().__init__()
        self.db_path = db_path
        self.role: Optional[str] = None
        self.menu_tree: Optional[MenuTreeWidget] = None
        self.status_display: Optional[StatusDisplay] = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            yield Container(id="menu-panel", classes="left-panel")
            with Vertical(classes="right-panel"):
                self.status_display = StatusDisplay(self.db_path)
                yield self.status_display
                yield Static(
                    "Use the arrow keys to move through the menu and ENTER to run an action.\n"
                    "'r' refreshes the status, 'l' signs out, 'q' quits.",
                    classes="info-panel",
                )
        yield Footer()

    def on_mount(self) -> None:
        prepare_db(self.db_path)
        self.push_screen(LoginForm(), self.on_login_result)

    # -----------------------
    # session
    # -----------------------

    def sign_in(self, role: str, username: str, password: str) -> bool:
        """Check the credentials; on success the menu is rebuilt for the role."""
        try:
            self.role = authenticate(role, username, password)
        except (ValidationError, AuthenticationError) as e:
            log_system_event("tui_login_failed", {"role": role, "error": str(e)}, level="warning")
            self.notify(str(e), severity="error")
            return False
        log_system_event("tui_login", {"role": self.role})
        self.notify(f"Signed in as {self.role}")
        return True

    def on_login_result(self, result: Optional[Dict[str, str]]) -> None:
        if not result:
            return
        if not self.sign_in(result.get("role", ""), result.get("username", ""), result.get("password", "")):
            self.push_screen(LoginForm(), self.on_login_result)
            return
        self.mount_menu()

    def mount_menu(self) -> None:
        panel = self.query_one("#menu-panel", Container)
        panel.remove_children()
        self.menu_tree = MenuTreeWidget(self.role)
        panel.mount(self.menu_tree)
        if self.status_display:
            self.status_display.role = self.role
            self.status_display.refresh_status()

    def action_logout(self) -> None:
        self.role = None
        if self.menu_tree is not None:
            self.menu_tree.remove()
            self.menu_tree = None
        if self.status_display:
            self.status_display.role = None
            self.status_display.refresh_status()
        self.push_screen(LoginForm(), self.on_login_result)

    def action_refresh(self) -> None:
        if self.status_display:
            self.status_display.refresh_status()
        self.notify("Status refreshed", timeout=2)

    # -----------------------
    # menu actions
    # -----------------------

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        if not event.node.data or event.node.children:
            return
        self.execute_action(event.node.data)

    def execute_action(self, action: str) -> None:
        """Open the form or view behind a menu entry."""
        log_system_event("tui_action_start", {"action": action, "role": self.role})
        try:
            if action in FORMS:
                title, fields = FORMS[action]
                self.push_screen(RecordForm(action, title, fields), self.on_form_result)
            elif action in FILE_FORMS:
                self.push_screen(FileInputForm(action, FILE_FORMS[action]), self.on_file_input_result)
            elif action == "params-set":
                fields = [(k, f"{k}:", str(getattr(DEFAULTS, k))) for k in PARAM_KEYS]
                self.push_screen(RecordForm(action, "Set Parameters", fields), self.on_form_result)
            elif action in VIEWS:
                VIEWS[action](self)
            else:
                self.notify(f"Unknown action: {action}", severity="warning")
        except Exception as e:
            log_system_event("tui_action_error", {"action": action, "error": str(e)}, level="error")
            self.notify(f"Error: {e}", severity="error")

    def show_rows(self, title: str, rows: Sequence[Dict[str, Any]], summary: str = "") -> None:
        if not rows:
            self.push_screen(OutputScreen(title, (summary + "\n\n" if summary else "") + "No data found."))
            return
        columns, cells = rows_to_table(rows)
        self.push_screen(OutputDataTableScreen(title, columns, cells, summary))

    def show_record(self, title: str, record: Dict[str, Any]) -> None:
        columns, cells = record_to_table(record)
        self.push_screen(OutputDataTableScreen(title, columns, cells))

    def on_form_result(self, result: Optional[Dict[str, str]]) -> None:
        """Run the use case behind a submitted form."""
        if not result:
            return
        form = dict(result)
        operation = form.pop("operation")
        try:
            handler = SUBMITS[operation]
            handler(self, form)
        except (ValidationError, AuthenticationError) as e:
            self.notify(str(e), severity="error")
        except Exception as e:
            log_system_event("tui_submit_error", {"operation": operation, "error": str(e)}, level="error")
            self.notify(f"Error: {e}", severity="error")

    def on_file_input_result(self, result: Optional[Dict[str, str]]) -> None:
        if not result:
            return
        file_path = result["file"]
        if not Path(file_path).exists():
            self.push_screen(OutputScreen("File not found", f"File '{file_path}' does not exist."))
            return
        importer = import_egg_sheet if result["operation"] == "eggs-import" else import_feed_sheet
        try:
            info = importer(file_path, db_path=self.db_path)
        except Exception as e:
            log_system_event("tui_import_error", {"file_path": file_path, "error": str(e)}, level="error")
            self.push_screen(OutputScreen("Import failed", str(e)))
            return
        summary = f"{info['imported']} of {info['total']} rows imported from {info['file']}"
        if info["errors"]:
            self.show_rows("Rejected rows", info["errors"], summary)
        else:
            self.notify(summary)

    # -----------------------
    # views
    # -----------------------

    def view_overview(self) -> None:
        res = dashboard_overview(self.role, db_path=self.db_path)
        rows = []
        for section in ("production", "feed", "batch", "medication", "debeaking", "inventory"):
            for key, val in res.get(section, {}).items():
                rows.append({"section": FEATURE_LABELS[section], "figure": key, "value": _cell(val)})
        alerts = "\n".join(f"[{a['level']}] {a['title']}: {a['detail']}" for a in res["alerts"]) or "No alerts"
        self.show_rows("Overview", rows, alerts)

    def view_batches(self) -> None:
        res = batch_overview(db_path=self.db_path)
        rows = [
            {k: b[k] for k in ("id", "batch_number", "breed", "status", "current_count",
                               "age_weeks", "phase", "survival_rate_pct", "weeks_remaining")}
            for b in res["batches"]
        ]
        self.show_rows("Batches", rows, f"Active batches: {res['active_batches']}  Birds: {res['total_birds']}")

    def view_production(self) -> None:
        res = production_summary(db_path=self.db_path)
        self.show_rows(
            "Egg Production", res["records"],
            f"Today: {res['today_total']} eggs  Average: {res['average_production']} eggs/day",
        )

    def view_feed(self) -> None:
        res = feed_status(db_path=self.db_path)
        self.show_rows(
            "Feed Status", res["records"],
            f"Weekly total: {res['weekly_total_kg']} kg  Daily average: {res['daily_average_kg']} kg  "
            f"Stock: {res['current_stock_kg']} kg  Days remaining: {res['days_remaining_label']}",
        )

    def view_medication(self) -> None:
        res = medication_schedule(db_path=self.db_path)
        self.show_rows(
            "Medication Schedule", res["records"],
            f"Overdue: {res['overdue']}  Due within {res['lookahead_days']} days: {res['due']}",
        )

    def view_debeaking(self) -> None:
        res = debeaking_schedule(db_path=self.db_path)
        self.show_rows(
            "Debeaking Schedule", res["records"],
            f"Scheduled: {res['scheduled']}  Overdue: {res['overdue']}  Completed: {res['completed']}",
        )

    def view_params(self) -> None:
        params = load_params(self.db_path)
        rows = [{"parameter": k, "value": getattr(params, k), "default": getattr(DEFAULTS, k)} for k in PARAM_KEYS]
        self.show_rows("System Parameters", rows, f"Database: {self.db_path}")

    def run_migrate(self) -> None:
        prepare_db(self.db_path)
        self.notify(f"Migrations applied in {self.db_path}")

    def show_log_summary(self) -> None:
        log_system_event("view_log_summary")
        lines = []
        for name, log_path in LOG_FILES.items():
            if log_path.exists():
                lines.append(f"{name}: {log_path.stat().st_size / 1024:.1f} KB")
            else:
                lines.append(f"{name}: file not found")
        lines.append("")
        lines.append(get_log_summary("system", lines=50))
        self.push_screen(OutputScreen("Log Summary", "\n".join(lines)))

    # -----------------------
    # submits
    # -----------------------

    def submit_inventory_show(self, form: Dict[str, str]) -> None:
        res = inventory_summary(db_path=self.db_path, on_date=form.get("date"), size=form.get("size"))
        summary = f"Total eggs: {res['total']}  Last updated: {_cell(res['last_updated']) or '-'}\n" + "  ".join(
            f"{d['size']}: {d['count']} ({d['percentage']}%)" for d in res["distribution"]
        )
        self.show_rows("Egg Inventory", res["records"], summary)

    def submit_inventory_export(self, form: Dict[str, str]) -> None:
        if not can_view(self.role, "inventory-export"):
            self.notify("Export is not available to this role", severity="error")
            return
        path = export_inventory(form.get("directory") or ".", db_path=self.db_path, on_date=form.get("date"))
        self.notify(f"Inventory exported to {path}")

    def submit_params(self, form: Dict[str, str]) -> None:
        items = []
        for key, val in form.items():
            if not val:
                continue
            try:
                number = float(val.replace(",", "."))
            except ValueError:
                raise ValidationError(f"{key} must be a number")
            if number < 0:
                raise ValidationError(f"{key} cannot be negative")
            items.append((key, val.replace(",", ".")))
        if not items:
            self.notify("Enter at least one parameter.", severity="warning")
            return
        prepare_db(self.db_path)
        ParamsRepo(self.db_path).set_many(items)
        self.notify("Parameters updated")


VIEWS: Dict[str, Callable[[AviaryDashboardApp], None]] = {
    "overview": AviaryDashboardApp.view_overview,
    "batch-list": AviaryDashboardApp.view_batches,
    "eggs-list": AviaryDashboardApp.view_production,
    "feed-status": AviaryDashboardApp.view_feed,
    "med-list": AviaryDashboardApp.view_medication,
    "debeak-list": AviaryDashboardApp.view_debeaking,
    "params-show": AviaryDashboardApp.view_params,
    "migrate": AviaryDashboardApp.run_migrate,
    "log-summary": AviaryDashboardApp.show_log_summary,
}

SUBMITS: Dict[str, Callable[[AviaryDashboardApp, Dict[str, str]], None]] = {
    "batch-add": lambda app, f: app.show_record("Batch Registered", register_batch(f, db_path=app.db_path)),
    "batch-sell": lambda app, f: app.show_record("Batch Sold", sell(f["batch"], db_path=app.db_path)),
    "batch-mortality": lambda app, f: app.show_record(
        "Losses Recorded",
        record_mortality(f["batch"], f["losses"], db_path=app.db_path, notes=f.get("notes")),
    ),
    "feed-add": lambda app, f: app.show_record("Feed Recorded", record_feed(f, db_path=app.db_path)),
    "med-add": lambda app, f: app.show_record("Medication Recorded", record_medication(f, db_path=app.db_path)),
    "debeak-add": lambda app, f: app.show_record("Debeaking Scheduled", schedule_debeaking(f, db_path=app.db_path)),
    "debeak-complete": lambda app, f: app.show_record(
        "Debeaking Completed",
        complete_debeaking(_record_id(f["record_id"]), f.get("performed_by") or None, db_path=app.db_path),
    ),
    "eggs-add": lambda app, f: app.show_record("Production Recorded", record_eggs(f, db_path=app.db_path)),
    "inventory-add": lambda app, f: app.show_record("Stock Recorded", record_inventory(f, db_path=app.db_path)),
    "inventory-show": AviaryDashboardApp.submit_inventory_show,
    "inventory-export": AviaryDashboardApp.submit_inventory_export,
    "params-set": AviaryDashboardApp.submit_params,
}


def _record_id(text: str) -> int:
    if not text.isdigit():
        raise ValidationError("Record id must be a whole number")
    return int(text)


def main(db_path: str = DB_PATH) -> None:
    """Run the dashboard TUI."""
    app = AviaryDashboardApp(db_path)
    app.run()


if __name__ == "__main__":
    main()
