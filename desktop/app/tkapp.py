"""Tkinter desktop application for the expense tracker."""

from __future__ import annotations

import argparse
import logging
import queue
import threading
import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, Iterable, Optional

from common.config import api_url_from_env
from desktop.app.api_client import ApiError, ExpenseClient
from desktop.app.state import CATEGORY_OPTIONS, ExpenseController


PRIMARY_BG = "#0f172a"
SECONDARY_BG = "#1e293b"
ACCENT_BG = "#1d4ed8"
ACCENT_ACTIVE_BG = "#2563eb"
TEXT_PRIMARY = "#e2e8f0"
TEXT_MUTED = "#94a3b8"
TEXT_ERROR = "#fca5a5"

POLL_INTERVAL_MS = 50

Callback = Callable[[Any], None]


class ExpensePanel(ttk.Frame):
    """Entry form plus the expense list, bound to an ExpenseController."""

    def __init__(self, master: tk.Misc, controller: ExpenseController) -> None:
        super().__init__(master, padding=16, style="Panel.TFrame")
        self.controller = controller

        # Results from worker threads land here and are applied on the Tk thread only.
        self._results: "queue.Queue[tuple[Callback, Any]]" = queue.Queue()

        self.description_var = tk.StringVar()
        self.amount_var = tk.StringVar()
        self.category_var = tk.StringVar(value=controller.form.category)
        self.error_var = tk.StringVar()
        self.submit_button: Optional[ttk.Button] = None

        self.amount_var.trace_add("write", self._handle_amount_change)

        self._build_form()
        self._build_table()
        self.columnconfigure(0, weight=1)
        self.rowconfigure(2, weight=1)

        controller.expenses.subscribe(self.populate)
        self.after(POLL_INTERVAL_MS, self._drain_results)

    def _build_form(self) -> None:
        ttk.Label(self, textvariable=self.error_var, style="Error.TLabel").grid(
            row=0, column=0, sticky="w", padx=4, pady=(0, 8)
        )

        form = ttk.LabelFrame(self, text="Add Expense", style="Card.TLabelframe")
        form.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 12))
        form.columnconfigure(0, weight=2)
        form.columnconfigure(1, weight=1)
        form.columnconfigure(2, weight=1)

        def add_label(text: str, column: int) -> None:
            ttk.Label(form, text=text, style="FormLabel.TLabel").grid(
                column=column, row=0, sticky="w", padx=4, pady=4
            )

        add_label("Description", 0)
        ttk.Entry(form, textvariable=self.description_var, style="App.TEntry").grid(
            column=0, row=1, sticky="ew", padx=4, pady=(0, 8)
        )

        add_label("Amount", 1)
        ttk.Entry(form, textvariable=self.amount_var, style="App.TEntry").grid(
            column=1, row=1, sticky="ew", padx=4, pady=(0, 8)
        )

        add_label("Category", 2)
        ttk.Combobox(
            form,
            textvariable=self.category_var,
            values=list(CATEGORY_OPTIONS),
            state="readonly",
            style="App.TCombobox",
        ).grid(column=2, row=1, sticky="ew", padx=4, pady=(0, 8))

        self.submit_button = ttk.Button(
            form,
            text=self.controller.submit_label,
            command=self.submit,
            style="Primary.TButton",
        )
        self.submit_button.grid(column=3, row=1, padx=4, pady=(0, 8))

    def _build_table(self) -> None:
        table_frame = ttk.Frame(self, style="Panel.TFrame")
        table_frame.grid(row=2, column=0, sticky="nsew")
        table_frame.columnconfigure(0, weight=1)
        table_frame.rowconfigure(0, weight=1)

        columns = ("description", "amount", "category")
        self.tree = ttk.Treeview(
            table_frame,
            columns=columns,
            show="headings",
            height=12,
            style="App.Treeview",
        )
        headings = {
            "description": "Description",
            "amount": "Amount",
            "category": "Category",
        }
        for key, label in headings.items():
            width = 320 if key == "description" else 140
            self.tree.heading(key, text=label, anchor="w")
            self.tree.column(key, width=width, anchor="w")

        vsb = ttk.Scrollbar(table_frame, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscroll=vsb.set)

        self.tree.grid(row=0, column=0, sticky="nsew")
        vsb.grid(row=0, column=1, sticky="ns")

        button_bar = ttk.Frame(table_frame, style="Panel.TFrame")
        button_bar.grid(row=1, column=0, columnspan=2, sticky="e", pady=8)
        ttk.Button(
            button_bar,
            text="Delete Selected",
            command=self.delete_selected,
            style="Secondary.TButton",
        ).grid(row=0, column=0, padx=4)

    # Worker plumbing ------------------------------------------------------
    def _run_in_background(self, call: Callable[[], Any], on_success: Callback, on_error: Callback) -> None:
        def worker() -> None:
            try:
                result = call()
            except ApiError as exc:
                self._results.put((on_error, exc))
            else:
                self._results.put((on_success, result))

        threading.Thread(target=worker, daemon=True).start()

    def _drain_results(self) -> None:
        while True:
            try:
                callback, value = self._results.get_nowait()
            except queue.Empty:
                break
            callback(value)
            self._refresh_status()
        self.after(POLL_INTERVAL_MS, self._drain_results)

    # Actions --------------------------------------------------------------
    def load(self) -> None:
        self._run_in_background(
            self.controller.client.list_expenses,
            self.controller.finish_load,
            self.controller.fail_load,
        )

    def submit(self) -> None:
        form = self.controller.form
        form.description = self.description_var.get()
        form.set_amount(self.amount_var.get())
        form.category = self.category_var.get()

        payload = self.controller.begin_submit()
        if payload is None:
            return
        self._refresh_status()
        self._run_in_background(
            lambda: self.controller.client.create_expense(payload),
            self._on_created,
            self.controller.fail_submit,
        )

    def _on_created(self, created: Any) -> None:
        self.controller.finish_submit(created)
        self._sync_form_vars()

    def delete_selected(self) -> None:
        for item_id in self.tree.selection():
            expense_id = int(item_id)
            self._run_in_background(
                lambda expense_id=expense_id: self.controller.client.delete_expense(expense_id),
                lambda _result, expense_id=expense_id: self.controller.finish_delete(expense_id),
                self.controller.fail_delete,
            )

    # View sync ------------------------------------------------------------
    def populate(self) -> None:
        self.tree.delete(*self.tree.get_children())
        for row in self.controller.expenses.items:
            self.tree.insert(
                "",
                "end",
                iid=str(row.id),
                values=(row.description, f"${row.amount_display}", row.category),
            )

    def _refresh_status(self) -> None:
        self.error_var.set(self.controller.error or "")
        if self.submit_button is not None:
            self.submit_button.configure(
                text=self.controller.submit_label,
                state="disabled" if self.controller.busy else "normal",
            )

    def _sync_form_vars(self) -> None:
        form = self.controller.form
        self.description_var.set(form.description)
        self.amount_var.set(form.amount)
        self.category_var.set(form.category)

    def _handle_amount_change(self, *_args: object) -> None:
        raw = self.amount_var.get()
        cleaned = self.controller.form.set_amount(raw)
        if cleaned != raw:
            self.amount_var.set(cleaned)


class ExpenseTrackerApp(tk.Tk):
    """Main application window."""

    def __init__(self, api_url: str) -> None:
        super().__init__()
        self.title("Expense Manager")
        self.geometry("860x600")
        self.minsize(720, 480)
        self.configure(bg=PRIMARY_BG)

        self._configure_styles()

        self.controller = ExpenseController(ExpenseClient(api_url))
        self._build_layout()
        self.panel.load()

    def _configure_styles(self) -> None:
        style = ttk.Style(self)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass

        style.configure("TFrame", background=PRIMARY_BG)
        style.configure("TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY)

        style.configure("Panel.TFrame", background=SECONDARY_BG, relief="flat")
        style.configure("Card.TLabelframe", background=SECONDARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Card.TLabelframe.Label", background=SECONDARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Header.TFrame", background=PRIMARY_BG)

        style.configure("FormLabel.TLabel", background=SECONDARY_BG, foreground=TEXT_MUTED, font=("Segoe UI", 9))
        style.configure("Error.TLabel", background=SECONDARY_BG, foreground=TEXT_ERROR, font=("Segoe UI", 10, "bold"))
        style.configure("Header.TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY, font=("Segoe UI", 20, "bold"))

        style.configure(
            "App.TEntry",
            fieldbackground=SECONDARY_BG,
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            insertcolor=TEXT_PRIMARY,
            bordercolor=ACCENT_BG,
        )
        style.map(
            "App.TEntry",
            fieldbackground=[("focus", SECONDARY_BG)],
            foreground=[("disabled", TEXT_MUTED)],
        )

        style.configure(
            "App.TCombobox",
            fieldbackground=SECONDARY_BG,
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            arrowcolor=TEXT_PRIMARY,
        )
        style.map(
            "App.TCombobox",
            fieldbackground=[("readonly", SECONDARY_BG)],
            foreground=[("disabled", TEXT_MUTED)],
        )

        style.configure(
            "Primary.TButton",
            background=ACCENT_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=ACCENT_BG,
            padding=(18, 6),
        )
        style.map(
            "Primary.TButton",
            background=[("active", ACCENT_ACTIVE_BG)],
            foreground=[("disabled", TEXT_MUTED)],
        )

        style.configure(
            "Secondary.TButton",
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=SECONDARY_BG,
            padding=(14, 6),
        )
        style.map(
            "Secondary.TButton",
            background=[("active", ACCENT_BG)],
            foreground=[("disabled", TEXT_MUTED)],
        )

        style.configure(
            "App.Treeview",
            background=SECONDARY_BG,
            fieldbackground=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=SECONDARY_BG,
            rowheight=28,
        )
        style.configure(
            "App.Treeview.Heading",
            background=SECONDARY_BG,
            foreground=TEXT_MUTED,
            relief="flat",
        )
        style.map(
            "App.Treeview",
            background=[("selected", ACCENT_BG)],
            foreground=[("selected", TEXT_PRIMARY)],
        )

    def _build_layout(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        header = ttk.Frame(self, padding=20, style="Header.TFrame")
        header.grid(row=0, column=0, sticky="ew")
        ttk.Label(header, text="Expense Manager", style="Header.TLabel").grid(row=0, column=0, sticky="w")

        self.panel = ExpensePanel(self, self.controller)
        self.panel.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Tkinter desktop app for the expense tracker")
    parser.add_argument(
        "--api-url",
        default=None,
        help="Base URL of the expense API (default: $EXPENSE_API_URL or http://localhost:3000)",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(level=logging.INFO)
    app = ExpenseTrackerApp(args.api_url or api_url_from_env())
    app.mainloop()


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
