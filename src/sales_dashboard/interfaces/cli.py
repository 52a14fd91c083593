from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional

from sales_dashboard.common.config import Settings, format_money
from sales_dashboard.common.logging_config import setup_logging
from sales_dashboard.domain.models import Status, TimeOfDay
from sales_dashboard.services.controller import DashboardController
from sales_dashboard.services.notifications import ConsoleNotifier, NotificationError, NotificationService
from sales_dashboard.services.reporter import default_date_range, recent_transactions
from sales_dashboard.services.validation import InputError

HELP = """
Commands:
  add                         record a single sale (prompts for fields)
  batch                       record a batch of identical sales
  report [FROM] [TO] [TIMES]  metrics for a date range, e.g. report 2024-06-01 2024-06-30 morning,evening
  recent                      most recent sales in the current range
  notify on|off|MESSAGE       toggle notifications or send one
  reset [sample]              discard all data (optionally reseed sample data)
  help                        show this help
  exit | quit                 leave
"""

Ask = Callable[[str], str]


def _parse_day(value: str) -> Optional[date]:
    value = value.strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InputError([f"Date: expected YYYY-MM-DD, got {value!r}"])


def _parse_times(value: str) -> List[TimeOfDay]:
    times = []
    for part in value.split(","):
        part = part.strip().capitalize()
        if not part:
            continue
        try:
            times.append(TimeOfDay(part))
        except ValueError:
            raise InputError([f"Time of day: unknown bucket {part!r} (morning, afternoon, evening)"])
    return times


def _parse_status(value: str) -> Status:
    value = value.strip().capitalize() or Status.APPROVED.value
    try:
        return Status(value)
    except ValueError:
        raise InputError([f"Status: expected Approved, Pending or Declined, got {value!r}"])


class DashboardCLI:
    """Interactive shell over a DashboardController."""

    def __init__(
        self,
        controller: DashboardController,
        notifications: NotificationService,
        settings: Optional[Settings] = None,
        ask: Ask = input,
        out: Callable[[str], None] = print,
    ):
        self.controller = controller
        self.notifications = notifications
        self.settings = settings or controller.settings
        self.ask = ask
        self.out = out
        self.start_date, self.end_date = default_date_range(controller.dataset)
        self.times: List[TimeOfDay] = []

    def _money(self, amount) -> str:
        return format_money(amount, self.settings.currency)

    def _refresh_range(self):
        self.start_date, self.end_date = default_date_range(self.controller.dataset)

    # -----------------------------
    # Commands
    # -----------------------------
    def add(self):
        product = self.ask("Product name: ")
        amount = self.ask("Amount: ")
        status = _parse_status(self.ask("Status [Approved/Pending/Declined]: "))
        day = _parse_day(self.ask("Date (YYYY-MM-DD, blank for today): ")) or date.today()

        self.controller.add_transaction(product, amount, status, day)
        self._refresh_range()
        self.out("✅ Sale added.\n")

    def batch(self):
        product = self.ask("Product name: ")
        unit_amount = self.ask("Unit amount: ")
        quantity = self.ask("Quantity: ")
        day = _parse_day(self.ask("Date (YYYY-MM-DD, blank for today): ")) or date.today()
        rate = self.ask("Approval rate % (blank = all approved): ").strip()

        self.controller.add_batch(
            product,
            unit_amount,
            quantity,
            day,
            randomize_status=bool(rate),
            approval_rate=rate or None,
        )
        self._refresh_range()
        self.out(f"✅ {quantity} sales added.\n")

    def report(self, args: List[str]):
        if len(args) >= 1:
            self.start_date = _parse_day(args[0])
        if len(args) >= 2:
            self.end_date = _parse_day(args[1])
        if len(args) >= 3:
            self.times = _parse_times(args[2])

        result = self.controller.report(self.start_date, self.end_date, self.times)
        times = ", ".join(t.value for t in self.times) or "all day"

        self.out(f"\n=== {self.start_date} → {self.end_date} ({times}) ===")
        self.out(f"Total sales:  {self._money(result.total_sales)}")
        self.out(f"Transactions: {result.total_transactions_count}")
        self.out(f"Approved:     {result.approved_transactions_count}")
        self.out(f"Conversion:   {result.conversion_rate}%")

        if result.filtered_daily_data:
            self.out("\nDaily sales:")
            for d in result.filtered_daily_data:
                self.out(f"- {d.date.isoformat()} | {self._money(d.sales)} | {d.transactions}")
        self.out("")

    def recent(self):
        result = self.controller.report(self.start_date, self.end_date, self.times)
        rows = recent_transactions(result, self.settings.recent_limit)
        if not rows:
            self.out("No transactions found for the selected window/filters.\n")
            return

        for i, t in enumerate(rows, start=1):
            self.out(f"{i:>2}. {t.date:%Y-%m-%d %H:%M} | {t.product} | {self._money(t.amount)} | {t.status.value}")
        self.out("")

    def notify(self, text: str):
        if text.lower() in {"on", "off"}:
            self.notifications.enabled = text.lower() == "on"
            self.out(f"Notifications {'enabled' if self.notifications.enabled else 'disabled'}.\n")
            return
        self.notifications.send(text)

    def reset(self, args: List[str]):
        self.controller.reset(with_sample_data=bool(args) and args[0].lower() == "sample")
        self._refresh_range()
        self.times = []
        self.out(f"🗑️ Data reset ({len(self.controller.dataset)} transactions).\n")

    # -----------------------------
    # Dispatch
    # -----------------------------
    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the session should end."""
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return True

        cmd = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""

        if cmd in {"exit", "quit"}:
            self.out("Goodbye!")
            return False

        try:
            if cmd == "add":
                self.add()
            elif cmd == "batch":
                self.batch()
            elif cmd == "report":
                self.report(rest.split())
            elif cmd == "recent":
                self.recent()
            elif cmd == "notify":
                self.notify(rest)
            elif cmd == "reset":
                self.reset(rest.split())
            elif cmd == "help":
                self.out(HELP)
            else:
                self.out(f"Unknown command: {cmd}. Type 'help'.\n")
        except InputError as e:
            self.out("❌ " + "\n❌ ".join(e.messages) + "\n")
        except NotificationError as e:
            self.out(f"❌ {e}\n")

        return True

    def run(self):
        self.out(f"\n=== {self.settings.app_name} ===")
        self.out("Type 'help' for commands, 'exit' or 'quit' to end.\n")

        while True:
            try:
                line = self.ask("> ")
            except EOFError:
                break
            if not self.handle(line):
                break


def main():
    settings = Settings.from_env()
    setup_logging("sales_dashboard.cli", settings.log_level)

    controller = DashboardController(settings=settings)
    notifications = NotificationService(ConsoleNotifier(), title=settings.app_name)
    DashboardCLI(controller, notifications, settings).run()


if __name__ == "__main__":
    main()
