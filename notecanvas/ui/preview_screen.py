"""Terminal preview of a pending batch."""

import logging
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text

from ..models.batch import PendingBatch
from ..services.preview_service import PreviewApprovalController, split_content

logger = logging.getLogger(__name__)

BODY_PREVIEW_CHARS = 60

# Canvas palette -> rich colour names
RICH_COLORS = {
    "blue": "blue",
    "green": "green",
    "pink": "hot_pink",
    "yellow": "yellow",
    "purple": "purple",
    "orange": "dark_orange",
    "teal": "dark_cyan",
    "red": "red",
    "indigo": "slate_blue1",
    "amber": "gold1",
    "emerald": "spring_green3",
    "rose": "light_pink1",
}


class PreviewScreen:
    """Renders the pending batch and asks the user whether to keep it."""

    def __init__(self, controller: PreviewApprovalController, console: Optional[Console] = None):
        self.controller = controller
        self.console = console or Console()

    def build_table(self, batch: PendingBatch) -> Table:
        table = Table(title=f"Preview ({len(batch.items)} notes)")
        table.add_column("", width=3)
        table.add_column("#", justify="right")
        table.add_column("Title", style="bold")
        table.add_column("Category")
        table.add_column("Tasks", justify="right")
        table.add_column("Position")
        table.add_column("Body")

        for index, note in enumerate(batch.items, start=1):
            _, body = split_content(note.content)
            if len(body) > BODY_PREVIEW_CHARS:
                body = body[:BODY_PREVIEW_CHARS] + "..."
            # Text cells so note content is never parsed as markup
            table.add_row(
                Text("x" if note.id in batch.selected_ids else " "),
                str(index),
                Text(note.title, style=RICH_COLORS.get(note.color, "default")),
                Text(note.category or "-"),
                str(len(note.tasks)),
                f"({note.position.x:.0f}, {note.position.y:.0f})",
                Text(body.replace("\n", " ")),
            )
        return table

    def render(self) -> None:
        """Print the pending batch, or a notice when there is none."""
        batch = self.controller.batch
        if not self.controller.has_pending:
            self.console.print("No notes waiting for approval.", style="yellow")
            return

        self.console.print(self.build_table(batch))
        if batch.reasoning:
            self.console.print(Panel(Text(batch.reasoning), title="Why these notes", border_style="blue"))

        selected, total = self.controller.selection_summary()
        self.console.print(f"{selected} of {total} selected")

    def confirm_and_commit(self, approve_all: bool = False) -> int:
        """Render, then commit or discard the batch.

        Args:
            approve_all: Commit without asking

        Returns:
            Number of notes committed
        """
        self.render()
        if not self.controller.has_pending:
            return 0

        if approve_all or Confirm.ask("Add these notes to the canvas?", console=self.console, default=True):
            committed = self.controller.approve_selected()
            self.console.print(f"✅ Added {len(committed)} notes", style="bold green")
            return len(committed)

        dropped = self.controller.discard()
        self.console.print(f"Discarded {dropped} notes", style="yellow")
        logger.info(f"User discarded preview ({dropped} notes)")
        return 0
