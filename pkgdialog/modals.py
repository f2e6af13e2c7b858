from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, OptionList, SelectionList, Static
from textual.widgets.option_list import Option

class ConfirmModal(ModalScreen[bool]):
    BINDINGS = [("escape", "cancel", "Back")]

    def __init__(self, title: str, body: str, yes_label: str = "Yes", no_label: str = "No"):
        super().__init__()
        self._title = title
        self._body = body
        self._yes = yes_label
        self._no = no_label

    def compose(self) -> ComposeResult:
        yield Container(
            Static(Text(self._title, style="bold")),
            Static(self._body, markup=False),
            Horizontal(
                Button(self._no, id="no", variant="error"),
                Button(self._yes, id="yes", variant="success"),
                classes="toolbar",
            ),
            id="modal",
        )

    def on_mount(self) -> None:
        self.query_one("#yes", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")

    def action_cancel(self) -> None:
        self.dismiss(False)

class OutputModal(ModalScreen[None]):
    BINDINGS = [("escape", "close", "Close")]

    def __init__(self, title: str, body: str):
        super().__init__()
        self._title = title
        self._body = body

    def compose(self) -> ComposeResult:
        yield Container(
            Static(Text(self._title, style="bold")),
            Static(self._body, markup=False),
            Button("OK", id="close", variant="primary"),
            id="modal",
        )

    def on_mount(self) -> None:
        self.query_one("#close", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)

class ChecklistModal(ModalScreen[Optional[List[str]]]):
    """Checklist of (id, label, state); dismisses with the checked ids in item order, or None."""

    BINDINGS = [("escape", "cancel", "Back")]

    def __init__(self, title: str, body: str, items: Sequence[Tuple[str, str, bool]]):
        super().__init__()
        self._title = title
        self._body = body
        self._items = list(items)

    def compose(self) -> ComposeResult:
        yield Container(
            Static(Text(self._title, style="bold")),
            Static(self._body, markup=False),
            SelectionList[str](
                *[(Text.assemble(pkg, "  ", (label, "dim")), pkg, state) for pkg, label, state in self._items],
                id="checklist",
            ),
            Horizontal(
                Button("Cancel", id="cancel", variant="error"),
                Button("OK", id="ok", variant="success"),
                classes="toolbar",
            ),
            id="modal",
        )

    def on_mount(self) -> None:
        self.query_one("#checklist", SelectionList).focus()

    def chosen(self) -> List[str]:
        picked = set(self.query_one("#checklist", SelectionList).selected)
        return [pkg for pkg, _, _ in self._items if pkg in picked]

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok":
            self.dismiss(self.chosen())
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)

class MenuModal(ModalScreen[Optional[str]]):
    BINDINGS = [("escape", "cancel", "Back")]

    def __init__(self, title: str, body: str, items: Sequence[Tuple[str, str]]):
        super().__init__()
        self._title = title
        self._body = body
        self._items = list(items)

    def compose(self) -> ComposeResult:
        yield Container(
            Static(Text(self._title, style="bold")),
            Static(self._body, markup=False),
            OptionList(
                *[Option(Text.assemble((key, "bold"), "  ", label), id=key) for key, label in self._items],
                id="menu",
            ),
            id="modal",
        )

    def on_mount(self) -> None:
        self.query_one("#menu", OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option.id)

    def action_cancel(self) -> None:
        self.dismiss(None)
