"""Rich renderables for each session screen (no Textual widgets here)."""

from __future__ import annotations

from typing import Callable

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from venom.core.forms import Field, Form
from venom.core.session import Screen, Session
from venom.tui.common.keybindings import help_line

PURPLE = "#908dfb"
WHITE = "#fafafa"
GRAY = "#bbbbbb"

SPINNER_FRAMES = "⣾⣽⣻⢿⡿⣟⣯⣷"


def project_rows(session: Session) -> list[tuple[str, str, str, str]]:
    """(name, folder, file, variable count) per cached project, ordered by name."""
    return [
        (p.name, p.target_folder, p.file_name, str(len(p.variables)))
        for p in session.cache.all()
    ]


def variable_rows(session: Session) -> list[tuple[str, str]]:
    """(key, value) rows of the draft, ordered by key."""
    if session.draft is None:
        return []
    return session.draft.sorted_variables()


def _table(columns: list[tuple[str, int]], rows: list[tuple[str, ...]], cursor: int) -> Table:
    table = Table(border_style="grey50", header_style="bold", expand=False)
    for title, width in columns:
        table.add_column(title, min_width=width, overflow="ellipsis")
    for i, row in enumerate(rows):
        style = "bold #ffffaf on #5f00ff" if i == cursor else ""
        table.add_row(*row, style=style)
    return table


def render_projects_list(session: Session) -> RenderableType:
    rows = project_rows(session)
    if not rows:
        return Text("No projects yet. Press 'a' to add one.", style=GRAY)
    return _table(
        [("Project", 30), ("Folder", 20), ("File", 30), ("Vars", 4)],
        rows,
        session.project_cursor,
    )


def render_variables_list(session: Session) -> RenderableType:
    name = session.draft.name if session.draft is not None else ""
    title = Text.assemble(("Variables: ", f"bold {PURPLE}"), (name, f"bold {WHITE}"))
    if session.draft_dirty:
        title.append("  ● unsaved", style="bold yellow")
    rows = variable_rows(session)
    if not rows:
        body: RenderableType = Text("No variables. Press 'a' to add one.", style=GRAY)
    else:
        body = _table([("Key", 50), ("Value", 50)], rows, session.variable_cursor)
    return Group(title, body)


def _render_field(field: Field, focused: bool) -> RenderableType:
    title_style = f"bold {PURPLE}" if focused else GRAY
    if field.kind == "confirm":
        lines = [Text(field.title, style=title_style)]
        if field.description:
            lines.append(Text(field.description, style=f"bold {WHITE}"))
        yes, no = f" {field.affirmative} ", f" {field.negative} "
        selected = f"bold {WHITE} on {PURPLE}" if focused else f"{GRAY} on #706ddb"
        buttons = Text.assemble(
            (yes, selected if field.value else GRAY),
            "  ",
            (no, selected if not field.value else GRAY),
        )
        lines.append(buttons)
        return Group(*lines)
    prompt = Text("> ", style=PURPLE if focused else GRAY)
    value = Text(str(field.value), style=WHITE)
    if focused:
        value.append("█", style=PURPLE)
    return Group(Text(field.title, style=title_style), Text.assemble(prompt, value))


def render_form(form: Form) -> RenderableType:
    parts: list[RenderableType] = []
    if form.title:
        parts.append(Text(form.title, style=f"bold {PURPLE}"))
    for i, field in enumerate(form.fields):
        parts.append(_render_field(field, i == form.focus))
        parts.append(Text(""))
    return Panel(Group(*parts), border_style="grey50", width=64)


def render_loading(session: Session) -> RenderableType:
    frame = SPINNER_FRAMES[session.spinner_frame % len(SPINNER_FRAMES)]
    return Text.assemble((f" {frame} ", "#5f00ff"), ("Loading...", f"bold {WHITE}"))


def render_confirm(session: Session) -> RenderableType:
    if session.pending is None:
        return Text("")
    return render_form(session.pending.form)


def render_error(session: Session) -> RenderableType:
    return Panel(
        Text(session.error or "Unknown error", style="bold"),
        title="Operation failed",
        border_style="red",
        width=64,
    )


def _render_session_form(session: Session) -> RenderableType:
    if session.form is None:
        return Text("")
    return render_form(session.form)


_VIEWS: dict[Screen, Callable[[Session], RenderableType]] = {
    Screen.PROJECTS_LIST: render_projects_list,
    Screen.VARIABLES_LIST: render_variables_list,
    Screen.CREATE_PROJECT_FORM: _render_session_form,
    Screen.EDIT_PROJECT_FORM: _render_session_form,
    Screen.CREATE_VARIABLE_FORM: _render_session_form,
    Screen.EDIT_VARIABLE_FORM: _render_session_form,
    Screen.LOADING: render_loading,
    Screen.CONFIRM: render_confirm,
    Screen.ERROR: render_error,
}


def render_session(session: Session) -> RenderableType:
    """Whole-screen renderable: current view, status line and key help."""
    parts: list[RenderableType] = [_VIEWS[session.screen](session), Text("")]
    if session.status:
        parts.append(Text(session.status, style="green"))
    parts.append(Text(help_line(session.screen, full=session.show_help), style=GRAY))
    return Group(*parts)
