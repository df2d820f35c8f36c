"""Key help contract shown under each screen."""

from __future__ import annotations

from typing import TypeAlias

from venom.core.session import Screen

KeyHelp: TypeAlias = tuple[str, str]

NAV_UP_HELP: KeyHelp = ("↑/k", "up")
NAV_DOWN_HELP: KeyHelp = ("↓/j", "down")
HELP_HELP: KeyHelp = ("?", "help")

FORM_HELP: list[KeyHelp] = [
    ("enter/tab", "next field"),
    ("shift+tab", "previous"),
    ("←/→", "yes/no"),
    ("y/n", "answer"),
    ("esc", "cancel"),
]


def compose_help(*entries: KeyHelp) -> list[KeyHelp]:
    """Return help entries in order."""
    return list(entries)


def with_nav_help(*entries: KeyHelp) -> list[KeyHelp]:
    """Prefix help entries with the list navigation contract."""
    return compose_help(NAV_UP_HELP, NAV_DOWN_HELP, *entries)


SCREEN_HELP: dict[Screen, list[KeyHelp]] = {
    Screen.PROJECTS_LIST: with_nav_help(
        ("p", "pull"),
        ("a", "add"),
        ("e", "edit"),
        ("v", "variables"),
        ("d", "delete"),
        ("x", "pull all"),
        ("r", "refresh"),
        ("q", "quit"),
        HELP_HELP,
    ),
    Screen.VARIABLES_LIST: with_nav_help(
        ("a", "add"),
        ("e", "edit"),
        ("d", "delete"),
        ("s", "save"),
        ("p", "pull"),
        ("q", "back"),
        HELP_HELP,
    ),
    Screen.CREATE_PROJECT_FORM: FORM_HELP,
    Screen.EDIT_PROJECT_FORM: FORM_HELP,
    Screen.CREATE_VARIABLE_FORM: FORM_HELP,
    Screen.EDIT_VARIABLE_FORM: FORM_HELP,
    Screen.CONFIRM: compose_help(("←/→", "yes/no"), ("y/n", "answer"), ("enter", "submit"), ("esc", "no")),
    Screen.LOADING: compose_help(("q", "quit")),
    Screen.ERROR: compose_help(("any key", "continue")),
}

# Entries shown when help is collapsed on list screens
SHORT_HELP_SIZE = 6


def help_line(screen: Screen, full: bool = False) -> str:
    """Render the help entries of ``screen`` as one line."""
    entries = SCREEN_HELP.get(screen, [])
    if not full and screen in (Screen.PROJECTS_LIST, Screen.VARIABLES_LIST):
        entries = entries[:SHORT_HELP_SIZE] + [HELP_HELP]
    return " │ ".join(f"{key}: {label}" for key, label in entries)
