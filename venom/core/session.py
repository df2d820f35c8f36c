"""Session state: current screen, working draft and pending confirmation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from venom.core.cache import ProjectCache
from venom.core.forms import Form
from venom.models import Project


class Screen(Enum):
    PROJECTS_LIST = "projects_list"
    CREATE_PROJECT_FORM = "create_project_form"
    EDIT_PROJECT_FORM = "edit_project_form"
    VARIABLES_LIST = "variables_list"
    CREATE_VARIABLE_FORM = "create_variable_form"
    EDIT_VARIABLE_FORM = "edit_variable_form"
    LOADING = "loading"
    CONFIRM = "confirm"
    ERROR = "error"


PROJECT_FORMS = (Screen.CREATE_PROJECT_FORM, Screen.EDIT_PROJECT_FORM)
VARIABLE_FORMS = (Screen.CREATE_VARIABLE_FORM, Screen.EDIT_VARIABLE_FORM)


# ---- Pending actions (what an accepted confirmation does) ----
@dataclass(frozen=True)
class DeleteProjectAction:
    name: str


@dataclass(frozen=True)
class DeleteVariableAction:
    key: str


@dataclass(frozen=True)
class OverwriteProjectAction:
    """Create would replace an existing project with the same name."""

    name: str


PendingAction = Union[DeleteProjectAction, DeleteVariableAction, OverwriteProjectAction]


@dataclass
class PendingConfirmation:
    """A raised confirmation: its dialog, what accept does, where decline returns."""

    action: PendingAction
    resume: Screen
    form: Form


@dataclass
class Session:
    """All UI and domain state for one operator session."""

    screen: Screen = Screen.LOADING
    cache: ProjectCache = field(default_factory=ProjectCache)
    draft: Optional[Project] = None
    draft_dirty: bool = False
    form: Optional[Form] = None
    original_key: Optional[str] = None
    pending: Optional[PendingConfirmation] = None
    # Screen that issued the in-flight command; errors resume here
    origin: Screen = Screen.PROJECTS_LIST
    project_cursor: int = 0
    variable_cursor: int = 0
    error: Optional[str] = None
    status: str = ""
    spinner_frame: int = 0
    ticking: bool = False
    show_help: bool = False

    def selected_project(self) -> Optional[Project]:
        """Cached project under the cursor (a copy), or None when the list is empty."""
        projects = self.cache.all()
        if not projects:
            return None
        return projects[min(self.project_cursor, len(projects) - 1)]

    def selected_variable(self) -> Optional[tuple[str, str]]:
        if self.draft is None:
            return None
        rows = self.draft.sorted_variables()
        if not rows:
            return None
        return rows[min(self.variable_cursor, len(rows) - 1)]


def rename_variable(
    variables: dict[str, str], old_key: str, new_key: str, value: str
) -> None:
    """Store ``value`` under ``new_key``, dropping ``old_key`` first when it differs."""
    if old_key != new_key:
        variables.pop(old_key, None)
    variables[new_key] = value
