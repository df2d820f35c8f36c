"""Session controller: routes every message to the handler for the current screen.

The controller is a pure state machine. ``handle`` mutates the session and
returns at most one command for the render loop to dispatch; it never
awaits and never touches the store directly.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from venom.core.commands import (
    Batch,
    Command,
    ConnectStore,
    CreateProject,
    DeleteProject,
    ExportProjects,
    LoadProjects,
    Quit,
    SaveVariables,
    Sequence,
    SpinnerTick,
    UpdateProject,
)
from venom.core.errors import StoreUnavailable
from venom.core.forms import Form, confirm_form, input_field, new_form
from venom.core.messages import (
    CommandFailed,
    KeyInput,
    Message,
    ProjectCreated,
    ProjectDeleted,
    ProjectsExported,
    ProjectsLoaded,
    ProjectUpdated,
    SpinnerTicked,
    StoreConnected,
    VariablesSaved,
)
from venom.core.session import (
    PROJECT_FORMS,
    DeleteProjectAction,
    DeleteVariableAction,
    OverwriteProjectAction,
    PendingAction,
    PendingConfirmation,
    Screen,
    Session,
    rename_variable,
)
from venom.models import Project

logger = logging.getLogger(__name__)

QUIT_KEYS = {"q", "ctrl+c"}
UP_KEYS = {"up", "k"}
DOWN_KEYS = {"down", "j"}
EDIT_KEYS = {"enter", "e"}


def project_form(project: Project, new: bool) -> Form:
    """Project create/edit form bound to the draft's current values."""
    fields = []
    if new:
        fields.append(input_field("name", "Project Name", project.name))
    fields.append(input_field("folder", "Target Folder", project.target_folder))
    fields.append(input_field("file", "File Name", project.file_name))
    title = "Creating Project" if new else f"Editing Project: {project.name}"
    return new_form(fields, title=title)


def variable_form(key: str = "", value: str = "", editing: bool = False) -> Form:
    """Variable create/edit form."""
    title = f"Editing Variable: {key}" if editing else "Adding New Variable"
    return new_form(
        [input_field("key", "Variable Key", key), input_field("value", "Variable Value", value)],
        title=title,
    )


class Controller:
    """Owns the session and turns input/completion messages into commands."""

    def __init__(self, session: Optional[Session] = None) -> None:
        self.session = session or Session()
        self._completions: dict[type, Callable[[Message], Optional[Command]]] = {
            StoreConnected: self._on_store_connected,
            ProjectsLoaded: self._on_projects_loaded,
            ProjectCreated: self._on_project_saved,
            ProjectUpdated: self._on_project_saved,
            ProjectDeleted: self._on_project_deleted,
            VariablesSaved: self._on_variables_saved,
            ProjectsExported: self._on_projects_exported,
            CommandFailed: self._on_command_failed,
            SpinnerTicked: self._on_spinner_tick,
        }
        self._screens: dict[Screen, Callable[[KeyInput], Optional[Command]]] = {
            Screen.PROJECTS_LIST: self._update_projects_list,
            Screen.CREATE_PROJECT_FORM: self._update_project_form,
            Screen.EDIT_PROJECT_FORM: self._update_project_form,
            Screen.VARIABLES_LIST: self._update_variables_list,
            Screen.CREATE_VARIABLE_FORM: self._update_variable_form,
            Screen.EDIT_VARIABLE_FORM: self._update_variable_form,
            Screen.LOADING: self._update_loading,
            Screen.CONFIRM: self._update_confirm,
            Screen.ERROR: self._update_error,
        }
        self._accepts: dict[type, Callable[[PendingAction], Optional[Command]]] = {
            DeleteProjectAction: self._accept_delete_project,
            DeleteVariableAction: self._accept_delete_variable,
            OverwriteProjectAction: self._accept_overwrite_project,
        }

    # ---- Entry points ----
    def init(self) -> Command:
        """Startup: connect, then fetch everything, while the spinner runs."""
        self.session.screen = Screen.LOADING
        self.session.origin = Screen.PROJECTS_LIST
        self.session.ticking = True
        return Batch(SpinnerTick(), Sequence(ConnectStore(), LoadProjects()))

    def handle(self, message: Message) -> Optional[Command]:
        """Process one message; returns the single command it triggers, if any."""
        completion = self._completions.get(type(message))
        if completion is not None:
            return completion(message)
        if isinstance(message, KeyInput):
            return self._screens[self.session.screen](message)
        logger.debug("Ignoring unexpected message %r", message)
        return None

    # ---- Helpers ----
    def _start_loading(self, command: Command, origin: Screen) -> Command:
        """Enter Loading for ``command``; errors will resume at ``origin``."""
        s = self.session
        s.origin = origin
        s.screen = Screen.LOADING
        s.status = ""
        if s.ticking:
            return command
        s.ticking = True
        return Batch(SpinnerTick(), command)

    def _go_projects_list(self) -> None:
        s = self.session
        s.screen = Screen.PROJECTS_LIST
        s.draft = None
        s.draft_dirty = False
        s.form = None
        s.original_key = None
        s.project_cursor = min(s.project_cursor, max(len(s.cache) - 1, 0))

    def _go_variables_list(self) -> None:
        s = self.session
        s.screen = Screen.VARIABLES_LIST
        s.form = None
        s.original_key = None
        count = len(s.draft.variables) if s.draft is not None else 0
        s.variable_cursor = min(s.variable_cursor, max(count - 1, 0))

    def _resume(self, screen: Screen) -> None:
        """Return to ``screen`` with the draft intact; project forms are rebuilt from it."""
        s = self.session
        if screen == Screen.PROJECTS_LIST:
            self._go_projects_list()
        elif screen == Screen.VARIABLES_LIST:
            self._go_variables_list()
        elif screen in PROJECT_FORMS and s.draft is not None:
            s.form = project_form(s.draft, new=screen == Screen.CREATE_PROJECT_FORM)
            s.screen = screen
        else:
            self._go_projects_list()

    def _raise_confirm(
        self, action: PendingAction, resume: Screen, message: str, description: str
    ) -> None:
        s = self.session
        s.pending = PendingConfirmation(
            action=action, resume=resume, form=confirm_form(message, description)
        )
        s.screen = Screen.CONFIRM

    @staticmethod
    def _move(cursor: int, key: str, count: int) -> int:
        if key in UP_KEYS:
            return max(cursor - 1, 0)
        if key in DOWN_KEYS:
            return min(cursor + 1, max(count - 1, 0))
        return cursor

    # ---- Completion messages ----
    def _on_store_connected(self, message: StoreConnected) -> Optional[Command]:
        logger.info("Project store ready")
        return None

    def _on_projects_loaded(self, message: ProjectsLoaded) -> Optional[Command]:
        self.session.cache.replace_all(message.projects)
        self._go_projects_list()
        return None

    def _on_project_saved(self, message: ProjectCreated | ProjectUpdated) -> Optional[Command]:
        project = message.project
        self.session.cache.upsert(project.name, project)
        verb = "Created" if isinstance(message, ProjectCreated) else "Updated"
        self._go_projects_list()
        self.session.status = f"{verb} project '{project.name}'"
        return None

    def _on_project_deleted(self, message: ProjectDeleted) -> Optional[Command]:
        self.session.cache.remove(message.name)
        self._go_projects_list()
        self.session.status = f"Deleted project '{message.name}'"
        return None

    def _on_variables_saved(self, message: VariablesSaved) -> Optional[Command]:
        s = self.session
        s.cache.upsert(message.project.name, message.project)
        s.draft = message.project.copy_draft()
        s.draft_dirty = False
        self._go_variables_list()
        s.status = f"Saved variables of '{message.project.name}'"
        return None

    def _on_projects_exported(self, message: ProjectsExported) -> Optional[Command]:
        count = len(message.paths)
        self._resume(self.session.origin)
        if count == 1:
            self.session.status = f"Exported {message.paths[0]}"
        else:
            self.session.status = f"Exported {count} files"
        return None

    def _on_command_failed(self, message: CommandFailed) -> Optional[Command]:
        error = message.error
        if isinstance(error, StoreUnavailable):
            logger.error("Store unavailable: %s", error)
            return Quit(exit_code=1, message=f"Store unavailable: {error}")
        logger.warning("Command failed: %s", error)
        s = self.session
        s.error = str(error)
        s.screen = Screen.ERROR
        return None

    def _on_spinner_tick(self, message: SpinnerTicked) -> Optional[Command]:
        s = self.session
        if s.screen != Screen.LOADING:
            s.ticking = False
            return None
        s.spinner_frame += 1
        return SpinnerTick()

    # ---- Screens ----
    def _update_projects_list(self, event: KeyInput) -> Optional[Command]:
        s = self.session
        key = event.key
        if key in QUIT_KEYS:
            return Quit()
        if key == "?":
            s.show_help = not s.show_help
            return None
        if key in UP_KEYS | DOWN_KEYS:
            s.project_cursor = self._move(s.project_cursor, key, len(s.cache))
            return None
        if key == "a":
            s.draft = Project()
            s.form = project_form(s.draft, new=True)
            s.screen = Screen.CREATE_PROJECT_FORM
            return None
        if key == "r":
            return self._start_loading(LoadProjects(), origin=Screen.PROJECTS_LIST)
        if key == "x":
            projects = s.cache.all()
            if not projects:
                return None
            return self._start_loading(
                ExportProjects(tuple(projects)), origin=Screen.PROJECTS_LIST
            )

        selected = s.selected_project()
        if selected is None:
            return None
        if key in EDIT_KEYS:
            s.draft = selected
            s.form = project_form(s.draft, new=False)
            s.screen = Screen.EDIT_PROJECT_FORM
        elif key == "v":
            s.draft = selected
            s.draft_dirty = False
            s.variable_cursor = 0
            s.screen = Screen.VARIABLES_LIST
        elif key == "d":
            self._raise_confirm(
                DeleteProjectAction(selected.name),
                resume=Screen.PROJECTS_LIST,
                message="Are you sure you want to delete",
                description=f"Project '{selected.name}'",
            )
        elif key == "p":
            return self._start_loading(
                ExportProjects((selected,)), origin=Screen.PROJECTS_LIST
            )
        return None

    def _update_project_form(self, event: KeyInput) -> Optional[Command]:
        s = self.session
        if s.form is None or s.draft is None:
            self._go_projects_list()
            return None
        _, complete = s.form.update(event)
        if not complete:
            return None
        form = s.form
        if not form.get_bool("confirm"):
            self._go_projects_list()
            return None

        s.draft.target_folder = form.get_string("folder")
        s.draft.file_name = form.get_string("file")
        if s.screen == Screen.EDIT_PROJECT_FORM:
            return self._start_loading(
                UpdateProject(s.draft.copy_draft()), origin=Screen.EDIT_PROJECT_FORM
            )

        s.draft.name = form.get_string("name")
        if s.draft.name in s.cache:
            self._raise_confirm(
                OverwriteProjectAction(s.draft.name),
                resume=Screen.CREATE_PROJECT_FORM,
                message="A project with this name already exists",
                description=f"Overwrite project '{s.draft.name}'?",
            )
            return None
        return self._start_loading(
            CreateProject(s.draft.copy_draft()), origin=Screen.CREATE_PROJECT_FORM
        )

    def _update_variables_list(self, event: KeyInput) -> Optional[Command]:
        s = self.session
        key = event.key
        if s.draft is None:
            self._go_projects_list()
            return None
        if key in QUIT_KEYS or key == "escape":
            self._go_projects_list()
            return None
        if key == "?":
            s.show_help = not s.show_help
            return None
        if key in UP_KEYS | DOWN_KEYS:
            s.variable_cursor = self._move(s.variable_cursor, key, len(s.draft.variables))
            return None
        if key == "a":
            s.original_key = None
            s.form = variable_form()
            s.screen = Screen.CREATE_VARIABLE_FORM
            return None
        if key == "s":
            return self._start_loading(
                SaveVariables(s.draft.copy_draft()), origin=Screen.VARIABLES_LIST
            )
        if key == "p":
            return self._start_loading(
                ExportProjects((s.draft.copy_draft(),)), origin=Screen.VARIABLES_LIST
            )

        selected = s.selected_variable()
        if selected is None:
            return None
        var_key, var_value = selected
        if key in EDIT_KEYS:
            s.original_key = var_key
            s.form = variable_form(var_key, var_value, editing=True)
            s.screen = Screen.EDIT_VARIABLE_FORM
        elif key == "d":
            self._raise_confirm(
                DeleteVariableAction(var_key),
                resume=Screen.VARIABLES_LIST,
                message="Are you sure you want to delete",
                description=f"Variable: {var_key}",
            )
        return None

    def _update_variable_form(self, event: KeyInput) -> Optional[Command]:
        s = self.session
        if s.form is None or s.draft is None:
            self._go_projects_list()
            return None
        _, complete = s.form.update(event)
        if not complete:
            return None
        form = s.form
        if not form.get_bool("confirm"):
            self._go_variables_list()
            return None

        new_key = form.get_string("key")
        value = form.get_string("value")
        if s.screen == Screen.EDIT_VARIABLE_FORM and s.original_key is not None:
            rename_variable(s.draft.variables, s.original_key, new_key, value)
        else:
            s.draft.variables[new_key] = value
        s.draft_dirty = True
        s.form = None
        s.original_key = None
        return self._start_loading(
            SaveVariables(s.draft.copy_draft()), origin=Screen.VARIABLES_LIST
        )

    def _update_loading(self, event: KeyInput) -> Optional[Command]:
        if event.key in QUIT_KEYS:
            return Quit()
        return None

    def _update_confirm(self, event: KeyInput) -> Optional[Command]:
        s = self.session
        pending = s.pending
        if pending is None:
            self._go_projects_list()
            return None
        _, complete = pending.form.update(event)
        if not complete:
            return None
        s.pending = None
        if not pending.form.get_bool("confirm"):
            self._resume(pending.resume)
            return None
        return self._accepts[type(pending.action)](pending.action)

    def _update_error(self, event: KeyInput) -> Optional[Command]:
        s = self.session
        s.error = None
        self._resume(s.origin)
        return None

    # ---- Accepted confirmations ----
    def _accept_delete_project(self, action: DeleteProjectAction) -> Optional[Command]:
        return self._start_loading(DeleteProject(action.name), origin=Screen.PROJECTS_LIST)

    def _accept_delete_variable(self, action: DeleteVariableAction) -> Optional[Command]:
        s = self.session
        if s.draft is None:
            self._go_projects_list()
            return None
        s.draft.variables.pop(action.key, None)
        s.draft_dirty = True
        return self._start_loading(
            SaveVariables(s.draft.copy_draft()), origin=Screen.VARIABLES_LIST
        )

    def _accept_overwrite_project(self, action: OverwriteProjectAction) -> Optional[Command]:
        s = self.session
        if s.draft is None:
            self._go_projects_list()
            return None
        return self._start_loading(
            CreateProject(s.draft.copy_draft()), origin=Screen.CREATE_PROJECT_FORM
        )
