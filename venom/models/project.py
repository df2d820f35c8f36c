"""Project document schema (one document per project, keyed by name)."""

from pydantic import BaseModel, Field


class Project(BaseModel):
    """Named configuration unit: target file location plus its variables.

    ``name`` is the document key in the store and never changes once the
    project exists.
    """

    name: str = Field(default="", description="Unique project name (store key)")
    target_folder: str = Field(default="", description="Folder the env file is written to")
    file_name: str = Field(default="", description="Name of the exported env file")
    variables: dict[str, str] = Field(
        default_factory=dict, description="Variable key -> value"
    )

    def sorted_variables(self) -> list[tuple[str, str]]:
        """Return variables as (key, value) pairs ordered by key."""
        return sorted(self.variables.items())

    def copy_draft(self) -> "Project":
        """Deep copy used as a working draft, so edits never leak into the cache."""
        return self.model_copy(deep=True)
