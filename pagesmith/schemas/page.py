"""Page, language and navigation schemas."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

SHOW_ALWAYS = "always"
SHOW_NEVER = "never"


class EntityBinding(BaseModel):
    """The entity record a dynamically expanded page was produced from."""

    name: str
    value: dict[str, Any]


class Page(BaseModel):
    """A navigation entry as returned by the CMS."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: str | int | None = None
    name: str | None = None
    path: str
    sorted_path: str = Field(
        default="",
        validation_alias=AliasChoices("sortedPath", "sorted_path"),
        serialization_alias="sortedPath",
    )
    label: str = ""
    sort: int = 0
    show: str | None = None
    access: str | None = None

    # Set during expansion / lookup, never part of the CMS payload.
    entity: EntityBinding | None = Field(default=None, exclude=True)
    has_dynamic_content: bool = Field(default=False, exclude=True)
    resolve_slug: str | None = Field(default=None, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _default_sorted_path(cls, data: Any) -> Any:
        """Pages without a sorted path are laid out by their public path."""
        if isinstance(data, dict) and not (data.get("sortedPath") or data.get("sorted_path")):
            data = {k: v for k, v in data.items() if k not in ("sortedPath", "sorted_path")}
            data["sorted_path"] = data.get("path", "")
        return data


class Lang(BaseModel):
    """A content language."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: str | int | None = None
    code: str
    label: str | None = None
    is_default: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_default", "isDefault"),
    )


class NavigationItem(BaseModel):
    """A node of the reconstructed navigation tree."""

    page_id: str | int | None = Field(default=None, serialization_alias="pageId")
    path: str
    label: str
    sort: int
    show: str | None = None
    children: list[NavigationItem] | None = None

    @classmethod
    def from_page(cls, page: Page) -> NavigationItem:
        return cls(
            page_id=page.id,
            path=page.path,
            label=page.label,
            sort=page.sort,
            show=page.show,
        )
