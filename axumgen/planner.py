# File: axumgen/planner.py
"""
axumgen - File-Set Planner
===========================
Decides which output files a run produces and where they go.

A manifest is a list of ``OutputGroup`` and ``ExclusiveChoice`` items.  Every
group carries a pure predicate over the ``GenerationConfig``; groups are
evaluated independently and their templates expanded into ``ResolvedFile``
records.  When two groups resolve to the same destination, the one listed
later wins.

Destinations may contain the ``_entityFileName_`` placeholder; it is replaced
by the entity's normalised name using the suffix rules below:

    _entityFileName_service_mongodb.rs → <name>_service.rs
    _entityFileName_mongodb.rs         → <name>.rs
    _entityFileName_service.rs         → <name>_service.rs
    _entityFileName_dto.rs             → <name>_dto.rs
    _entityFileName_.rs                → <name>.rs

Planning never touches the filesystem.  Any inconsistency raises
``PlanningError`` so that a run aborts before its first write.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from axumgen.errors import PlanningError
from axumgen.models import EntityDescriptor, GenerationConfig
from axumgen.naming import normalize

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen.planner")

ENTITY_PLACEHOLDER: str = "_entityFileName_"

Predicate = Callable[[GenerationConfig], bool]
PathTransform = Callable[[str], str]

# Longest suffix first so "service_mongodb" is not consumed as "service".
_PLACEHOLDER_RULES: Tuple[Tuple[str, str], ...] = (
    ("service_mongodb", "_service"),
    ("mongodb", ""),
    ("service", "_service"),
    ("dto", "_dto"),
    ("", ""),
)

_PLACEHOLDER_RE: re.Pattern[str] = re.compile(
    re.escape(ENTITY_PLACEHOLDER)
    + r"(?P<suffix>service_mongodb|mongodb|service|dto)?(?=\.|/|$)"
)


# ---------------------------------------------------------------------------
# Manifest building blocks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateSpec:
    """
    One template of a group.

    ``file`` is the template source path.  The destination is ``file``
    unless ``rename_to`` is given.
    """

    file: str
    rename_to: Optional[str] = None

    @property
    def destination(self) -> str:
        return self.rename_to if self.rename_to is not None else self.file


TemplateLike = Union[str, TemplateSpec]


def _as_spec(item: TemplateLike) -> TemplateSpec:
    return item if isinstance(item, TemplateSpec) else TemplateSpec(item)


@dataclass(frozen=True)
class OutputGroup:
    """A named set of templates emitted together under a common condition."""

    name: str
    templates: Sequence[TemplateLike]
    condition: Optional[Predicate] = None
    path: str = ""
    rename: Optional[PathTransform] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "templates", tuple(_as_spec(t) for t in self.templates))

    def matches(self, config: GenerationConfig) -> bool:
        return self.condition is None or bool(self.condition(config))


@dataclass(frozen=True)
class ExclusiveChoice:
    """A set of groups of which exactly one must match the configuration."""

    name: str
    groups: Sequence[OutputGroup]
    required: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", tuple(self.groups))

    def select(self, config: GenerationConfig) -> Optional[OutputGroup]:
        matched: List[OutputGroup] = [g for g in self.groups if g.matches(config)]
        if len(matched) == 1:
            return matched[0]
        if not matched and not self.required:
            return None
        names: str = ", ".join(g.name for g in matched) or "none"
        logger.error("Exclusive choice '%s' matched %d groups (%s).", self.name, len(matched), names)
        raise PlanningError(
            f"Exclusive choice '{self.name}' must match exactly one group, "
            f"matched {len(matched)} ({names})",
            group=self.name,
        )


ManifestItem = Union[OutputGroup, ExclusiveChoice]


@dataclass(frozen=True)
class ResolvedFile:
    """A concrete (template → destination) pair produced by planning."""

    source_template: str
    destination: str
    group: str


# ---------------------------------------------------------------------------
# Placeholder substitution
# ---------------------------------------------------------------------------


def substitute_entity(path: str, entity: Optional[EntityDescriptor]) -> str:
    """Replace every ``_entityFileName_`` occurrence in *path*."""
    if ENTITY_PLACEHOLDER not in path:
        return path
    if entity is None:
        raise PlanningError(
            f"Template path '{path}' needs an entity but none was given"
        )

    base: str = normalize(entity.entity_file_name)
    replacements: Dict[str, str] = dict(_PLACEHOLDER_RULES)

    def _replace(match: re.Match[str]) -> str:
        suffix: str = match.group("suffix") or ""
        return base + replacements[suffix]

    return _PLACEHOLDER_RE.sub(_replace, path)


def _join(prefix: str, relative: str) -> str:
    if not prefix:
        return relative
    return prefix.rstrip("/") + "/" + relative.lstrip("/")


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def _expand(
    group: OutputGroup, entity: Optional[EntityDescriptor]
) -> List[ResolvedFile]:
    resolved: List[ResolvedFile] = []
    for spec in group.templates:
        source: str = _join(group.path, spec.file)
        destination: str = _join(group.path, spec.destination)
        destination = substitute_entity(destination, entity)
        if group.rename is not None:
            destination = group.rename(destination)
        resolved.append(ResolvedFile(source, destination, group.name))
    return resolved


def plan(
    groups: Sequence[ManifestItem],
    config: GenerationConfig,
    entity: Optional[EntityDescriptor] = None,
) -> List[ResolvedFile]:
    """
    Resolve *groups* against *config* (and *entity*, for entity manifests).

    The result is ordered by first appearance of each destination; a later
    group writing the same destination replaces the earlier record in place.
    Same inputs always produce the same list.
    """
    by_destination: Dict[str, ResolvedFile] = {}

    for item in groups:
        if isinstance(item, ExclusiveChoice):
            selected: Optional[OutputGroup] = item.select(config)
            active: List[OutputGroup] = [selected] if selected is not None else []
        elif item.matches(config):
            active = [item]
        else:
            logger.debug("Group '%s' skipped by its condition.", item.name)
            active = []

        for group in active:
            for rf in _expand(group, entity):
                previous: Optional[ResolvedFile] = by_destination.get(rf.destination)
                if previous is not None:
                    logger.debug(
                        "Destination %s: group '%s' overrides '%s'.",
                        rf.destination,
                        rf.group,
                        previous.group,
                    )
                by_destination[rf.destination] = rf

    result: List[ResolvedFile] = list(by_destination.values())
    logger.info(
        "Planned %d files%s.",
        len(result),
        f" for entity {entity.name}" if entity is not None else "",
    )
    return result


__all__: List[str] = [
    "ENTITY_PLACEHOLDER",
    "TemplateSpec",
    "OutputGroup",
    "ExclusiveChoice",
    "ResolvedFile",
    "substitute_entity",
    "plan",
]

logger.debug("axumgen.planner loaded — %d public symbols.", len(__all__))
