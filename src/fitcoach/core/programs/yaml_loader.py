"""Parse and validate program definitions uploaded as YAML.

Example::

    name: Beginner Strength
    description: Three full-body sessions per week
    template: |
      # Week 1
      - Squats: 3x8
    metadata:
      difficulty: beginner
      tags: [strength]
"""

import logging
from dataclasses import dataclass, field

import yaml
from pydantic import ValidationError

from .models import ProgramDefinition, ProgramValidationError

logger = logging.getLogger(__name__)

FIELD_YAML = "yaml"
FIELD_GENERAL = "general"


@dataclass
class ParsedProgram:
    """Either a valid ``definition`` or a non-empty ``errors`` list."""

    definition: ProgramDefinition | None = None
    errors: list[ProgramValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.definition is not None


def _validation_errors(exc: ValidationError) -> list[ProgramValidationError]:
    return [
        ProgramValidationError(
            field=".".join(str(part) for part in err["loc"]) or FIELD_GENERAL,
            message=err["msg"],
        )
        for err in exc.errors()
    ]


def parse_program_yaml(text: str) -> ParsedProgram:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        logger.info("Rejected program upload: invalid YAML (%s)", exc)
        mark = getattr(exc, "problem_mark", None)
        return ParsedProgram(
            errors=[
                ProgramValidationError(
                    field=FIELD_YAML,
                    message="Invalid YAML format",
                    line=mark.line + 1 if mark is not None else None,
                )
            ]
        )

    if not isinstance(data, dict):
        return ParsedProgram(
            errors=[
                ProgramValidationError(
                    field=FIELD_GENERAL,
                    message="Program file must contain a mapping of fields",
                )
            ]
        )

    try:
        return ParsedProgram(definition=ProgramDefinition.model_validate(data))
    except ValidationError as exc:
        errors = _validation_errors(exc)
        logger.info("Rejected program upload: %d validation errors", len(errors))
        return ParsedProgram(errors=errors)
