"""LLM customization of a program template for one user."""

import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from fitcoach.core.errors import GenerationFailed, InvalidInput
from fitcoach.core.profile.models import UserProfile
from fitcoach.core.service.metrics import PROGRAM_CUSTOMIZATIONS_TOTAL
from fitcoach.core.service.prompt import build_customization_prompt, build_system_prompt
from fitcoach.infra.telemetry import ATTR_PROGRAM_ID, SPAN_PROGRAM_CUSTOMIZE, tracer

from .models import Program

logger = logging.getLogger(__name__)


class ProgramCustomizer:
    def __init__(self, llm: BaseChatModel) -> None:
        self._llm = llm

    async def customize(self, program: Program, profile: UserProfile) -> str:
        """Return the program's Markdown plan rewritten for *profile*."""
        if not profile.fitness_goals:
            raise InvalidInput(
                "Please set at least one fitness goal in your profile "
                "before customizing a program"
            )

        with tracer.start_as_current_span(SPAN_PROGRAM_CUSTOMIZE) as span:
            span.set_attribute(ATTR_PROGRAM_ID, program.id)
            try:
                reply = await self._llm.ainvoke(
                    [
                        SystemMessage(content=build_system_prompt(profile)),
                        HumanMessage(content=build_customization_prompt(program.template)),
                    ]
                )
            except Exception:
                PROGRAM_CUSTOMIZATIONS_TOTAL.labels(status="error").inc()
                raise

        plan = reply.content.strip() if isinstance(reply.content, str) else ""
        if not plan:
            PROGRAM_CUSTOMIZATIONS_TOTAL.labels(status="error").inc()
            raise GenerationFailed("Failed to generate customized program")

        PROGRAM_CUSTOMIZATIONS_TOTAL.labels(status="ok").inc()
        logger.debug(
            "Program %s customized for %s (%d chars)", program.id, profile.id, len(plan)
        )
        return plan
