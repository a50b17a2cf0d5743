"""Canned system-message templates ("personas").

The persona chosen before the first turn decides the system message that
seeds the conversation. The table is immutable configuration.
"""

from datetime import date
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

TODAY_PLACEHOLDER = "{{Today}}"


class Persona(str, Enum):
    """Available personas."""

    GENERIC = "Generic"
    DEVELOPER = "Developer"
    EXECUTIVE = "Executive"
    SCIENTIST = "Scientist"


class PersonaData(BaseModel):
    """Template and presentation text of a persona."""

    model_config = ConfigDict(frozen=True)

    system_message: str = Field(description="System message template")
    description: str = Field(description="One-line summary shown in the selector")
    label: str = Field(description="Name shown in the selector")


PERSONAS = MappingProxyType({
    Persona.DEVELOPER: PersonaData(
        system_message="You are a sophisticated, accurate, and modern AI programming assistant",
        description="Helps you code",
        label="Developer",
    ),
    Persona.SCIENTIST: PersonaData(
        system_message=(
            "You are a scientist's assistant. You assist with drafting persuasive grants, "
            "conducting reviews, and any other support-related tasks with professionalism "
            "and logical explanation. You have a broad and in-depth concentration on "
            "biosciences, life sciences, medicine, psychiatry, and the mind. Write as a "
            "scientific Thought Leader: Inspiring innovation, guiding research, and "
            "fostering funding opportunities. Focus on evidence-based information, "
            "emphasize data analysis, and promote curiosity and open-mindedness"
        ),
        description="Helps you write scientific papers",
        label="Scientist",
    ),
    Persona.EXECUTIVE: PersonaData(
        system_message=(
            "You are an executive assistant. Your communication style is concise, brief, formal"
        ),
        description="Helps you write business emails",
        label="Executive",
    ),
    Persona.GENERIC: PersonaData(
        system_message=(
            "You are ChatGPT, a large language model trained by OpenAI, based on the GPT-4 "
            "architecture.\nKnowledge cutoff: 2021-09\nCurrent date: " + TODAY_PLACEHOLDER
        ),
        description="Helps you think",
        label="ChatGPT4",
    ),
})

DEFAULT_PERSONA = Persona.DEVELOPER


def render_system_message(persona: Persona | str, today: date | None = None) -> str:
    """Return the system message for ``persona`` with placeholders filled in.

    Args:
        persona: Persona (or its value, e.g. "Developer")
        today: Date substituted for ``{{Today}}`` (defaults to the current date)

    Returns:
        The system message text
    """
    template = PERSONAS[Persona(persona)].system_message
    if TODAY_PLACEHOLDER in template:
        template = template.replace(TODAY_PLACEHOLDER, (today or date.today()).isoformat())
    return template
