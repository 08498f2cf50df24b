"""Customer data types, agent profile, and placeholder context."""

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

FieldValue = Union[str, int, float, bool, list[str], None]

# Flat field-id -> value mapping collected during one call. Field ids are
# defined by the script document.
CustomerData = Mapping[str, Any]


class AgentProfile(BaseModel):
    """Licensed agent running the call."""
    agent_id: str
    name: str = ""
    npn: str = ""
    email: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.name.strip() and self.npn.strip())


class PlaceholderContext(BaseModel):
    """Values available for substitution into script text."""
    agent_name: Optional[str] = None
    agent_npn: Optional[str] = None
    customer_first_name: Optional[str] = None
    customer_last_name: Optional[str] = None
    customer_state: Optional[str] = None
    customer_phone: Optional[str] = None

    @classmethod
    def from_customer_data(
        cls,
        data: CustomerData,
        agent: Optional[AgentProfile] = None,
    ) -> "PlaceholderContext":
        """Build a context from the data snapshot and the agent profile.

        The agent's NPN falls back to ``agent_producer_number`` when the
        agent typed it into the script instead of their profile.
        """

        def _text(key: str) -> Optional[str]:
            value = data.get(key)
            if value is None or isinstance(value, (list, bool)):
                return None
            return str(value)

        npn = agent.npn if agent and agent.npn else _text("agent_producer_number")
        return cls(
            agent_name=agent.name if agent and agent.name else None,
            agent_npn=npn,
            customer_first_name=_text("customer_first_name"),
            customer_last_name=_text("customer_last_name"),
            customer_state=_text("customer_state"),
            customer_phone=_text("customer_phone"),
        )
