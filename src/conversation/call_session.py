"""
One sales call: the glue between the data store, the script, and the tools.

The session owns the customer data store. Every derived view (rendered
section, completeness, quotes, recommendations) is recomputed from a
fresh snapshot when asked for. Collaborator calls (save, lead creation,
form submission) report failure through their result and leave the
collected data exactly as it was, so the agent can retry.

Usage:
    session = CallSession(document, carriers, agent)
    view = session.set_field("customer_first_name", "Ruth")
    session.next_section()
    quotes = session.calculate_quotes(QuoteMode.COVERAGE_FIRST, 10000)
    session.select_quote(quotes[1])
    session.create_lead(LeadCreationTrigger.QUOTE_PROVIDED)
"""

import uuid
from typing import Any, Optional, Sequence, Union

from src.config import settings
from src.conversation.data_store import CustomerDataStore
from src.conversation.navigator import ScriptNavigator
from src.conversation.renderer import RenderResult, render_section
from src.conversation.summary import summarize_customer_data
from src.logging_context import get_session_logger, set_session_id
from src.schemas.customer_schema import AgentProfile, PlaceholderContext
from src.schemas.quote_schema import Carrier, QuoteMode, QuoteOption
from src.schemas.script_schema import ScriptDocument
from src.tools import leads
from src.tools.carriers import CarrierRecommendation, recommend_carriers
from src.tools.forms import FormIntegration, FormSubmission
from src.tools.persistence import load_customer_data, save_customer_data
from src.tools.quotes import HIGH_RISK_FIELDS, compute_quotes

logger = get_session_logger(__name__)

QUOTE_INPUT_FIELDS = frozenset({"customer_age", "tobacco_use", *HIGH_RISK_FIELDS})


class CallSession:
    """State and actions for a single call."""

    def __init__(
        self,
        document: ScriptDocument,
        carriers: Sequence[Carrier],
        agent: AgentProfile,
        store: Optional[CustomerDataStore] = None,
        forms: Optional[FormIntegration] = None,
        store_path: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or f"CALL-{uuid.uuid4().hex[:8]}"
        set_session_id(self.session_id)
        self.document = document
        self.carriers = list(carriers)
        self.agent = agent
        self.store = store or CustomerDataStore()
        self.navigator = ScriptNavigator(document)
        self.forms = forms or FormIntegration(settings.forms.google_form_url)
        self.store_path = store_path or settings.paths.session_store_path
        self.quotes: list[QuoteOption] = []
        self.form_submission: Optional[FormSubmission] = None
        self.lead_id: Optional[str] = None

        if not agent.is_complete:
            logger.warning("Agent profile incomplete, name/NPN placeholders will show labels")
        logger.info("Call session started with %d section(s)", self.navigator.total_sections)

    # --- Views ---------------------------------------------------------

    def placeholder_context(self) -> PlaceholderContext:
        return PlaceholderContext.from_customer_data(self.store.snapshot(), self.agent)

    def render_current(self) -> RenderResult:
        snapshot = self.store.snapshot()
        return render_section(
            self.navigator.current_section,
            snapshot,
            PlaceholderContext.from_customer_data(snapshot, self.agent),
        )

    def recommendations(self) -> list[CarrierRecommendation]:
        return recommend_carriers(self.store.snapshot())

    def summary(self) -> dict[str, dict[str, str]]:
        return summarize_customer_data(self.store.snapshot())

    # --- Data entry ----------------------------------------------------

    def set_field(self, field_id: str, value: Any) -> RenderResult:
        """Record an answer and return the re-rendered current section."""
        self.store.set_field(field_id, value)
        if field_id in QUOTE_INPUT_FIELDS and self.quotes:
            logger.debug("Quote input '%s' changed, discarding previous quotes", field_id)
            self.quotes = []
        return self.render_current()

    # --- Navigation ----------------------------------------------------

    def next_section(self) -> RenderResult:
        """
        Advance to the next section.

        Leaving the medical section sends the application form once.
        A failed send is logged and kept in ``form_submission`` but does
        not block the call.

        Raises:
            SectionIncompleteError: Required fields still blank.
            InvalidSectionError: Already on the last section.
        """
        leaving = self.navigator.current_section.id
        self.navigator.next_section(self.store.snapshot())
        if leaving == settings.script.medical_section_id and not self._form_sent():
            self.form_submission = self.forms.submit_medical_data(self.store.snapshot())
            if not self.form_submission.get("success"):
                logger.error(
                    "Medical form not sent: %s", self.form_submission.get("error")
                )
        return self.render_current()

    def previous_section(self) -> RenderResult:
        self.navigator.previous_section()
        return self.render_current()

    def go_to_section(self, index: int) -> RenderResult:
        self.navigator.go_to_section(index)
        return self.render_current()

    def _form_sent(self) -> bool:
        return bool(self.form_submission and self.form_submission.get("success"))

    # --- Quotes --------------------------------------------------------

    def calculate_quotes(
        self,
        mode: Union[QuoteMode, str],
        target: float,
        allow_default_age: bool = False,
    ) -> list[QuoteOption]:
        """Replace the current quote set. Raises InsufficientQuoteDataError."""
        self.quotes = compute_quotes(
            self.store.snapshot(), self.carriers, mode, target,
            allow_default_age=allow_default_age,
        )
        return list(self.quotes)

    def select_quote(self, option: QuoteOption) -> None:
        """Copy the chosen quote into the customer data."""
        self.store.update({
            "coverage_amount": option.coverage_amount,
            "monthly_premium": option.monthly_premium,
            "selected_carrier": option.carrier,
            "selected_plan": option.plan_type.value,
        })
        logger.info(
            "Quote selected: $%d coverage at $%d/month with %s",
            option.coverage_amount, option.monthly_premium, option.carrier or "no carrier",
        )

    # --- Collaborators -------------------------------------------------

    def save(self) -> bool:
        return save_customer_data(self.store.snapshot(), self.store_path)

    def restore(self) -> bool:
        """
        Merge a previously saved snapshot into the store, if one exists.

        The snapshot is checked in full before anything is merged. A file
        with any unsupported value is rejected and the store is left as is.
        """
        data = load_customer_data(self.store_path)
        if data is None:
            return False
        try:
            restored = CustomerDataStore(data)
        except (TypeError, ValueError) as exc:
            logger.warning("Saved customer data at %s rejected: %s", self.store_path, exc)
            return False
        self.store.update(restored.snapshot())
        logger.info("Restored %d field(s) from %s", len(data), self.store_path)
        return True

    def create_lead(
        self,
        trigger: leads.LeadCreationTrigger = leads.LeadCreationTrigger.MANUAL_TRIGGER,
    ) -> leads.LeadResult:
        snapshot = self.store.snapshot()
        if not leads.validate_customer_data_for_lead(snapshot):
            return {
                "success": False,
                "message": "Insufficient customer data to create lead. "
                           "Need at least name and contact information.",
            }
        result = leads.create_lead(
            leads.map_customer_data_to_lead(snapshot), self.agent.agent_id, trigger
        )
        if result.get("success"):
            self.lead_id = result["lead"]["id"]
        else:
            logger.error("Lead creation failed: %s", result.get("message"))
        return result

    def submit_form(self) -> FormSubmission:
        self.form_submission = self.forms.submit_to_form(self.store.snapshot())
        return self.form_submission
