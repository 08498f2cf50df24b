"""
Offline console demo: plays a full final-expense call without any network.

Drives a real CallSession over the bundled script and carrier files,
answering each section from a pre-scripted scenario. Shows the rendered
script with placeholders filled, branch follow-ups opening as answers
arrive, the quote options, carrier recommendations, and the lead.

Usage:
    python console_demo.py
    python console_demo.py --scenario impaired
"""

import argparse
from typing import Any, Optional

from src.config import settings
from src.conversation.call_session import CallSession
from src.conversation.navigator import SectionIncompleteError
from src.conversation.renderer import RenderResult
from src.conversation.summary import format_summary
from src.schemas.customer_schema import AgentProfile
from src.schemas.quote_schema import QuoteMode
from src.schemas.script_schema import NodeType
from src.tools.documents import load_carriers, load_script_document
from src.tools.forms import FormIntegration
from src.tools.leads import LeadCreationTrigger

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

QUOTE_SECTION_ID = "quote_presentation"

_BASE_ANSWERS: dict[str, dict[str, Any]] = {
    "introduction": {
        "customer_first_name": "Ruth",
        "customer_last_name": "Alvarez",
        "customer_state": "TX",
        "customer_phone": "(512) 555-0147",
        "recording_consent": "Yes",
    },
    "rapport_building": {
        "marital_status": "Widowed",
        "funeral_experience": "Yes",
        "retirement_status": "Retired",
        "previous_occupation": "School librarian",
    },
    "qualifying": {
        "main_concern": "Not leaving funeral costs to my kids",
        "protection_for": "Two daughters",
        "customer_age": 67,
        "customer_dob": "1959-04-12",
    },
    "application": {
        "primary_beneficiary": "Elena Alvarez",
        "primary_beneficiary_relationship": "Daughter",
        "address": "418 Pecan St, Austin, TX",
        "account_type": "Checking",
        "draft_date": "3rd",
    },
}

_HEALTHY_MEDICAL = {
    "tobacco_use": "No",
    "height": "5'4",
    "weight": 150,
    "heart_problems": "No",
    "stroke_history": "No",
    "cancer_history": "No",
    "aids_hiv_terminal": "No",
    "diabetes": "No",
    "blood_pressure": "Yes",
    "blood_pressure_medication_changed": "No",
    "emphysema_copd": "No",
    "liver_kidney_disease": "No",
    "medications": ["Lisinopril"],
}

_IMPAIRED_MEDICAL = {
    **_HEALTHY_MEDICAL,
    "tobacco_use": "Yes",
    "weight": 210,
    "diabetes": "Yes",
    "diabetes_treatment": "Insulin",
    "diabetes_complications": "Yes",
    "diabetes_complication_types": ["Neuropathy"],
    "medications": ["Lisinopril", "Insulin glargine"],
}


class ConsoleWalkthrough:
    """Plays one scripted call section by section in the terminal."""

    SCENARIOS: dict[str, dict[str, dict[str, Any]]] = {
        "healthy": {**_BASE_ANSWERS, "medical_questions": _HEALTHY_MEDICAL},
        "impaired": {**_BASE_ANSWERS, "medical_questions": _IMPAIRED_MEDICAL},
    }

    def __init__(self, agent: Optional[AgentProfile] = None) -> None:
        self.agent = agent or AgentProfile(
            agent_id="demo-agent", name="Dana Reyes", npn="18822345"
        )
        self.document = load_script_document(settings.paths.script_path)
        self.carriers = load_carriers(settings.paths.carriers_path)

    def agent_say(self, text: str, level: int = 0) -> None:
        print(f"{'  ' * level}{GREEN}{BOLD}[Agent]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def show(self, result: RenderResult) -> None:
        print(f"\n{BOLD}--- {result.title} ---{RESET}")
        for item in result.items:
            pad = "  " * item.level
            if item.kind == NodeType.AGENT_LINE:
                self.agent_say(item.text, item.level)
            elif item.kind == NodeType.INSTRUCTION:
                print(f"{pad}{YELLOW}({item.text}){RESET}")
            elif item.kind == NodeType.CUSTOMER_RESPONSE:
                print(f"{pad}{BLUE}[Customer]{RESET} {item.text}")
            else:
                value = item.value if item.answered else f"{DIM}...{RESET}"
                star = "*" if item.required else ""
                print(f"{pad}  {item.text}{star}: {value}")
        answered, total = result.progress()
        self.system_log(f"Required answered: {answered}/{total}")

    def run_scenario(self, scenario: str) -> None:
        answers = self.SCENARIOS.get(scenario)
        if answers is None:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        forms = FormIntegration(
            settings.forms.google_form_url or "https://forms.example.com/demo/viewform",
            opener=lambda url: True,
        )
        session = CallSession(
            self.document, self.carriers, self.agent, forms=forms,
            session_id=f"DEMO-{scenario}",
        )

        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  FINAL EXPENSE CALL - Scenario: {scenario}{RESET}")
        print(f"{BOLD}  Agent: {self.agent.name} (NPN {self.agent.npn}){RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

        while True:
            section = session.navigator.current_section
            for field_id, value in answers.get(section.id, {}).items():
                session.set_field(field_id, value)
            if section.id == QUOTE_SECTION_ID:
                self._present_quotes(session)
            self.show(session.render_current())

            if session.navigator.is_last():
                break
            try:
                session.next_section()
            except SectionIncompleteError as exc:
                print(f"{RED}Blocked: {exc}{RESET}")
                break
            if session.form_submission is not None and section.id == settings.script.medical_section_id:
                status = "sent" if session.form_submission.get("success") else "failed"
                self.system_log(f"Medical form {status}")

        lead = session.create_lead(LeadCreationTrigger.CALL_COMPLETED)
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Call complete.{RESET}")
        print(f"{DIM}  Section trace: {' -> '.join(session.navigator.get_section_trace())}{RESET}")
        print(f"{DIM}  Lead: {lead['message']}{RESET}")
        print(format_summary(session.summary()))
        print(f"{BOLD}{'=' * 60}{RESET}")

    def _present_quotes(self, session: CallSession) -> None:
        quotes = session.calculate_quotes(QuoteMode.COVERAGE_FIRST, 10000)
        print(f"\n{BOLD}Quote options:{RESET}")
        for option in quotes:
            print(
                f"  ${option.coverage_amount:,} for ${option.monthly_premium}/month "
                f"(${option.daily_cost:.2f}/day) {option.plan_type.value} - {option.carrier}"
            )
        for rec in session.recommendations()[:3]:
            self.system_log(f"{rec.carrier}: {rec.suitability.value}")
        session.select_quote(quotes[1])


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline call walkthrough")
    parser.add_argument(
        "--scenario",
        choices=list(ConsoleWalkthrough.SCENARIOS),
        default="healthy",
        help="Pre-scripted customer to play",
    )
    args = parser.parse_args()
    ConsoleWalkthrough().run_scenario(args.scenario)


if __name__ == "__main__":
    main()
