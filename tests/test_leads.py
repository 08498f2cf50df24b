"""Tests for the mock lead store and lead helpers."""

from src.tools.leads import (
    LeadCreationTrigger,
    create_lead,
    delete_lead,
    get_customer_data_summary,
    get_lead,
    list_leads,
    map_customer_data_to_lead,
    should_create_lead,
    update_lead,
    validate_customer_data_for_lead,
)

CUSTOMER = {
    "customer_first_name": "Ruth",
    "customer_last_name": "Alvarez",
    "customer_phone": "(512) 555-0147",
    "customer_dob": "1959-04-12",
    "customer_age": 67,
    "tobacco_use": "No",
    "heart_problems": "Yes",
    "blood_pressure": "Yes",
    "coverage_amount": 10000,
    "monthly_premium": 104,
    "selected_plan": "graded",
}


class TestValidation:
    def test_name_and_phone_required(self):
        assert validate_customer_data_for_lead(CUSTOMER)
        assert not validate_customer_data_for_lead({"customer_first_name": "Ruth"})
        assert not validate_customer_data_for_lead({"customer_phone": "5125550147"})

    def test_email_counts_as_contact(self):
        assert validate_customer_data_for_lead(
            {"customer_last_name": "Alvarez", "email": "ruth@example.com"}
        )

    def test_should_create_needs_interest_or_health(self):
        basic = {"customer_first_name": "Ruth", "customer_phone": "5125550147"}
        assert not should_create_lead(basic)
        assert should_create_lead({**basic, "main_concern": "Funeral costs"})
        assert should_create_lead({**basic, "tobacco_use": "No"})


class TestMapping:
    def test_maps_and_converts(self):
        fields = map_customer_data_to_lead(CUSTOMER)
        assert fields["first_name"] == "Ruth"
        assert fields["phone"] == "5125550147"
        assert fields["tobacco_use"] is False
        assert fields["health_conditions"] == ["Heart", "High Blood Pressure"]
        assert fields["coverage_amount"] == 10000.0
        assert fields["premium_budget"] == 104.0
        assert fields["coverage_type"] == "graded"

    def test_does_not_copy_unrelated_fields(self):
        fields = map_customer_data_to_lead({**CUSTOMER, "hobbies_interests": "Gardening"})
        assert "hobbies_interests" not in fields
        assert "customer_first_name" not in fields

    def test_summary(self):
        summary = get_customer_data_summary(CUSTOMER)
        assert "Name: Ruth Alvarez" in summary
        assert "Coverage: $10,000" in summary
        assert "Premium: $104/month" in summary


class TestLeadStore:
    def test_create_and_get(self):
        result = create_lead(
            map_customer_data_to_lead(CUSTOMER), "agent-007", LeadCreationTrigger.QUOTE_PROVIDED
        )
        assert result["success"]
        lead = result["lead"]
        assert lead["id"].startswith("LD-")
        assert lead["trigger"] == "quote_provided"
        assert get_lead(lead["id"]) == lead

    def test_requires_agent(self):
        result = create_lead({"first_name": "Ruth"}, "")
        assert not result["success"]
        assert "agent" in result["message"]

    def test_requires_name(self):
        result = create_lead({"phone": "5125550147"}, "agent-007")
        assert not result["success"]

    def test_update_protects_identity(self):
        lead = create_lead({"first_name": "Ruth"}, "agent-007")["lead"]
        result = update_lead(lead["id"], {"agent_id": "someone-else", "email": "r@example.com"})
        assert result["success"]
        assert result["lead"]["agent_id"] == "agent-007"
        assert result["lead"]["email"] == "r@example.com"

    def test_update_missing(self):
        assert not update_lead("LD-NOPE", {"email": "x"})["success"]

    def test_delete(self):
        lead = create_lead({"first_name": "Ruth"}, "agent-007")["lead"]
        assert delete_lead(lead["id"])["success"]
        assert get_lead(lead["id"]) is None
        assert not delete_lead(lead["id"])["success"]

    def test_list_by_agent(self):
        create_lead({"first_name": "Ruth"}, "agent-007")
        create_lead({"first_name": "Walt"}, "agent-007")
        create_lead({"first_name": "Ida"}, "agent-042")
        assert len(list_leads("agent-007")) == 2
        assert [l["first_name"] for l in list_leads("agent-042")] == ["Ida"]
