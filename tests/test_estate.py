import pytest

from planright.errors import InputValidationError
from planright.estate import checklist_status, completion, estate_profile, update_checklist
from planright.schema import EstateChecklist


def test_completion():
    assert completion(EstateChecklist()) == 0
    assert completion(EstateChecklist(has_will=True, has_poa=True)) == 33
    full = EstateChecklist(
        has_will=True, has_trust=True, has_poa=True, has_healthcare_directive=True,
        beneficiaries_reviewed=True, asset_titling_reviewed=True,
    )
    assert completion(full) == 100
    assert all(item["done"] for item in checklist_status(full))


def test_update_checklist_returns_copy_and_notifies():
    seen = []
    original = EstateChecklist()
    updated = update_checklist(original, "has_will", True, on_change=seen.append)
    assert updated.has_will is True
    assert original.has_will is False
    assert seen == [updated]


def test_update_checklist_unknown_field():
    with pytest.raises(InputValidationError) as exc:
        update_checklist(EstateChecklist(), "has_yacht", True)
    assert exc.value.field == "has_yacht"
    assert isinstance(exc.value, ValueError)


def test_estate_profile_flags():
    md = estate_profile(600_000, state="md")
    assert md["needs_trust"] is True
    assert md["needs_attorney"] is False
    assert md["state_estate_tax"] is True
    assert md["state_inheritance_tax"] is True

    ca = estate_profile(100_000, state="CA")
    assert ca["community_property_state"] is True
    assert ca["needs_trust"] is False
