# planright/estate.py
# Estate planning basics: essential documents checklist, trust/titling reference and state flags.
import dataclasses
import logging
from typing import Callable, Dict, List, Optional

from .errors import InputValidationError
from .formatting import num, round_half_up
from .schema import EstateChecklist

logger = logging.getLogger(__name__)

TRUST_NET_WORTH = 500_000
ATTORNEY_NET_WORTH = 1_000_000

COMMUNITY_PROPERTY_STATES = ["AZ", "CA", "ID", "LA", "NV", "NM", "TX", "WA", "WI"]
STATE_ESTATE_TAX_STATES = ["CT", "DC", "HI", "IL", "MA", "MD", "ME", "MN", "NY", "OR", "RI", "VT", "WA"]
STATE_INHERITANCE_TAX_STATES = ["IA", "KY", "MD", "NE", "NJ", "PA"]

CHECKLIST_ITEMS = [
    ("has_will", "Last Will and Testament"),
    ("has_trust", "Revocable Living Trust"),
    ("has_poa", "Power of Attorney"),
    ("has_healthcare_directive", "Healthcare Directive"),
    ("beneficiaries_reviewed", "Beneficiaries Reviewed"),
    ("asset_titling_reviewed", "Asset Titling Reviewed"),
]

ESSENTIAL_DOCUMENTS = [
    {
        "id": "will",
        "name": "Last Will and Testament",
        "short": "Who gets what when you die",
        "full": "A will specifies how your assets are distributed after death, names guardians for "
                "minor children, and designates an executor to manage your estate.",
        "does": [
            "Names beneficiaries for your assets",
            "Designates guardians for minor children",
            "Appoints an executor to handle your estate",
            "Can specify funeral wishes",
        ],
        "does_not": [
            "Avoid probate (goes through court process)",
            "Override beneficiary designations on accounts",
            "Control assets held in trust",
            "Take effect while you're alive",
        ],
    },
    {
        "id": "trust",
        "name": "Revocable Living Trust",
        "short": "Avoid probate, maintain privacy",
        "full": "A revocable living trust holds your assets during your lifetime and transfers them "
                "to beneficiaries at death without going through probate.",
        "does": [
            "Avoids probate (faster, private transfer)",
            "Provides continuity if you become incapacitated",
            "Can manage assets for minor beneficiaries",
            "Maintains privacy (not public record)",
        ],
        "does_not": [
            "Provide asset protection from creditors (revocable trusts)",
            "Reduce estate taxes by itself",
            "Work unless assets are retitled into the trust",
            "Replace the need for a will (you still need a 'pour-over' will)",
        ],
    },
    {
        "id": "poa",
        "name": "Power of Attorney",
        "short": "Financial decisions if incapacitated",
        "full": "A durable power of attorney designates someone to make financial decisions "
                "on your behalf if you become incapacitated.",
        "does": [
            "Allows someone to pay your bills",
            "Manage your investments",
            "Handle banking and real estate transactions",
            "File taxes on your behalf",
        ],
        "does_not": [
            "Grant authority after your death (ends at death)",
            "Override your decisions while you're competent",
            "Automatically give authority over healthcare",
            "Work if not 'durable' (regular POA ends at incapacity)",
        ],
    },
    {
        "id": "healthcare",
        "name": "Healthcare Directive / Living Will",
        "short": "Medical decisions and end-of-life wishes",
        "full": "A healthcare directive states your wishes for medical treatment and designates "
                "someone to make healthcare decisions if you cannot.",
        "does": [
            "Specifies end-of-life treatment preferences",
            "Designates a healthcare proxy/agent",
            "Guides decisions about life support",
            "Documents organ donation wishes",
        ],
        "does_not": [
            "Cover routine medical decisions while competent",
            "Automatically include HIPAA authorization (do separately)",
            "Override your verbal wishes if you're competent",
            "Need to predict every medical scenario",
        ],
    },
]

# can_change is True/False or a short qualifier
TRUST_TYPES = [
    {"type": "Revocable Living Trust", "can_change": True, "you_control": True, "avoids_probate": True,
     "tax_benefits": False, "asset_protection": False,
     "best_for": "Most people wanting probate avoidance and incapacity planning"},
    {"type": "Irrevocable Trust", "can_change": False, "you_control": False, "avoids_probate": True,
     "tax_benefits": True, "asset_protection": True,
     "best_for": "High net worth individuals, Medicaid planning, asset protection"},
    {"type": "Special Needs Trust", "can_change": "Varies", "you_control": False, "avoids_probate": True,
     "tax_benefits": False, "asset_protection": True,
     "best_for": "Beneficiaries receiving government benefits"},
    {"type": "Testamentary Trust", "can_change": "Until death", "you_control": True, "avoids_probate": False,
     "tax_benefits": False, "asset_protection": False,
     "best_for": "Created by will, for minor beneficiaries"},
]

TITLING_OPTIONS = [
    {
        "type": "JTWROS",
        "full_name": "Joint Tenants with Right of Survivorship",
        "description": "Property passes directly to surviving owner(s) outside of probate",
        "pros": ["Avoids probate", "Automatic transfer at death", "Simple to set up"],
        "cons": ["Exposes asset to all owners' creditors", "Gift tax implications if adding non-spouse",
                 "Loss of stepped-up basis on deceased owner's share"],
        "best_for": "Married couples, some real estate",
    },
    {
        "type": "Tenants in Common",
        "full_name": "Tenants in Common",
        "description": "Each owner has a separate, transferable share that passes through their estate",
        "pros": ["Each owner controls their share", "Can have unequal ownership", "Full stepped-up basis"],
        "cons": ["Goes through probate", "Co-owner could sell or will their share to anyone"],
        "best_for": "Business partners, investment property, unmarried co-owners",
    },
    {
        "type": "Community Property",
        "full_name": "Community Property (9 states)",
        "description": "Married couples own property 50/50 with special tax treatment",
        "pros": ["Full stepped-up basis at first death", "Clear ownership rules",
                 "Avoids probate with rights of survivorship"],
        "cons": ["Only available in 9 states", "Complex if you move states",
                 "Assets exposed to either spouse's creditors"],
        "best_for": "Married couples in community property states",
    },
    {
        "type": "TOD/POD",
        "full_name": "Transfer/Payable on Death",
        "description": "Account passes directly to named beneficiary at death",
        "pros": ["Avoids probate", "Easy to set up", "Revocable anytime", "Keeps control during lifetime"],
        "cons": ["Only for certain accounts", "Beneficiary could predecease you",
                 "Doesn't provide management if incapacitated"],
        "best_for": "Bank accounts, brokerage accounts, vehicles (in some states)",
    },
    {
        "type": "Trust Ownership",
        "full_name": "Owned by Revocable Trust",
        "description": "Asset is titled in the name of your trust",
        "pros": ["Avoids probate", "Incapacity planning", "Privacy", "Works for any asset"],
        "cons": ["Requires trust creation", "Must retitle assets", "Ongoing management"],
        "best_for": "Real estate, valuable personal property, comprehensive planning",
    },
]

PROBATE_PROBLEMS = [
    {"issue": "Time", "detail": "Typically 6-18 months, can be years for contested estates"},
    {"issue": "Cost", "detail": "Attorney fees, executor fees, court costs: often 3-8% of estate value"},
    {"issue": "Public Record", "detail": "Anyone can see your assets, debts, and who inherits"},
    {"issue": "Court Control", "detail": "Judge oversees everything, may require bonds and approvals"},
    {"issue": "Frozen Assets", "detail": "Heirs can't access assets until probate closes"},
]

PROBATE_AVOIDANCE_STRATEGIES = [
    {"strategy": "Revocable Living Trust", "effectiveness": "High", "complexity": "Medium", "cost": "$1,500-5,000+"},
    {"strategy": "Joint Ownership (JTWROS)", "effectiveness": "Medium", "complexity": "Low", "cost": "$0-200"},
    {"strategy": "TOD/POD Designations", "effectiveness": "Medium", "complexity": "Low", "cost": "$0"},
    {"strategy": "Beneficiary Designations", "effectiveness": "High", "complexity": "Low", "cost": "$0"},
    {"strategy": "Small Estate Procedures", "effectiveness": "Limited", "complexity": "Low", "cost": "Varies by state"},
]


def estate_profile(net_worth: float = 0.0, has_real_estate: bool = False, has_minor_children: bool = False,
                   is_blended_family: bool = False, state: Optional[str] = None) -> Dict[str, bool]:
    sc = (state or "").upper()
    worth = num(net_worth)
    return {
        "needs_trust": worth > TRUST_NET_WORTH or has_real_estate or has_minor_children or is_blended_family,
        "needs_attorney": worth > ATTORNEY_NET_WORTH or is_blended_family or has_minor_children or has_real_estate,
        "community_property_state": sc in COMMUNITY_PROPERTY_STATES,
        "state_estate_tax": sc in STATE_ESTATE_TAX_STATES,
        "state_inheritance_tax": sc in STATE_INHERITANCE_TAX_STATES,
    }


def completion(checklist: EstateChecklist) -> int:
    """Percent of the six checklist items done, rounded."""
    done = sum(1 for name, _ in CHECKLIST_ITEMS if getattr(checklist, name) is True)
    return round_half_up(done / len(CHECKLIST_ITEMS) * 100)


def checklist_status(checklist: EstateChecklist) -> List[Dict[str, object]]:
    return [{"label": label, "done": bool(getattr(checklist, name))} for name, label in CHECKLIST_ITEMS]


def update_checklist(checklist: EstateChecklist, field: str, value,
                     on_change: Optional[Callable[[EstateChecklist], None]] = None) -> EstateChecklist:
    """
    Return a copy with one field changed; the original is left as is.
    on_change, when given, receives the new checklist.
    """
    names = {f.name for f in dataclasses.fields(EstateChecklist)}
    if field not in names:
        raise InputValidationError(field, value, "Not an estate checklist field.")
    updated = dataclasses.replace(checklist, **{field: value})
    logger.debug("Estate checklist %s -> %r", field, value)
    if on_change is not None:
        on_change(updated)
    return updated
