"""
Field registry.

Per-entity lists of filterable fields, each tagged with a semantic type.
"""

from typing import Dict, List, Optional

from filter_engine.core.models import FieldType, FilterField, SelectOption


def _options(*pairs) -> List[SelectOption]:
    return [SelectOption(label=label, value=value) for label, value in pairs]


INDUSTRY_OPTIONS = _options(
    ("Technology", "technology"),
    ("Healthcare", "healthcare"),
    ("Finance", "finance"),
    ("Manufacturing", "manufacturing"),
    ("Retail", "retail"),
    ("Education", "education"),
    ("Other", "other"),
)

COMPANY_FIELDS: List[FilterField] = [
    FilterField(key="name", label="Company Name", type=FieldType.TEXT),
    FilterField(key="industry", label="Industry", type=FieldType.SELECT, options=INDUSTRY_OPTIONS),
    FilterField(key="companySize", label="Company Size", type=FieldType.SELECT, options=_options(
        ("1-10 employees", "startup"),
        ("11-50 employees", "small"),
        ("51-200 employees", "medium"),
        ("201-1000 employees", "large"),
        ("1000+ employees", "enterprise"),
    )),
    FilterField(key="status", label="Status", type=FieldType.SELECT, options=_options(
        ("Active", "ACTIVE"),
        ("Prospect", "PROSPECT"),
        ("Customer", "CUSTOMER"),
        ("Inactive", "INACTIVE"),
        ("Churned", "CHURNED"),
    )),
    FilterField(key="website", label="Website", type=FieldType.TEXT),
    FilterField(key="createdAt", label="Created Date", type=FieldType.DATE),
    FilterField(key="updatedAt", label="Updated Date", type=FieldType.DATE),
    FilterField(key="_count.contacts", label="Number of Contacts", type=FieldType.NUMBER),
    FilterField(key="_count.deals", label="Number of Deals", type=FieldType.NUMBER),
    FilterField(key="_count.activities", label="Number of Activities", type=FieldType.NUMBER),
]

CONTACT_FIELDS: List[FilterField] = [
    FilterField(key="firstName", label="First Name", type=FieldType.TEXT),
    FilterField(key="lastName", label="Last Name", type=FieldType.TEXT),
    FilterField(key="email", label="Email", type=FieldType.TEXT),
    FilterField(key="phone", label="Phone", type=FieldType.TEXT),
    FilterField(key="jobTitle", label="Job Title", type=FieldType.TEXT),
    FilterField(key="isPrimary", label="Is Primary Contact", type=FieldType.BOOLEAN),
    FilterField(key="company.name", label="Company Name", type=FieldType.RELATIONSHIP, related_entity="company"),
    FilterField(key="company.industry", label="Company Industry", type=FieldType.SELECT, options=INDUSTRY_OPTIONS),
    FilterField(key="createdAt", label="Created Date", type=FieldType.DATE),
    FilterField(key="updatedAt", label="Updated Date", type=FieldType.DATE),
    FilterField(key="_count.deals", label="Number of Deals", type=FieldType.NUMBER),
    FilterField(key="_count.activities", label="Number of Activities", type=FieldType.NUMBER),
]

DEAL_FIELDS: List[FilterField] = [
    FilterField(key="title", label="Deal Title", type=FieldType.TEXT),
    FilterField(key="value", label="Deal Value", type=FieldType.NUMBER),
    FilterField(key="probability", label="Probability", type=FieldType.NUMBER),
    FilterField(key="expectedCloseDate", label="Expected Close Date", type=FieldType.DATE),
    FilterField(key="stage.name", label="Pipeline Stage", type=FieldType.RELATIONSHIP, related_entity="stage"),
    FilterField(key="company.name", label="Company Name", type=FieldType.RELATIONSHIP, related_entity="company"),
    FilterField(key="contact.firstName", label="Contact First Name", type=FieldType.RELATIONSHIP, related_entity="contact"),
    FilterField(key="contact.lastName", label="Contact Last Name", type=FieldType.RELATIONSHIP, related_entity="contact"),
    FilterField(key="createdAt", label="Created Date", type=FieldType.DATE),
    FilterField(key="updatedAt", label="Updated Date", type=FieldType.DATE),
    FilterField(key="_count.activities", label="Number of Activities", type=FieldType.NUMBER),
]

ACTIVITY_FIELDS: List[FilterField] = [
    FilterField(key="subject", label="Subject", type=FieldType.TEXT),
    FilterField(key="type", label="Type", type=FieldType.SELECT, options=_options(
        ("Call", "CALL"),
        ("Email", "EMAIL"),
        ("Meeting", "MEETING"),
        ("Task", "TASK"),
        ("Note", "NOTE"),
        ("Proposal", "PROPOSAL"),
        ("Contract", "CONTRACT"),
        ("Demo", "DEMO"),
        ("Follow-up", "FOLLOW_UP"),
    )),
    FilterField(key="status", label="Status", type=FieldType.SELECT, options=_options(
        ("Pending", "PENDING"),
        ("In Progress", "IN_PROGRESS"),
        ("Completed", "COMPLETED"),
        ("Cancelled", "CANCELLED"),
        ("Overdue", "OVERDUE"),
    )),
    FilterField(key="priority", label="Priority", type=FieldType.SELECT, options=_options(
        ("Low", "LOW"),
        ("Medium", "MEDIUM"),
        ("High", "HIGH"),
        ("Urgent", "URGENT"),
    )),
    FilterField(key="company.name", label="Company Name", type=FieldType.RELATIONSHIP, related_entity="company"),
    FilterField(key="contact.firstName", label="Contact First Name", type=FieldType.RELATIONSHIP, related_entity="contact"),
    FilterField(key="deal.title", label="Deal Title", type=FieldType.RELATIONSHIP, related_entity="deal"),
    FilterField(key="dueDate", label="Due Date", type=FieldType.DATE),
    FilterField(key="completedAt", label="Completed Date", type=FieldType.DATE),
    FilterField(key="createdAt", label="Created Date", type=FieldType.DATE),
]

# Pipeline stages are only reachable through deal relationships.
STAGE_FIELDS: List[FilterField] = [
    FilterField(key="name", label="Stage Name", type=FieldType.TEXT),
    FilterField(key="probability", label="Stage Probability", type=FieldType.NUMBER),
]

ENTITY_FIELDS: Dict[str, List[FilterField]] = {
    "companies": COMPANY_FIELDS,
    "contacts": CONTACT_FIELDS,
    "deals": DEAL_FIELDS,
    "activities": ACTIVITY_FIELDS,
}

_RELATED_ENTITIES: Dict[str, List[FilterField]] = {
    "company": COMPANY_FIELDS,
    "contact": CONTACT_FIELDS,
    "deal": DEAL_FIELDS,
    "activity": ACTIVITY_FIELDS,
    "stage": STAGE_FIELDS,
}


def entity_names() -> List[str]:
    """Names of all entities with a field registry."""
    return list(ENTITY_FIELDS)


def fields_for(entity: str) -> List[FilterField]:
    """
    Return the filterable fields of an entity.

    Unknown entity names yield an empty list rather than an error.
    """
    return list(ENTITY_FIELDS.get(entity, []))


def get_field(entity: str, key: str) -> Optional[FilterField]:
    """Look up one field of an entity by key."""
    for field in ENTITY_FIELDS.get(entity, []):
        if field.key == key:
            return field
    return None


def resolve_field_type(field: FilterField) -> FieldType:
    """
    Effective type used for operator selection.

    Relationship fields take the type of the attribute they traverse to;
    when the target cannot be found they behave as text.
    """
    if field.type is not FieldType.RELATIONSHIP:
        return field.type

    target_fields = _RELATED_ENTITIES.get(field.related_entity or "", [])
    attribute = field.key.split(".", 1)[-1]
    for target in target_fields:
        if target.key == attribute and target.type is not FieldType.RELATIONSHIP:
            return target.type
    return FieldType.TEXT
