# leads.py
"""Quote request form. Submissions are validated and logged only; there is no lead backend yet."""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from typing import List, Optional

from errors import InvalidLeadError
from presentation import format_phone_number

log = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_ZIP_RE = re.compile(r"\b\d{5}(?:-\d{4})?\b")


@dataclass
class LeadRequest:
    full_name: str
    phone: str
    email: str
    address: str
    is_homeowner: Optional[bool] = None
    monthly_bill: str = ""
    zip_code: str = ""
    sun_score: Optional[int] = None
    city: str = ""
    state: str = ""


def extract_zip(address: str) -> str:
    """First US ZIP (or ZIP+4) found in a free-text address, else ''."""
    match = _ZIP_RE.search(address or "")
    return match.group(0) if match else ""


def validate_lead(lead: LeadRequest) -> List[str]:
    problems = []
    if not lead.full_name.strip():
        problems.append("Full name is required.")
    if len(re.sub(r"\D", "", lead.phone)) != 10:
        problems.append("Enter a 10-digit phone number.")
    if not _EMAIL_RE.match(lead.email.strip()):
        problems.append("Enter a valid email address.")
    if not lead.address.strip():
        problems.append("Property address is required.")
    return problems


def submit_lead(lead: LeadRequest) -> str:
    problems = validate_lead(lead)
    if problems:
        raise InvalidLeadError(problems)

    # Validated on the raw digits; the display form is applied only afterwards
    lead.phone = format_phone_number(lead.phone)

    reference = uuid.uuid4().hex[:10]
    # Contact details stay out of the log
    log.info(
        "Quote request %s received (city=%s, state=%s, zip=%s, score=%s, homeowner=%s)",
        reference, lead.city, lead.state, lead.zip_code, lead.sun_score, lead.is_homeowner,
    )
    return reference
