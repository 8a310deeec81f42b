# resources.py
from __future__ import annotations

from typing import Dict

# Public utility commission sites for states where we have one on file
STATE_COMMISSIONS: Dict[str, tuple] = {
    "AZ": ("Arizona Corporation Commission", "https://www.azcc.gov/"),
    "CA": ("California Public Utilities Commission", "https://www.cpuc.ca.gov/"),
    "FL": ("Florida Public Service Commission", "https://www.floridapsc.com/"),
    "MI": ("Michigan Public Service Commission", "https://www.michigan.gov/mpsc"),
    "NY": ("NY Public Service Commission", "https://dps.ny.gov/"),
    "TX": ("Public Utility Commission of Texas", "https://www.puc.texas.gov/"),
}


def quote_links(state: str) -> Dict[str, str]:
    """Independent places to compare installers and check rates, shown next to the quote form."""
    links = {
        "EnergySage Solar Quotes": "https://www.energysage.com/solar/",
        "NABCEP Consumer Guide": "https://www.nabcep.org/resource/pv-consumer-guide/",
        "NREL PVWatts Calculator": "https://pvwatts.nrel.gov/",
        "DSIRE Incentives & Policies": "https://www.dsireusa.org/",
        "OpenEI Utility Rates": "https://openei.org/apps/USURDB/",
    }
    commission = STATE_COMMISSIONS.get((state or "").strip().upper())
    if commission:
        name, url = commission
        links[f"{name} (rates & interconnection)"] = url
    return links
