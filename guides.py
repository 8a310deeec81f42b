# guides.py
from __future__ import annotations

from typing import Dict, List

# Short FAQ copy for the city calculator page


def calculator_faqs(city: str, state_name: str) -> List[Dict[str, str]]:
    return [
        {
            "question": f"How much can I save with solar in {city}?",
            "answer": (
                f"Solar savings in {city}, {state_name} depend on your current electricity usage, roof "
                f"orientation, and local utility rates. Our calculator uses NREL satellite data specific to "
                f"{city}'s location. Most homeowners save $15,000-$50,000 over 25 years."
            ),
        },
        {
            "question": "How long does it take for solar to pay for itself?",
            "answer": (
                f"The payback period for solar in {city} depends on your electricity costs, system size, and "
                f"local sun exposure. Most homeowners see their system pay for itself in 6-10 years through "
                f"electricity savings. After that, you're generating free electricity for the rest of the "
                f"system's life."
            ),
        },
        {
            "question": f"What is the average SunScore in {state_name}?",
            "answer": (
                f"{state_name} generally has good solar potential. The SunScore is based on peak sun hours "
                f"per day from NREL satellite data. Scores above 70 indicate good solar potential, while "
                f"scores above 85 are excellent."
            ),
        },
        {
            "question": "What are my financing options?",
            "answer": (
                "Cash purchase (highest ROI), solar loans ($0 down available), lease (lower savings, no upfront "
                "cost), or a PPA (pay for power produced at a fixed rate)."
            ),
        },
    ]
