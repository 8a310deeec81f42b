# gemini_client.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict

import requests

from cache import TTLCache
from config import CONTENT_TIMEOUT_SECONDS, CONTENT_TTL_SECONDS, get_secret
from errors import MalformedUpstreamResponse
from models import CityRecord, GeneratedContent, SavingsRange
from savings import round_half_up

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ["title", "meta_description", "h1", "intro_content", "detailed_content"]


def savings_range(lifetime_savings: float) -> SavingsRange:
    """
    Range around a savings figure computed at a typical ~$150/mo bill.

    Low ~ a $100/mo household (67%), high ~ a $300/mo one (200%), both rounded
    to the nearest $5k.
    """
    low = int(round_half_up(lifetime_savings * 0.67 / 5000)) * 5000
    high = int(round_half_up(lifetime_savings * 2.0 / 5000)) * 5000
    return SavingsRange(low=low, high=high)


def target_keyword(city: CityRecord) -> str:
    return f"Solar panels in {city.city}"


def default_title(city: CityRecord, year: int) -> str:
    return f"{target_keyword(city)} - {year} Cost & Savings | SunScore"


def sun_quality(sun_hours: float) -> str:
    if sun_hours >= 5.5:
        return "excellent"
    if sun_hours >= 5.0:
        return "strong"
    if sun_hours >= 4.5:
        return "good"
    return "solid"


def fallback_content(city: CityRecord, lifetime_savings: float, year: int, sun_hours: float) -> GeneratedContent:
    """Static copy used whenever the model is unavailable or answers badly."""
    keyword = target_keyword(city)
    rng = savings_range(lifetime_savings)
    quality = sun_quality(sun_hours)

    return GeneratedContent(
        title=default_title(city, year),
        meta_description=(
            f"Calculate your solar savings in {city.city}, {city.state_id}. "
            f"With {sun_hours:.1f} peak sun hours daily, homeowners save "
            f"${rng.low_formatted} to ${rng.high_formatted} over 25 years depending on usage."
        ),
        h1=keyword,
        intro_content=(
            f"<p>{city.city} is a prime location for solar energy, averaging "
            f"<strong>{sun_hours:.1f} peak sun hours</strong> per day, {quality} solar potential. "
            f"With electricity rates rising across {city.state_name}, homeowners are switching to "
            f"solar to lock in predictable energy costs and escape the utility rate rollercoaster.</p>"
        ),
        detailed_content=(
            f"<h3>Why Utility Rates Keep Rising in {city.state_name}</h3>\n"
            f"<p>Energy inflation is a growing concern for families in {city.city}. Utility companies "
            f"continue raising rates an average of 4% annually, and that trend shows no signs of slowing. "
            f"By generating your own power with solar, you effectively freeze your electricity rate at "
            f"today's cost of equipment and shield your household budget from future utility price hikes.</p>\n"
            f"<h3>Building Long-Term Wealth with Solar</h3>\n"
            f"<p>Solar isn't just about saving money, it's about redirecting cash flow. Over the next 25 years, "
            f"switching to solar in {city.city} could save you <strong>${rng.low_formatted} to "
            f"${rng.high_formatted}</strong> depending on your electricity consumption. That's money that "
            f"stays in your pocket instead of going to the utility company. Use the calculator above to get "
            f"your personalized estimate based on your actual electric bill.</p>"
        ),
        from_fallback=True,
    )


def build_prompt(city: CityRecord, lifetime_savings: float, sun_hours: float) -> str:
    keyword = target_keyword(city)
    rng = savings_range(lifetime_savings)
    return f"""You are an SEO content writer. Generate content for a solar calculator page split into two distinct sections.

STRICT SEO DATA:
- Keyword: "{keyword}"
- City: {city.city}, {city.state_id}
- Sun Hours: {sun_hours:.1f} peak hours
- Savings Range: ${rng.low_formatted} to ${rng.high_formatted} (25-year estimate, depending on electricity usage)
- Urgency: Rising utility rates, inflation protection. (NO Tax Credit mentions).

OUTPUT REQUIREMENTS (JSON ONLY):
1. title: SEO Title starting with "{keyword}"
2. meta_description: Click-worthy description. Use the savings RANGE (e.g., "$XX,000 to $XX,000 depending on usage").
3. h1: Exact keyword "{keyword}"
4. intro_content: ONE punchy HTML paragraph (<p> tag only). Hook the user immediately about why {city.city} is perfect for solar given the {sun_hours:.1f} sun hours. Keep it 40-50 words.
5. detailed_content: TWO HTML paragraphs (with <h3> headers). Focus on "Escaping Rate Hikes" and "Long-term Wealth". When mentioning savings, use the RANGE format "${rng.low_formatted} to ${rng.high_formatted} depending on your electricity consumption". Tone: Financial & Urgent. NO mentions of federal tax credits or ITC.

Return ONLY valid JSON with no markdown formatting."""


def _strip_fences(text: str) -> str:
    clean = text.strip()
    if clean.startswith("```json"):
        clean = clean[7:]
    if clean.startswith("```"):
        clean = clean[3:]
    if clean.endswith("```"):
        clean = clean[:-3]
    return clean.strip()


def parse_content(text: str, city: CityRecord, year: int) -> GeneratedContent:
    """Validate model output; raises MalformedUpstreamResponse if unusable."""
    try:
        parsed: Any = json.loads(_strip_fences(text or ""))
    except ValueError as e:
        raise MalformedUpstreamResponse(f"Model returned invalid JSON: {e}") from e

    # The model sometimes wraps the object in a list
    if isinstance(parsed, list) and parsed:
        parsed = parsed[0]
    if not isinstance(parsed, dict):
        raise MalformedUpstreamResponse("Model output is not a JSON object.")

    missing = [f for f in REQUIRED_FIELDS if not parsed.get(f)]
    if missing:
        raise MalformedUpstreamResponse(f"Missing required fields: {', '.join(missing)}")

    keyword = target_keyword(city)
    title = str(parsed["title"])
    if not title.lower().startswith(keyword.lower()):
        title = default_title(city, year)

    return GeneratedContent(
        title=title,
        meta_description=str(parsed["meta_description"]),
        h1=keyword,
        intro_content=str(parsed["intro_content"]),
        detailed_content=str(parsed["detailed_content"]),
    )


class GeminiClient:
    """
    Gemini text-generation client for per-city marketing copy.

    Never raises to the caller: every failure degrades to `fallback_content`.
    Results (including fallbacks) are cached per city/state/year.
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

    def __init__(
        self,
        api_key: str | None = None,
        cache: TTLCache | None = None,
        timeout: float = CONTENT_TIMEOUT_SECONDS,
        model: str = "gemini-2.0-flash",
    ):
        if api_key is None:
            api_key = get_secret("GEMINI_API_KEY")
        self.api_key = api_key
        self.cache = cache if cache is not None else TTLCache(CONTENT_TTL_SECONDS)
        self.timeout = timeout
        self.model = model
        self.last_error: str | None = None

    def available(self) -> bool:
        return bool(self.api_key)

    @staticmethod
    def cache_key(city: CityRecord, year: int) -> str:
        return f"{city.city}-{city.state_id}-{year}"

    def city_content(self, city: CityRecord, lifetime_savings: float, year: int, sun_hours: float) -> GeneratedContent:
        return self.cache.get_or_set(
            self.cache_key(city, year),
            lambda: self.generate(city, lifetime_savings, year, sun_hours),
        )

    def generate(self, city: CityRecord, lifetime_savings: float, year: int, sun_hours: float) -> GeneratedContent:
        self.last_error = None

        if not self.available():
            log.warning("GEMINI_API_KEY not set, using fallback content")
            return fallback_content(city, lifetime_savings, year, sun_hours)

        try:
            text = self._request(build_prompt(city, lifetime_savings, sun_hours))
            return parse_content(text, city, year)
        except requests.exceptions.Timeout:
            self.last_error = "Gemini request timed out."
        except requests.exceptions.RequestException as e:
            self.last_error = f"Gemini request failed: {e}"
        except MalformedUpstreamResponse as e:
            self.last_error = str(e)

        log.error("%s Using fallback content for %s, %s", self.last_error, city.city, city.state_id)
        return fallback_content(city, lifetime_savings, year, sun_hours)

    def _request(self, prompt: str) -> str:
        url = f"{self.BASE_URL}/{self.model}:generateContent"
        body: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": 0.7,
                "maxOutputTokens": 1024,
                "responseMimeType": "application/json",
            },
        }
        resp = requests.post(url, params={"key": self.api_key}, json=body, timeout=self.timeout)
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedUpstreamResponse("Gemini returned a non-JSON response.") from e

        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise MalformedUpstreamResponse("No text in Gemini response.")
