# Project: SunScore Solar Savings Calculator (Streamlit App)

# app.py
from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass
from typing import Optional

import streamlit as st

from cache import TTLCache
from cities import STATE_NAMES, CityDirectory, city_slug
from config import (
    BUILD_TIME_CITY_LIMIT,
    CONTENT_TTL_SECONDS,
    IRRADIANCE_TTL_SECONDS,
    MAX_SLIDER_BILL,
    MIN_MONTHLY_BILL,
    SYSTEM_SIZE_WATTS,
    YEARS_ANALYZED,
    configure_logging,
)
from data_connectors import PlacesClient, geocode_address
from errors import ConfigurationError, InvalidLeadError, NotFoundError, UpstreamError
from gemini_client import GeminiClient
from guides import calculator_faqs
from irradiance import adapt
from leads import LeadRequest, extract_zip, submit_lead
from models import CityRecord, PlaceDetails, SessionSnapshot
from nrel_client import NRELClient
from presentation import (
    BillRecomputer,
    SessionStore,
    clamp_monthly_bill,
    format_currency,
    format_number,
    format_years,
    neighbor_count,
    user_error_message,
)
from resources import quote_links
from regional_rates import is_known_region
from savings import project_for_location
from ui_components import (
    faq_list,
    link_button_card,
    monthly_production_chart,
    note,
    savings_chart,
    stat_row,
    sun_score_gauge,
)

log = logging.getLogger(__name__)

# ---------------------------------
# App State / Navigation
# ---------------------------------

PAGES = {
    "Home": "home",
    "Solar Calculator": "calculator",
    "Locations": "locations",
    "Get a Quote": "quote",
}


@dataclass(frozen=True)
class Location:
    """Where the calculator is pointed: a dataset city or a geocoded address."""

    slug: str
    label: str
    lat: float
    lng: float
    region: str
    city: Optional[CityRecord] = None


def _init_state():
    if "page" not in st.session_state:
        st.session_state.page = "home"
    if "location" not in st.session_state:
        st.session_state.location = None
    if "recomputers" not in st.session_state:
        st.session_state.recomputers = {}
    if "quote_context" not in st.session_state:
        st.session_state.quote_context = {}


# ---------------------------------
# Process-wide resources
# ---------------------------------


@st.cache_resource
def _city_directory() -> CityDirectory:
    return CityDirectory()


@st.cache_resource
def _irradiance_cache() -> TTLCache:
    return TTLCache(IRRADIANCE_TTL_SECONDS)


@st.cache_resource
def _content_cache() -> TTLCache:
    return TTLCache(CONTENT_TTL_SECONDS)


def _session_store() -> SessionStore:
    return SessionStore(st.session_state)


def _location_for_city(city: CityRecord) -> Location:
    return Location(
        slug=city_slug(city.city_ascii, city.state_id),
        label=f"{city.city}, {city.state_name}",
        lat=city.lat,
        lng=city.lng,
        region=city.state_id,
        city=city,
    )


def _open_city(city: CityRecord):
    location = _location_for_city(city)
    st.session_state.location = location
    st.query_params["city"] = location.slug
    _set_page("calculator")


def _open_address(details: PlaceDetails):
    st.session_state.location = Location(
        slug=city_slug(details.formatted_address, details.region_code or "us"),
        label=details.formatted_address,
        lat=details.lat,
        lng=details.lng,
        region=details.region_code,
    )
    # Only dataset cities are linkable
    if "city" in st.query_params:
        del st.query_params["city"]
    _set_page("calculator")


def _location_from_query():
    """Open the city named by `?city=<slug>` unless it is already showing."""
    slug = st.query_params.get("city")
    if not slug:
        return
    current = st.session_state.location
    if current is not None and current.slug == slug:
        return
    try:
        city = _city_directory().by_slug(slug)
    except NotFoundError as e:
        log.warning("Unknown city in link: %s", slug)
        st.session_state.city_error = user_error_message(e)
        st.session_state.location = None
        del st.query_params["city"]
        _set_page("calculator")
        return
    _open_city(city)


# ---------------------------------
# Shared sidebar
# ---------------------------------


def sidebar_nav():
    with st.sidebar:
        st.markdown("### SunScore")

        # Keep the radio in step with page changes made by buttons
        labels_by_key = {v: k for k, v in PAGES.items()}
        st.session_state.nav_radio = labels_by_key.get(st.session_state.page, "Home")

        st.radio(
            "Go to",
            list(PAGES.keys()),
            label_visibility="collapsed",
            key="nav_radio",
            on_change=_on_nav,
        )

        st.markdown("---")
        st.caption(
            f"Estimates assume a {SYSTEM_SIZE_WATTS / 1000:.0f} kW system, a {YEARS_ANALYZED}-year horizon "
            "and 4% yearly utility inflation. Production data: NREL PVWatts."
        )


# ---------------------------------
# Pages
# ---------------------------------


def page_home():
    st.title("How much will solar save you?")
    st.write(
        "Enter your address to get a **SunScore** and a 25-year savings estimate "
        "based on NREL satellite data and local electricity prices."
    )

    places = PlacesClient()
    with st.form("address_form"):
        address = st.text_input("Home address", placeholder="123 Main St, Phoenix, AZ")
        submitted = st.form_submit_button("Calculate my savings")

    if submitted:
        try:
            details = geocode_address(address)
        except (NotFoundError, UpstreamError) as e:
            st.error(user_error_message(e))
        else:
            _open_address(details)
            st.rerun()

    if places.available() and address:
        _address_suggestions(places, address)

    st.markdown("---")
    st.subheader("Popular cities")
    directory = _city_directory()
    cities = directory.top(BUILD_TIME_CITY_LIMIT)
    cols = st.columns(3)
    for i, city in enumerate(cities):
        with cols[i % 3]:
            link_button_card(
                f"{city.city}, {city.state_id}",
                f"Population {format_number(city.population)}",
                on_click=_open_city,
                args=(city,),
                key=f"home_city_{directory.slug_for(city)}",
            )


def _address_suggestions(places: PlacesClient, text: str):
    try:
        suggestions = places.autocomplete(text)
    except (ConfigurationError, UpstreamError) as e:
        log.warning("Address suggestions unavailable: %s", e)
        return
    if not suggestions:
        return

    labels = {s.description: s.place_id for s in suggestions}
    choice = st.selectbox("Did you mean…", ["Select an address"] + list(labels.keys()), key="place_choice")
    if choice != "Select an address" and st.button("Use this address", key="use_place"):
        try:
            details = places.details(labels[choice])
        except (ConfigurationError, NotFoundError, UpstreamError) as e:
            st.error(user_error_message(e))
            return
        _open_address(details)
        st.rerun()


def page_calculator():
    location: Optional[Location] = st.session_state.location
    if location is None:
        st.header("Solar Calculator")
        city_error = st.session_state.pop("city_error", None)
        if city_error:
            st.error(city_error)
        note("Pick a city on the **Locations** page or enter an address on **Home** to start.")
        return

    city = location.city
    st.header(f"Solar Calculator for {location.label}")
    if city is not None:
        st.caption(f"{neighbor_count(city.city, dt.datetime.now())} neighbors checked their SunScore today")

    # Irradiance: fetched once per location and cached for the process
    nrel = NRELClient(cache=_irradiance_cache())
    try:
        with st.spinner("Loading NREL solar data for this location…"):
            irradiance = nrel.fetch_irradiance(location.lat, location.lng)
    except (ConfigurationError, UpstreamError) as e:
        st.error(user_error_message(e))
        if nrel.last_error:
            st.caption(f"Details: {nrel.last_error}")
        if not isinstance(e, ConfigurationError):
            st.button("Try again", key="retry_irradiance")
        return

    inputs = adapt(irradiance, location.region, location.slug)
    if not is_known_region(location.region):
        note("We could not match a US state for this address, so prices and rates use national averages.")

    recomputers = st.session_state.recomputers
    recomputer: Optional[BillRecomputer] = recomputers.get(location.slug)
    if recomputer is None:
        recomputer = BillRecomputer(inputs, inputs.default_monthly_bill)
        recomputers[location.slug] = recomputer

    bill_key = f"bill_{location.slug}"
    slider_key = f"bill_slider_{location.slug}"

    # Returning from the quote page
    snapshot = _session_store().restore_for(location.slug)
    if snapshot is not None:
        recomputer.restore(snapshot.monthly_bill, snapshot.projection)
    if snapshot is not None or bill_key not in st.session_state:
        st.session_state[bill_key] = str(recomputer.monthly_bill)
        st.session_state[slider_key] = min(recomputer.monthly_bill, MAX_SLIDER_BILL)

    bill_text = st.text_input(
        "Average monthly electric bill ($)",
        key=bill_key,
        on_change=_slider_from_text,
        args=(bill_key, slider_key),
        help=f"Minimum ${MIN_MONTHLY_BILL}. Type any amount, or drag up to ${MAX_SLIDER_BILL:,}.",
    )
    st.slider(
        "Monthly bill",
        min_value=MIN_MONTHLY_BILL,
        max_value=MAX_SLIDER_BILL,
        step=1,
        key=slider_key,
        on_change=_text_from_slider,
        args=(bill_key, slider_key),
        label_visibility="collapsed",
    )
    recomputer.submit(bill_text)
    if recomputer.pending:
        # A newer keystroke interrupts this rerun, so only the last value settles
        time.sleep(recomputer.remaining())
    recomputer.poll()
    projection = recomputer.projection

    col_gauge, col_summary = st.columns([1, 2])
    with col_gauge:
        sun_score_gauge(projection.sun_score, projection.peak_sun_hours)
    with col_summary:
        stat_row([
            ("25-year savings", format_currency(projection.twenty_five_year_savings_usd), None),
            ("Payback", format_years(projection.payback_years), None),
            ("System cost", format_currency(projection.system_cost_usd), f"{SYSTEM_SIZE_WATTS / 1000:.0f} kW system"),
        ])
        stat_row([
            ("First-year savings", format_currency(projection.first_year_savings_usd), None),
            ("Bill offset", f"{projection.bill_offset_percent}%", None),
            ("Home value boost", format_currency(projection.home_value_increase_usd), None),
        ])

    content = None
    if city is not None:
        baseline = project_for_location(inputs, inputs.default_monthly_bill)
        content = GeminiClient(cache=_content_cache()).city_content(
            city, baseline.twenty_five_year_savings_usd, dt.date.today().year, inputs.peak_sun_hours
        )
        st.markdown(content.intro_content, unsafe_allow_html=True)

    savings_chart(projection)
    if irradiance.monthly_production_kwh:
        monthly_production_chart(irradiance.monthly_production_kwh)

    stat_row([
        ("Annual production", f"{format_number(projection.annual_production_kwh)} kWh", None),
        ("CO₂ offset", f"{format_number(projection.co2_offset_tons)} tons", f"over {YEARS_ANALYZED} years"),
        ("Trees equivalent", format_number(projection.trees_equivalent), None),
        ("Monthly equivalent", format_currency(projection.monthly_equivalent_payment_usd), "system cost / 300 months"),
    ])
    if inputs.station_distance_miles:
        st.caption(f"Nearest NREL weather station: {inputs.station_distance_miles:.1f} miles away")

    if st.button("Get my free quote", type="primary", key="cta_quote"):
        _session_store().save(
            SessionSnapshot(
                city_slug=location.slug,
                monthly_bill=recomputer.monthly_bill,
                address=location.label,
                lat=location.lat,
                lng=location.lng,
                projection=projection,
                has_interacted=True,
            )
        )
        st.session_state.quote_context = {
            "address": location.label,
            "bill": recomputer.monthly_bill,
            "score": projection.sun_score,
            "city": city.city if city else "",
            "state": location.region,
        }
        _set_page("quote")
        st.rerun()

    if content is not None:
        st.markdown(content.detailed_content, unsafe_allow_html=True)
        st.subheader("FAQ")
        faq_list(calculator_faqs(city.city, city.state_name))


def page_locations():
    st.header("Solar calculators by state")
    directory = _city_directory()
    states = directory.states()
    if not states:
        st.warning("City dataset is empty.")
        return

    state = st.selectbox(
        "State",
        states,
        format_func=lambda code: STATE_NAMES.get(code, code),
        key="locations_state",
    )
    cities = directory.by_state(state)
    st.caption(f"{len(cities)} cities in {STATE_NAMES.get(state, state)}")
    for city in cities:
        st.button(
            f"{city.city}, {city.state_id}",
            key=f"loc_city_{directory.slug_for(city)}",
            on_click=_open_city,
            args=(city,),
        )


def page_quote():
    ctx = st.session_state.quote_context or {}
    st.header("Get your free solar quote")
    if ctx.get("score") is not None:
        st.caption(f"SunScore {ctx['score']}/100 · ${ctx.get('bill', '')}/mo bill · {ctx.get('city', '')} {ctx.get('state', '')}")

    if st.session_state.get("lead_reference"):
        st.success(f"Thanks! Your request is in (ref {st.session_state.lead_reference}). A local installer will call you at {st.session_state.get('lead_phone', 'your number')}.")
    else:
        with st.form("quote_form"):
            full_name = st.text_input("Full name")
            phone = st.text_input("Phone", placeholder="(555) 123-4567")
            email = st.text_input("Email")
            address = st.text_input("Property address", value=ctx.get("address", ""))
            homeowner = st.radio("Do you own your home?", ["Yes", "No"], horizontal=True)
            bill = st.text_input("Monthly electric bill ($)", value=str(ctx.get("bill", "")))
            submitted = st.form_submit_button("Request my quote")

        if submitted:
            lead = LeadRequest(
                full_name=full_name,
                phone=phone,
                email=email,
                address=address,
                zip_code=extract_zip(address),
                is_homeowner=homeowner == "Yes",
                monthly_bill=str(clamp_monthly_bill(bill)) if bill else "",
                sun_score=ctx.get("score"),
                city=ctx.get("city", ""),
                state=ctx.get("state", ""),
            )
            try:
                st.session_state.lead_reference = submit_lead(lead)
                st.session_state.lead_phone = lead.phone
                st.rerun()
            except InvalidLeadError as e:
                for problem in e.problems:
                    st.error(problem)

    if st.session_state.location is not None:
        st.button("← Back to my estimate", on_click=_set_page, args=("calculator",), key="back_to_estimate")

    st.markdown("---")
    st.markdown("#### Compare installers & learn more")
    for label, url in quote_links(ctx.get("state", "")).items():
        st.markdown(f"- [{label}]({url})")


# ---------------------------------
# Helpers
# ---------------------------------


def _set_page(name: str):
    st.session_state.page = name


def _on_nav():
    _set_page(PAGES[st.session_state.nav_radio])


def _text_from_slider(text_key: str, slider_key: str):
    st.session_state[text_key] = str(st.session_state[slider_key])


def _slider_from_text(text_key: str, slider_key: str):
    bill = clamp_monthly_bill(st.session_state[text_key])
    st.session_state[slider_key] = min(bill, MAX_SLIDER_BILL)


def _route():
    page = st.session_state.page
    if page == "home":
        page_home()
    elif page == "calculator":
        page_calculator()
    elif page == "locations":
        page_locations()
    elif page == "quote":
        page_quote()


# ---------------------------------
# Entry
# ---------------------------------


def main():
    configure_logging()
    st.set_page_config(page_title="SunScore: Solar Savings Calculator", layout="wide")
    _init_state()
    _location_from_query()
    sidebar_nav()
    _route()


if __name__ == "__main__":
    main()
