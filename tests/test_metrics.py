from linktracker.services.metrics import (
    GeoHints,
    extract_click_metrics,
    extract_utm_params,
    get_client_ip,
)


def test_extracts_request_metadata():
    headers = {
        "User-Agent": "Mozilla/5.0",
        "Referer": "https://news.example.org/",
        "CF-Connecting-IP": "203.0.113.7",
    }
    geo = GeoHints(country="NO", city="Oslo", latitude=59.91, longitude=10.75)

    metrics = extract_click_metrics(headers, [("utm_source", "news")], geo=geo)

    assert metrics.ip == "203.0.113.7"
    assert metrics.user_agent == "Mozilla/5.0"
    assert metrics.referer == "https://news.example.org/"
    assert metrics.country == "NO"
    assert metrics.city == "Oslo"
    assert metrics.latitude == 59.91
    assert metrics.longitude == 10.75
    assert metrics.utm_source == "news"


def test_missing_inputs_leave_fields_absent():
    metrics = extract_click_metrics({}, [])

    assert metrics.to_payload() == {}


def test_payload_omits_absent_fields():
    metrics = extract_click_metrics({"user-agent": "curl/8.0"}, [("utm_medium", "email")])

    assert metrics.to_payload() == {"user_agent": "curl/8.0", "utm_medium": "email"}


def test_utm_params_first_non_empty_value_wins():
    utm = extract_utm_params([
        ("utm_source", ""),
        ("utm_source", "news"),
        ("utm_source", "ads"),
        ("utm_campaign", "spring"),
        ("utm_unknown", "x"),
        ("ref", "y"),
    ])

    assert utm == {"utm_source": "news", "utm_campaign": "spring"}


def test_all_utm_fields_are_captured():
    query = [
        ("utm_source", "s"),
        ("utm_medium", "m"),
        ("utm_campaign", "c"),
        ("utm_term", "t"),
        ("utm_content", "co"),
        ("utm_purpose", "p"),
    ]

    payload = extract_click_metrics({}, query).to_payload()

    assert payload == dict(query)


def test_client_ip_precedence():
    assert get_client_ip({"X-Forwarded-For": "198.51.100.1, 10.0.0.1"}, "10.0.0.2") == "198.51.100.1"
    assert get_client_ip({"X-Real-IP": "198.51.100.9"}, "10.0.0.2") == "198.51.100.9"
    assert get_client_ip({}, "10.0.0.2") == "10.0.0.2"
    assert get_client_ip({}) is None
    assert (
        get_client_ip({"CF-Connecting-IP": "203.0.113.7", "X-Forwarded-For": "198.51.100.1"})
        == "203.0.113.7"
    )


def test_geo_hints_from_headers():
    geo = GeoHints.from_headers({
        "CF-IPCountry": "SE",
        "CF-IPCity": "Stockholm",
        "CF-IPLatitude": "59.33",
        "CF-IPLongitude": "18.06",
    })

    assert geo == GeoHints(country="SE", city="Stockholm", latitude=59.33, longitude=18.06)


def test_geo_hints_ignore_unusable_values():
    geo = GeoHints.from_headers({
        "CF-IPCountry": "XX",
        "CF-IPCity": "  ",
        "CF-IPLatitude": "north",
        "CF-IPLongitude": "500",
    })

    assert geo == GeoHints()
