import pytest
import requests
from requests.structures import CaseInsensitiveDict
from unittest.mock import patch, MagicMock
from favicon_api.services.icon_discovery import extract_icons, get_favicons
from favicon_api.services.proxy_favicon import proxy_favicon

PAGE_HTML = """
<html><head>
<title>Example</title>
<link rel="stylesheet" href="/style.css">
<link rel="icon" type="image/png" sizes="32x32" href="/favicon-32.png">
<link rel="shortcut icon" href="favicon.ico">
<link rel="apple-touch-icon" sizes="180x180" href="https://cdn.example.com/touch.png">
<link rel="icon" href="/favicon-32.png">
<link rel="icon" href="data:image/png;base64,iVBORw0KGgo=">
<link rel="icon">
</head><body></body></html>
"""


def test_extract_icons():
    icons = extract_icons(PAGE_HTML, "http://example.com/home/")
    assert [icon.href for icon in icons] == [
        "http://example.com/favicon-32.png",
        "http://example.com/home/favicon.ico",
        "https://cdn.example.com/touch.png",
        "data:image/png;base64,iVBORw0KGgo=",
    ]
    assert icons[0].sizes == "32x32"
    assert icons[1].sizes is None
    assert icons[2].sizes == "180x180"


def test_extract_icons_without_links():
    assert extract_icons("<html><head></head></html>", "http://example.com") == []


@patch("favicon_api.services.icon_discovery.cloudscraper.create_scraper")
def test_get_favicons(mock_create_scraper):
    mock_scraper = MagicMock()
    mock_scraper.get.return_value.text = PAGE_HTML
    mock_scraper.get.return_value.url = "https://www.example.com/"
    mock_create_scraper.return_value = mock_scraper

    result = get_favicons("http://example.com", {"user-agent": "pytest"})
    assert result.icons[0].href == "https://www.example.com/favicon-32.png"
    mock_scraper.get.assert_called_once()
    args, kwargs = mock_scraper.get.call_args
    assert args[0] == "http://example.com"
    assert kwargs["headers"] == {"user-agent": "pytest"}


@patch("favicon_api.services.icon_discovery.cloudscraper.create_scraper")
def test_get_favicons_raises_on_http_error(mock_create_scraper):
    mock_scraper = MagicMock()
    mock_scraper.get.return_value.raise_for_status.side_effect = requests.exceptions.HTTPError("503")
    mock_create_scraper.return_value = mock_scraper

    with pytest.raises(requests.exceptions.HTTPError):
        get_favicons("http://example.com")


def make_response(status_code=200, content=b"", content_type="image/png"):
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    resp.headers = CaseInsensitiveDict({"Content-Type": content_type})
    return resp


@patch("favicon_api.services.proxy_favicon.requests.get")
def test_proxy_favicon_uses_first_provider(mock_get, png_bytes):
    mock_get.return_value = make_response(content=png_bytes)

    response = proxy_favicon("example.com", providers=["google", "duckduckgo"])
    assert response.status_code == 200
    assert response.body == png_bytes
    assert response.headers["content-type"] == "image/png"
    assert response.headers["x-favicon-source"] == "google"
    assert mock_get.call_count == 1
    assert "domain=example.com" in mock_get.call_args[0][0]


@patch("favicon_api.services.proxy_favicon.requests.get")
def test_proxy_favicon_falls_through_providers(mock_get, png_bytes):
    mock_get.side_effect = [
        requests.exceptions.ConnectionError("down"),
        make_response(content=png_bytes, content_type="image/x-icon"),
    ]

    response = proxy_favicon("example.com", providers=["unknown", "google", "duckduckgo"])
    assert response.status_code == 200
    assert response.headers["x-favicon-source"] == "duckduckgo"
    assert response.headers["content-type"] == "image/x-icon"
    assert mock_get.call_args[0][0] == "https://icons.duckduckgo.com/ip3/example.com.ico"


@patch("favicon_api.services.proxy_favicon.requests.get")
def test_proxy_favicon_placeholder_when_all_fail(mock_get):
    mock_get.side_effect = [
        make_response(status_code=404),
        make_response(content=b"<html></html>", content_type="text/html"),
    ]

    response = proxy_favicon("example.com", providers=["google", "duckduckgo"])
    assert response.status_code == 404
    assert response.headers["content-type"] == "image/svg+xml"
    assert b">E</text>" in response.body
