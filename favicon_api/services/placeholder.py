from xml.sax.saxutils import escape
from fastapi.responses import Response

from favicon_api.config import BROWSER_CACHE_CONTROL

SVG_TEMPLATE = """
<svg width="100" height="100" xmlns="http://www.w3.org/2000/svg">
  <rect width="100%" height="100%" fill="#cccccc"/>
  <text x="50%" y="50%" font-size="48" text-anchor="middle" dominant-baseline="middle" fill="#000000">{letter}</text>
</svg>
"""


def placeholder_svg(domain: str) -> str:
    """Gray 100x100 glyph showing the first letter of the requested domain."""
    first_letter = domain[:1].upper()
    return SVG_TEMPLATE.format(letter=escape(first_letter))


def placeholder_response(domain: str) -> Response:
    # Never stored in the lookup cache
    return Response(
        content=placeholder_svg(domain),
        status_code=404,
        media_type="image/svg+xml",
        headers={"Cache-Control": BROWSER_CACHE_CONTROL},
    )
