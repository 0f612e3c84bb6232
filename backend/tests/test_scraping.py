from jarla.utils.scraping import format_url, logo_from_html


class TestFormatUrl:
    def test_adds_scheme(self):
        assert format_url(" acme.se ") == "https://acme.se"
        assert format_url("http://acme.se") == "http://acme.se"


class TestLogoFromHtml:
    def test_og_image_wins(self):
        html = '<link rel="apple-touch-icon" href="/a.png"><meta property="og:image" content="https://cdn/og.png">'
        assert logo_from_html("acme.se", html) == "https://cdn/og.png"

    def test_apple_icon_made_absolute(self):
        assert logo_from_html("acme.se", '<link rel="apple-touch-icon" href="/touch.png">') == "https://acme.se/touch.png"

    def test_ico_favicon_skipped(self):
        html = '<link rel="icon" href="/favicon.ico"><img class="site-logo" src="/img/brand.svg">'
        assert logo_from_html("https://acme.se", html) == "https://acme.se/img/brand.svg"

    def test_png_favicon(self):
        assert logo_from_html("https://acme.se", '<link rel="shortcut icon" href="/fav.png">') == "https://acme.se/fav.png"

    def test_logo_in_src(self):
        assert logo_from_html("https://acme.se", '<img src="/static/logo-dark.png">') == "https://acme.se/static/logo-dark.png"

    def test_nothing(self):
        assert logo_from_html("https://acme.se", "<p>hi</p>") is None
