# File: tests/test_parser.py
"""DOM extraction from rendered markup."""
import pytest

from site_atlas.parser.html_parser import extract_page

PAGE_URL = "https://example.com/shop/index.html"

RICH_HTML = """
<html>
<head>
  <title>
    Example   Shop
  </title>
  <meta name="description" content="Things for sale">
  <meta name="keywords" content="a,b">
  <meta name="viewport" content="width=device-width">
  <meta name="robots" content="noindex">
  <link rel="canonical" href="/shop/">
  <link rel="alternate" hreflang="de" href="/de/shop/">
  <meta property="og:title" content="Shop OG">
  <meta property="og:type" content="website">
  <meta name="twitter:card" content="summary">
  <script type="application/ld+json">{"@type": "Organization", "name": "ACME", "url": "https://example.com"}</script>
  <script type="application/ld+json">{not json</script>
  <script src="js/app.js"></script>
</head>
<body>
  <header role="banner"><nav aria-label="Main">menu</nav></header>
  <main>
    <h2>Second</h2>
    <h1>Welcome</h1>
    <img src="logo.png" alt="ACME" width="10" height="20">
    <img src="spacer.gif">
    <a href="../about">About</a>
    <a href="https://other.org/" rel="nofollow noopener">Other</a>
    <a href="mailto:hi@example.com">Mail</a>
    <button id="buy" class="btn primary">Buy</button>
    <button disabled>Nope</button>
    <div role="button">Div button</div>
    <input type="submit" value="Send">
    <div class="error">Something went wrong</div>
    <p class="alert">Heads up</p>
  </main>
  <form action="/login" method="post">
    <label for="user">User</label>
    <input id="user" name="user" type="text" required maxlength="20">
    <label>Password <input type="password" name="pw" pattern="[a-z]+"></label>
    <input type="search" name="q" placeholder="Search">
    <select name="country"><option>x</option></select>
    <textarea name="msg"></textarea>
  </form>
  <form><input type="email" required minlength="5"></form>
  <script>var hidden = "not visible";</script>
  <footer>Footer text</footer>
</body>
</html>
"""


@pytest.fixture()
def record():
    return extract_page(RICH_HTML, PAGE_URL, {"domContentLoadedMs": 5})


def test_title_and_meta(record):
    assert record.title == "Example Shop"
    assert record.meta["description"] == "Things for sale"
    assert record.meta["keywords"] == "a,b"
    assert record.meta["viewport"] == "width=device-width"
    assert record.meta["robots"] == "noindex"
    assert record.meta["canonical"] == "https://example.com/shop/"
    assert record.meta["hreflang"] == [{"lang": "de", "href": "https://example.com/de/shop/"}]


def test_social_and_structured_data(record):
    assert record.open_graph == {"og:title": "Shop OG", "og:type": "website"}
    assert record.twitter_card == {"twitter:card": "summary"}
    assert record.schema_org == [
        {"@type": "Organization", "name": "ACME", "url": "https://example.com"},
        {"@type": None},
    ]


def test_headings_grouped_by_level(record):
    assert record.headings == [{"tag": "h1", "text": "Welcome"}, {"tag": "h2", "text": "Second"}]


def test_landmarks_include_semantic_and_role_elements(record):
    tags = [(l["tag"], l["role"]) for l in record.landmarks]
    assert ("header", "banner") in tags
    assert ("nav", None) in tags
    assert ("main", None) in tags
    assert ("footer", None) in tags
    assert tags.count(("form", None)) == 2
    assert ("div", "button") in tags
    nav = next(l for l in record.landmarks if l["tag"] == "nav")
    assert nav["ariaLabel"] == "Main"


def test_images_and_links(record):
    assert record.images[0] == {
        "src": "https://example.com/shop/logo.png",
        "alt": "ACME",
        "width": "10",
        "height": "20",
    }
    assert record.images[1]["alt"] is None
    assert record.links == [
        {"href": "https://example.com/about", "text": "About", "rel": None},
        {"href": "https://other.org/", "text": "Other", "rel": "nofollow noopener"},
        {"href": "mailto:hi@example.com", "text": "Mail", "rel": None},
    ]


def test_buttons(record):
    by_text = {b["text"]: b for b in record.buttons}
    assert by_text["Buy"] == {"text": "Buy", "enabled": True, "id": "buy", "classes": "btn primary"}
    assert by_text["Nope"]["enabled"] is False
    assert "Div button" in by_text
    assert "Send" in by_text


def test_forms(record):
    login, signup = record.forms
    assert login["index"] == 0
    assert login["action"] == "https://example.com/login"
    assert login["method"] == "POST"
    fields = {f["name"]: f for f in login["fields"]}
    assert fields["user"]["label"] == "User"
    assert fields["user"]["validations"] == ["required", "maxlength:20"]
    assert fields["pw"]["label"].startswith("Password")
    assert fields["pw"]["validations"] == ["pattern:[a-z]+"]
    assert fields["q"]["label"] is None
    assert fields["q"]["placeholder"] == "Search"
    assert fields["country"]["type"] == "select"
    assert fields["msg"]["type"] == "textarea"
    # only the search input counts; select/textarea are not text-like types
    assert login["a11y"] == {"unlabeledControls": 1}

    assert signup["action"] is None
    assert signup["method"] == "GET"


def test_email_field_without_label():
    html = '<form><input type="email" required minlength="5"></form>'
    record = extract_page(html, "https://example.com/")

    field = record.forms[0]["fields"][0]
    assert field["type"] == "email"
    assert "required" in field["validations"]
    assert "minlength:5" in field["validations"]
    assert record.forms[0]["a11y"]["unlabeledControls"] == 1


def test_text_errors_scripts_and_perf(record):
    assert record.error_messages == ["Something went wrong", "Heads up"]
    assert record.scripts == ["https://example.com/shop/js/app.js"]
    assert "Welcome" in record.visible_text
    assert "Footer text" in record.visible_text
    assert "not visible" not in record.visible_text
    assert record.perf == {"domContentLoadedMs": 5}


def test_base_href_is_honoured():
    html = '<html><head><base href="https://cdn.example.com/root/"></head><body><a href="x">x</a></body></html>'
    record = extract_page(html, "https://example.com/page")
    assert record.links[0]["href"] == "https://cdn.example.com/root/x"


def test_empty_document_degrades_to_defaults():
    record = extract_page("", "https://example.com/")
    assert record.title is None
    assert record.links == []
    assert record.forms == []
    assert record.visible_text == ""
    assert record.perf == {}


def test_malformed_urls_do_not_break_extraction():
    html = '<a href="http://[broken">bad</a><a href="/fine">ok</a><script src="http://[x"></script><title>Still</title>'
    record = extract_page(html, "https://example.com/")
    assert record.title == "Still"
    assert {"href": "https://example.com/fine", "text": "ok", "rel": None} in record.links
    assert record.scripts == []


def test_rendered_inner_text_takes_precedence():
    html = '<body><p>Shown</p><p style="display:none">Hidden by CSS</p></body>'
    record = extract_page(html, "https://example.com/", visible_text="  Shown\n")
    assert record.visible_text == "Shown"


def test_markup_text_when_browser_text_missing():
    record = extract_page("<body><p>Shown</p></body>", "https://example.com/", visible_text=None)
    assert record.visible_text == "Shown"
