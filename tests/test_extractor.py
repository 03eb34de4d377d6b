"""Tests for app.services.extractor.extract_article."""

from app.services.extractor import extract_article

_ARTICLE_HTML = """
<!DOCTYPE html>
<html>
<head><title>Understanding Tide Pools</title></head>
<body>
  <nav><a href="/">Home</a> <a href="/about">About</a></nav>
  <article>
    <h1>Understanding Tide Pools</h1>
    <p>Tide pools are rocky pockets along the shore that hold seawater when the
    tide goes out, and they shelter an astonishing variety of small creatures,
    from anemones and hermit crabs to sea stars and tiny fish.</p>
    <p>Because the water in a pool is cut off from the ocean for hours at a time,
    its temperature, salinity and oxygen level can swing widely, so the animals
    that live there have evolved clever ways to cope with harsh conditions.</p>
    <p>Visitors should step carefully, avoid lifting rocks, and leave every shell
    and creature where they found it, as <a href="/guide">our field guide</a>
    explains in more detail.</p>
  </article>
  <footer>Copyright 2024</footer>
</body>
</html>
"""


class TestExtractArticle:
    def test_finds_title_and_content(self):
        article = extract_article(_ARTICLE_HTML, "https://example.com/tide-pools")
        assert article is not None
        assert article.title == "Understanding Tide Pools"
        assert "hermit crabs" in article.content_html
        assert "clever ways to cope" in article.content_html

    def test_links_are_made_absolute(self):
        article = extract_article(_ARTICLE_HTML, "https://example.com/tide-pools")
        assert article is not None
        assert "https://example.com/guide" in article.content_html

    def test_is_deterministic(self):
        first = extract_article(_ARTICLE_HTML, "https://example.com/tide-pools")
        second = extract_article(_ARTICLE_HTML, "https://example.com/tide-pools")
        assert first == second

    def test_empty_document_is_not_found(self):
        assert extract_article("", "https://example.com/") is None

    def test_whitespace_document_is_not_found(self):
        assert extract_article("   \n  ", "https://example.com/") is None

    def test_document_without_text_is_not_found(self):
        html = "<html><head><title>Sign in</title></head><body><div></div></body></html>"
        assert extract_article(html, "https://example.com/login") is None

    def test_navigation_only_page_is_not_found(self):
        html = """
        <html><head><title>Menu</title></head><body>
          <nav><a href="/a">A</a><a href="/b">B</a></nav>
          <footer>Copyright</footer>
        </body></html>
        """
        assert extract_article(html, "https://example.com/") is None

    def test_scripts_and_hidden_elements_are_dropped(self):
        html = _ARTICLE_HTML.replace(
            "<h1>Understanding Tide Pools</h1>",
            '<h1>Understanding Tide Pools</h1><script>track()</script>'
            '<div style="display:none">Hidden promo text</div>',
        )
        article = extract_article(html, "https://example.com/tide-pools")
        assert article is not None
        assert "track()" not in article.content_html
        assert "Hidden promo text" not in article.content_html

    def test_og_title_is_preferred(self):
        html = _ARTICLE_HTML.replace(
            "<title>", '<meta property="og:title" content="Tide Pools: A Guide"><title>'
        )
        article = extract_article(html, "https://example.com/tide-pools")
        assert article is not None
        assert article.title == "Tide Pools: A Guide"


class TestExtractArticleWithoutSemanticMarkup:
    def test_densest_paragraph_block_wins(self):
        html = """
        <html><head><title>Quarterly Garden Notes</title></head><body>
          <div class="top"><p>Short teaser.</p></div>
          <div class="content">
            <p>The spring planting season started late this year because of a
            long cold spell, but the tomatoes caught up quickly once it warmed.</p>
            <p>Beans and squash were sown directly into the beds in May, and both
            germinated evenly thanks to a steady schedule of morning watering.</p>
          </div>
          <div class="bottom"><p>Another short line.</p></div>
        </body></html>
        """
        article = extract_article(html, "https://garden.example/notes")
        assert article is not None
        assert article.title == "Quarterly Garden Notes"
        assert "tomatoes caught up" in article.content_html
        assert "Short teaser" not in article.content_html


class TestExtractArticleInsideForm:
    def test_article_wrapped_in_page_form(self):
        html = """
        <html><head><title>Harbour Ferry Timetable Changes</title></head><body>
          <form id="aspnetForm" method="post" action="./timetable.aspx">
            <input type="hidden" name="__VIEWSTATE" value="dDwtMTA4MTc2">
            <article>
              <p>From the first of June the early ferry to the island will leave
              fifteen minutes sooner, giving commuters more time to make connections.</p>
              <p>The evening return service keeps its current schedule, although an
              extra crossing has been added on Fridays during the summer months.</p>
              <p>Passengers with season tickets do not need to take any action, as
              their passes remain valid on every sailing without a reservation.</p>
            </article>
            <button type="submit">Search</button>
          </form>
        </body></html>
        """
        article = extract_article(html, "https://ferries.example/timetable.aspx")
        assert article is not None
        assert article.title == "Harbour Ferry Timetable Changes"
        assert "early ferry to the island" in article.content_html
        assert "__VIEWSTATE" not in article.content_html
        assert "Search" not in article.content_html
