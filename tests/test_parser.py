"""Tests for record extraction against an in-memory document."""

import pytest

from fieldscraper.document import HTMLDocument
from fieldscraper.models import SelectorMap
from fieldscraper.parser import RecordExtractor


def _map(container=None, **selectors) -> SelectorMap:
    return SelectorMap(selectors=selectors, container_selector=container)


@pytest.fixture
def extractor() -> RecordExtractor:
    return RecordExtractor()


class TestIndexAlignment:
    @pytest.mark.asyncio
    async def test_pairs_matches_by_position(self, extractor, product_html) -> None:
        records = await extractor.extract(
            HTMLDocument(product_html), _map(Name=".title", Price=".price")
        )
        assert records == [
            {"Name": "X", "Price": "1"},
            {"Name": "Y", "Price": "2"},
            {"Name": "Z", "Price": "3"},
        ]

    @pytest.mark.asyncio
    async def test_record_keys_follow_field_order(self, extractor, product_html) -> None:
        records = await extractor.extract(
            HTMLDocument(product_html), _map(Price=".price", Name=".title")
        )
        assert list(records[0]) == ["Price", "Name"]

    @pytest.mark.asyncio
    async def test_shorter_lists_pad_with_empty_strings(self, extractor) -> None:
        html = """
        <ul>
          <li class="name">A</li><li class="name">B</li><li class="name">C</li>
        </ul>
        <span class="price">9</span>
        """
        records = await extractor.extract(HTMLDocument(html), _map(Name=".name", Price=".price"))
        assert records == [
            {"Name": "A", "Price": "9"},
            {"Name": "B", "Price": ""},
            {"Name": "C", "Price": ""},
        ]

    @pytest.mark.asyncio
    async def test_rows_with_only_empty_values_are_dropped(self, extractor) -> None:
        html = """
        <p class="name">  </p>
        <p class="name">Kept</p>
        """
        records = await extractor.extract(HTMLDocument(html), _map(Name=".name"))
        assert records == [{"Name": "Kept"}]

    @pytest.mark.asyncio
    async def test_text_is_trimmed_and_nested(self, extractor) -> None:
        html = '<div class="title">\n   <b>Big</b> Lamp \n</div>'
        records = await extractor.extract(HTMLDocument(html), _map(Name=".title"))
        assert records == [{"Name": "Big Lamp"}]

    @pytest.mark.asyncio
    async def test_unmatched_selector_contributes_empty_strings(self, extractor, product_html) -> None:
        records = await extractor.extract(
            HTMLDocument(product_html), _map(Name=".title", Rating=".stars")
        )
        assert [r["Rating"] for r in records] == ["", "", ""]
        assert [r["Name"] for r in records] == ["X", "Y", "Z"]


class TestSingleRecordFallback:
    @pytest.mark.asyncio
    async def test_no_matches_anywhere_gives_zero_records(self, extractor, product_html) -> None:
        records = await extractor.extract(
            HTMLDocument(product_html), _map(Name=".missing", Price=".absent")
        )
        assert records == []

    @pytest.mark.asyncio
    async def test_empty_document(self, extractor) -> None:
        records = await extractor.extract(HTMLDocument(""), _map(Name="h1"))
        assert records == []

    @pytest.mark.asyncio
    async def test_first_match_record_when_index_rows_are_all_empty(self, extractor) -> None:
        class FirstOnlyDocument(HTMLDocument):
            async def query_all(self, selector):
                matches = await super().query_all(selector)
                # only the blank heading survives the full query
                return [m for m in matches if not await m.text()]

        html = '<h1 class="t">Only Title</h1><h1 class="t"></h1>'
        records = await extractor.extract(FirstOnlyDocument(html), _map(Name=".t"))
        assert records == [{"Name": "Only Title"}]


class TestInvalidSelectors:
    @pytest.mark.asyncio
    async def test_query_failure_counts_as_no_matches(self, extractor, product_html) -> None:
        class BrokenSelectorDocument(HTMLDocument):
            async def query_all(self, selector):
                if selector == "%%%":
                    raise ValueError("bad selector")
                return await super().query_all(selector)

            async def query_first(self, selector):
                if selector == "%%%":
                    raise ValueError("bad selector")
                return await super().query_first(selector)

        records = await extractor.extract(
            BrokenSelectorDocument(product_html),
            SelectorMap(selectors={"Name": ".title", "Price": "%%%"})
        )
        assert records == [
            {"Name": "X", "Price": ""},
            {"Name": "Y", "Price": ""},
            {"Name": "Z", "Price": ""},
        ]


class TestContainerMode:
    @pytest.mark.asyncio
    async def test_fields_stay_inside_their_container(self, extractor) -> None:
        html = """
        <div class="card"><h2 class="title">A</h2><span class="price">1</span></div>
        <div class="card"><h2 class="title">B</h2></div>
        <div class="card"><h2 class="title">C</h2><span class="price">3</span></div>
        """
        records = await extractor.extract(
            HTMLDocument(html), _map(container=".card", Name=".title", Price=".price")
        )
        assert records == [
            {"Name": "A", "Price": "1"},
            {"Name": "B", "Price": ""},
            {"Name": "C", "Price": "3"},
        ]

    @pytest.mark.asyncio
    async def test_positional_mode_misaligns_same_page(self, extractor) -> None:
        html = """
        <div class="card"><h2 class="title">A</h2><span class="price">1</span></div>
        <div class="card"><h2 class="title">B</h2></div>
        <div class="card"><h2 class="title">C</h2><span class="price">3</span></div>
        """
        records = await extractor.extract(HTMLDocument(html), _map(Name=".title", Price=".price"))
        assert records[1] == {"Name": "B", "Price": "3"}

    @pytest.mark.asyncio
    async def test_empty_containers_dropped_without_fallback(self, extractor) -> None:
        html = '<div class="card"></div><h2 class="title">Outside</h2>'
        records = await extractor.extract(
            HTMLDocument(html), _map(container=".card", Name=".title")
        )
        assert records == []
