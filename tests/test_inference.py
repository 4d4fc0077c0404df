"""Tests for completion parsing, fallback selectors and the inference pipeline."""

import pytest

from fieldscraper.errors import CompletionError
from fieldscraper.inference import SelectorInference, fallback_selector, parse_selectors
from tests.fakes import FakeClient


# ---------------------------------------------------------------------------
# parse_selectors
# ---------------------------------------------------------------------------

class TestParseSelectors:
    def test_exact_json(self) -> None:
        result = parse_selectors('{"A": ".a", "B": ".b"}', ["A", "B"])
        assert result.selectors == {"A": ".a", "B": ".b"}
        assert result.fallback_fields == []

    def test_json_wrapped_in_prose_and_code_fence(self) -> None:
        response = 'Sure! Here you go:\n```json\n{"Name": ".title h3",\n "Price": ".cost"}\n```\nGood luck.'
        result = parse_selectors(response, ["Name", "Price"])
        assert result.selectors == {"Name": ".title h3", "Price": ".cost"}

    def test_not_json_uses_price_fallback(self) -> None:
        result = parse_selectors("not json at all", ["Price"])
        assert ".price" in result.selectors["Price"]
        assert result.fallback_fields == ["Price"]

    def test_malformed_json_falls_back_for_all_fields(self) -> None:
        result = parse_selectors('{"Name": ".title", "Price": }', ["Name", "Price"])
        assert result.selectors == {
            "Name": fallback_selector("Name"),
            "Price": fallback_selector("Price"),
        }

    def test_missing_field_gets_per_field_fallback(self) -> None:
        result = parse_selectors('{"Name": ".title"}', ["Name", "Price"])
        assert result.selectors["Name"] == ".title"
        assert result.selectors["Price"] == fallback_selector("Price")
        assert result.fallback_fields == ["Price"]

    def test_empty_value_gets_fallback(self) -> None:
        result = parse_selectors('{"Name": "", "Price": "   "}', ["Name", "Price"])
        assert result.fallback_fields == ["Name", "Price"]

    def test_extra_keys_are_dropped(self) -> None:
        result = parse_selectors('{"Name": ".t", "Other": ".o"}', ["Name"])
        assert list(result.selectors) == ["Name"]

    def test_output_follows_requested_order(self) -> None:
        result = parse_selectors('{"B": ".b", "A": ".a"}', ["A", "B"])
        assert list(result.selectors) == ["A", "B"]

    def test_list_value_joined_into_one_selector(self) -> None:
        result = parse_selectors('{"Name": [".title", "h2"]}', ["Name"])
        assert result.selectors["Name"] == ".title, h2"

    def test_non_object_json_falls_back(self) -> None:
        result = parse_selectors('["{", "}"]', ["Name"])
        assert result.fallback_fields == ["Name"]

    def test_deeply_nested_json_falls_back(self) -> None:
        response = '{"Name": ' + "[" * 100000 + "]" * 100000 + "}"
        result = parse_selectors(response, ["Name"])
        assert result.selectors == {"Name": fallback_selector("Name")}
        assert result.fallback_fields == ["Name"]

    def test_many_unclosed_braces_fall_back(self) -> None:
        result = parse_selectors("{" * 50000, ["Price"])
        assert result.selectors == {"Price": fallback_selector("Price")}

    def test_block_spans_first_open_to_last_close_brace(self) -> None:
        response = 'prefix {"Name": ".a"} middle {"Name": ".b"} suffix'
        # Two objects side by side do not decode as one
        assert parse_selectors(response, ["Name"]).fallback_fields == ["Name"]

    @pytest.mark.parametrize(
        "response",
        ["", "{", "}", "{}", "null", "{\"Name\": null}", "{{{}}}", "} {", "\x00{\"a\":1"],
    )
    def test_never_raises_and_covers_every_field(self, response) -> None:
        fields = ["Name", "Price", "Rating"]
        result = parse_selectors(response, fields)
        assert list(result.selectors) == fields
        assert all(result.selectors.values())


# ---------------------------------------------------------------------------
# fallback_selector
# ---------------------------------------------------------------------------

class TestFallbackSelector:
    def test_name_and_title(self) -> None:
        assert fallback_selector("Product Name").startswith("h1, h2, h3")
        assert fallback_selector("Article TITLE") == fallback_selector("Product Name")

    def test_price(self) -> None:
        assert '[class*="price"]' in fallback_selector("Unit Price")

    def test_category(self) -> None:
        assert ".breadcrumb" in fallback_selector("Product Category")

    def test_description(self) -> None:
        assert fallback_selector("Description").endswith("p")

    def test_rule_order_name_before_price(self) -> None:
        # "Price Name" hits the name rule first
        assert fallback_selector("Price Name") == fallback_selector("Name")

    def test_generic_uses_lowercased_field(self) -> None:
        assert fallback_selector("Rating") == (
            '[data-testid*="rating"], [class*="rating"], [id*="rating"]'
        )


# ---------------------------------------------------------------------------
# SelectorInference
# ---------------------------------------------------------------------------

class TestSelectorInference:
    @pytest.mark.asyncio
    async def test_sends_cleaned_html_and_parses_answer(self, product_html) -> None:
        client = FakeClient('{"Name": ".title", "Price": ".price"}')
        inference = SelectorInference(client)

        result = await inference.generate_selectors(product_html, ["Name", "Price"], "cards only")

        assert result.selectors == {"Name": ".title", "Price": ".price"}
        prompt = client.prompts[0]
        assert "window.tracking" not in prompt
        assert '<h2 class="title">X</h2>' in prompt
        assert "Additional instructions: cards only" in prompt

    @pytest.mark.asyncio
    async def test_garbage_answer_still_yields_full_map(self, product_html) -> None:
        inference = SelectorInference(FakeClient("I cannot help with that."))
        result = await inference.generate_selectors(product_html, ["Name", "Price"])
        assert set(result.selectors) == {"Name", "Price"}
        assert result.fallback_fields == ["Name", "Price"]

    @pytest.mark.asyncio
    async def test_completion_error_propagates(self, product_html) -> None:
        inference = SelectorInference(FakeClient(CompletionError("quota exceeded")))
        with pytest.raises(CompletionError, match="completion failed: quota exceeded"):
            await inference.generate_selectors(product_html, ["Name"])

    @pytest.mark.asyncio
    async def test_html_cap_applied(self) -> None:
        client = FakeClient('{"Name": "h1"}')
        inference = SelectorInference(client, max_html_chars=10)
        await inference.generate_selectors("<p>" + "y" * 100 + "</p>", ["Name"])
        assert "y" * 8 not in client.prompts[0]
