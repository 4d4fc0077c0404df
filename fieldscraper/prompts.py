"""
Prompt construction for CSS selector inference.
"""

import json
from typing import List, Optional


# Format-only example; its field names deliberately have nothing to do with the request
_FORMAT_EXAMPLE = {
    "Product Name": ".product-title h3",
    "Price": ".price-display .amount",
    "Product Category": ".breadcrumb li:last-child",
}


def _expected_shape(fields: List[str]) -> str:
    lines = [f'  {json.dumps(name, ensure_ascii=False)}: "css-selector-here"' for name in fields[:2]]
    body = ",\n".join(lines)
    if len(fields) > 2:
        body += ",\n  ..."
    return "{\n" + body + "\n}"


def build_prompt(html: str, fields: List[str], custom_prompt: Optional[str] = None) -> str:
    """
    Build the selector-inference prompt.

    The output only depends on the arguments, so identical inputs always
    produce identical prompts.
    """
    fields_list = "\n".join(f"- {name}" for name in fields)
    instructions = f"Additional instructions: {custom_prompt}\n\n" if custom_prompt else ""
    format_example = json.dumps(_FORMAT_EXAMPLE, indent=2)

    return f"""You are an expert web scraper. Analyze the following HTML and generate CSS selectors to extract the specified data fields.

HTML Content:
{html}

Data fields to extract:
{fields_list}

{instructions}Requirements:
1. Provide CSS selectors that will extract the specified data fields
2. Look for patterns in the HTML that indicate repeated data structures (like product listings, articles, etc.)
3. Prefer more specific selectors over generic ones
4. If multiple items exist on the page, the selectors should match every item, in page order
5. Return ONLY a JSON object with exactly one key per data field, using the EXACT field names above, and no additional text

Expected JSON format:
{_expected_shape(fields)}

Example response (illustrates the format only; do NOT copy these selectors, infer yours from the HTML above):
{format_example}

Analyze the HTML and provide the JSON response:"""
