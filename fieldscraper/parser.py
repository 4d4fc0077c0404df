import logging
from typing import Dict, List, Optional
from .document import Document, Element
from .errors import ScraperError
from .models import SelectorMap

logger = logging.getLogger(__name__)


class RecordExtractor:
    """Builds records by querying a rendered document with a selector map."""

    async def extract(self, document: Document, selector_map: SelectorMap) -> List[Dict[str, str]]:
        """
        Extract all records from a document.

        With a container selector, each container yields one record. Otherwise
        the i-th match of every field selector is paired into record i, and a
        single first-match record is tried when that finds nothing.
        """
        if selector_map.container_selector:
            records = await self._extract_by_container(document, selector_map)
        else:
            records = await self._extract_by_index(document, selector_map)
            if not records:
                logger.info("Index method found no records, trying single-record extraction")
                records = await self._extract_single(document, selector_map)

        logger.info("Extracted %d records", len(records))
        return records

    async def _extract_by_index(self, document: Document, selector_map: SelectorMap) -> List[Dict[str, str]]:
        """Pair up the i-th match of each field into one record."""
        texts_by_field: Dict[str, List[str]] = {}

        for field_name, selector in selector_map.selectors.items():
            elements = await self._query_all(document, field_name, selector)
            texts_by_field[field_name] = [await element.text() for element in elements]
            logger.info(
                "Selector '%s' for field '%s' found %d elements",
                selector, field_name, len(elements)
            )

        max_elements = max((len(texts) for texts in texts_by_field.values()), default=0)

        records = []
        for i in range(max_elements):
            record = {
                field_name: texts[i] if i < len(texts) else ""
                for field_name, texts in texts_by_field.items()
            }
            if any(record.values()):
                records.append(record)

        return records

    async def _extract_single(self, document: Document, selector_map: SelectorMap) -> List[Dict[str, str]]:
        """Build at most one record from the first match of each field."""
        record = {}
        for field_name, selector in selector_map.selectors.items():
            element = await self._query_first(document, field_name, selector)
            record[field_name] = await element.text() if element is not None else ""

        return [record] if any(record.values()) else []

    async def _extract_by_container(self, document: Document, selector_map: SelectorMap) -> List[Dict[str, str]]:
        """One record per container element, fields looked up inside it."""
        containers = await self._query_all(
            document, "container", selector_map.container_selector
        )
        logger.info(
            "Container selector '%s' found %d elements",
            selector_map.container_selector, len(containers)
        )

        records = []
        for container in containers:
            record = {}
            for field_name, selector in selector_map.selectors.items():
                element = await self._query_first(container, field_name, selector)
                record[field_name] = await element.text() if element is not None else ""
            if any(record.values()):
                records.append(record)

        return records

    async def _query_all(self, scope, field_name: str, selector: str) -> List[Element]:
        try:
            return await scope.query_all(selector)
        except ScraperError:
            raise
        except Exception as e:
            logger.warning("Selector '%s' for field '%s' failed: %s", selector, field_name, e)
            return []

    async def _query_first(self, scope, field_name: str, selector: str) -> Optional[Element]:
        try:
            return await scope.query_first(selector)
        except ScraperError:
            raise
        except Exception as e:
            logger.warning("Selector '%s' for field '%s' failed: %s", selector, field_name, e)
            return None
