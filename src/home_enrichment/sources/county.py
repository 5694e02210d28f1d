"""County assessor adapter (secondary property records).

Assessor APIs differ per county, so the lookup URL is configured as a
template, e.g. ``https://assessor.example.gov/api/parcels?address={address}&zip={zip_code}``.
An empty template disables the source.
"""

from urllib.parse import quote

import httpx

from home_enrichment.logging import get_logger
from home_enrichment.models import AddressQuery, ProfileFields, SourceLabel
from home_enrichment.sources.base import DEFAULT_TIMEOUT, BaseSource
from home_enrichment.sources.records import map_records_payload

logger = get_logger(__name__)


class CountyAssessorSource(BaseSource[AddressQuery, ProfileFields]):
    name = "county_assessor"

    def __init__(
        self,
        client: httpx.AsyncClient,
        url_template: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._url_template = url_template.strip()

    @property
    def label(self) -> SourceLabel:
        return SourceLabel.PROPERTY_RECORDS

    @property
    def enabled(self) -> bool:
        return bool(self._url_template)

    def build_url(self, query: AddressQuery) -> str:
        return self._url_template.format(
            address=quote(query.street),
            city=quote(query.city),
            state=quote(query.state),
            zip_code=quote(query.zip_code),
        )

    async def _fetch(self, query: AddressQuery) -> ProfileFields | None:
        if not self.enabled:
            return None

        response = await self._client.get(self.build_url(query))
        if response.status_code == 404:
            logger.info("county_record_not_found", address=query.one_line)
            return None
        response.raise_for_status()
        return map_records_payload(response.json())
