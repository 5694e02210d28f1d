"""RentCast property-records adapter (primary structural and financial source)."""

from collections.abc import Iterator

import httpx

from home_enrichment.logging import get_logger
from home_enrichment.models import AddressQuery, ProfileFields, SourceLabel
from home_enrichment.sources.base import DEFAULT_TIMEOUT, BaseSource
from home_enrichment.sources.records import map_records_payload

logger = get_logger(__name__)

RENTCAST_PROPERTIES_URL = "https://api.rentcast.io/v1/properties"


def address_query_forms(query: AddressQuery) -> Iterator[dict[str, str]]:
    """Yield lookup parameters from most to least specific.

    Full address, then without ZIP, then the bare street, then a city/state
    search limited to one result.
    """
    yield {"address": f"{query.street}, {query.city}, {query.state} {query.zip_code}"}
    yield {"address": f"{query.street}, {query.city}, {query.state}"}
    yield {"address": query.street}
    yield {"city": query.city, "state": query.state, "limit": "1"}


class RentCastSource(BaseSource[AddressQuery, ProfileFields]):
    """Looks up a property record by address, relaxing the address on 404."""

    name = "rentcast"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._api_key = api_key

    @property
    def label(self) -> SourceLabel:
        return SourceLabel.PROPERTY_RECORDS

    async def _fetch(self, query: AddressQuery) -> ProfileFields | None:
        headers = {"X-Api-Key": self._api_key, "Accept": "application/json"}

        response: httpx.Response | None = None
        for attempt, params in enumerate(address_query_forms(query), start=1):
            response = await self._client.get(
                RENTCAST_PROPERTIES_URL, params=params, headers=headers
            )
            if response.status_code != 404:
                break
            logger.debug("rentcast_not_found", attempt=attempt, params=params)

        if response is None or response.status_code == 404:
            logger.info("rentcast_property_not_found", address=query.one_line)
            return None
        if response.status_code == 401:
            logger.warning("rentcast_unauthorized")
            return None
        if response.status_code == 429:
            logger.warning("rentcast_rate_limited")
            return None
        response.raise_for_status()

        fields = map_records_payload(response.json())
        if fields is not None:
            logger.info(
                "rentcast_record_mapped",
                address=query.one_line,
                fields=len(fields.populated_fields()),
            )
        return fields
