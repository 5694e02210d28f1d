"""USPS Web Tools address standardization (Verify API)."""

from xml.sax.saxutils import escape, quoteattr

import httpx
from bs4 import BeautifulSoup, Tag

from home_enrichment.logging import get_logger
from home_enrichment.models import AddressQuery, ProfileFields, SourceLabel
from home_enrichment.sources.base import DEFAULT_TIMEOUT, BaseSource

logger = get_logger(__name__)

USPS_VERIFY_URL = "https://secure.shippingapis.com/ShippingAPI.dll"


def build_verify_request(user_id: str, query: AddressQuery) -> str:
    """Render the AddressValidateRequest XML document."""
    return (
        f"<AddressValidateRequest USERID={quoteattr(user_id)}>"
        '<Address ID="0">'
        "<Address1></Address1>"
        f"<Address2>{escape(query.street)}</Address2>"
        f"<City>{escape(query.city)}</City>"
        f"<State>{escape(query.state)}</State>"
        f"<Zip5>{escape(query.zip_code[:5])}</Zip5>"
        "<Zip4></Zip4>"
        "</Address>"
        "</AddressValidateRequest>"
    )


def _child_text(tag: Tag, name: str) -> str | None:
    child = tag.find(name)
    return child.get_text(strip=True) if child is not None else None


class USPSAddressSource(BaseSource[AddressQuery, ProfileFields]):
    """Confirms the address is deliverable.

    A verified address contributes no profile fields; success only records
    the provenance label.
    """

    name = "usps"

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_id: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(client, timeout=timeout)
        self._user_id = user_id

    @property
    def label(self) -> SourceLabel:
        return SourceLabel.USPS_VALIDATION

    async def _fetch(self, query: AddressQuery) -> ProfileFields | None:
        response = await self._client.get(
            USPS_VERIFY_URL,
            params={"API": "Verify", "XML": build_verify_request(self._user_id, query)},
        )
        response.raise_for_status()

        soup = BeautifulSoup(response.text, "html.parser")
        error = soup.find("error")
        if error is not None:
            logger.warning("usps_verify_error", description=_child_text(error, "description"))
            return None
        address = soup.find("address")
        if address is None:
            raise ValueError("USPS response has no Address element")

        logger.debug(
            "usps_address_verified",
            street=_child_text(address, "address2"),
            zip5=_child_text(address, "zip5"),
        )
        return ProfileFields()
