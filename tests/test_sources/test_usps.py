"""Tests for the USPS address verification adapter."""

import httpx
import respx

from home_enrichment.models import AddressQuery, ProfileFields, SourceLabel
from home_enrichment.sources.usps import USPS_VERIFY_URL, USPSAddressSource, build_verify_request

VERIFIED = """<?xml version="1.0" encoding="UTF-8"?>
<AddressValidateResponse><Address ID="0">
<Address2>123 MAIN ST</Address2><City>SAN FRANCISCO</City><State>CA</State>
<Zip5>94102</Zip5><Zip4>4701</Zip4>
</Address></AddressValidateResponse>"""

NOT_FOUND = """<?xml version="1.0" encoding="UTF-8"?>
<AddressValidateResponse><Address ID="0"><Error>
<Number>-2147219401</Number><Description>Address Not Found.</Description>
</Error></Address></AddressValidateResponse>"""


class TestBuildVerifyRequest:
    def test_escapes_markup(self) -> None:
        query = AddressQuery(address="1 A&B Way", city="Austin", state="TX", zip_code="78701-1234")

        xml = build_verify_request('id"1', query)

        assert "<Address2>1 A&amp;B Way</Address2>" in xml
        assert "<Zip5>78701</Zip5>" in xml
        assert "USERID='id\"1'" in xml


class TestUSPSAddressSource:
    @respx.mock
    async def test_verified_address_contributes_label_only(
        self, client: httpx.AsyncClient, sf_query: AddressQuery
    ) -> None:
        route = respx.get(USPS_VERIFY_URL).mock(return_value=httpx.Response(200, text=VERIFIED))
        source = USPSAddressSource(client, "user-1")

        fields = await source.fetch(sf_query)

        assert fields == ProfileFields()
        assert source.label is SourceLabel.USPS_VALIDATION
        assert route.calls.last.request.url.params["API"] == "Verify"

    @respx.mock
    async def test_error_element_is_none(
        self, client: httpx.AsyncClient, sf_query: AddressQuery
    ) -> None:
        respx.get(USPS_VERIFY_URL).mock(return_value=httpx.Response(200, text=NOT_FOUND))

        assert await USPSAddressSource(client, "user-1").fetch(sf_query) is None

    @respx.mock
    async def test_unexpected_document_is_none(
        self, client: httpx.AsyncClient, sf_query: AddressQuery
    ) -> None:
        respx.get(USPS_VERIFY_URL).mock(return_value=httpx.Response(200, text="<Other/>"))

        assert await USPSAddressSource(client, "user-1").fetch(sf_query) is None
