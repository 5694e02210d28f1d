"""External data source adapters."""

from home_enrichment.sources.base import BaseSource
from home_enrichment.sources.census import CensusACSSource, CensusGeocoderSource
from home_enrichment.sources.county import CountyAssessorSource
from home_enrichment.sources.rentcast import RentCastSource
from home_enrichment.sources.usps import USPSAddressSource
from home_enrichment.sources.weather import VisualCrossingSource
from home_enrichment.sources.zillow import ZillowScraper

__all__ = [
    "BaseSource",
    "CensusACSSource",
    "CensusGeocoderSource",
    "CountyAssessorSource",
    "RentCastSource",
    "USPSAddressSource",
    "VisualCrossingSource",
    "ZillowScraper",
]
