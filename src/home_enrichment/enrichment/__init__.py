"""Derived-fact calculators and the enrichment orchestrator."""

from home_enrichment.enrichment.climate import climate_recommendations, estimate_climate
from home_enrichment.enrichment.inventory import generate_appliances, generate_systems
from home_enrichment.enrichment.orchestrator import PropertyEnricher
from home_enrichment.enrichment.property_type import map_to_home_schema, normalize_property_type
from home_enrichment.enrichment.storm import classify_storm_frequency, determine_storm_frequency

__all__ = [
    "PropertyEnricher",
    "classify_storm_frequency",
    "climate_recommendations",
    "determine_storm_frequency",
    "estimate_climate",
    "generate_appliances",
    "generate_systems",
    "map_to_home_schema",
    "normalize_property_type",
]
