"""Spreadsheet import of influencers and campaign memberships."""

from influencer_crm.importer.csv_import import (
    CsvImporter,
    ImportConfig,
    ImportReport,
    load_import_config,
    map_partnership_type,
    parse_campaign_code,
    read_post_references,
    read_rows,
)

__all__ = [
    "CsvImporter",
    "ImportConfig",
    "ImportReport",
    "load_import_config",
    "map_partnership_type",
    "parse_campaign_code",
    "read_post_references",
    "read_rows",
]
