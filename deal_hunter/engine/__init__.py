from deal_hunter.engine.mock_generator import MockDealGenerator, filter_deals
from deal_hunter.engine.parser import extract_json_array, normalize_deal, parse_deals
from deal_hunter.engine.sorting import sort_deals

__all__ = [
    "MockDealGenerator",
    "extract_json_array",
    "filter_deals",
    "normalize_deal",
    "parse_deals",
    "sort_deals",
]
