"""Labor regulation update feed aggregator."""
