"""
Map annotations: the four station/unit marker kinds, the aggregator that indexes them,
region-change throttling and render reconciliation.
"""
