"""Chart selection, validation and data reshaping.

Charts are described by a chart type plus a typed role mapping. This package
contains the schema types, the availability rules, the validator and the
reshaper that produces chart-ready datasets.
"""
