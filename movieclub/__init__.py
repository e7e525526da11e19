"""Core (UI-agnostic) movie club dashboard logic.

This package contains:
- data loading (JSON/CSV/XLSX -> pandas) and per-record normalization
- filter state and the filter engine
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
