"""
Multi-Wind: current wind conditions from SMHI or YR (met.no)

Fetches the current wind speed and direction for one location from one of
two interchangeable providers, normalizes the divergent JSON schemas into a
single WindObservation and keeps it fresh on a fixed interval with bounded
retries.

Architecture:
    config.py       - ProviderConfig / WindConfig, .env + environment loading
    providers/      - One variant per provider:
                      * smhi.py - SMHI pmp3g point forecast
                      * yr.py   - met.no Locationforecast 2.0 (YR backend)
    fetch.py        - httpx fetch client (timeout, status, transport mapping)
    acquisition.py  - build URL -> fetch -> parse, one cycle
    scheduler.py    - periodic refresh + retry controller
    classify.py     - Beaufort / descriptive / compass classification
    display.py      - plain-text rendering for the CLI

Entry Points:
    main.py         - CLI (one-shot or continuous)
"""

__version__ = "2.1.0"
__author__ = "Multi-Wind"
