"""
NEO Watch.

Near-Earth object risk manifest built on the NASA NeoWs feed: normalization,
risk tiering, stable multi-key sorting and CSV export, plus a NeoWs health
probe and a frame-driven orbital animation of the planets and a sampled
asteroid belt.

Usage:
    uvicorn neowatch.main:app
    python -m neowatch.report

Environment variables:
    NASA_API_KEY   api.nasa.gov key (DEMO_KEY if unset)
"""
