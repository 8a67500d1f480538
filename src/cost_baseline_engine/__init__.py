"""
Cost Baseline Engine - statistical cost baselines for cloud subscriptions.

A deterministic batch job that turns a lookback window of daily cost data into:
- Rolling average and confidence-interval baselines
- Day-of-week and week-of-month seasonal profiles
- Per-service baselines with volatility and growth classification
- Day-over-day and week-over-week anomaly thresholds
"""

__version__ = "0.1.0"
