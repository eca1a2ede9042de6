"""
PregnancyForecast
Rule-based delivery outcome and progression forecasting from ANC visits
"""

__version__ = "1.0.0"
