from .metric_chart_view import MetricChartView

__all__ = ["MetricChartView"]
