from .charts import example_chart

__all__ = ['example_chart']
