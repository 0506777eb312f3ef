"""Analytics app package: dashboard, customer and calendar figures."""
