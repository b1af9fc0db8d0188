"""Flask service for product fitment webhooks."""
