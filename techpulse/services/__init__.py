"""Business services: classification, feed, search, subscriptions and chat."""
