"""Cakeshop storefront core: cart aggregator, checkout and webapp API."""
