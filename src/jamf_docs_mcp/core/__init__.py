"""Core documentation retrieval: HTTP, caching, scraping and the token-budgeted content pipeline."""
