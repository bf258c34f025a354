"""Product price monitor: scrape a product page, normalize offers with an LLM, keep price history."""
