"""Store-facing services and external API clients."""
