"""Infrastructure: storage backends and the Redis client factory."""
