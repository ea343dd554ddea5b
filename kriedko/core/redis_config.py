# kriedko/core/redis_config.py

"""
Redis connection management for the key-value submission store.
"""

import os
import redis
from redis import Redis
import logging

logger = logging.getLogger(__name__)


class RedisConfig:
    """Redis connection configuration"""

    def __init__(self, url: str):
        self.url = url
        self.max_connections = int(os.getenv("REDIS_MAX_CONNECTIONS", "10"))
        self.decode_responses = True
        self.socket_timeout = 5
        self.socket_connect_timeout = 5
        self.health_check_interval = 30


def create_redis_client(url: str) -> Redis:
    """
    Create a pooled Redis client.

    The connection is not tested here; the store surfaces connection
    failures as StorageError on first use.
    """
    config = RedisConfig(url)

    connection_pool = redis.ConnectionPool.from_url(
        config.url,
        max_connections=config.max_connections,
        decode_responses=config.decode_responses,
        socket_timeout=config.socket_timeout,
        socket_connect_timeout=config.socket_connect_timeout,
        health_check_interval=config.health_check_interval,
    )

    logger.info("Redis connection pool created")
    return Redis(connection_pool=connection_pool)


def close_redis_client(client: Redis) -> None:
    """Close Redis client and its pool"""
    try:
        client.close()
        client.connection_pool.disconnect()
    except redis.RedisError as e:
        logger.error(f"Error closing Redis client: {e}")
