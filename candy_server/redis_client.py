from redis.asyncio import Redis

from candy_server.load_secrets import redis_host, redis_port

redis = Redis(host=redis_host, port=redis_port, decode_responses=True, health_check_interval=30)
