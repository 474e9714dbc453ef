from solar_monitor.models.cached_response import CachedResponse
