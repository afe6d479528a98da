from .routes_prometheus import router_prometheus

__all__ = ["router_prometheus"]
