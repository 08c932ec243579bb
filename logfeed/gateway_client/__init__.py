from .client import GatewayLogsClient, REQUEST_LOGS_PATH, get_gateway_client

__all__ = ["GatewayLogsClient", "REQUEST_LOGS_PATH", "get_gateway_client"]
