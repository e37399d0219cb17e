from .gateway import AuthenticationGateway, extract_bearer_token

__all__ = ["AuthenticationGateway", "extract_bearer_token"]
