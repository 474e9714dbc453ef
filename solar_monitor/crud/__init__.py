from .cached_response import cached_response
