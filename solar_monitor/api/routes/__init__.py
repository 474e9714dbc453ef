from .live_status import router as live_status_router
from .reports import router as reports_router
from .ai_intelligence import router as ai_intelligence_router
from .alerts import router as alerts_router
from .navigation import router as navigation_router
from .cache import router as cache_router
from .sse import router as sse_router
from .pages import router as pages_router
