from .users import router as users_router
from .properties import router as properties_router
from .access import router as access_router
from .tasks import router as tasks_router
from .recurring_tasks import router as recurring_tasks_router
from .logs import router as logs_router
from .documents import router as documents_router
from .appliances import router as appliances_router
from .warranties import router as warranties_router
from .checklists import router as checklists_router

__all__ = [
    "users_router",
    "properties_router",
    "access_router",
    "tasks_router",
    "recurring_tasks_router",
    "logs_router",
    "documents_router",
    "appliances_router",
    "warranties_router",
    "checklists_router",
]
