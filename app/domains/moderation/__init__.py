# app/domains/moderation/__init__.py
from . import analytics, api, service

router = api.router
admin_router = api.admin_router
register_event_handlers = analytics.register_event_handlers
build_moderation_service = service.build_moderation_service
