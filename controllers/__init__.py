"""Controllers module - Application-level controllers for coordinating session, overlay and navigation."""

from controllers.app_controller import AppController, get_app_controller, reset_app_controller
from controllers.navigation import NavigationHistory
from controllers.overlay_coordinator import OverlayCoordinator
from controllers.route_guard import RouteDecision, RouteGuard
from controllers.session_manager import SessionManager

__all__ = [
    "AppController",
    "NavigationHistory",
    "OverlayCoordinator",
    "RouteDecision",
    "RouteGuard",
    "SessionManager",
    "get_app_controller",
    "reset_app_controller",
]
